from __future__ import annotations

from align_engine.align import merge_aligns


def test_merge_interleaves_and_collapses_duplicates() -> None:
    assert merge_aligns((0, 4, 9), (2, 4, 12)) == (0, 2, 4, 9, 12)


def test_merge_is_commutative_and_idempotent() -> None:
    left = (1, 5, 8)
    right = (0, 5, 20)

    assert merge_aligns(left, right) == merge_aligns(right, left)
    assert merge_aligns(left, left) == left


def test_merge_with_empty_inputs() -> None:
    assert merge_aligns((), ()) == ()
    assert merge_aligns((3,), ()) == (3,)
    assert merge_aligns((), (3,)) == (3,)


def test_merge_leaves_inputs_untouched() -> None:
    left = [1, 3]
    right = [2]

    merge_aligns(left, right)

    assert left == [1, 3]
    assert right == [2]
