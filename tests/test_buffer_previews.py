from __future__ import annotations

import pytest

from align_engine.buffer import Buffer, BufferValidationError


def make_buffer(text: str = "abc\ndef", cursor: tuple[int, int] = (0, 0)) -> Buffer:
    buffer = Buffer.from_text(text)
    buffer.move_cursor(*cursor)
    return buffer


def test_preview_is_visible_but_not_undoable() -> None:
    buffer = make_buffer()

    edit = buffer.create_preview((0, 1), "  ")

    assert buffer.line(0) == "a  bc"
    assert edit.span == (0, 1, 3)
    assert buffer.mirror().previews == ((0, 1, 3),)
    assert len(buffer.undo) == 0


def test_materialize_records_undo_entry_once() -> None:
    buffer = make_buffer()
    edit = buffer.create_preview((0, 1), "  ")

    assert buffer.materialize_preview(edit) is True
    assert buffer.materialize_preview(edit) is False
    assert buffer.discard_preview(edit) is False

    entry = buffer.undo.latest()
    assert entry is not None
    assert entry.label == "materialize_preview"
    assert entry.before_text == "abc\ndef"
    assert entry.after_text == "a  bc\ndef"
    assert len(buffer.undo) == 1
    assert buffer.line(0) == "a  bc"


def test_discard_restores_text_and_cursor() -> None:
    buffer = make_buffer(cursor=(0, 2))
    edit = buffer.create_preview((0, 1), "__")
    assert buffer.state.cursor == (0, 4)

    assert buffer.discard_preview(edit) is True

    assert buffer.line(0) == "abc"
    assert buffer.state.cursor == (0, 2)
    assert edit.status == "discarded"
    assert buffer.discard_preview(edit) is False


def test_previews_track_each_other_on_one_row() -> None:
    buffer = make_buffer()
    later = buffer.create_preview((0, 1), "X")
    earlier = buffer.create_preview((0, 0), "YY")

    assert buffer.line(0) == "YYaXbc"
    assert later.col == 3

    buffer.discard_preview(earlier)

    assert later.col == 1
    assert buffer.line(0) == "aXbc"
    assert [edit.handle for edit in buffer.previews] == [later.handle]


def test_resolving_one_preview_leaves_the_other_pending() -> None:
    buffer = make_buffer()
    first = buffer.create_preview((0, 0), " ")
    second = buffer.create_preview((1, 0), " ")

    buffer.materialize_preview(first)
    buffer.discard_preview(first)

    assert buffer.document.text() == " abc\n def"
    assert second.pending
    assert len(buffer.previews) == 1


def test_real_edit_flushes_pending_previews_first() -> None:
    buffer = make_buffer(cursor=(1, 3))
    buffer.create_preview((0, 3), "  ")

    buffer.insert_text("!")

    assert len(buffer.previews) == 0
    assert buffer.document.text() == "abc  \ndef!"
    assert [entry.label for entry in (buffer.undo.undo(), buffer.undo.undo())] == [
        "insert_text",
        "materialize_previews",
    ]


def test_flush_previews_counts_materialized() -> None:
    buffer = make_buffer()
    buffer.create_preview((0, 0), " ")
    buffer.create_preview((1, 3), " ")

    assert buffer.flush_previews() == 2
    assert buffer.flush_previews() == 0


def test_preview_rejects_newlines_and_bad_positions() -> None:
    buffer = make_buffer()

    with pytest.raises(ValueError):
        buffer.create_preview((0, 0), "a\nb")
    with pytest.raises(BufferValidationError):
        buffer.create_preview((5, 0), " ")


def test_materialize_previews_is_one_undo_step() -> None:
    buffer = make_buffer("ab\ncd\nef")
    edits = [
        buffer.create_preview((0, 1), "  "),
        buffer.create_preview((2, 1), " "),
        buffer.create_preview((0, 0), " "),
    ]

    assert buffer.materialize_previews(edits + edits[:1]) == 3
    assert buffer.materialize_previews(edits) == 0

    entry = buffer.undo.latest()
    assert entry is not None
    assert len(buffer.undo) == 1
    assert entry.before_text == "ab\ncd\nef"
    assert entry.after_text == " a  b\ncd\ne f"
    assert all(edit.status == "materialized" for edit in edits)
