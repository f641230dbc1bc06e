"""Union of sorted, duplicate-free column sequences."""

from __future__ import annotations

from typing import Sequence


def merge_aligns(left: Sequence[int], right: Sequence[int]) -> tuple[int, ...]:
    """Merge two ascending duplicate-free sequences into one.

    Equal heads collapse into a single element; neither input is modified.
    """

    merged: list[int] = []
    i = j = 0
    while i < len(left) and j < len(right):
        a, b = left[i], right[j]
        if a == b:
            merged.append(a)
            i += 1
            j += 1
        elif a < b:
            merged.append(a)
            i += 1
        else:
            merged.append(b)
            j += 1
    merged.extend(left[i:])
    merged.extend(right[j:])
    return tuple(merged)


__all__ = ["merge_aligns"]
