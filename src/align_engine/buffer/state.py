"""Cursor and change tracking state for buffers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

Cursor = Tuple[int, int]  # (row, character index)


@dataclass(slots=True)
class BufferState:
    """Mutable cursor info tied to a BufferDocument version."""

    cursor: Cursor = (0, 0)
    last_change_tick: int = 0

    def set_cursor(self, row: int, col: int) -> None:
        self.cursor = (row, col)
