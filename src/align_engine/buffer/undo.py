"""Linear undo history for buffer edits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .state import Cursor


@dataclass(slots=True)
class UndoEntry:
    label: str
    before_text: str
    after_text: str
    cursor_before: Cursor
    cursor_after: Cursor


class UndoTimeline:
    """Entries pushed after an undo drop the redo tail."""

    def __init__(self) -> None:
        self._entries: List[UndoEntry] = []
        self._index: int = -1

    def __len__(self) -> int:
        return self._index + 1

    def push(self, entry: UndoEntry) -> None:
        del self._entries[self._index + 1 :]
        self._entries.append(entry)
        self._index = len(self._entries) - 1

    def latest(self) -> Optional[UndoEntry]:
        if self._index < 0:
            return None
        return self._entries[self._index]

    def undo(self) -> Optional[UndoEntry]:
        entry = self.latest()
        if entry is not None:
            self._index -= 1
        return entry

    def redo(self) -> Optional[UndoEntry]:
        if self._index >= len(self._entries) - 1:
            return None
        self._index += 1
        return self._entries[self._index]
