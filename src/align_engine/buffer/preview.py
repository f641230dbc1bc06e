"""Bookkeeping for uncommitted, visually inserted text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Literal

from .sync import PreviewSpan

PreviewStatus = Literal["pending", "materialized", "discarded"]


@dataclass(slots=True, eq=False)
class PreviewEdit:
    """Text shown in the buffer that is not yet part of the undo history.

    ``row``/``col`` track where the text currently lives; they move when
    other previews are inserted or removed earlier on the same line.
    """

    handle: int
    row: int
    col: int
    text: str
    status: PreviewStatus = "pending"

    @property
    def end(self) -> int:
        return self.col + len(self.text)

    @property
    def pending(self) -> bool:
        return self.status == "pending"

    @property
    def span(self) -> PreviewSpan:
        return (self.row, self.col, self.end)


class PreviewLayer:
    """Tracks pending previews and keeps their positions current."""

    def __init__(self) -> None:
        self._pending: Dict[int, PreviewEdit] = {}
        self._counter = 0

    def __len__(self) -> int:
        return len(self._pending)

    def __iter__(self) -> Iterator[PreviewEdit]:
        return iter(sorted(self._pending.values(), key=lambda e: (e.row, e.col)))

    def add(self, row: int, col: int, text: str) -> PreviewEdit:
        self.shift(row, col, len(text), inclusive=True)
        self._counter += 1
        edit = PreviewEdit(handle=self._counter, row=row, col=col, text=text)
        self._pending[edit.handle] = edit
        return edit

    def resolve(self, edit: PreviewEdit, status: PreviewStatus) -> None:
        self._pending.pop(edit.handle, None)
        edit.status = status

    def shift(self, row: int, col: int, delta: int, *, inclusive: bool) -> None:
        for edit in self._pending.values():
            if edit.row != row:
                continue
            if edit.col > col or (inclusive and edit.col == col):
                edit.col += delta

    def spans(self) -> tuple[PreviewSpan, ...]:
        return tuple(edit.span for edit in self)


__all__ = ["PreviewEdit", "PreviewLayer", "PreviewStatus"]
