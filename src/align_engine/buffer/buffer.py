"""High-level buffer façade combining document, state, undo and previews."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import ContextManager, Iterable, Optional

from align_engine.runtime import telemetry

from .document import BufferDocument
from .preview import PreviewEdit, PreviewLayer
from .state import BufferState, Cursor
from .sync import BufferMirror
from .undo import UndoEntry, UndoTimeline
from .validation import ensure_cursor, ensure_single_line


@dataclass(slots=True)
class BufferView:
    version: int
    text: str
    cursor: Cursor


@dataclass(slots=True)
class BufferDelta:
    version: int
    text: str
    cursor: Cursor
    label: str


class Buffer:
    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[BufferDocument] = None,
        state: Optional[BufferState] = None,
        undo: Optional[UndoTimeline] = None,
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.state = state or BufferState()
        self.undo = undo or UndoTimeline()
        self.previews = PreviewLayer()

    @classmethod
    def from_text(cls, text: str, *, name: str = "default") -> "Buffer":
        return cls(name=name, document=BufferDocument.from_text(text))

    def snapshot(self) -> BufferView:
        return BufferView(
            version=self.document.version,
            text=self.document.text(),
            cursor=self.state.cursor,
        )

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        return BufferMirror(
            text=self.document.text(),
            cursor=self.state.cursor,
            previews=self.previews.spans(),
            attributes=dict(attributes or {}),
        )

    def line(self, row: int) -> str:
        return self.document.get_line(row)

    @property
    def line_count(self) -> int:
        return self.document.line_count

    def move_cursor(self, row: int, col: int) -> Cursor:
        self.state.set_cursor(*ensure_cursor(self.document, (row, col)))
        return self.state.cursor

    def replace_range(
        self, start: Cursor, end: Cursor, text: str, *, label: str
    ) -> BufferDelta:
        if len(self.previews):
            self.flush_previews()
        start = ensure_cursor(self.document, start)
        end = ensure_cursor(self.document, end)
        if start > end:
            start, end = end, start
        with Transaction(self, label) as tx:
            before_text = self.document.text()
            start_offset = _offset_for_cursor(self.document, start)
            end_offset = _offset_for_cursor(self.document, end)
            new_text = before_text[:start_offset] + text + before_text[end_offset:]
            self.document = BufferDocument.from_text(
                new_text, version=self.document.version + 1
            )
            self.state.set_cursor(
                *_cursor_from_offset(self.document, start_offset + len(text))
            )
            self.state.last_change_tick = self.document.version
            tx.commit(before_text, new_text, start, self.state.cursor)

        return BufferDelta(
            version=self.document.version,
            text=new_text,
            cursor=self.state.cursor,
            label=label,
        )

    def insert_text(self, text: str, *, cursor: Optional[Cursor] = None) -> BufferDelta:
        position = cursor or self.state.cursor
        return self.replace_range(position, position, text, label="insert_text")

    def delete_range(self, start: Cursor, end: Cursor) -> BufferDelta:
        return self.replace_range(start, end, "", label="delete_range")

    def get_text_range(self, start: Cursor, end: Cursor) -> str:
        start = ensure_cursor(self.document, start)
        end = ensure_cursor(self.document, end)
        if start > end:
            start, end = end, start
        text = self.document.text()
        return text[
            _offset_for_cursor(self.document, start) : _offset_for_cursor(
                self.document, end
            )
        ]

    def create_preview(self, position: Cursor, text: str) -> PreviewEdit:
        """Show ``text`` at ``position`` without recording an undo entry."""

        row, col = ensure_cursor(self.document, position)
        ensure_single_line(text)
        with telemetry.span(
            "buffer::create_preview",
            component="buffer",
            metadata={"buffer": self.name, "row": row, "col": col},
        ):
            line = self.document.get_line(row)
            self.document = self.document.with_line(
                row, line[:col] + text + line[col:]
            )
            edit = self.previews.add(row, col, text)
            cursor_row, cursor_col = self.state.cursor
            if cursor_row == row and cursor_col >= col:
                self.state.set_cursor(row, cursor_col + len(text))
        return edit

    def materialize_preview(self, edit: PreviewEdit) -> bool:
        """Promote a pending preview to a real edit; ``False`` if already resolved."""

        return self._commit_previews((edit,), "materialize_preview") == 1

    def materialize_previews(self, edits: Iterable[PreviewEdit]) -> int:
        """Promote several previews as one undo step; returns how many were pending."""

        return self._commit_previews(edits, "materialize_previews")

    def _commit_previews(self, edits: Iterable[PreviewEdit], label: str) -> int:
        pending = sorted(
            {edit.handle: edit for edit in edits if edit.pending}.values(),
            key=lambda edit: (edit.row, edit.col),
            reverse=True,
        )
        if not pending:
            return 0
        with Transaction(self, label) as tx:
            lines = list(self.document.snapshot())
            for edit in pending:
                line = lines[edit.row]
                lines[edit.row] = line[: edit.col] + line[edit.end :]
                self.previews.resolve(edit, "materialized")
            self.state.last_change_tick = self.document.version
            first, last = pending[-1], pending[0]
            tx.commit(
                "\n".join(lines),
                self.document.text(),
                (first.row, first.col),
                (last.row, last.end),
            )
        return len(pending)

    def discard_preview(self, edit: PreviewEdit) -> bool:
        """Remove a pending preview without trace; ``False`` if already resolved."""

        if not edit.pending:
            return False
        with telemetry.span(
            "buffer::discard_preview",
            component="buffer",
            metadata={"buffer": self.name, "row": edit.row, "col": edit.col},
        ):
            line = self.document.get_line(edit.row)
            self.document = self.document.with_line(
                edit.row, line[: edit.col] + line[edit.end :]
            )
            self.previews.resolve(edit, "discarded")
            self.previews.shift(edit.row, edit.col, -len(edit.text), inclusive=False)
            cursor_row, cursor_col = self.state.cursor
            if cursor_row == edit.row and cursor_col > edit.col:
                self.state.set_cursor(
                    edit.row, max(edit.col, cursor_col - len(edit.text))
                )
        return True

    def flush_previews(self) -> int:
        """Materialize every pending preview as a single undo step."""

        return self.materialize_previews(list(self.previews))


class Transaction(AbstractContextManager["Transaction"]):
    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(
        self,
        before_text: str,
        after_text: str,
        cursor_before: Cursor,
        cursor_after: Cursor,
    ) -> None:
        self.buffer.undo.push(
            UndoEntry(
                label=self.label,
                before_text=before_text,
                after_text=after_text,
                cursor_before=cursor_before,
                cursor_after=cursor_after,
            )
        )

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


def _offset_for_cursor(document: BufferDocument, cursor: Cursor) -> int:
    lines = document.snapshot()
    row, col = cursor
    offset = 0
    for i in range(row):
        offset += len(lines[i]) + 1  # newline
    return offset + col


def _cursor_from_offset(document: BufferDocument, offset: int) -> Cursor:
    lines = document.snapshot()
    running = 0
    for row, line in enumerate(lines):
        if offset <= running + len(line):
            return (row, offset - running)
        running += len(line) + 1
    return (len(lines) - 1, len(lines[-1]))
