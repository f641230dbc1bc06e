"""Editor services the advance session relies on."""

from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence, cast

from align_engine.buffer import Buffer, Cursor, PreviewEdit
from align_engine.runtime.config import AlignSettings

from .columns import column_of, index_at_column

ADVANCE_ACTION = "align.advance"


class AlignHost(Protocol):
    """Collaborators the alignment core calls out to but never implements.

    ``move_to_column`` and ``delete_range`` complete the editing surface for
    hosts driving alignment themselves; :class:`AdvanceSession` does not call
    them, since it reads line text directly and pads through previews.
    """

    @property
    def tab_width(self) -> int: ...

    def cursor_position(self) -> Cursor: ...

    def current_column(self) -> int: ...

    def move_to_column(self, column: int) -> bool: ...

    def line_at(self, offset: int) -> Optional[int]: ...

    def text_of_line(self, handle: int) -> str: ...

    def insert_text(self, position: Cursor, text: str) -> None: ...

    def delete_range(self, start: Cursor, end: Cursor) -> None: ...

    def create_preview(self, position: Cursor, text: str) -> object: ...

    def materialize_preview(self, preview: object) -> bool: ...

    def materialize_previews(self, previews: Sequence[object]) -> int: ...

    def discard_preview(self, preview: object) -> bool: ...

    def is_same_repeated_action(self, previous: Optional[str], current: str) -> bool: ...

    def multi_edit_active(self) -> bool: ...


class BufferAlignHost:
    """``AlignHost`` backed by an :class:`~align_engine.buffer.Buffer`.

    Line handles are absolute row numbers. ``flags`` is the shared keymap flag
    mapping; a true ``multi_edit`` flag disables alignment.
    """

    def __init__(
        self,
        buffer: Buffer,
        *,
        settings: AlignSettings | None = None,
        flags: Mapping[str, bool] | None = None,
    ) -> None:
        self.buffer = buffer
        self.settings = settings or AlignSettings()
        self._flags = flags if flags is not None else {}
        self._equivalent = self.settings.repeat_actions | {ADVANCE_ACTION}

    @property
    def tab_width(self) -> int:
        return self.settings.tab_width

    def cursor_position(self) -> Cursor:
        return self.buffer.state.cursor

    def current_column(self) -> int:
        row, index = self.buffer.state.cursor
        return column_of(self.buffer.line(row), index, self.tab_width)

    def move_to_column(self, column: int) -> bool:
        """Put the cursor at display ``column``; false if the line stops short."""

        row = self.buffer.state.cursor[0]
        index = index_at_column(self.buffer.line(row), column, self.tab_width)
        if index is None:
            return False
        self.buffer.move_cursor(row, index)
        return True

    def line_at(self, offset: int) -> Optional[int]:
        row = self.buffer.state.cursor[0] + offset
        if 0 <= row < self.buffer.line_count:
            return row
        return None

    def text_of_line(self, handle: int) -> str:
        return self.buffer.line(handle)

    def insert_text(self, position: Cursor, text: str) -> None:
        self.buffer.insert_text(text, cursor=position)

    def delete_range(self, start: Cursor, end: Cursor) -> None:
        self.buffer.delete_range(start, end)

    def create_preview(self, position: Cursor, text: str) -> PreviewEdit:
        return self.buffer.create_preview(position, text)

    def materialize_preview(self, preview: object) -> bool:
        return self.buffer.materialize_preview(cast(PreviewEdit, preview))

    def materialize_previews(self, previews: Sequence[object]) -> int:
        return self.buffer.materialize_previews(
            cast(PreviewEdit, preview) for preview in previews
        )

    def discard_preview(self, preview: object) -> bool:
        return self.buffer.discard_preview(cast(PreviewEdit, preview))

    def is_same_repeated_action(self, previous: Optional[str], current: str) -> bool:
        if previous is None:
            return False
        if previous == current:
            return True
        return previous in self._equivalent and current in self._equivalent

    def multi_edit_active(self) -> bool:
        return bool(self._flags.get("multi_edit", False))


__all__ = ["ADVANCE_ACTION", "AlignHost", "BufferAlignHost"]
