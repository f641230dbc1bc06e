"""Adapter boundary types for syncing buffers with host widgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Tuple

from .state import Cursor

PreviewSpan = Tuple[int, int, int]  # (row, start column index, end column index)


@dataclass(slots=True)
class BufferMirror:
    """Host-friendly snapshot describing the current buffer state.

    ``previews`` lists the spans of text that are shown but not yet committed,
    so renderers can highlight them.
    """

    text: str
    cursor: Cursor
    previews: Tuple[PreviewSpan, ...] = ()
    attributes: dict[str, str] = field(default_factory=dict)


class BufferSync(Protocol):
    """Protocol describing how adapters exchange data with the buffer layer."""

    def pull_buffer(self) -> BufferMirror:
        """Return the latest buffer snapshot that the host should render."""
        ...


class BufferValidationError(RuntimeError):
    """Raised when adapters or buffers provide out-of-bounds cursor info."""

    def __init__(self, message: str, *, cursor: Cursor | None = None) -> None:
        super().__init__(message)
        self.cursor = cursor
