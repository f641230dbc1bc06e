"""Buffer abstractions, undo history and preview overlays."""

from .buffer import Buffer, BufferDelta, BufferView, Transaction
from .document import BufferDocument
from .preview import PreviewEdit, PreviewLayer
from .state import BufferState, Cursor
from .sync import BufferMirror, BufferSync, BufferValidationError
from .undo import UndoEntry, UndoTimeline
from .validation import ensure_cursor

__all__ = [
    "BufferDocument",
    "BufferState",
    "Cursor",
    "UndoTimeline",
    "UndoEntry",
    "Buffer",
    "BufferDelta",
    "BufferView",
    "Transaction",
    "BufferMirror",
    "BufferSync",
    "BufferValidationError",
    "PreviewEdit",
    "PreviewLayer",
    "ensure_cursor",
]
