"""Action handlers bound by the default keymaps."""

from .core import enter_insert_mode, exit_to_normal_mode
from .editing import (
    cursor_down,
    cursor_left,
    cursor_right,
    cursor_up,
    delete_backward,
    insert_newline,
)
from .align import advance_alignment

__all__ = [
    "enter_insert_mode",
    "exit_to_normal_mode",
    "insert_newline",
    "delete_backward",
    "cursor_left",
    "cursor_right",
    "cursor_up",
    "cursor_down",
    "advance_alignment",
]
