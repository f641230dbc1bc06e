"""Plain editing and cursor movement actions."""

from __future__ import annotations

from align_engine.buffer import Buffer
from align_engine.modes.base_mode import ModeContext, ModeResult


def _clamp(buffer: Buffer, row: int, col: int) -> tuple[int, int]:
    row = max(0, min(row, buffer.line_count - 1))
    return (row, max(0, min(col, len(buffer.line(row)))))


def _move(context: ModeContext, row: int, col: int) -> ModeResult:
    cursor = context.buffer.move_cursor(*_clamp(context.buffer, row, col))
    context.bus.emit("cursor.move", cursor)
    return ModeResult(consumed=True, status="cursor_move")


def insert_newline(context: ModeContext, binding) -> ModeResult:
    del binding
    context.buffer.insert_text("\n")
    return ModeResult(consumed=True, status="insert_text")


def delete_backward(context: ModeContext, binding) -> ModeResult:
    del binding
    buffer = context.buffer
    row, col = buffer.state.cursor
    if col > 0:
        buffer.delete_range((row, col - 1), (row, col))
    elif row > 0:
        buffer.delete_range((row - 1, len(buffer.line(row - 1))), (row, 0))
    else:
        return ModeResult(consumed=True, status="noop")
    return ModeResult(consumed=True, status="delete")


def cursor_left(context: ModeContext, binding) -> ModeResult:
    del binding
    row, col = context.buffer.state.cursor
    if col == 0 and row > 0:
        return _move(context, row - 1, len(context.buffer.line(row - 1)))
    return _move(context, row, col - 1)


def cursor_right(context: ModeContext, binding) -> ModeResult:
    del binding
    row, col = context.buffer.state.cursor
    if col >= len(context.buffer.line(row)) and row < context.buffer.line_count - 1:
        return _move(context, row + 1, 0)
    return _move(context, row, col + 1)


def cursor_up(context: ModeContext, binding) -> ModeResult:
    del binding
    row, col = context.buffer.state.cursor
    return _move(context, row - 1, col)


def cursor_down(context: ModeContext, binding) -> ModeResult:
    del binding
    row, col = context.buffer.state.cursor
    return _move(context, row + 1, col)


__all__ = [
    "insert_newline",
    "delete_backward",
    "cursor_left",
    "cursor_right",
    "cursor_up",
    "cursor_down",
]
