"""Tab-aware conversions between character indexes and display columns."""

from __future__ import annotations

from typing import Optional


def is_blank(char: str) -> bool:
    return char.isspace()


def advance_column(column: int, char: str, tab_width: int) -> int:
    if char == "\t":
        return column + tab_width - column % tab_width
    return column + 1


def column_of(text: str, index: int, tab_width: int) -> int:
    """Display column at which ``text[index]`` starts (or the line end)."""

    column = 0
    for char in text[:index]:
        column = advance_column(column, char, tab_width)
    return column


def index_at_column(text: str, column: int, tab_width: int) -> Optional[int]:
    """Character index starting exactly at ``column``.

    Returns ``None`` when the line is shorter than ``column`` or the column
    falls inside a tab.
    """

    current = 0
    for index, char in enumerate(text):
        if current == column:
            return index
        if current > column:
            return None
        current = advance_column(current, char, tab_width)
    return len(text) if current == column else None


def token_start(text: str, index: int) -> int:
    """Back up over trailing whitespace, then over the token before it."""

    while index > 0 and is_blank(text[index - 1]):
        index -= 1
    while index > 0 and not is_blank(text[index - 1]):
        index -= 1
    return index


def is_align_point(text: str, index: int) -> bool:
    """True when a token starts at ``index``."""

    if index >= len(text) or is_blank(text[index]):
        return False
    return index == 0 or is_blank(text[index - 1])


__all__ = [
    "advance_column",
    "column_of",
    "index_at_column",
    "is_align_point",
    "is_blank",
    "token_start",
]
