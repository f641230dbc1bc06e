"""Per-line extraction of alignment columns."""

from __future__ import annotations

from dataclasses import dataclass

from .columns import advance_column, is_blank


@dataclass(frozen=True, slots=True)
class LineAligns:
    """Visible length of a line and its token starts at or after a column."""

    length: int
    columns: tuple[int, ...]

    def reaches(self, column: int) -> bool:
        """Whether any non-whitespace sits at or past ``column``."""

        return self.length > column


def scan_line(text: str, reference_column: int = 0, *, tab_width: int = 8) -> LineAligns:
    """Return the line's visible length and its alignment columns.

    A column counts when a non-whitespace character sits there and the
    character before it is whitespace (or the column starts the line). Only
    columns ``>= reference_column`` are reported. The length ignores trailing
    whitespace.
    """

    columns: list[int] = []
    column = 0
    length = 0
    previous_blank = True
    for char in text:
        blank = is_blank(char)
        if not blank and previous_blank and column >= reference_column:
            columns.append(column)
        column = advance_column(column, char, tab_width)
        if not blank:
            length = column
        previous_blank = blank
    return LineAligns(length=length, columns=tuple(columns))


__all__ = ["LineAligns", "scan_line"]
