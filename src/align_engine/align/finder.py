"""Inference of the vertical alignment group around the cursor line.

The finder walks upward and then downward from the origin line. Each line is
reduced to its alignment columns (see :mod:`align_engine.align.scanner`) and
folded into a running set of *active* columns. Columns outside the span seen
so far are accepted as new; columns inside it must agree with the active set,
apart from two tolerated shapes:

* a *concatenated cell*, where the line lacks an active column because one
  cell runs over it. The near edge must agree and the far edge must be an
  active column the line also has.
* a *separated cell*, where the line has an extra column inside an active
  cell. The near edge must agree and another active column must remain to
  close the cell.

The first line that breaks these rules, a blank line, or the buffer edge ends
the scan in that direction. Lines accepted before it stay accepted.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Callable, Optional, Sequence

from align_engine.runtime import telemetry

from .merge import merge_aligns
from .scanner import LineAligns, scan_line

LineSource = Callable[[int], Optional[str]]


@dataclass(frozen=True, slots=True)
class ScanResult:
    lines_backward: int
    lines_forward: int
    aligns: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class _ScanState:
    base_column: int
    aligns: tuple[int, ...]
    max_column: int
    min_column: float

    @classmethod
    def seed(cls, base_column: int, base_is_active: bool) -> "_ScanState":
        if base_is_active:
            return cls(base_column, (base_column,), base_column, base_column)
        return cls(base_column, (), -1, math.inf)


def reconcile(active: Sequence[int], current: Sequence[int]) -> Optional[list[int]]:
    """Compare a line's columns with the active ones.

    Returns the extra columns the line contributes, or ``None`` when the line
    is inconsistent with the active set.
    """

    extras: list[int] = []
    i = j = 0
    flanked = True  # the reference column is an agreeing left edge
    while i < len(active) and j < len(current):
        a, c = active[i], current[j]
        if a == c:
            i += 1
            j += 1
            flanked = True
        elif a < c:
            # Concatenated cell: skip to the active column closing it.
            if not flanked or c not in active[i + 1 :]:
                return None
            i = active.index(c, i + 1)
        else:
            # Separated cell.
            if not flanked:
                return None
            extras.append(c)
            j += 1
            flanked = False
    if j < len(current):
        return None
    return extras


def fold_line(state: _ScanState, line: LineAligns) -> Optional[_ScanState]:
    """Fold one line into ``state``; ``None`` rejects the line."""

    pending: list[int] = []
    max_column = state.max_column
    min_column = state.min_column

    if line.length > max_column:
        pending.extend(line.columns)
        current: list[int] = []
        max_column = line.length
    else:
        current = [column for column in line.columns if column <= max_column]
        pending.extend(column for column in line.columns if column > max_column)

    below = [column for column in current if column < min_column]
    if below:
        pending.extend(below)
        current = current[len(below) :]
        min_column = below[0]

    extras = reconcile(state.aligns, current)
    if extras is None:
        return None
    pending.extend(extras)

    return replace(
        state,
        aligns=merge_aligns(state.aligns, sorted(set(pending))),
        max_column=max_column,
        min_column=min_column,
    )


class AlignColumnFinder:
    """Scans lines around the origin line for a consistent alignment group.

    ``line_at(offset)`` returns the text of the line ``offset`` lines away from
    the origin, or ``None`` past the buffer edge.
    """

    def __init__(
        self,
        line_at: LineSource,
        *,
        tab_width: int = 8,
        scan_limit: Optional[int] = None,
        logger_name: str | None = None,
    ) -> None:
        self._line_at = line_at
        self._tab_width = tab_width
        self._scan_limit = scan_limit
        self._logger_name = logger_name

    def find(self, base_column: int, base_is_active: bool) -> ScanResult:
        with telemetry.span(
            "align::find",
            logger_name=self._logger_name,
            component="align",
            metadata={"base_column": base_column, "base_active": base_is_active},
        ) as handle:
            state = _ScanState.seed(base_column, base_is_active)
            state, backward = self._scan(state, -1)
            state, forward = self._scan(state, 1)
            handle.add_metadata("lines", f"-{backward}/+{forward}")
            handle.add_metadata("aligns", state.aligns)
        return ScanResult(
            lines_backward=backward, lines_forward=forward, aligns=state.aligns
        )

    def _scan(self, state: _ScanState, step: int) -> tuple[_ScanState, int]:
        accepted = 0
        offset = step
        reason = "limit"
        while self._scan_limit is None or accepted < self._scan_limit:
            text = self._line_at(offset)
            if text is None:
                reason = "boundary"
                break
            line = scan_line(text, state.base_column, tab_width=self._tab_width)
            if not line.reaches(state.base_column):
                reason = "blank"
                break
            folded = fold_line(state, line)
            if folded is None:
                reason = "inconsistent"
                break
            state = folded
            accepted += 1
            offset += step
        telemetry.record_event(
            "align.scan_stop",
            level="debug",
            data={"direction": step, "accepted": accepted, "reason": reason},
            logger_name=self._logger_name,
        )
        return state, accepted


__all__ = ["AlignColumnFinder", "ScanResult", "fold_line", "reconcile"]
