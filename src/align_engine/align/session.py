"""Per-sequence state machine driving repeated advance actions.

The first advance action of a sequence inserts a plain space. Repeating it
scans the surrounding lines once and then walks the resulting alignment
columns one per action:

* a column ahead of the cursor pads the cursor line up to it (preview);
* a column behind the cursor pads the other lines of the group so that cell
  lands on the cursor column (preview);
* a column equal to the cursor column is skipped silently;
* once the columns run out, previews are committed and a plain space is
  inserted, returning the session to idle.

Any other action commits the previews and ends the session before it runs.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Literal, Optional, cast

from align_engine.runtime import telemetry

from .columns import column_of, index_at_column, is_align_point, is_blank, token_start
from .finder import AlignColumnFinder
from .host import ADVANCE_ACTION, AlignHost

StepKind = Literal["literal", "lead", "lag"]


@dataclass(frozen=True, slots=True)
class AdvanceStep:
    """What a single advance action did.

    ``column`` is the alignment column consumed (``None`` for a plain space);
    ``lines`` counts the lines that received padding.
    """

    kind: StepKind
    column: Optional[int] = None
    width: int = 1
    lines: int = 1


class AdvanceSession:
    def __init__(
        self,
        host: AlignHost,
        *,
        scan_limit: Optional[int] = None,
        logger_name: str | None = None,
    ) -> None:
        self._host = host
        self._scan_limit = scan_limit
        self._logger_name = logger_name
        self._previous_action: Optional[str] = None
        self._pending: Optional[Deque[int]] = None
        self._lines_backward = 0
        self._lines_forward = 0
        self._previews: List[object] = []

    @property
    def active(self) -> bool:
        return self._pending is not None

    @property
    def pending_aligns(self) -> tuple[int, ...]:
        return tuple(self._pending or ())

    @property
    def preview_count(self) -> int:
        return len(self._previews)

    def before_action(self, action_id: str) -> None:
        """Called before any action runs; non-advance actions end the session."""

        if self._host.is_same_repeated_action(ADVANCE_ACTION, action_id):
            return
        self.reset()
        self._previous_action = action_id

    def advance(self, action_id: str = ADVANCE_ACTION) -> AdvanceStep:
        repeated = self._host.is_same_repeated_action(
            self._previous_action, action_id
        ) and not self._host.multi_edit_active()
        self._previous_action = action_id
        with telemetry.span(
            "align::advance",
            logger_name=self._logger_name,
            component="align",
            metadata={"action": action_id, "repeated": repeated},
        ) as handle:
            if not repeated:
                self.reset()
                step = self._literal_space()
            else:
                if self._pending is None:
                    self._begin()
                step = self._step()
            handle.add_metadata("step", step.kind)
        return step

    def reset(self, *, materialize: bool = True) -> None:
        """Resolve every preview and return to idle."""

        if materialize:
            self._host.materialize_previews(self._previews)
        else:
            for preview in self._previews:
                self._host.discard_preview(preview)
        if self._pending is not None or self._previews:
            telemetry.record_event(
                "align.session_reset",
                level="debug",
                data={"previews": len(self._previews), "materialize": materialize},
                logger_name=self._logger_name,
            )
        self._previews.clear()
        self._pending = None
        self._lines_backward = 0
        self._lines_forward = 0

    def _begin(self) -> None:
        row, index = self._host.cursor_position()
        text = self._host.text_of_line(row)
        tab_width = self._host.tab_width
        base_column = column_of(text, token_start(text, index), tab_width)
        base_is_active = index < len(text) and not is_blank(text[index])

        result = self._finder().find(base_column, base_is_active)
        aligns = list(result.aligns)
        if aligns and aligns[0] == base_column:
            aligns.pop(0)
        self._lines_backward = result.lines_backward
        self._lines_forward = result.lines_forward
        self._pending = deque(aligns)

    def _finder(self) -> AlignColumnFinder:
        host = self._host

        def line_text(offset: int) -> Optional[str]:
            handle = host.line_at(offset)
            return None if handle is None else host.text_of_line(handle)

        return AlignColumnFinder(
            line_text,
            tab_width=host.tab_width,
            scan_limit=self._scan_limit,
            logger_name=self._logger_name,
        )

    def _step(self) -> AdvanceStep:
        pending = cast(Deque[int], self._pending)
        column = self._host.current_column()
        while pending and pending[0] == column:
            pending.popleft()
        if not pending:
            self.reset()
            return self._literal_space()

        target = pending.popleft()
        if target > column:
            return self._lead(target, column)
        return self._lag(target, column)

    def _literal_space(self) -> AdvanceStep:
        self._host.insert_text(self._host.cursor_position(), " ")
        return AdvanceStep(kind="literal")

    def _lead(self, target: int, column: int) -> AdvanceStep:
        width = target - column
        self._previews.append(
            self._host.create_preview(self._host.cursor_position(), " " * width)
        )
        return AdvanceStep(kind="lead", column=target, width=width)

    def _lag(self, target: int, column: int) -> AdvanceStep:
        width = column - target
        padded = 0
        for offset in self._group_offsets():
            handle = self._host.line_at(offset)
            if handle is None:
                continue
            text = self._host.text_of_line(handle)
            index = index_at_column(text, target, self._host.tab_width)
            # Lines where a wider cell runs over the target stay untouched.
            if index is None or not is_align_point(text, index):
                continue
            if _opens_wide_gap(text, index):
                continue
            self._previews.append(
                self._host.create_preview((handle, index), " " * width)
            )
            padded += 1
        if padded and self._pending:
            self._pending = deque(aligned + width for aligned in self._pending)
        return AdvanceStep(kind="lag", column=target, width=width, lines=padded)

    def _group_offsets(self) -> List[int]:
        backward = [-distance for distance in range(1, self._lines_backward + 1)]
        forward = list(range(1, self._lines_forward + 1))
        return backward + forward


def _opens_wide_gap(text: str, index: int) -> bool:
    """True when the token at ``index`` follows a tab or two spaces.

    Such a gap already marks a cell boundary and is left as it is.
    """

    return text[index - 1 : index] == "\t" or text[max(index - 2, 0) : index] == "  "


__all__ = ["AdvanceSession", "AdvanceStep", "StepKind"]
