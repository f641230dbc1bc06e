"""The advance action."""

from __future__ import annotations

from align_engine.align import ADVANCE_ACTION
from align_engine.modes.base_mode import ModeContext, ModeResult


def advance_alignment(context: ModeContext, binding) -> ModeResult:
    """Step the context's session and publish what it did as ``align.step``."""

    action_id = binding.action_id if binding is not None else ADVANCE_ACTION
    step = context.session.advance(action_id)
    context.bus.emit(
        "align.step",
        {"kind": step.kind, "column": step.column, "width": step.width, "lines": step.lines},
    )
    return ModeResult(consumed=True, status=f"align_{step.kind}")


__all__ = ["advance_alignment"]
