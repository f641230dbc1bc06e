"""Mode switching actions."""

from __future__ import annotations

from align_engine.modes.base_mode import ModeContext, ModeResult


def enter_insert_mode(context: ModeContext, binding) -> ModeResult:
    del context, binding
    return ModeResult(consumed=True, switch_to="insert", message="enter_insert")


def exit_to_normal_mode(context: ModeContext, binding) -> ModeResult:
    del context, binding
    return ModeResult(consumed=True, switch_to="normal", message="exit_insert")


__all__ = ["enter_insert_mode", "exit_to_normal_mode"]
