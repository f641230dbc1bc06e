"""Key dispatch: bound sequences run actions, the rest go to the active mode."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Type

from align_engine.keymaps import Keymap, load_default_keymaps
from align_engine.runtime import telemetry

from .base_mode import KeyInput, Mode, ModeContext, ModeResult
from .insert_mode import InsertMode
from .normal_mode import NormalMode


class ModeManager:
    """Owns the modes of one context and the keymap they share.

    The first mode in ``modes`` starts active. A multi-key binding holds its
    typed prefix until it matches or misses; a miss hands the last key to the
    active mode.
    """

    def __init__(
        self,
        context: ModeContext,
        *,
        keymap: Keymap | None = None,
        modes: Iterable[Type[Mode]] = (NormalMode, InsertMode),
    ) -> None:
        self.context = context
        self.keymap = keymap or load_default_keymaps(
            Keymap(logger_name="align_engine.keymaps")
        )
        self._modes: Dict[str, Mode] = {}
        self._active: Optional[str] = None
        self._typed: List[str] = []
        for mode_cls in modes:
            self.register_mode(mode_cls)

    @property
    def active_mode(self) -> Optional[Mode]:
        return self._modes.get(self._active) if self._active else None

    def register_mode(self, mode_cls: Type[Mode]) -> Mode:
        mode = mode_cls(self.context)
        if mode.name in self._modes:
            raise ValueError(f"Mode '{mode.name}' already registered")
        self._modes[mode.name] = mode
        if self._active is None:
            self._active = mode.name
            mode.on_enter(None)
        return mode

    def switch_mode(self, name: str) -> None:
        if name not in self._modes:
            raise KeyError(f"Unknown mode '{name}'")
        if name == self._active:
            return
        previous = self.active_mode
        if previous is not None:
            previous.on_exit(name)
        self._active = name
        self._typed.clear()
        self._modes[name].on_enter(previous.name if previous else None)
        telemetry.record_event("mode.switch", data={"mode": name})

    def handle_key(self, key: KeyInput) -> ModeResult:
        mode = self.active_mode
        if mode is None:
            raise RuntimeError("No active mode registered")
        with telemetry.span(
            f"mode::{mode.name}",
            component=True,
            metadata={"key": key.token},
        ) as handle:
            result = self._dispatch(mode, key)
            handle.add_metadata("status", result.status)
        if result.switch_to:
            self.switch_mode(result.switch_to)
        return result

    def _dispatch(self, mode: Mode, key: KeyInput) -> ModeResult:
        self._typed.append(key.token)
        lookup = self.keymap.lookup(mode.name, self._typed)
        if lookup.status == "pending":
            return ModeResult(consumed=True, status="pending", message="awaiting_sequence")
        self._typed.clear()
        if lookup.status == "miss" or lookup.action is None:
            return mode.handle_unbound(key)

        mode.before_action(lookup.action.id)
        outcome = lookup.action(self.context, lookup.binding)
        return outcome if isinstance(outcome, ModeResult) else ModeResult(consumed=True)


__all__ = ["ModeManager"]
