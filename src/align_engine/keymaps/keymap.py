"""Per-mode table mapping key sequences to actions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Literal, Optional, Sequence

from align_engine.runtime.telemetry import span

from .models import ActionRef, Binding, KeySequence

BindingKey = tuple[str, tuple[str, ...]]


@dataclass(frozen=True, slots=True)
class Lookup:
    """Outcome of feeding typed tokens to :meth:`Keymap.lookup`.

    ``pending`` means the tokens are a strict prefix of some binding.
    """

    status: Literal["match", "pending", "miss"]
    binding: Optional[Binding] = None
    action: Optional[ActionRef] = None


class Keymap:
    """Actions by id plus at most one binding per mode and key sequence."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[BindingKey, Binding] = {}
        self._prefixes: Dict[str, set[tuple[str, ...]]] = {}
        self._logger_name = logger_name

    def __len__(self) -> int:
        return len(self._bindings)

    def __iter__(self) -> Iterator[Binding]:
        return iter(sorted(self._bindings.values(), key=lambda b: b.id))

    def add_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        if not replace and action.id in self._actions:
            raise ValueError(f"Action '{action.id}' already registered")
        self._actions[action.id] = action
        return action

    def action(self, action_id: str) -> ActionRef:
        try:
            return self._actions[action_id]
        except KeyError as exc:
            raise KeyError(f"Action '{action_id}' is not registered") from exc

    def bind(self, binding: Binding, *, replace: bool = False) -> Binding:
        if binding.action_id not in self._actions:
            raise KeyError(
                f"Binding '{binding.id}' references unknown action '{binding.action_id}'"
            )
        key = (binding.mode, binding.tokens)
        if not replace and key in self._bindings:
            raise ValueError(f"'{binding.id}' is already bound")
        self._bindings[key] = binding
        self._rebuild_prefixes(binding.mode)
        return binding

    def bind_keys(
        self, mode: str, keys: Sequence[str], action_id: str, *, replace: bool = False
    ) -> Binding:
        return self.bind(
            Binding(mode, KeySequence.from_strings(*keys), action_id), replace=replace
        )

    def unbind(self, mode: str, tokens: Sequence[str]) -> Optional[Binding]:
        binding = self._bindings.pop((mode, tuple(tokens)), None)
        if binding is not None:
            self._rebuild_prefixes(mode)
        return binding

    def modes(self) -> tuple[str, ...]:
        return tuple(sorted({mode for mode, _ in self._bindings}))

    def lookup(self, mode: str, tokens: Sequence[str]) -> Lookup:
        typed = tuple(tokens)
        with span(
            "keymaps::lookup",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"mode": mode, "tokens": " ".join(typed)},
        ) as handle:
            binding = self._bindings.get((mode, typed))
            if binding is not None:
                result = Lookup("match", binding, self._actions[binding.action_id])
            elif typed in self._prefixes.get(mode, ()):
                result = Lookup("pending")
            else:
                result = Lookup("miss")
            handle.add_metadata("status", result.status)
        return result

    def _rebuild_prefixes(self, mode: str) -> None:
        self._prefixes[mode] = {
            tokens[:size]
            for (bound_mode, tokens) in self._bindings
            if bound_mode == mode
            for size in range(1, len(tokens))
        }


__all__ = ["Keymap", "Lookup"]
