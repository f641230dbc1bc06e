"""Textual adapter that wires ModeManager events into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from align_engine.buffer import BufferMirror
from align_engine.modes import KeyInput, ModeResult
from align_engine.modes.mode_manager import ModeManager
from align_engine.runtime import telemetry


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


class TextualAlignAdapter:
    """Bridges ModeManager and bus events to a Textual-friendly surface.

    Also satisfies ``BufferSync`` through ``pull_buffer``.
    """

    EVENTS = ("align.step", "cursor.move")

    def __init__(self, manager: ModeManager, hooks: TextualUIHooks) -> None:
        self.manager = manager
        self.hooks = hooks
        self.logger = telemetry.get_logger("align_engine.adapters.textual")
        self._subscribe_events()
        self._refresh_buffer()

    def pull_buffer(self) -> BufferMirror:
        active = self.manager.active_mode
        return self.manager.context.buffer.mirror(
            attributes={"mode": active.name if active else ""}
        )

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> ModeResult:
        """Translate a Textual key event into a KeyInput and dispatch it."""

        normalized_modifiers = tuple(str(mod).upper() for mod in modifiers)
        self._log_state("key ->", key=key, text=text, mods=normalized_modifiers)
        result = self.manager.handle_key(
            KeyInput(key=key, text=text, modifiers=normalized_modifiers)
        )
        self._after_mode_result(result)
        self._log_state(
            "result <-",
            consumed=result.consumed,
            status=result.status,
            message=result.message,
            switch_to=result.switch_to,
        )
        return result

    def _after_mode_result(self, result: ModeResult) -> None:
        status = result.message or result.status
        if status:
            self.hooks.update_status(status)
        self._refresh_buffer()

    def _subscribe_events(self) -> None:
        bus = self.manager.context.bus
        for event in self.EVENTS:
            bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)
        if name == "align.step" and isinstance(payload, dict):
            column = payload.get("column")
            label = f"align:{payload.get('kind')}"
            if column is not None:
                label = f"{label}@{column}"
            self.hooks.update_status(label)

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(self.pull_buffer())

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        line = " ".join(parts)
        self.logger.debug(line)
        self.hooks.log(line)

    def _state_metadata(self) -> Dict[str, object]:
        context = self.manager.context
        buffer = context.buffer
        active_mode = self.manager.active_mode
        session = context.session
        return {
            "mode": active_mode.name if active_mode else "?",
            "cursor": buffer.state.cursor,
            "buffer": buffer.name,
            "buffer_version": buffer.document.version,
            "previews": len(buffer.previews),
            "pending_aligns": session.pending_aligns,
        }


__all__ = ["TextualAlignAdapter", "TextualUIHooks"]
