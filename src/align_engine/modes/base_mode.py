"""Shared state handed to modes and actions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from align_engine.align import AdvanceSession, BufferAlignHost
from align_engine.buffer import Buffer
from align_engine.runtime.config import AlignSettings


@dataclass(frozen=True, slots=True)
class KeyInput:
    """A key event; ``text`` is set when the key would type something."""

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None

    @property
    def token(self) -> str:
        modifiers = sorted({m.lower() for m in self.modifiers})
        return "+".join((*modifiers, self.key))


@dataclass(slots=True)
class ModeResult:
    consumed: bool
    switch_to: Optional[str] = None
    status: str = "ok"
    message: Optional[str] = None


class ModeBus:
    """Synchronous fan-out of named events to subscribers."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in tuple(self._subscribers.get(event, ())):
            callback(payload)


@dataclass(slots=True)
class ModeContext:
    """Everything an action may touch.

    ``flags`` holds editor state the advance session consults; a true
    ``multi_edit`` turns every advance press into a plain space. The session
    is built once per context and lives as long as the buffer does.
    """

    buffer: Buffer
    bus: ModeBus = field(default_factory=ModeBus)
    settings: AlignSettings = field(default_factory=AlignSettings.from_env)
    flags: Dict[str, bool] = field(default_factory=dict)
    session: AdvanceSession = field(init=False)

    def __post_init__(self) -> None:
        host = BufferAlignHost(self.buffer, settings=self.settings, flags=self.flags)
        self.session = AdvanceSession(
            host, scan_limit=self.settings.scan_limit, logger_name="align_engine.align"
        )


class Mode:
    """A named input mode; the manager resolves bound keys before asking it."""

    name: str = "mode"

    def __init__(self, context: ModeContext) -> None:
        self.context = context

    def on_enter(self, previous: Optional[str]) -> None:
        del previous

    def on_exit(self, next_mode: Optional[str]) -> None:
        del next_mode

    def before_action(self, action_id: str) -> None:
        """Runs ahead of every bound action while this mode is active."""

        del action_id

    def handle_unbound(self, key: KeyInput) -> ModeResult:
        del key
        return ModeResult(consumed=False, status="miss")


__all__ = ["KeyInput", "Mode", "ModeBus", "ModeContext", "ModeResult"]
