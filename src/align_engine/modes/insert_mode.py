"""Insert mode: unbound keys type text."""

from __future__ import annotations

from typing import Optional

from .base_mode import KeyInput, Mode, ModeResult

INSERT_TEXT_ACTION = "insert.text"


class InsertMode(Mode):
    """Reports every action to the advance session before it runs.

    Anything other than another advance press commits pending previews, so
    typed text and real edits never land between uncommitted padding.
    """

    name = "insert"

    def on_exit(self, next_mode: Optional[str]) -> None:
        del next_mode
        self.context.session.reset()

    def before_action(self, action_id: str) -> None:
        self.context.session.before_action(action_id)

    def handle_unbound(self, key: KeyInput) -> ModeResult:
        if not key.text:
            return ModeResult(consumed=False, status="miss")
        self.before_action(INSERT_TEXT_ACTION)
        self.context.buffer.insert_text(key.text)
        return ModeResult(consumed=True, status="insert_text")


__all__ = ["INSERT_TEXT_ACTION", "InsertMode"]
