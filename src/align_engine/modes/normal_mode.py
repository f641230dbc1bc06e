"""Normal mode: only bound keys do anything."""

from __future__ import annotations

from .base_mode import Mode


class NormalMode(Mode):
    name = "normal"


__all__ = ["NormalMode"]
