"""Modes and the manager dispatching key input to them."""

from .base_mode import KeyInput, Mode, ModeBus, ModeContext, ModeResult
from .normal_mode import NormalMode
from .insert_mode import INSERT_TEXT_ACTION, InsertMode
from .mode_manager import ModeManager

__all__ = [
    "INSERT_TEXT_ACTION",
    "KeyInput",
    "Mode",
    "ModeBus",
    "ModeContext",
    "ModeManager",
    "ModeResult",
    "NormalMode",
    "InsertMode",
]
