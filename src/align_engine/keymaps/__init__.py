"""Key bindings for the advance action and plain editing."""

from .models import ActionRef, Binding, KeySequence, KeyStroke
from .keymap import Keymap, Lookup
from .defaults import DEFAULT_BINDINGS, default_actions, load_default_keymaps

__all__ = [
    "ActionRef",
    "Binding",
    "KeySequence",
    "KeyStroke",
    "Keymap",
    "Lookup",
    "DEFAULT_BINDINGS",
    "default_actions",
    "load_default_keymaps",
]
