"""Built-in actions and bindings for normal and insert mode."""

from __future__ import annotations

from typing import Iterable

from .keymap import Keymap
from .models import ActionRef, Binding, KeySequence


def default_actions() -> tuple[ActionRef, ...]:
    # Imported here: action modules depend on the mode package, which in turn
    # loads this module.
    from align_engine.actions import align as align_actions
    from align_engine.actions import core as core_actions
    from align_engine.actions import editing as editing_actions

    return (
        ActionRef("core.enter_insert", core_actions.enter_insert_mode, "Enter insert mode"),
        ActionRef(
            "core.exit_to_normal", core_actions.exit_to_normal_mode, "Return to normal mode"
        ),
        ActionRef(
            "align.advance",
            align_actions.advance_alignment,
            "Insert a space or step to the next aligned column",
        ),
        ActionRef("edit.newline", editing_actions.insert_newline, "Split the line"),
        ActionRef(
            "edit.backspace", editing_actions.delete_backward, "Delete the previous character"
        ),
        ActionRef("cursor.left", editing_actions.cursor_left),
        ActionRef("cursor.right", editing_actions.cursor_right),
        ActionRef("cursor.up", editing_actions.cursor_up),
        ActionRef("cursor.down", editing_actions.cursor_down),
    )


_CURSOR_KEYS = (
    ("LEFT", "cursor.left"),
    ("RIGHT", "cursor.right"),
    ("UP", "cursor.up"),
    ("DOWN", "cursor.down"),
)

_TABLE = (
    ("normal", "i", "core.enter_insert"),
    ("normal", "h", "cursor.left"),
    ("normal", "l", "cursor.right"),
    ("normal", "k", "cursor.up"),
    ("normal", "j", "cursor.down"),
    *(("normal", key, action) for key, action in _CURSOR_KEYS),
    ("insert", "ESC", "core.exit_to_normal"),
    ("insert", "SPACE", "align.advance"),
    ("insert", "ENTER", "edit.newline"),
    ("insert", "BACKSPACE", "edit.backspace"),
    *(("insert", key, action) for key, action in _CURSOR_KEYS),
)

DEFAULT_BINDINGS: tuple[Binding, ...] = tuple(
    Binding(mode, KeySequence.from_strings(key), action) for mode, key, action in _TABLE
)


def load_default_keymaps(
    keymap: Keymap,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] = (),
    exclude: Iterable[str] = (),
) -> Keymap:
    """Add the built-in actions and bindings, skipping binding ids in ``exclude``."""

    skipped = set(exclude)
    for action in default_actions():
        keymap.add_action(action, replace=replace)
    for binding in DEFAULT_BINDINGS:
        if binding.id not in skipped:
            keymap.bind(binding, replace=replace)
    for binding in extra_bindings:
        keymap.bind(binding, replace=replace)
    return keymap


__all__ = ["DEFAULT_BINDINGS", "default_actions", "load_default_keymaps"]
