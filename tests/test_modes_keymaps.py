from __future__ import annotations

from typing import List

import pytest

from align_engine.buffer import Buffer
from align_engine.modes import KeyInput, ModeContext
from align_engine.modes.mode_manager import ModeManager
from align_engine.runtime import AlignSettings


def make_manager(text: str, cursor: tuple[int, int] = (0, 0)) -> ModeManager:
    buffer = Buffer.from_text(text)
    buffer.move_cursor(*cursor)
    return ModeManager(ModeContext(buffer=buffer, settings=AlignSettings()))


def type_keys(manager: ModeManager, *keys: str) -> List[str]:
    statuses = []
    for key in keys:
        if key == "SPACE":
            event = KeyInput(key="SPACE", text=" ")
        elif len(key) == 1:
            event = KeyInput(key=key, text=key)
        else:
            event = KeyInput(key=key)
        statuses.append(manager.handle_key(event).status)
    return statuses


def test_normal_mode_uses_keymap_binding() -> None:
    manager = make_manager("")

    result = manager.handle_key(KeyInput(key="i"))

    assert result.switch_to == "insert"
    assert result.consumed is True
    assert manager.active_mode is not None
    assert manager.active_mode.name == "insert"


def test_normal_mode_pending_sequence() -> None:
    manager = make_manager("")
    manager.keymap.bind_keys("normal", ("g", "i"), "core.enter_insert")

    pending = manager.handle_key(KeyInput(key="g"))
    assert pending.status == "pending"
    assert pending.consumed is True

    match = manager.handle_key(KeyInput(key="i"))
    assert match.switch_to == "insert"


def test_broken_sequence_falls_through_to_mode() -> None:
    manager = make_manager("")
    manager.keymap.bind_keys("normal", ("g", "i"), "core.enter_insert")

    manager.handle_key(KeyInput(key="g"))
    result = manager.handle_key(KeyInput(key="x"))

    assert result.status == "miss"
    assert result.consumed is False
    assert manager.handle_key(KeyInput(key="i")).switch_to == "insert"


def test_insert_mode_escape_binding() -> None:
    manager = make_manager("")
    type_keys(manager, "i")

    result = manager.handle_key(KeyInput(key="ESC"))

    assert result.switch_to == "normal"
    assert result.consumed is True


def test_unbound_printable_key_types_in_insert_mode() -> None:
    manager = make_manager("")

    statuses = type_keys(manager, "i", "h", "i")

    assert statuses == ["ok", "insert_text", "insert_text"]
    assert manager.context.buffer.line(0) == "hi"


def test_space_in_insert_mode_aligns_on_repeat() -> None:
    manager = make_manager("foo bar\n", (1, 0))

    statuses = type_keys(manager, "i", "f", "o", "SPACE", "SPACE")

    buffer = manager.context.buffer
    assert statuses[-2:] == ["align_literal", "align_lead"]
    assert buffer.line(0) == "foo bar"
    assert buffer.line(1) == "fo  "
    assert buffer.state.cursor == (1, 4)
    assert len(buffer.previews) == 1


def test_typing_after_alignment_commits_previews() -> None:
    manager = make_manager("foo bar\n", (1, 0))

    type_keys(manager, "i", "f", "o", "SPACE", "SPACE", "b")

    buffer = manager.context.buffer
    assert buffer.line(1) == "fo  b"
    assert len(buffer.previews) == 0
    assert not manager.context.session.active


def test_leaving_insert_mode_commits_previews() -> None:
    manager = make_manager("foo bar\n", (1, 0))

    type_keys(manager, "i", "f", "o", "SPACE", "SPACE", "ESC")

    assert manager.active_mode is not None
    assert manager.active_mode.name == "normal"
    assert len(manager.context.buffer.previews) == 0
    assert manager.context.buffer.line(1) == "fo  "


def test_multi_edit_flag_types_plain_spaces() -> None:
    manager = make_manager("foo bar\n", (1, 0))
    manager.context.flags["multi_edit"] = True

    statuses = type_keys(manager, "i", "f", "o", "SPACE", "SPACE")

    assert statuses[-2:] == ["align_literal", "align_literal"]
    assert len(manager.context.buffer.previews) == 0


def test_align_step_event_is_published() -> None:
    manager = make_manager("foo bar\n", (1, 0))
    events: List[object] = []
    manager.context.bus.subscribe("align.step", events.append)

    type_keys(manager, "i", "f", "o", "SPACE", "SPACE")

    assert events == [
        {"kind": "literal", "column": None, "width": 1, "lines": 1},
        {"kind": "lead", "column": 4, "width": 1, "lines": 1},
    ]


def test_editing_actions() -> None:
    manager = make_manager("ab\ncd", (1, 0))

    type_keys(manager, "i", "BACKSPACE")
    assert manager.context.buffer.document.text() == "abcd"
    assert manager.context.buffer.state.cursor == (0, 2)

    type_keys(manager, "ENTER", "LEFT", "LEFT", "UP")
    assert manager.context.buffer.document.text() == "ab\ncd"
    assert manager.context.buffer.state.cursor == (0, 1)


def test_normal_mode_cursor_keys_clamp() -> None:
    manager = make_manager("long line\nx")

    type_keys(manager, "l", "l", "l", "j")

    assert manager.context.buffer.state.cursor == (1, 1)


def test_switching_to_unknown_mode_fails() -> None:
    manager = make_manager("")

    with pytest.raises(KeyError, match="visual"):
        manager.switch_mode("visual")
