from __future__ import annotations

from align_engine.align import ADVANCE_ACTION, AdvanceSession, BufferAlignHost
from align_engine.buffer import Buffer
from align_engine.runtime import AlignSettings


def make_session(
    text: str,
    cursor: tuple[int, int],
    *,
    settings: AlignSettings | None = None,
    flags: dict[str, bool] | None = None,
) -> tuple[Buffer, AdvanceSession]:
    buffer = Buffer.from_text(text)
    buffer.move_cursor(*cursor)
    host = BufferAlignHost(buffer, settings=settings, flags=flags)
    return buffer, AdvanceSession(host)


def test_first_advance_inserts_plain_space() -> None:
    buffer, session = make_session("foo bar\nfo", (1, 2))

    step = session.advance()

    assert step.kind == "literal"
    assert buffer.line(1) == "fo "
    assert not session.active


def test_repeated_advance_aligns_cursor_with_previous_line() -> None:
    buffer, session = make_session("foo bar\nfo", (1, 2))

    session.advance()
    step = session.advance()

    assert step.kind == "lead"
    assert step.column == 4
    assert buffer.line(0) == "foo bar"
    assert buffer.line(1) == "fo  "
    assert buffer.state.cursor == (1, 4)
    assert buffer.mirror().previews == ((1, 3, 4),)


def test_exhausted_session_commits_and_types_space() -> None:
    buffer, session = make_session("foo bar\nfo", (1, 2))
    session.advance()
    session.advance()
    assert session.pending_aligns == ()

    step = session.advance()

    assert step.kind == "literal"
    assert not session.active
    assert buffer.line(1) == "fo   "
    assert len(buffer.previews) == 0
    assert buffer.undo.latest().label == "insert_text"


def test_columns_equal_to_cursor_are_skipped() -> None:
    buffer, session = make_session("ab cd ef\nab", (1, 2))

    session.advance()
    step = session.advance()

    assert step.kind == "lead"
    assert step.column == 6
    assert step.width == 3
    assert buffer.state.cursor == (1, 6)


def test_lag_pads_other_lines_to_cursor_column() -> None:
    buffer, session = make_session("x = 1\nlongname", (1, 8))

    session.advance()
    lag = session.advance()

    assert lag.kind == "lag"
    assert lag.column == 2
    assert lag.width == 7
    assert lag.lines == 1
    assert buffer.line(0) == "x" + " " * 8 + "= 1"
    assert session.pending_aligns == (11,)

    lead = session.advance()

    assert lead.kind == "lead"
    assert lead.width == 2
    assert buffer.line(1) == "longname" + " " * 3
    assert buffer.line(0).index("1") == buffer.state.cursor[1]


def test_lag_skips_lines_where_a_cell_spans_the_target() -> None:
    buffer, session = make_session("ab cd\nabcd ef\nabcdefg", (2, 7))

    session.advance()
    step = session.advance()

    assert step.kind == "lag"
    assert step.column == 3
    assert step.lines == 1
    assert buffer.line(0) == "ab" + " " * 6 + "cd"
    assert buffer.line(1) == "abcd ef"


def test_non_advance_action_commits_previews() -> None:
    buffer, session = make_session("foo bar\nfo", (1, 2))
    session.advance()
    session.advance()
    undo_depth = len(buffer.undo)

    session.before_action("insert.text")

    assert not session.active
    assert session.preview_count == 0
    assert len(buffer.previews) == 0
    assert buffer.line(1) == "fo  "
    assert len(buffer.undo) == undo_depth + 1
    assert buffer.undo.latest().label == "materialize_previews"


def test_advance_after_other_action_starts_over() -> None:
    buffer, session = make_session("foo bar\nfo", (1, 2))
    session.advance()
    session.before_action("cursor.left")

    step = session.advance()

    assert step.kind == "literal"
    assert buffer.line(1) == "fo  "


def test_reset_without_materialize_discards_previews() -> None:
    buffer, session = make_session("foo bar\nfo", (1, 2))
    session.advance()
    session.advance()

    session.reset(materialize=False)

    assert buffer.line(1) == "fo "
    assert buffer.state.cursor == (1, 3)
    assert not session.active


def test_multi_edit_disables_alignment() -> None:
    flags = {"multi_edit": True}
    buffer, session = make_session("foo bar\nfo", (1, 2), flags=flags)

    session.advance()
    step = session.advance()

    assert step.kind == "literal"
    assert session.preview_count == 0
    assert buffer.line(1) == "fo  "


def test_configured_repeat_actions_count_as_advance() -> None:
    settings = AlignSettings(repeat_actions=frozenset({"align.tab"}))
    buffer, session = make_session("foo bar\nfo", (1, 2), settings=settings)

    session.advance(ADVANCE_ACTION)
    step = session.advance("align.tab")

    assert step.kind == "lead"
    assert buffer.state.cursor == (1, 4)


def test_advance_before_a_token_pushes_it_to_the_next_column() -> None:
    buffer, session = make_session("a   bb  c\nxx yy", (1, 3))

    session.advance()
    step = session.advance()

    assert step.kind == "lead"
    assert step.column == 8
    assert buffer.line(1) == "xx" + " " * 6 + "yy"
    assert buffer.state.cursor == (1, 8)
    assert session.pending_aligns == ()


def test_host_moves_cursor_by_display_column() -> None:
    buffer = Buffer.from_text("a\tb")
    host = BufferAlignHost(buffer)

    assert host.move_to_column(8) is True
    assert buffer.state.cursor == (0, 2)
    assert host.current_column() == 8
    assert host.move_to_column(4) is False
    assert host.move_to_column(12) is False
    assert buffer.state.cursor == (0, 2)


def test_host_edits_are_real_and_undoable() -> None:
    buffer = Buffer.from_text("ab\ncd")
    host = BufferAlignHost(buffer)

    host.insert_text((1, 0), "  ")
    host.delete_range((0, 0), (0, 1))

    assert buffer.document.text() == "b\n  cd"
    assert [entry.label for entry in (buffer.undo.undo(), buffer.undo.undo())] == [
        "delete_range",
        "insert_text",
    ]
    assert host.line_at(-1) is None
    assert host.line_at(1) == 1
    assert host.line_at(2) is None


def test_lag_leaves_lines_with_a_double_space_gap_alone() -> None:
    buffer, session = make_session("x  = 1\nlongname", (1, 8))

    session.advance()
    step = session.advance()

    assert step.kind == "lag"
    assert step.lines == 0
    assert buffer.line(0) == "x  = 1"
    assert session.preview_count == 0


def test_lag_leaves_lines_with_a_tab_gap_alone() -> None:
    buffer, session = make_session("x\t= 1\nlongnamexx", (1, 10))

    session.advance()
    step = session.advance()

    assert step.kind == "lag"
    assert step.lines == 0
    assert buffer.line(0) == "x\t= 1"


def test_lag_still_pads_single_space_lines_next_to_gapped_ones() -> None:
    buffer, session = make_session("a  b\na b\nlongname", (2, 8))

    session.advance()
    step = session.advance()

    assert step.kind == "lag"
    assert step.column == 2
    assert step.lines == 1
    assert buffer.line(0) == "a  b"
    assert buffer.line(1) == "a" + " " * 8 + "b"


def test_commit_after_lag_over_several_lines_is_one_undo_step() -> None:
    buffer, session = make_session("a b\na b\nlongname", (2, 8))
    session.advance()
    session.advance()
    assert session.preview_count == 2
    depth = len(buffer.undo)

    session.before_action("cursor.left")

    assert len(buffer.undo) == depth + 1
    entry = buffer.undo.latest()
    assert entry is not None
    assert entry.after_text == "a" + " " * 8 + "b\n" + "a" + " " * 8 + "b\nlongname "
    assert entry.before_text == "a b\na b\nlongname "
