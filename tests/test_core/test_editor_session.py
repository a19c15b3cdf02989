# tests/test_core/test_editor_session.py
"""EditorSession Tests
=======================

Tests for the session controller, driven through `process_event()` and
`run()` with a scripted terminal.

This test module verifies that EditorSession:

1. Dispatches movement, editing, save and quit keys.
2. Requires repeated quit requests while the buffer has unsaved changes.
3. Expires status messages after the configured timeout.
4. Saves to the buffer's file (prompting for a name when there is none) and
   reports failures in the message bar.
5. Builds render plans with tildes, the welcome row and a status bar.
"""

import pytest

from kedit import __version__
from kedit.core.EditorSession import EditorSession, SessionState
from kedit.core.errors import KeyReadFailure
from kedit.core.InputEvent import InputEvent, Key
from kedit.core.LineBuffer import LineBuffer
from kedit.core.Position import Position
from tests.stubs import FakeClock, StubTerminal, chars, ctrl, key


def type_text(session: EditorSession, text: str) -> None:
    for event in chars(text):
        session.process_event(event)


# --- editing ---
class TestEditing:
    def test_typing_inserts_and_advances_cursor(self, session: EditorSession) -> None:
        type_text(session, "hi")

        assert session.buffer.lines == ["hi"]
        assert session.cursor == Position(2, 0)
        assert session.dirty == 2

    def test_enter_splits_line_and_moves_to_next_row(self, session: EditorSession) -> None:
        type_text(session, "hello")
        session.cursor = Position(2, 0)
        session.process_event(key(Key.ENTER))

        assert session.buffer.lines == ["he", "llo"]
        assert session.cursor == Position(0, 1)

    def test_backspace_at_line_start_joins_lines(self, session: EditorSession) -> None:
        session.buffer.lines = ["foo", "bar"]
        session.cursor = Position(0, 1)
        session.process_event(key(Key.BACKSPACE))

        assert session.buffer.lines == ["foobar"]
        assert session.cursor == Position(3, 0)

    def test_backspace_at_buffer_start_changes_nothing(self, session: EditorSession) -> None:
        session.buffer.lines = ["foo"]
        session.process_event(key(Key.BACKSPACE))

        assert session.buffer.lines == ["foo"]
        assert session.cursor == Position(0, 0)
        assert session.dirty == 0

    def test_delete_removes_character_under_cursor(self, session: EditorSession) -> None:
        session.buffer.lines = ["abc"]
        session.cursor = Position(1, 0)
        session.process_event(key(Key.DELETE))

        assert session.buffer.lines == ["ac"]
        assert session.cursor == Position(1, 0)

    def test_delete_at_line_end_joins_next_line(self, session: EditorSession) -> None:
        session.buffer.lines = ["ab", "cd"]
        session.cursor = Position(2, 0)
        session.process_event(key(Key.DELETE))

        assert session.buffer.lines == ["abcd"]
        assert session.cursor == Position(2, 0)

    def test_enter_then_backspace_restores_buffer(self, session: EditorSession) -> None:
        session.buffer.lines = ["hello"]
        session.cursor = Position(3, 0)
        session.process_event(key(Key.ENTER))
        session.process_event(key(Key.BACKSPACE))

        assert session.buffer.lines == ["hello"]
        assert session.cursor == Position(3, 0)

    def test_movement_keys_go_through_controller(self, session_with_text: EditorSession) -> None:
        session_with_text.process_event(key(Key.DOWN))
        session_with_text.process_event(key(Key.END))

        assert session_with_text.cursor == Position(len("    print('Hello, world!')"), 1)

    def test_unknown_and_unbound_ctrl_keys_are_ignored(self, session: EditorSession) -> None:
        session.process_event(key(Key.UNKNOWN))
        session.process_event(ctrl("x"))
        session.process_event(key(Key.ESCAPE))

        assert session.buffer.lines == []
        assert session.running

    def test_resize_updates_viewport(self, session: EditorSession, terminal: StubTerminal) -> None:
        terminal.width, terminal.height = 40, 10
        session.process_event(key(Key.RESIZE))

        assert (session.viewport.width, session.viewport.height) == (40, 8)


# --- quit protocol ---
class TestQuit:
    def test_clean_buffer_quits_immediately(self, session: EditorSession) -> None:
        session.process_event(ctrl("q"))

        assert not session.running
        assert session.state is SessionState.TERMINATED

    def test_dirty_buffer_needs_four_requests(self, session: EditorSession) -> None:
        type_text(session, "x")
        messages = []

        for _ in range(3):
            session.process_event(ctrl("q"))
            assert session.running
            assert session.state is SessionState.CONFIRMING_QUIT
            messages.append(session.current_status_message())

        session.process_event(ctrl("q"))

        assert not session.running
        assert session.dirty == 1
        assert messages == [
            f"WARNING!!! File has unsaved changes. Press Ctrl-Q {n} more times to quit."
            for n in (2, 1, 0)
        ]

    def test_quit_counter_follows_config(self, config, terminal: StubTerminal, clock: FakeClock) -> None:
        config["editor"]["quit_times"] = 1
        session = EditorSession(config, LineBuffer(["x"]), terminal, clock=clock)
        session.buffer.dirty = 1

        session.process_event(ctrl("q"))
        assert session.running
        session.process_event(ctrl("q"))
        assert not session.running

    def test_other_keys_do_not_reset_counter(self, session: EditorSession) -> None:
        type_text(session, "x")
        session.process_event(ctrl("q"))
        type_text(session, "y")

        assert session.quit_attempts_remaining == 2

    def test_custom_quit_binding(self, config, terminal: StubTerminal, clock: FakeClock) -> None:
        config["keybindings"]["quit"] = "ctrl+x"
        session = EditorSession(config, LineBuffer(), terminal, clock=clock)

        session.process_event(ctrl("q"))
        assert session.running
        session.process_event(ctrl("x"))
        assert not session.running

    def test_save_restores_quit_confirmations(self, tmp_path, config, terminal, clock) -> None:
        """After a save, new edits need the full confirmation sequence again."""
        session = EditorSession(config, LineBuffer(filename=str(tmp_path / "a.txt")), terminal, clock=clock)
        type_text(session, "a")
        for _ in range(3):
            session.process_event(ctrl("q"))

        session.process_event(ctrl("s"))
        assert session.state is SessionState.RUNNING

        type_text(session, "b")
        session.process_event(ctrl("q"))

        assert session.running
        assert session.quit_attempts_remaining == 2
        assert (tmp_path / "a.txt").read_text() == "a"

    def test_invalid_quit_times_falls_back_to_default(self, config, terminal: StubTerminal, clock: FakeClock) -> None:
        config["editor"]["quit_times"] = "three"
        session = EditorSession(config, LineBuffer(), terminal, clock=clock)

        assert session.quit_times == 3
        assert session.quit_attempts_remaining == 3

    def test_invalid_binding_falls_back_to_default(self, config, terminal: StubTerminal, clock: FakeClock) -> None:
        config["keybindings"]["quit"] = "hyper+q"
        session = EditorSession(config, LineBuffer(), terminal, clock=clock)

        assert session.quit_combo == InputEvent(Key.CTRL, "q")


# --- status message ---
class TestStatusMessage:
    def test_message_expires_after_timeout(self, session: EditorSession, clock: FakeClock) -> None:
        session.set_status_message("hello")
        clock.advance(4.5)
        assert session.current_status_message() == "hello"

        clock.advance(0.5)
        assert session.current_status_message() == ""

    def test_setting_message_restarts_timer(self, session: EditorSession, clock: FakeClock) -> None:
        session.set_status_message("first")
        clock.advance(4)
        session.set_status_message("second")
        clock.advance(4)

        assert session.current_status_message() == "second"

    def test_help_message_names_bindings(self, session: EditorSession) -> None:
        assert session.help_message() == "HELP: Ctrl-S = save | Ctrl-Q = quit"


# --- saving ---
class TestSave:
    def test_save_writes_file_and_reports(self, tmp_path, config, terminal, clock) -> None:
        path = tmp_path / "notes.txt"
        session = EditorSession(config, LineBuffer(filename=str(path)), terminal, clock=clock)
        type_text(session, "abc")
        session.process_event(ctrl("s"))

        assert path.read_text() == "abc"
        assert session.dirty == 0
        assert session.current_status_message() == "notes.txt 1L written"

    def test_save_failure_keeps_dirty(self, tmp_path, config, terminal, clock) -> None:
        path = tmp_path / "missing-dir" / "notes.txt"
        session = EditorSession(config, LineBuffer(filename=str(path)), terminal, clock=clock)
        type_text(session, "abc")
        session.process_event(ctrl("s"))

        assert session.dirty == 3
        assert session.current_status_message() == "Can't save! I/O error: No such file or directory"

    def test_unnamed_buffer_prompts_for_name(self, tmp_path, session: EditorSession, terminal: StubTerminal) -> None:
        target = str(tmp_path / "out.txt")
        type_text(session, "data")
        terminal.queue(*chars(target + "Z"), key(Key.BACKSPACE), key(Key.ENTER))
        session.process_event(ctrl("s"))

        assert (tmp_path / "out.txt").read_text() == "data"
        assert session.buffer.filename == target
        assert session.current_status_message() == "out.txt 1L written"
        assert terminal.plans[0].message_bar == "Save as:  (ESC to cancel)"

    def test_prompt_ignores_enter_on_empty_input(self, tmp_path, session: EditorSession, terminal: StubTerminal) -> None:
        type_text(session, "data")
        terminal.queue(key(Key.ENTER), *chars(str(tmp_path / "f")), key(Key.ENTER))
        session.process_event(ctrl("s"))

        assert session.buffer.filename == str(tmp_path / "f")

    def test_escape_aborts_save(self, session: EditorSession, terminal: StubTerminal) -> None:
        type_text(session, "data")
        terminal.queue(*chars("name"), key(Key.ESCAPE))
        session.process_event(ctrl("s"))

        assert session.buffer.filename is None
        assert session.dirty == 4
        assert session.current_status_message() == "Save aborted"

    def test_prompt_without_terminal_returns_none(self, config, clock) -> None:
        session = EditorSession(config, LineBuffer(["x"]), None, clock=clock)

        assert session.prompt("Save as: {}") is None
        session.save_file()
        assert session.current_status_message() == "Save aborted"


# --- rendering ---
class TestRenderPlan:
    def test_empty_buffer_shows_tildes_and_welcome(self, session: EditorSession) -> None:
        plan = session.build_render_plan()

        assert len(plan.rows) == 22
        welcome_row = 22 // 3
        assert f"kedit editor -- version {__version__}" in plan.rows[welcome_row]
        assert plan.rows[welcome_row].startswith("~")
        assert all(row == "~" for i, row in enumerate(plan.rows) if i != welcome_row)

    def test_rows_past_end_are_tildes_without_welcome(self, session_with_text: EditorSession) -> None:
        plan = session_with_text.build_render_plan()

        assert plan.rows[:4] == session_with_text.buffer.lines
        assert all(row == "~" for row in plan.rows[4:])

    def test_status_bar_layout(self, config, terminal, clock) -> None:
        session = EditorSession(config, LineBuffer(["a", "b", "c"], filename="notes.txt"), terminal, clock=clock)
        session.cursor = Position(0, 1)
        plan = session.build_render_plan()

        assert len(plan.status_bar) == 80
        assert plan.status_bar.startswith("notes.txt - 3 lines")
        assert plan.status_bar.endswith("2/3")

        type_text(session, "x")
        assert "(modified)" in session.build_render_plan().status_bar

    def test_status_bar_for_unnamed_buffer(self, session: EditorSession) -> None:
        assert session.build_render_plan().status_bar.startswith("[No Name] - 0 lines")

    def test_message_bar_shows_fresh_message_only(self, session: EditorSession, clock: FakeClock) -> None:
        session.set_status_message("saved")
        assert session.build_render_plan().message_bar == "saved"

        clock.advance(10)
        assert session.build_render_plan().message_bar == ""

    def test_cursor_is_screen_relative_after_scroll(self, config, terminal, clock) -> None:
        lines = ["line %d" % i for i in range(100)]
        session = EditorSession(config, LineBuffer(lines), terminal, clock=clock)
        session.cursor = Position(3, 50)
        plan = session.build_render_plan()

        assert session.viewport.row_offset == 50 - 22 + 1
        assert plan.cursor == Position(3, 21)
        assert plan.rows[-1] == "line 50"

    def test_long_lines_scroll_horizontally(self, config, terminal, clock) -> None:
        session = EditorSession(config, LineBuffer(["x" * 100 + "END"]), terminal, clock=clock)
        session.cursor = Position(103, 0)
        plan = session.build_render_plan()

        assert plan.rows[0].endswith("END")
        assert plan.cursor == Position(79, 0)


# --- main loop ---
class TestRun:
    def test_type_save_quit_end_to_end(self, tmp_path, config, clock) -> None:
        path = tmp_path / "notes.txt"
        terminal = StubTerminal(
            [*chars("hi"), key(Key.ENTER), *chars("there"), ctrl("s"), ctrl("q")]
        )
        session = EditorSession(config, LineBuffer(filename=str(path)), terminal, clock=clock)
        session.run()

        assert path.read_bytes() == b"hi\nthere"
        assert session.status_message == "notes.txt 2L written"
        assert not session.running
        assert terminal.events == []

    def test_first_frame_shows_help(self, config, clock) -> None:
        terminal = StubTerminal([ctrl("q")])
        EditorSession(config, LineBuffer(), terminal, clock=clock).run()

        assert terminal.plans[0].message_bar == "HELP: Ctrl-S = save | Ctrl-Q = quit"

    def test_key_read_failure_propagates(self, config, clock) -> None:
        terminal = StubTerminal([*chars("a"), KeyReadFailure("unable to read keypress", 5)])
        session = EditorSession(config, LineBuffer(), terminal, clock=clock)

        with pytest.raises(KeyReadFailure):
            session.run()
        assert session.buffer.lines == ["a"]

    def test_run_requires_terminal(self, config) -> None:
        with pytest.raises(RuntimeError):
            EditorSession(config, LineBuffer()).run()
