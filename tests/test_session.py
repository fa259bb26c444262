from __future__ import annotations

from typing import Any, Dict, List, Tuple

import pytest

from tile_editor.grid import ReflowState
from tile_editor.runtime import telemetry
from tile_editor.session import EditSession, SessionConfig, SessionCursorError


def make_session(
    storage: str | None = "", rows: int = 2, columns: int = 4
) -> EditSession:
    return EditSession.open(storage, SessionConfig.of(rows, columns), name="test")


Event = Tuple[str, str, Dict[str, Any]]


def capture_events(monkeypatch: pytest.MonkeyPatch) -> List[Event]:
    events: List[Event] = []

    def fake_record_event(
        name: str, *, level: str = "info", data=None, logger_name=None
    ) -> None:
        events.append((name, level, dict(data or {})))

    monkeypatch.setattr(telemetry, "record_event", fake_record_event)
    return events


def test_open_expands_and_pads_storage() -> None:
    session = make_session("abcdefgh")

    assert session.text == "abcd\nefgh"
    assert session.cursor == 0
    assert not session.dirty
    assert session.history.depth == (1, 0)


def test_open_empty_storage_yields_blank_rows() -> None:
    assert make_session(None).text == "\n"
    assert make_session("", rows=3).text == "\n\n"


def test_typing_into_full_row_cascades() -> None:
    session = make_session("abcd    ")
    session.move_end()

    delta = session.insert_text("e")

    assert delta.text == "abcd\ne"
    assert delta.cursor == 6
    assert delta.changed and delta.status == "ok"
    assert session.dirty
    assert session.version == 1


def test_undo_and_redo_restore_buffers() -> None:
    session = make_session("abcd    ")
    session.move_end()
    session.insert_text("e")

    undone = session.undo()
    assert undone.text == "abcd\n"
    assert undone.cursor == 5
    assert not session.dirty

    redone = session.redo()
    assert redone.text == "abcd\ne"
    assert redone.label == "redo"


def test_undo_without_history_reports_status() -> None:
    session = make_session("abcd")

    delta = session.undo()

    assert not delta.changed
    assert delta.status == "nothing_to_undo"
    assert session.redo().status == "nothing_to_redo"


def test_no_op_edit_is_not_recorded() -> None:
    session = make_session("abcd")

    delta = session.backspace()

    assert not delta.changed
    assert delta.status == "unchanged"
    assert session.history.depth == (1, 0)
    assert session.version == 0


def test_split_line_then_delete_merges_back() -> None:
    session = make_session("abcd")
    session.move_cursor(2)

    session.split_line()
    assert session.text == "ab\ncd\n"
    assert session.cursor == 3

    session.backspace()
    assert session.text == "abcd\n"
    assert session.cursor == 2

    session.move_cursor(0)
    session.delete()
    assert session.text == "bcd\n"


def test_replace_text_reflows_host_edit() -> None:
    session = make_session()

    session.push_host_edit("abcdefghij", 10)

    assert session.text == "abcd\nefgh\nij"
    assert session.cursor == 12
    assert session.state is ReflowState.IDLE


def test_cursor_moves() -> None:
    session = make_session("abcdefgh")
    session.move_cursor(7)

    assert session.move_up().cursor == 2
    assert session.move_down().cursor == 7
    assert session.move_down().cursor == len(session.text)
    assert session.move_home().cursor == 5
    assert session.move_left().cursor == 4
    assert session.move_right().cursor == 5
    assert session.move_end().cursor == 9
    session.move_cursor(1)
    assert session.move_up().cursor == 0


def test_move_cursor_outside_buffer_raises() -> None:
    session = make_session("abcd")

    with pytest.raises(SessionCursorError) as info:
        session.move_cursor(99)

    assert info.value.cursor == 99
    with pytest.raises(SessionCursorError):
        session.move_cursor(-1)


def test_save_returns_fixed_size_storage_and_marks_clean() -> None:
    session = make_session()
    session.insert_text("hi")

    storage = session.save()

    assert storage == "hi      "
    assert not session.dirty


def test_save_discards_rows_past_budget(monkeypatch: pytest.MonkeyPatch) -> None:
    session = make_session("abcdefgh")
    session.move_cursor(len(session.text))
    session.split_line()
    session.insert_text("z")
    events = capture_events(monkeypatch)

    assert session.text == "abcd\nefgh\nz"
    assert session.pending_loss().dropped_lines == ("z",)
    assert session.save() == "abcdefgh"

    truncated = [data for name, _, data in events if name == "session.save_truncated"]
    assert truncated == [
        {"session": "test", "dropped_lines": 1, "dropped_characters": 1}
    ]
    assert not session.dirty


def test_export_joins_rows_into_prose() -> None:
    session = make_session("wordone wordtwoo", rows=2, columns=8)

    assert session.export() == "wordone wordtwoo"


def test_mirror_classifies_buffer() -> None:
    session = make_session("abcd")
    session.insert_text("ä")

    mirror = session.pull_tile()

    assert mirror.text == session.text
    assert mirror.rows == 2 and mirror.columns == 4
    assert mirror.attributes == {"state": "idle", "dirty": "true"}
    assert mirror.classification.has_disallowed
    assert session.snapshot().dirty


def test_collapse_leaves_session_dirty_until_marked_saved() -> None:
    session = make_session()
    session.insert_text("hi")

    storage = session.collapse()
    assert storage == "hi      "
    assert session.dirty

    session.mark_saved(storage)
    assert not session.dirty
