from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from tile_editor.adapters.textual import TextualTileAdapter, TextualUIHooks
from tile_editor.runtime import telemetry
from tile_editor.session import EditSession, SessionConfig, TileMirror
from tile_editor.storage import write_tile


def make_adapter(
    storage: str = "",
    *,
    updates: List[TileMirror] | None = None,
    statuses: List[str] | None = None,
    saved: List[str] | None = None,
    logs: List[str] | None = None,
) -> TextualTileAdapter:
    session = EditSession.open(storage, SessionConfig.of(2, 4), name="adapter")
    hooks = TextualUIHooks(
        update_buffer=(updates if updates is not None else []).append,
        update_status=(statuses if statuses is not None else []).append,
        save=(saved if saved is not None else []).append,
        log=(logs if logs is not None else []).append,
    )
    return TextualTileAdapter(session, hooks)


def test_adapter_renders_initial_buffer() -> None:
    updates: List[TileMirror] = []

    make_adapter("abcd", updates=updates)

    assert [mirror.text for mirror in updates] == ["abcd\n"]


def test_adapter_inserts_printable_characters() -> None:
    updates: List[TileMirror] = []
    statuses: List[str] = []
    adapter = make_adapter(updates=updates, statuses=statuses)

    adapter.handle_textual_key("a", text="a")
    adapter.handle_textual_key("shift+b", text="B")

    assert updates[-1].text == "aB\n"
    assert updates[-1].cursor == 2
    assert statuses == ["insert_text", "insert_text"]


def test_adapter_undo_redo_statuses() -> None:
    statuses: List[str] = []
    adapter = make_adapter(statuses=statuses)

    adapter.handle_textual_key("x", text="x")
    adapter.handle_textual_key("ctrl+z")
    adapter.handle_textual_key("ctrl+z")
    adapter.handle_textual_key("ctrl+y")

    assert statuses[1:] == ["undo", "nothing_to_undo", "redo"]
    assert adapter.session.text == "x\n"


def test_adapter_enter_and_backspace() -> None:
    adapter = make_adapter("abcd")
    adapter.handle_textual_key("right")
    adapter.handle_textual_key("right")

    adapter.handle_textual_key("enter")
    assert adapter.session.text == "ab\ncd\n"

    delta = adapter.handle_textual_key("backspace")
    assert delta is not None
    assert delta.text == "abcd\n"


def test_adapter_save_hands_storage_to_host() -> None:
    saved: List[str] = []
    statuses: List[str] = []
    adapter = make_adapter("abcd", saved=saved, statuses=statuses)
    adapter.handle_textual_key("end")
    adapter.handle_textual_key("e", text="e")

    delta = adapter.handle_textual_key("ctrl+s")

    assert saved == ["abcde   "]
    assert delta is not None and delta.status == "saved"
    assert statuses[-1] == "saved"
    assert not adapter.session.dirty


def test_adapter_reports_truncated_save() -> None:
    statuses: List[str] = []
    adapter = make_adapter("abcdefgh", statuses=statuses)
    adapter.session.move_cursor(len(adapter.session.text))
    adapter.handle_textual_key("enter")
    adapter.handle_textual_key("z", text="z")

    adapter.handle_textual_key("ctrl+s")

    assert statuses[-1] == "saved_truncated:1"


def test_adapter_ignores_unknown_keys_and_logs() -> None:
    logs: List[str] = []
    updates: List[TileMirror] = []
    adapter = make_adapter(updates=updates, logs=logs)

    assert adapter.handle_textual_key("tab", text="\t") is None
    assert adapter.handle_textual_key("f5") is None

    assert len(updates) == 1
    assert logs[0].startswith("key ->")
    assert any(line.startswith("miss <-") for line in logs)


def test_render_tile_marks_cursor_and_rows() -> None:
    pytest.importorskip("textual")
    from tile_editor.adapters.textual.app import render_tile

    adapter = make_adapter("ab")
    session = adapter.session

    assert render_tile(session.mirror()).plain == "ab\n"
    session.move_cursor(len(session.text))
    assert render_tile(session.mirror()).plain == "ab\n "


def test_adapter_keeps_session_dirty_when_write_fails(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    events: List[str] = []
    monkeypatch.setattr(
        telemetry, "record_event", lambda name, **_kwargs: events.append(name)
    )
    statuses: List[str] = []
    session = EditSession.open("", SessionConfig.of(2, 4), name="adapter")
    hooks = TextualUIHooks(
        update_buffer=lambda mirror: None,
        update_status=statuses.append,
        save=lambda storage: write_tile(tmp_path / "missing" / "001.txt", storage),
    )
    adapter = TextualTileAdapter(session, hooks)
    adapter.handle_textual_key("a", text="a")

    delta = adapter.handle_textual_key("ctrl+s")

    assert delta is not None and delta.status == "save_failed"
    assert statuses[-1] == "save_failed"
    assert session.dirty
    assert "session.save_failed" in events
    assert "session.save" not in events
