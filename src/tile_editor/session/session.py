"""Edit session facade combining codec, reflow, history and telemetry."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Callable, ContextManager, Optional

from tile_editor.grid.charset import BufferClassification, classify
from tile_editor.grid.codec import CollapseLoss, GridCodec
from tile_editor.grid.export import ExportNormalizer
from tile_editor.grid.history import UndoRedoHistory
from tile_editor.grid.reflow import (
    ReflowEngine,
    ReflowResult,
    ReflowState,
    cursor_offset,
    cursor_position,
)
from tile_editor.runtime import telemetry

from .config import SessionConfig
from .sync import SessionCursorError, TileMirror


@dataclass(slots=True)
class SessionView:
    version: int
    text: str
    cursor: int
    dirty: bool


@dataclass(slots=True)
class SessionDelta:
    version: int
    text: str
    cursor: int
    label: str
    changed: bool
    status: str = "ok"


class EditSession:
    """One open tile: live buffer, cursor and undo history.

    Grid dimensions come from ``config`` and cannot change for the lifetime
    of the session; open a new session to edit under a different profile.
    """

    def __init__(
        self,
        config: SessionConfig,
        *,
        storage: Optional[str] = None,
        name: str = "tile",
        history: Optional[UndoRedoHistory] = None,
    ) -> None:
        self.name = name
        self.config = config
        self.codec = GridCodec(config.dimensions)
        self.engine = ReflowEngine(config.dimensions)
        self.history = history or UndoRedoHistory()
        self.version = 0
        opened = self.engine.normalize(self.codec.expand(storage), 0)
        self.text = opened.text
        self.cursor = 0
        self.history.reset(self.text)
        self._saved_text = self.text
        telemetry.record_event(
            "session.open",
            level="debug",
            data={
                "session": name,
                "profile": config.profile.value,
                "rows": config.rows,
                "columns": config.columns,
            },
        )

    @classmethod
    def open(
        cls, storage: Optional[str], config: SessionConfig, *, name: str = "tile"
    ) -> "EditSession":
        return cls(config, storage=storage, name=name)

    @property
    def dirty(self) -> bool:
        return self.text != self._saved_text

    @property
    def state(self) -> ReflowState:
        return self.engine.state_of(self.text)

    def snapshot(self) -> SessionView:
        return SessionView(
            version=self.version, text=self.text, cursor=self.cursor, dirty=self.dirty
        )

    def classify(self) -> BufferClassification:
        return classify(self.text, self.config.rows, validator=self.config.validator)

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> TileMirror:
        attrs = {"state": self.state.value, "dirty": str(self.dirty).lower()}
        attrs.update(attributes or {})
        return TileMirror(
            text=self.text,
            cursor=self.cursor,
            rows=self.config.rows,
            columns=self.config.columns,
            classification=self.classify(),
            attributes=attrs,
        )

    def pull_tile(self) -> TileMirror:
        return self.mirror()

    def push_host_edit(self, text: str, cursor: int) -> None:
        self.replace_text(text, cursor=cursor)

    # editing

    def insert_text(self, text: str) -> SessionDelta:
        return self._apply(
            "insert_text", lambda: self.engine.insert(self.text, self.cursor, text)
        )

    def backspace(self) -> SessionDelta:
        return self._apply(
            "backspace", lambda: self.engine.delete_backward(self.text, self.cursor)
        )

    def delete(self) -> SessionDelta:
        return self._apply(
            "delete", lambda: self.engine.delete_forward(self.text, self.cursor)
        )

    def split_line(self) -> SessionDelta:
        return self._apply(
            "split_line", lambda: self.engine.split_line(self.text, self.cursor)
        )

    def replace_text(self, text: str, *, cursor: Optional[int] = None) -> SessionDelta:
        position = self.cursor if cursor is None else cursor
        return self._apply(
            "replace_text", lambda: self.engine.replace(self.text, text, position)
        )

    def _apply(self, label: str, edit: Callable[[], ReflowResult]) -> SessionDelta:
        with Transaction(self, label) as tx:
            tx.commit(edit())
        assert tx.delta is not None
        return tx.delta

    # history

    def undo(self) -> SessionDelta:
        restored = self.history.undo()
        if restored is None:
            return self._history_miss("undo", "nothing_to_undo")
        return self._restore("undo", restored)

    def redo(self) -> SessionDelta:
        restored = self.history.redo()
        if restored is None:
            return self._history_miss("redo", "nothing_to_redo")
        return self._restore("redo", restored)

    def _restore(self, label: str, text: str) -> SessionDelta:
        self.text = text
        self.cursor = min(self.cursor, len(text))
        self.version += 1
        undo_depth, redo_depth = self.history.depth
        telemetry.record_event(
            f"session.{label}",
            level="debug",
            data={"session": self.name, "undo": undo_depth, "redo": redo_depth},
        )
        return self._delta(label, changed=True)

    def _history_miss(self, label: str, status: str) -> SessionDelta:
        telemetry.record_event(
            f"session.{label}",
            level="debug",
            data={"session": self.name, "status": status},
        )
        return self._delta(label, changed=False, status=status)

    # cursor

    def move_cursor(self, index: int) -> SessionDelta:
        if index < 0 or index > len(self.text):
            raise SessionCursorError(
                f"Cursor {index} outside buffer of length {len(self.text)}",
                cursor=index,
            )
        self.cursor = index
        return self._delta("move_cursor", changed=False)

    def move_left(self) -> SessionDelta:
        return self.move_cursor(max(0, self.cursor - 1))

    def move_right(self) -> SessionDelta:
        return self.move_cursor(min(len(self.text), self.cursor + 1))

    def move_up(self) -> SessionDelta:
        row, col = cursor_position(self.text, self.cursor)
        if row == 0:
            return self.move_cursor(0)
        return self.move_cursor(cursor_offset(self.text, row - 1, col))

    def move_down(self) -> SessionDelta:
        row, col = cursor_position(self.text, self.cursor)
        if row >= self.text.count("\n"):
            return self.move_cursor(len(self.text))
        return self.move_cursor(cursor_offset(self.text, row + 1, col))

    def move_home(self) -> SessionDelta:
        row, _ = cursor_position(self.text, self.cursor)
        return self.move_cursor(cursor_offset(self.text, row, 0))

    def move_end(self) -> SessionDelta:
        row, _ = cursor_position(self.text, self.cursor)
        return self.move_cursor(cursor_offset(self.text, row, len(self.text)))

    # storage

    def pending_loss(self) -> CollapseLoss:
        return self.codec.loss(self.text)

    def collapse(self) -> str:
        return self.codec.collapse(self.text)

    def save(self) -> str:
        """Collapse the buffer into storage text and mark the session clean.

        Hosts that write the storage somewhere should call ``collapse`` and
        ``mark_saved`` separately, marking clean only once the write worked.
        """

        storage = self.collapse()
        self.mark_saved(storage)
        return storage

    def mark_saved(self, storage: str) -> None:
        """Adopt the current buffer as saved.

        Rows past the budget and characters past the column limit are not
        part of ``storage``; a ``session.save_truncated`` warning reports how
        many were dropped.
        """

        loss = self.codec.loss(self.text)
        if loss:
            telemetry.record_event(
                "session.save_truncated",
                level="warning",
                data={
                    "session": self.name,
                    "dropped_lines": len(loss.dropped_lines),
                    "dropped_characters": loss.dropped_characters,
                },
            )
        self._saved_text = self.text
        telemetry.record_event(
            "session.save",
            level="debug",
            data={"session": self.name, "length": len(storage)},
        )

    def export(self) -> str:
        storage = self.collapse()
        return ExportNormalizer(self.config.columns).normalize(storage)

    def _delta(self, label: str, *, changed: bool, status: str = "ok") -> SessionDelta:
        return SessionDelta(
            version=self.version,
            text=self.text,
            cursor=self.cursor,
            label=label,
            changed=changed,
            status=status,
        )


class Transaction(AbstractContextManager["Transaction"]):
    """Wraps one reflowed edit in a telemetry span and records its history."""

    def __init__(self, session: EditSession, label: str) -> None:
        self.session = session
        self.label = label
        self.delta: Optional[SessionDelta] = None
        self._span_cm: Optional[ContextManager[telemetry.SpanHandle]] = None
        self._handle: Optional[telemetry.SpanHandle] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"session::{self.label}",
            component=True,
            metadata={"session": self.session.name},
        )
        self._handle = self._span_cm.__enter__()
        return self

    def commit(self, result: ReflowResult) -> None:
        session = self.session
        session.text = result.text
        session.cursor = result.cursor
        recorded = False
        if result.changed:
            session.version += 1
            recorded = session.history.record(result.text)
        if self._handle is not None:
            self._handle.add_metadata("cascades", result.cascades)
            self._handle.add_metadata("recorded", recorded)
        self.delta = SessionDelta(
            version=session.version,
            text=session.text,
            cursor=session.cursor,
            label=self.label,
            changed=result.changed,
            status="ok" if result.changed else "unchanged",
        )

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["EditSession", "SessionDelta", "SessionView", "Transaction"]
