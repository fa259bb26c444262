"""Textual-facing controller that turns key events into edit session calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from tile_editor.runtime import telemetry
from tile_editor.session import EditSession, SessionDelta, TileMirror
from tile_editor.storage import TileStorageError


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[TileMirror], None]
    update_status: Callable[[str], None] = _noop
    # receives collapsed storage text; the host decides where it goes
    save: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop


KeyHandler = Callable[["TextualTileAdapter"], SessionDelta]


class TextualTileAdapter:
    """Bridges one EditSession to a Textual-friendly surface."""

    def __init__(self, session: EditSession, hooks: TextualUIHooks) -> None:
        self.session = session
        self.hooks = hooks
        self._refresh_buffer()

    def handle_textual_key(
        self, key: str, *, text: Optional[str] = None
    ) -> Optional[SessionDelta]:
        """Dispatch a Textual key name (``event.key``) and its character."""

        self._log_state("key ->", key=key, text=text)
        handler = _KEY_HANDLERS.get(key.lower())
        if handler is not None:
            delta = handler(self)
        elif text is not None and len(text) == 1 and text.isprintable():
            delta = self.session.insert_text(text)
        else:
            self._log_state("miss <-", key=key)
            return None
        self._after_delta(delta)
        return delta

    def save(self) -> SessionDelta:
        """Hand collapsed storage to the host; the session stays dirty on failure."""

        loss = self.session.pending_loss()
        storage = self.session.collapse()
        try:
            self.hooks.save(storage)
        except TileStorageError as exc:
            telemetry.record_event(
                "session.save_failed",
                level="error",
                data={"session": self.session.name, "error": str(exc)},
            )
            return self._save_delta("save_failed")
        self.session.mark_saved(storage)
        status = "saved"
        if loss:
            status = f"saved_truncated:{loss.dropped_characters}"
        return self._save_delta(status)

    def _save_delta(self, status: str) -> SessionDelta:
        view = self.session.snapshot()
        return SessionDelta(
            version=view.version,
            text=view.text,
            cursor=view.cursor,
            label="save",
            changed=False,
            status=status,
        )

    def _after_delta(self, delta: SessionDelta) -> None:
        status = delta.label if delta.status == "ok" else delta.status
        self.hooks.update_status(status)
        self._refresh_buffer()
        self._log_state(
            "result <-",
            label=delta.label,
            status=delta.status,
            changed=delta.changed,
        )

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(self.session.mirror())

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot: Dict[str, object] = {
            "session": self.session.name,
            "cursor": self.session.cursor,
            "version": self.session.version,
            "dirty": self.session.dirty,
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))


_KEY_HANDLERS: Dict[str, KeyHandler] = {
    "ctrl+z": lambda adapter: adapter.session.undo(),
    "ctrl+y": lambda adapter: adapter.session.redo(),
    "ctrl+s": lambda adapter: adapter.save(),
    "enter": lambda adapter: adapter.session.split_line(),
    "backspace": lambda adapter: adapter.session.backspace(),
    "delete": lambda adapter: adapter.session.delete(),
    "left": lambda adapter: adapter.session.move_left(),
    "right": lambda adapter: adapter.session.move_right(),
    "up": lambda adapter: adapter.session.move_up(),
    "down": lambda adapter: adapter.session.move_down(),
    "home": lambda adapter: adapter.session.move_home(),
    "end": lambda adapter: adapter.session.move_end(),
}


__all__ = ["TextualTileAdapter", "TextualUIHooks"]
