"""Adapter boundary types for syncing an edit session with host widgets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from tile_editor.grid.charset import BufferClassification


@dataclass(slots=True)
class TileMirror:
    """Host-friendly snapshot describing what the editor should render."""

    text: str
    cursor: int
    rows: int
    columns: int
    classification: BufferClassification
    attributes: dict[str, str] = field(default_factory=dict)


class TileSync(Protocol):
    """How adapters exchange state with an edit session."""

    def pull_tile(self) -> TileMirror:
        """Return the latest session snapshot the host should render."""
        ...

    def push_host_edit(self, text: str, cursor: int) -> None:
        """Submit text edited directly in a host widget (paste, IME input)."""
        ...


class SessionCursorError(ValueError):
    """Raised when a host hands the session a cursor outside the buffer."""

    def __init__(self, message: str, *, cursor: int | None = None) -> None:
        super().__init__(message)
        self.cursor = cursor


__all__ = ["TileMirror", "TileSync", "SessionCursorError"]
