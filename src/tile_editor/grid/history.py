"""Snapshot-based undo/redo for one edit session."""

from __future__ import annotations

from typing import List, Optional


class UndoRedoHistory:
    """Two stacks of whole-buffer snapshots.

    The top of the undo stack is always the current state, so undoing needs
    at least two entries. Snapshots are plain strings and therefore never
    alias the live buffer. The history lives in memory for one session only.
    """

    def __init__(self, initial: Optional[str] = None) -> None:
        self._undo: List[str] = []
        self._redo: List[str] = []
        if initial is not None:
            self._undo.append(initial)

    def reset(self, initial: Optional[str] = None) -> None:
        self._undo.clear()
        self._redo.clear()
        if initial is not None:
            self._undo.append(initial)

    def record(self, buffer: str) -> bool:
        if self._undo and self._undo[-1] == buffer:
            return False
        self._undo.append(buffer)
        self._redo.clear()
        return True

    def can_undo(self) -> bool:
        return len(self._undo) >= 2

    def can_redo(self) -> bool:
        return bool(self._redo)

    def undo(self) -> Optional[str]:
        if not self.can_undo():
            return None
        self._redo.append(self._undo.pop())
        return self._undo[-1]

    def redo(self) -> Optional[str]:
        if not self.can_redo():
            return None
        restored = self._redo.pop()
        self._undo.append(restored)
        return restored

    @property
    def current(self) -> Optional[str]:
        return self._undo[-1] if self._undo else None

    @property
    def depth(self) -> tuple[int, int]:
        return len(self._undo), len(self._redo)


__all__ = ["UndoRedoHistory"]
