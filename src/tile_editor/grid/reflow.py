"""Live reflow of an editable buffer under a fixed column budget.

The engine keeps every line at most ``columns`` characters wide by pushing
overflow onto the following line (a *cascade*), and relocates the cursor so it
stays attached to the character it followed before the edit. Lines beyond the
row budget are kept while editing; only ``GridCodec.collapse`` drops them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from .dimensions import LINE_SEPARATOR, GridDimensions, normalize_line_breaks

# (row, column) inside the split buffer
LinePosition = Tuple[int, int]


class ReflowState(str, Enum):
    IDLE = "idle"
    OVERFLOWING = "overflowing"


@dataclass(frozen=True, slots=True)
class ReflowResult:
    text: str
    cursor: int
    cascades: int = 0
    changed: bool = True

    @property
    def line_count(self) -> int:
        return self.text.count(LINE_SEPARATOR) + 1


class ReflowEngine:
    """Applies single edits to a buffer and re-establishes the grid constraint."""

    __slots__ = ("dimensions",)

    def __init__(self, dimensions: GridDimensions) -> None:
        self.dimensions = dimensions

    @property
    def rows(self) -> int:
        return self.dimensions.rows

    @property
    def columns(self) -> int:
        return self.dimensions.columns

    def state_of(self, buffer: str) -> ReflowState:
        if any(len(line) > self.columns for line in buffer.split(LINE_SEPARATOR)):
            return ReflowState.OVERFLOWING
        return ReflowState.IDLE

    def normalize(self, buffer: str, cursor: int) -> ReflowResult:
        lines = buffer.split(LINE_SEPARATOR)
        row, col = _to_position(buffer, _clamp(cursor, len(buffer)))
        cascades = 0

        index = 0
        while index < len(lines):
            line = lines[index]
            if len(line) > self.columns:
                kept, overflow = line[: self.columns], line[self.columns :]
                lines[index] = kept
                if index + 1 < len(lines):
                    lines[index + 1] = overflow + lines[index + 1]
                else:
                    lines.append(overflow)
                if row == index and col > self.columns:
                    row, col = index + 1, col - self.columns
                elif row == index + 1:
                    col += len(overflow)
                cascades += 1
            index += 1

        while len(lines) < self.rows:
            lines.append("")

        text = LINE_SEPARATOR.join(lines)
        new_cursor = _clamp(_to_offset(lines, row, col), len(text))
        return ReflowResult(
            text=text,
            cursor=new_cursor,
            cascades=cascades,
            changed=text != buffer,
        )

    def insert(self, buffer: str, cursor: int, text: str) -> ReflowResult:
        cursor = _clamp(cursor, len(buffer))
        text = normalize_line_breaks(text)
        edited = buffer[:cursor] + text + buffer[cursor:]
        return self._settle(buffer, edited, cursor + len(text))

    def delete_backward(self, buffer: str, cursor: int) -> ReflowResult:
        cursor = _clamp(cursor, len(buffer))
        if cursor == 0:
            return self._settle(buffer, buffer, cursor)
        edited = buffer[: cursor - 1] + buffer[cursor:]
        return self._settle(buffer, edited, cursor - 1)

    def delete_forward(self, buffer: str, cursor: int) -> ReflowResult:
        cursor = _clamp(cursor, len(buffer))
        if cursor >= len(buffer):
            return self._settle(buffer, buffer, cursor)
        edited = buffer[:cursor] + buffer[cursor + 1 :]
        return self._settle(buffer, edited, cursor)

    def split_line(self, buffer: str, cursor: int) -> ReflowResult:
        """Break the current line at the cursor; the cursor opens the new line."""

        cursor = _clamp(cursor, len(buffer))
        edited = buffer[:cursor] + LINE_SEPARATOR + buffer[cursor:]
        return self._settle(buffer, edited, cursor + 1)

    def replace(self, buffer: str, text: str, cursor: int) -> ReflowResult:
        """Adopt ``text`` produced by a host widget and reflow it."""

        return self._settle(buffer, normalize_line_breaks(text), cursor)

    def _settle(self, original: str, edited: str, cursor: int) -> ReflowResult:
        result = self.normalize(edited, cursor)
        return ReflowResult(
            text=result.text,
            cursor=result.cursor,
            cascades=result.cascades,
            changed=result.text != original,
        )


def _clamp(value: int, upper: int) -> int:
    return max(0, min(value, upper))


def _to_position(buffer: str, offset: int) -> LinePosition:
    row = buffer.count(LINE_SEPARATOR, 0, offset)
    line_start = buffer.rfind(LINE_SEPARATOR, 0, offset) + 1
    return row, offset - line_start


def _to_offset(lines: List[str], row: int, col: int) -> int:
    row = min(row, len(lines) - 1)
    offset = sum(len(line) + 1 for line in lines[:row])
    return offset + min(col, len(lines[row]))


def cursor_position(buffer: str, cursor: int) -> LinePosition:
    return _to_position(buffer, _clamp(cursor, len(buffer)))


def cursor_offset(buffer: str, row: int, col: int) -> int:
    lines = buffer.split(LINE_SEPARATOR)
    return _to_offset(lines, max(0, row), max(0, col))


__all__ = [
    "ReflowEngine",
    "ReflowResult",
    "ReflowState",
    "cursor_offset",
    "cursor_position",
]
