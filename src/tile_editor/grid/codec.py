"""Conversion between flat storage text and the editable multi-line buffer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .dimensions import (
    LINE_SEPARATOR,
    GridDimensions,
    chunk,
    ensure_dimensions,
    normalize_line_breaks,
    strip_line_breaks,
)


@dataclass(frozen=True, slots=True)
class CollapseLoss:
    """What ``collapse`` would throw away for a given buffer."""

    dropped_lines: tuple[str, ...] = ()
    clipped: tuple[tuple[int, str], ...] = ()

    @property
    def dropped_characters(self) -> int:
        return sum(len(line) for line in self.dropped_lines) + sum(
            len(tail) for _, tail in self.clipped
        )

    def __bool__(self) -> bool:
        return any(self.dropped_lines) or bool(self.clipped)


class GridCodec:
    """Bidirectional codec between storage text and editable buffers.

    ``expand`` hides storage beyond ``rows`` lines from the editable view but
    never touches the stored text itself. ``collapse`` is a destructive save:
    lines past ``rows`` and characters past ``columns`` are discarded so the
    result always has exactly ``rows * columns`` characters.
    """

    __slots__ = ("dimensions",)

    def __init__(self, dimensions: GridDimensions) -> None:
        self.dimensions = dimensions

    @property
    def rows(self) -> int:
        return self.dimensions.rows

    @property
    def columns(self) -> int:
        return self.dimensions.columns

    def expand(self, storage: Optional[str]) -> str:
        if not storage:
            return ""
        segments = chunk(strip_line_breaks(storage), self.columns)[: self.rows]
        return LINE_SEPARATOR.join(segment.rstrip() for segment in segments)

    def collapse(self, buffer: Optional[str]) -> str:
        lines = self._lines(buffer)
        fixed = []
        for index in range(self.rows):
            line = lines[index] if index < len(lines) else ""
            fixed.append(line[: self.columns].ljust(self.columns))
        return "".join(fixed)

    def loss(self, buffer: Optional[str]) -> CollapseLoss:
        lines = self._lines(buffer)
        clipped = tuple(
            (index, line[self.columns :])
            for index, line in enumerate(lines[: self.rows])
            if len(line) > self.columns
        )
        return CollapseLoss(dropped_lines=tuple(lines[self.rows :]), clipped=clipped)

    @staticmethod
    def _lines(buffer: Optional[str]) -> list[str]:
        return normalize_line_breaks(buffer or "").split(LINE_SEPARATOR)


def expand(storage: Optional[str], rows: int, columns: int) -> str:
    return GridCodec(ensure_dimensions(rows, columns)).expand(storage)


def collapse(buffer: Optional[str], rows: int, columns: int) -> str:
    return GridCodec(ensure_dimensions(rows, columns)).collapse(buffer)


__all__ = ["CollapseLoss", "GridCodec", "expand", "collapse"]
