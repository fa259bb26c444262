"""Grid dimensions shared by the codec, the reflow engine and the exporter."""

from __future__ import annotations

from dataclasses import dataclass

LINE_SEPARATOR = "\n"


class ConfigurationError(ValueError):
    """Raised when a grid is configured with non-positive rows or columns."""

    def __init__(
        self,
        message: str,
        *,
        rows: int | None = None,
        columns: int | None = None,
    ) -> None:
        super().__init__(message)
        self.rows = rows
        self.columns = columns


@dataclass(frozen=True, slots=True)
class GridDimensions:
    """Immutable ``rows x columns`` budget of one tile."""

    rows: int
    columns: int

    def __post_init__(self) -> None:
        for label, value in (("rows", self.rows), ("columns", self.columns)):
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(
                    f"Grid {label} must be a positive integer, got {value!r}",
                    rows=self.rows,
                    columns=self.columns,
                )

    @property
    def capacity(self) -> int:
        return self.rows * self.columns


def ensure_dimensions(rows: int, columns: int) -> GridDimensions:
    return GridDimensions(rows=rows, columns=columns)


def normalize_line_breaks(text: str) -> str:
    """Fold ``\\r\\n`` and bare ``\\r`` into ``\\n``."""

    return text.replace("\r\n", LINE_SEPARATOR).replace("\r", LINE_SEPARATOR)


def strip_line_breaks(text: str) -> str:
    return text.replace("\r\n", "").replace("\n", "").replace("\r", "")


def chunk(text: str, width: int) -> list[str]:
    """Split ``text`` into ``width``-sized pieces; the last one may be shorter."""

    if width <= 0:
        raise ConfigurationError(f"Chunk width must be positive, got {width!r}")
    return [text[start : start + width] for start in range(0, len(text), width)]


__all__ = [
    "LINE_SEPARATOR",
    "ConfigurationError",
    "GridDimensions",
    "ensure_dimensions",
    "normalize_line_breaks",
    "strip_line_breaks",
    "chunk",
]
