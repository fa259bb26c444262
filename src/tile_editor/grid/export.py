"""Turn stored grid text back into flowing prose for tabular export."""

from __future__ import annotations

from .dimensions import ConfigurationError, chunk, strip_line_breaks


class ExportNormalizer:
    """Re-joins grid rows into one line of naturally spaced text.

    Storage pads every row to the full width, so consecutive rows either end
    in padding (a word boundary that collapses to one space) or run straight
    into the next row (a boundary that still needs one space). The whole
    stored length is consumed; no row budget applies here.
    """

    __slots__ = ("columns",)

    def __init__(self, columns: int) -> None:
        if isinstance(columns, bool) or not isinstance(columns, int) or columns <= 0:
            raise ConfigurationError(
                f"Grid columns must be a positive integer, got {columns!r}",
                columns=columns,
            )
        self.columns = columns

    def normalize(self, storage: str | None) -> str:
        if not storage:
            return ""
        flat = strip_line_breaks(storage)
        pieces = chunk(flat, self.columns)
        consumed = 0
        out = []
        for piece in pieces:
            consumed += len(piece)
            out.append(self.join_piece(piece, consumed < len(flat)))
        return "".join(out)

    def join_piece(self, piece: str, has_next: bool) -> str:
        if not piece:
            return ""
        if len(piece) == self.columns:
            if has_next and not piece[-1].isspace():
                return piece + " "
            trimmed = piece.rstrip()
            if has_next and len(trimmed) < len(piece):
                return trimmed + " "
            return trimmed
        trimmed = piece.rstrip()
        if has_next and trimmed:
            return trimmed + " "
        return trimmed


def normalize_for_export(storage: str | None, columns: int) -> str:
    return ExportNormalizer(columns).normalize(storage)


__all__ = ["ExportNormalizer", "normalize_for_export"]
