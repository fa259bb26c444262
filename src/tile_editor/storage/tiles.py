"""Tile files on disk and CSV export of their contents.

Tile files are stored in Windows-1250 so the display firmware can read them
byte for byte; the editor itself only ever handles decoded text.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Tuple, Union

from tile_editor.grid.export import ExportNormalizer
from tile_editor.runtime import telemetry

TILE_ENCODING = "cp1250"
EXPORT_ENCODING = "utf-8"
EXPORT_HEADER = "Number,Text"

PathLike = Union[str, Path]


class TileStorageError(RuntimeError):
    """Raised when a tile or export file cannot be read or written."""

    def __init__(self, message: str, *, path: PathLike | None = None) -> None:
        super().__init__(message)
        self.path = path


def read_tile(path: PathLike) -> str:
    """Return the decoded storage text of ``path``; a missing file reads as ``""``."""

    target = Path(path)
    if not target.is_file():
        return ""
    try:
        return target.read_bytes().decode(TILE_ENCODING)
    except (OSError, UnicodeDecodeError) as exc:
        raise TileStorageError(
            f"Error reading file {target}: {exc}", path=target
        ) from exc


def write_tile(path: PathLike, storage: str) -> None:
    target = Path(path)
    try:
        payload = storage.encode(TILE_ENCODING)
        target.write_bytes(payload)
    except (OSError, UnicodeEncodeError) as exc:
        raise TileStorageError(
            f"Error saving file {target}: {exc}", path=target
        ) from exc
    telemetry.record_event(
        "storage.write_tile",
        level="debug",
        data={"path": str(target), "bytes": len(payload)},
    )


def csv_field(prose: str) -> str:
    flat = prose.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
    return '"' + flat.replace('"', '""') + '"'


def export_rows(records: Iterable[Tuple[str, str]], columns: int) -> List[str]:
    """Build CSV lines for ``(identifier, storage_text)`` records, header first."""

    normalizer = ExportNormalizer(columns)
    lines = [EXPORT_HEADER]
    for identifier, storage in records:
        lines.append(f"{identifier},{csv_field(normalizer.normalize(storage))}")
    return lines


def export_files(paths: Iterable[PathLike], columns: int) -> List[str]:
    """Export existing tile files, naming each row after the file stem.

    Unreadable files are skipped and reported; one bad tile never aborts
    the whole export.
    """

    records: List[Tuple[str, str]] = []
    for path in paths:
        target = Path(path)
        if not target.is_file():
            continue
        try:
            records.append((target.stem, read_tile(target)))
        except TileStorageError as exc:
            telemetry.record_event(
                "storage.export_skip",
                level="warning",
                data={"path": str(target), "error": str(exc)},
            )
    return export_rows(records, columns)


def write_export(path: PathLike, lines: Iterable[str]) -> int:
    target = Path(path)
    rows = list(lines)
    try:
        target.write_text("\n".join(rows) + "\n", encoding=EXPORT_ENCODING)
    except OSError as exc:
        raise TileStorageError(
            f"Failed to save CSV file {target}: {exc}", path=target
        ) from exc
    telemetry.record_event(
        "storage.export",
        data={"path": str(target), "records": max(0, len(rows) - 1)},
    )
    return max(0, len(rows) - 1)


__all__ = [
    "TILE_ENCODING",
    "EXPORT_HEADER",
    "TileStorageError",
    "read_tile",
    "write_tile",
    "csv_field",
    "export_rows",
    "export_files",
    "write_export",
]
