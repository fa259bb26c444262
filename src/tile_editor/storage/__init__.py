"""Tile file I/O and CSV export."""

from .tiles import (
    EXPORT_HEADER,
    TILE_ENCODING,
    TileStorageError,
    csv_field,
    export_files,
    export_rows,
    read_tile,
    write_export,
    write_tile,
)

__all__ = [
    "EXPORT_HEADER",
    "TILE_ENCODING",
    "TileStorageError",
    "csv_field",
    "export_files",
    "export_rows",
    "read_tile",
    "write_export",
    "write_tile",
]
