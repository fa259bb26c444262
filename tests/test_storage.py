from __future__ import annotations

from pathlib import Path

import pytest

from tile_editor.storage import (
    EXPORT_HEADER,
    TileStorageError,
    csv_field,
    export_files,
    export_rows,
    read_tile,
    write_export,
    write_tile,
)


def test_tiles_are_stored_in_windows_1250(tmp_path: Path) -> None:
    path = tmp_path / "001.txt"
    storage = "Žluťoučký kůň "

    write_tile(path, storage)

    assert path.read_bytes() == storage.encode("cp1250")
    assert read_tile(path) == storage


def test_missing_tile_reads_empty(tmp_path: Path) -> None:
    assert read_tile(tmp_path / "absent.txt") == ""


def test_unencodable_tile_raises(tmp_path: Path) -> None:
    path = tmp_path / "bad.txt"

    with pytest.raises(TileStorageError) as info:
        write_tile(path, "日本")

    assert info.value.path == path


def test_csv_field_escapes_quotes_and_line_breaks() -> None:
    assert csv_field('say "hi"') == '"say ""hi"""'
    assert csv_field("one\r\ntwo\nthree") == '"one two three"'


def test_export_rows_normalizes_each_tile() -> None:
    lines = export_rows([("001", "wordone wordtwoo"), ("002", "ab  cd  ")], 8)

    assert lines == [EXPORT_HEADER, '001,"wordone wordtwoo"', '002,"ab  cd"']


def test_export_files_uses_stems_and_skips_missing(tmp_path: Path) -> None:
    first = tmp_path / "001.txt"
    second = tmp_path / "002.txt"
    write_tile(first, "abcdefgh")
    write_tile(second, "ab  cd  ")

    lines = export_files([first, tmp_path / "missing.txt", second], 4)

    assert lines == ["Number,Text", '001,"abcd efgh"', '002,"ab cd"']


def test_write_export_counts_records(tmp_path: Path) -> None:
    path = tmp_path / "out.csv"

    count = write_export(path, ["Number,Text", '001,"č"'])

    assert count == 1
    assert path.read_text(encoding="utf-8") == 'Number,Text\n001,"č"\n'


def test_write_export_into_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(TileStorageError):
        write_export(tmp_path / "nope" / "out.csv", [EXPORT_HEADER])
