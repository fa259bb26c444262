import pytest

from tile_editor.grid import ConfigurationError, ExportNormalizer, normalize_for_export


def test_padded_word_boundary_collapses_to_one_space() -> None:
    assert normalize_for_export("wordone wordtwoo", 8) == "wordone wordtwoo"


def test_full_row_running_into_next_gets_a_space() -> None:
    assert normalize_for_export("abcdefgh", 4) == "abcd efgh"


def test_row_padding_is_trimmed() -> None:
    assert normalize_for_export("ab  cd  ", 4) == "ab cd"


def test_short_final_piece() -> None:
    assert normalize_for_export("abcdef", 4) == "abcd ef"


def test_blank_middle_row_leaves_single_space() -> None:
    assert normalize_for_export("ab  " + "    " + "cd  ", 4) == "ab  cd"


def test_line_breaks_are_ignored() -> None:
    assert normalize_for_export("ab\ncd", 2) == "ab cd"
    assert normalize_for_export("ab\r\ncd", 2) == "ab cd"


def test_empty_storage_exports_empty() -> None:
    assert normalize_for_export("", 4) == ""
    assert ExportNormalizer(4).normalize(None) == ""


def test_join_piece_rules() -> None:
    normalizer = ExportNormalizer(4)

    assert normalizer.join_piece("abcd", True) == "abcd "
    assert normalizer.join_piece("abcd", False) == "abcd"
    assert normalizer.join_piece("ab  ", True) == "ab "
    assert normalizer.join_piece("ab  ", False) == "ab"
    assert normalizer.join_piece("ab", True) == "ab "
    assert normalizer.join_piece("  ", True) == ""
    assert normalizer.join_piece("", True) == ""


def test_columns_must_be_positive() -> None:
    with pytest.raises(ConfigurationError):
        ExportNormalizer(0)
    with pytest.raises(ConfigurationError):
        normalize_for_export("abc", -2)
