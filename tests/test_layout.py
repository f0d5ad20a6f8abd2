"""Tests for the ASCII layout loader."""

import pytest

from smoke_ca.layout import LayoutError, load_layout, parse_layout


def test_parse_valid_layout():
    layout = parse_layout("///\n/0:\n///\n")
    assert (layout.rows, layout.cols) == (3, 3)
    assert layout.width == 3 and layout.height == 3
    assert layout.data == b"////0:///"


def test_all_symbols_accepted():
    layout = parse_layout("/0123456789:")
    assert layout.cols == 12


def test_invalid_character_reports_position():
    with pytest.raises(LayoutError, match=r"'x'.*2, 1"):
        parse_layout("000\n0x0\n")


def test_ragged_rows_rejected():
    with pytest.raises(LayoutError, match="same number of columns"):
        parse_layout("000\n00\n")


@pytest.mark.parametrize("text", ["", "\n"])
def test_empty_layout_rejected(text):
    with pytest.raises(LayoutError, match="empty"):
        parse_layout(text)


def test_oversized_layout_rejected():
    with pytest.raises(LayoutError, match="512x512"):
        parse_layout("0" * 513)
    with pytest.raises(LayoutError, match="512x512"):
        parse_layout("0\n" * 513)


def test_maximum_size_accepted():
    layout = parse_layout(("0" * 512 + "\n") * 2)
    assert layout.cols == 512


def test_load_layout_from_file(tmp_path):
    path = tmp_path / "room.txt"
    path.write_text("/0/\n/:/\n")
    layout = load_layout(path)
    assert layout.data == b"/0//:/"


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_layout(tmp_path / "missing.txt")


def test_non_ascii_byte_reports_position(tmp_path):
    path = tmp_path / "binary.txt"
    path.write_bytes(b"000\n0\xff0\n")
    with pytest.raises(LayoutError, match=r"\(255\) detected at 2, 1"):
        load_layout(path)


def test_parse_layout_accepts_bytes():
    layout = parse_layout(b"/0\r\n0:\r\n")
    assert layout.data == b"/00:"


def test_load_directory_raises_os_error(tmp_path):
    with pytest.raises(OSError):
        load_layout(tmp_path)
