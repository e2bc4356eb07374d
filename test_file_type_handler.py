import io

import pytest

from file_type_handler import FileTypeHandler, NoInputError, UnsupportedFileType
from table_model import InputFormat


class FakeTty(io.BytesIO):
    def isatty(self):
        return True


def test_format_inferred_from_extension(tmp_path):
    path = tmp_path / "data.JSON"
    path.write_text('[["a","b"]]', encoding="utf-8")
    handler = FileTypeHandler(str(path))
    assert handler.input_format is InputFormat.JSON
    assert handler.source_name == "data.JSON"
    assert handler.load().rows == [["a", "b"]]


def test_explicit_format_overrides_extension(tmp_path):
    path = tmp_path / "data.txt"
    path.write_text("x,y\n1,2\n", encoding="utf-8")
    handler = FileTypeHandler(str(path), "csv")
    assert handler.load(has_header=True).headers == ["x", "y"]


def test_unknown_extension_without_format(tmp_path):
    with pytest.raises(UnsupportedFileType):
        FileTypeHandler(str(tmp_path / "data.xlsx"))


def test_reads_stdin_bytes():
    stdin = io.TextIOWrapper(io.BytesIO(b"name\nAlice\n"))
    handler = FileTypeHandler(None, "csv", stdin=stdin)
    assert handler.source_name == "stdin"
    assert handler.load().rows == [["Alice"]]


def test_terminal_stdin_is_rejected():
    handler = FileTypeHandler(None, None, stdin=FakeTty(b""))
    assert handler.input_format is InputFormat.CSV
    with pytest.raises(NoInputError):
        handler.read_bytes()
