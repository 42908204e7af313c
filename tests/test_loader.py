"""Unit tests for the CSV/Excel file loader."""

import os
import tempfile

import pandas as pd
import pytest

from vizpilot.errors import DatasetLoadError, UnsupportedFileType
from vizpilot.loader import load_file


@pytest.fixture
def tmp_dir():
    with tempfile.TemporaryDirectory() as d:
        yield d


def _write_file(path: str, content: bytes):
    with open(path, "wb") as f:
        f.write(content)


class TestLoadCsv:
    def test_basic_csv(self, tmp_dir):
        path = os.path.join(tmp_dir, "basic.csv")
        _write_file(path, b"a,b,c\n1,2,3\n4,5,6\n")
        dataset = load_file(path)
        assert dataset.name == "basic.csv"
        assert dataset.columns == ["a", "b", "c"]
        assert dataset.shape == (2, 3)
        assert dataset.rows[0] == {"a": 1, "b": 2, "c": 3}

    def test_name_is_basename(self, tmp_dir):
        nested = os.path.join(tmp_dir, "nested")
        os.makedirs(nested)
        path = os.path.join(nested, "deep.csv")
        _write_file(path, b"x\n1\n")
        assert load_file(path).name == "deep.csv"

    def test_missing_values_become_none(self, tmp_dir):
        path = os.path.join(tmp_dir, "gaps.csv")
        _write_file(path, b"name,age\nann,\nbob,40\n")
        dataset = load_file(path)
        assert dataset.rows[0]["age"] is None
        assert dataset.rows[1]["age"] == 40

    def test_blank_rows_dropped(self, tmp_dir):
        path = os.path.join(tmp_dir, "blank.csv")
        _write_file(path, b"a,b\n1,2\n,\n\n3,4\n")
        dataset = load_file(path)
        assert dataset.shape == (2, 2)

    def test_whitespace_only_rows_kept(self, tmp_dir):
        path = os.path.join(tmp_dir, "spaces.csv")
        _write_file(path, b"a,b\n1,2\n , \n3,4\n")
        dataset = load_file(path)
        assert dataset.shape == (3, 2)
        assert dataset.rows[1] == {"a": " ", "b": " "}

    def test_headers_only_gives_empty_dataset(self, tmp_dir):
        path = os.path.join(tmp_dir, "header.csv")
        _write_file(path, b"a,b,c\n")
        dataset = load_file(path)
        assert dataset.columns == []
        assert dataset.rows == []

    def test_empty_file_gives_empty_dataset(self, tmp_dir):
        path = os.path.join(tmp_dir, "empty.csv")
        _write_file(path, b"")
        assert load_file(path).shape == (0, 0)


class TestEncodingDetection:
    def test_latin1_encoding(self, tmp_dir):
        path = os.path.join(tmp_dir, "latin1.csv")
        content = "name,city\nJosé,São Paulo\nRené,Zürich\n"
        _write_file(path, content.encode("latin-1"))
        dataset = load_file(path)
        assert dataset.shape == (2, 2)
        names = [row["name"] for row in dataset.rows]
        assert "José" in names or "Jos" in str(names)

    def test_utf8_encoding(self, tmp_dir):
        path = os.path.join(tmp_dir, "utf8.csv")
        _write_file(path, "name,city\nJosé,São Paulo\n".encode("utf-8"))
        dataset = load_file(path)
        assert dataset.rows[0]["city"] == "São Paulo"


class TestDelimiterDetection:
    def test_semicolon(self, tmp_dir):
        path = os.path.join(tmp_dir, "semi.csv")
        _write_file(path, b"a;b;c\n1;2;3\n4;5;6\n")
        assert load_file(path).columns == ["a", "b", "c"]

    def test_tab(self, tmp_dir):
        path = os.path.join(tmp_dir, "tab.csv")
        _write_file(path, b"a\tb\n1\t2\n3\t4\n")
        assert load_file(path).shape == (2, 2)


class TestLoadExcel:
    def test_first_sheet_loaded(self, tmp_dir):
        path = os.path.join(tmp_dir, "book.xlsx")
        with pd.ExcelWriter(path) as writer:
            pd.DataFrame({"region": ["North", "South"], "units": [3, 4]}).to_excel(
                writer, sheet_name="first", index=False
            )
            pd.DataFrame({"other": [1]}).to_excel(writer, sheet_name="second", index=False)
        dataset = load_file(path)
        assert dataset.name == "book.xlsx"
        assert dataset.columns == ["region", "units"]
        assert dataset.rows[1] == {"region": "South", "units": 4}

    def test_corrupt_workbook(self, tmp_dir):
        path = os.path.join(tmp_dir, "broken.xlsx")
        _write_file(path, b"this is not a zip archive")
        with pytest.raises(DatasetLoadError):
            load_file(path)


class TestLoadErrors:
    def test_unsupported_extension(self, tmp_dir):
        path = os.path.join(tmp_dir, "notes.txt")
        _write_file(path, b"a,b\n1,2\n")
        with pytest.raises(UnsupportedFileType, match="notes.txt"):
            load_file(path)

    def test_unsupported_extension_checked_before_existence(self):
        with pytest.raises(UnsupportedFileType):
            load_file("/no/such/file.json")

    def test_file_not_found(self):
        with pytest.raises(DatasetLoadError, match="File not found"):
            load_file("/nonexistent/path/data.csv")

    def test_uppercase_extension(self, tmp_dir):
        path = os.path.join(tmp_dir, "LOUD.CSV")
        _write_file(path, b"a,b\n1,2\n")
        assert load_file(path).shape == (1, 2)
