"""File loader: CSV and Excel files into TabularDataset.

CSV files get automatic encoding and delimiter detection.
"""

from __future__ import annotations

import csv
import io
import os
import zipfile
from typing import Optional

import chardet
import pandas as pd

from vizpilot.errors import DatasetLoadError, UnsupportedFileType
from vizpilot.models import TabularDataset

CSV_EXTENSIONS = (".csv",)
EXCEL_EXTENSIONS = (".xlsx", ".xls")


def _detect_encoding(raw: bytes) -> str:
    """Detect byte encoding using chardet, falling back to utf-8."""
    if not raw:
        return "utf-8"
    encoding = chardet.detect(raw).get("encoding")
    return encoding or "utf-8"


def _decode(raw: bytes) -> Optional[str]:
    """Decode with the detected encoding, then utf-8, then latin-1."""
    for encoding in (_detect_encoding(raw), "utf-8", "latin-1"):
        try:
            return raw.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            continue
    return None


def _detect_delimiter(text: str) -> str:
    """Detect CSV delimiter using csv.Sniffer, falling back to comma."""
    try:
        dialect = csv.Sniffer().sniff(text[:8192], delimiters=",\t;|")
        return dialect.delimiter
    except csv.Error:
        return ","


def _drop_empty_rows(df: pd.DataFrame) -> pd.DataFrame:
    """Drop rows whose every value is missing or an empty string."""
    if df.empty:
        return df
    blank = df.apply(lambda col: col.isna() | col.astype(str).eq(""))
    return df.loc[~blank.all(axis=1)].reset_index(drop=True)


def _read_csv(path: str) -> pd.DataFrame:
    with open(path, "rb") as f:
        raw = f.read()

    text = _decode(raw)
    if text is None:
        raise DatasetLoadError("Failed to decode file with any supported encoding")
    if not text.strip():
        return pd.DataFrame()

    delimiter = _detect_delimiter(text)
    try:
        df = pd.read_csv(io.StringIO(text), sep=delimiter, engine="python")
    except (pd.errors.ParserError, ValueError) as exc:
        raise DatasetLoadError(f"CSV parse error: {exc}") from exc

    # A single wide column usually means the sniffer picked the wrong delimiter.
    if len(df.columns) == 1 and len(df) > 1:
        for alt_delim in ["\t", ";", "|", ","]:
            if alt_delim == delimiter:
                continue
            try:
                alt_df = pd.read_csv(io.StringIO(text), sep=alt_delim, engine="python")
            except (pd.errors.ParserError, ValueError):
                continue
            if len(alt_df.columns) > 1:
                df = alt_df
                break

    return df


def _read_excel(path: str) -> pd.DataFrame:
    try:
        return pd.read_excel(path, sheet_name=0)
    except (ValueError, ImportError, OSError, zipfile.BadZipFile) as exc:
        raise DatasetLoadError(f"XLSX parse error: {exc}") from exc


def load_file(file_path: str) -> TabularDataset:
    """Load a CSV or Excel file as a dataset named after the file.

    Fully blank rows are dropped. A file without data rows gives an empty
    dataset with no columns.

    Args:
        file_path: Path to a ``.csv``, ``.xlsx`` or ``.xls`` file.

    Returns:
        The loaded ``TabularDataset``.

    Raises:
        UnsupportedFileType: For any other extension.
        DatasetLoadError: If the file is missing or cannot be parsed.
    """
    name = os.path.basename(file_path)
    extension = os.path.splitext(name)[1].lower()

    if extension not in CSV_EXTENSIONS + EXCEL_EXTENSIONS:
        raise UnsupportedFileType(name)
    if not os.path.isfile(file_path):
        raise DatasetLoadError(f"File not found: {file_path}")

    try:
        df = _read_csv(file_path) if extension in CSV_EXTENSIONS else _read_excel(file_path)
    except OSError as exc:
        raise DatasetLoadError(f"Cannot read file: {exc}") from exc

    df = _drop_empty_rows(df)
    if df.empty:
        return TabularDataset(name=name, columns=[], rows=[])
    return TabularDataset.from_frame(name, df)
