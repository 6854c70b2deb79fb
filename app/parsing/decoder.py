"""
app/parsing/decoder.py

Byte-level decoding of ad-platform exports into raw rows.

Each heuristic (encoding sniffing, header-row scanning, delimiter choice) is a
small pure function so its thresholds can be tuned and tested in isolation.
"""

from __future__ import annotations

import csv
import io
import logging
import zipfile
from dataclasses import dataclass, field

import numpy as np
import pandas as pd
import xlrd
from openpyxl.utils.exceptions import InvalidFileException

from app.domain.ad_export import RawRow
from app.parsing.errors import UnreadableFileError, UnsupportedFormatError

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS: frozenset[str] = frozenset({"csv", "tsv"})
SPREADSHEET_EXTENSIONS: frozenset[str] = frozenset({"xlsx", "xls"})
SUPPORTED_EXTENSIONS: frozenset[str] = TEXT_EXTENSIONS | SPREADSHEET_EXTENSIONS

DEFAULT_HEADER_SCAN_LINES = 10
DEFAULT_UTF16_PROBE_BYTES = 10

_UTF16_BOMS: tuple[bytes, ...] = (b"\xff\xfe", b"\xfe\xff")
_HEADER_METRIC_HINTS: tuple[str, ...] = ("impressions", "impr", "cost", "clicks", "status")
_DATED_METRIC_HINTS: tuple[str, ...] = ("impr", "clicks")

# Raised by pandas and its Excel engines when the bytes are not a workbook.
_SPREADSHEET_READ_ERRORS: tuple[type[Exception], ...] = (
    ValueError,
    KeyError,
    EOFError,
    OSError,
    zipfile.BadZipFile,
    xlrd.XLRDError,
    InvalidFileException,
)


@dataclass(frozen=True)
class DecodedRows:
    """
    Raw rows of one export plus its header row, in column order.
    """

    headers: tuple[str, ...]
    rows: list[RawRow] = field(default_factory=list)


def file_extension(filename: str) -> str:
    """
    Return the lowercased extension, or the whole name when it has no dot.
    """

    return filename.rsplit(".", 1)[-1].strip().lower()


def ensure_supported_extension(filename: str) -> str:
    """
    Return the extension of ``filename`` or raise UnsupportedFormatError.
    """

    extension = file_extension(filename)
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError(extension)
    return extension


def detect_encoding(data: bytes, *, probe_bytes: int = DEFAULT_UTF16_PROBE_BYTES) -> str:
    """
    Sniff UTF-16 vs UTF-8 from raw bytes.

    A UTF-16 byte-order mark wins. Without one, a file longer than the probe
    window whose every second byte in that window is NUL is taken to be ASCII
    text encoded as UTF-16.
    """

    if data[:2] in _UTF16_BOMS:
        return "utf-16"

    if len(data) > probe_bytes:
        window = data[:probe_bytes]
        if window[1::2] and not any(window[1::2]):
            return "utf-16-le"
        if window[0::2] and not any(window[0::2]):
            return "utf-16-be"

    return "utf-8"


def decode_bytes(data: bytes, *, probe_bytes: int = DEFAULT_UTF16_PROBE_BYTES) -> str:
    encoding = detect_encoding(data, probe_bytes=probe_bytes)
    logger.debug("Decoding ad export bytes=%d encoding=%s", len(data), encoding)
    return data.decode(encoding, errors="replace")


def clean_text(text: str) -> str:
    """Drop a leading BOM and every embedded NUL; fold CRLF and bare CR endings to LF."""

    if text.startswith("\ufeff"):
        text = text[1:]
    return text.replace("\x00", "").replace("\r\n", "\n").replace("\r", "\n")


def split_lines(text: str) -> list[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


def is_header_line(line: str) -> bool:
    lower = line.lower()
    if "campaign" in lower and any(hint in lower for hint in _HEADER_METRIC_HINTS):
        return True
    return "date" in lower and any(hint in lower for hint in _DATED_METRIC_HINTS)


def find_header_index(lines: list[str], *, scan_lines: int = DEFAULT_HEADER_SCAN_LINES) -> int:
    """
    Locate the header row, skipping export titles and date-range banners.

    Only the first ``scan_lines`` lines are inspected; when none of them looks
    like a header the first line is used.
    """

    for index, line in enumerate(lines[:scan_lines]):
        if is_header_line(line):
            return index
    return 0


def detect_delimiter(header_line: str) -> str:
    """Tab when the header has strictly more tabs than commas, else comma."""

    return "\t" if header_line.count("\t") > header_line.count(",") else ","


def parse_delimited_text(text: str, *, scan_lines: int = DEFAULT_HEADER_SCAN_LINES) -> DecodedRows:
    """
    Parse CSV/TSV text into raw rows keyed by the detected header row.

    Raises:
        UnreadableFileError: the csv reader rejects the text.
    """

    lines = split_lines(clean_text(text))
    header_index = find_header_index(lines, scan_lines=scan_lines)
    header_line = lines[header_index] if lines else ""
    delimiter = detect_delimiter(header_line)
    if header_index:
        logger.debug("Skipped %d leading non-data line(s) before header", header_index)

    reader = csv.DictReader(io.StringIO("\n".join(lines[header_index:])), delimiter=delimiter)
    headers = tuple(reader.fieldnames or ())

    rows: list[RawRow] = []
    try:
        for record in reader:
            # Overflow cells past the last header land under the ``None`` key.
            record.pop(None, None)  # type: ignore[call-overload]
            rows.append(record)
    except csv.Error as exc:
        raise UnreadableFileError(f"malformed delimited text ({exc})") from exc
    return DecodedRows(headers=headers, rows=rows)


def _to_python(value: object) -> object:
    if isinstance(value, np.generic):
        return value.item()
    return value


def read_spreadsheet(data: bytes) -> DecodedRows:
    """
    Read the first sheet of an XLSX/XLS workbook into raw rows.

    Blank cells are dropped from their row, matching a sparse sheet-to-records
    conversion; fully blank rows are skipped.

    Raises:
        UnreadableFileError: the bytes are not a readable workbook.
    """

    try:
        frame = pd.read_excel(io.BytesIO(data), sheet_name=0)
    except _SPREADSHEET_READ_ERRORS as exc:
        logger.warning("Spreadsheet read failed bytes=%d error=%s", len(data), exc)
        raise UnreadableFileError("not a valid Excel workbook") from exc
    headers = tuple(str(column) for column in frame.columns)
    frame = frame.astype(object).where(pd.notna(frame), None)

    rows: list[RawRow] = []
    for values in frame.itertuples(index=False, name=None):
        row = {
            header: _to_python(value)
            for header, value in zip(headers, values)
            if value is not None
        }
        if row:
            rows.append(row)
    return DecodedRows(headers=headers, rows=rows)


def rows_from_bytes(
    data: bytes,
    filename: str,
    *,
    scan_lines: int = DEFAULT_HEADER_SCAN_LINES,
    probe_bytes: int = DEFAULT_UTF16_PROBE_BYTES,
) -> DecodedRows:
    """
    Decode one uploaded export by extension.

    Raises:
        UnsupportedFormatError: extension is not csv, tsv, xlsx or xls.
        UnreadableFileError: the content cannot be read in that format.
    """

    extension = ensure_supported_extension(filename)
    if extension in SPREADSHEET_EXTENSIONS:
        return read_spreadsheet(data)
    return parse_delimited_text(decode_bytes(data, probe_bytes=probe_bytes), scan_lines=scan_lines)
