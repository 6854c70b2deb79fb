"""
tests/test_decoder.py

Pytest unit tests for the byte/text decoding heuristics.

Coverage
--------
- Extension checks
- UTF-16 sniffing (BOM, little- and big-endian heuristics, short files)
- Header-row scanning past report banners
- Delimiter selection
- Ragged CSV rows and CR-only line endings
- Spreadsheet reading via pandas, including unreadable workbooks
"""

from __future__ import annotations

import csv
import io
from datetime import datetime

import pandas as pd
import pytest

from app.parsing.decoder import (
    clean_text,
    detect_delimiter,
    detect_encoding,
    ensure_supported_extension,
    find_header_index,
    parse_delimited_text,
    read_spreadsheet,
    rows_from_bytes,
)
from app.parsing.errors import UnreadableFileError, UnsupportedFormatError


class TestExtensions:
    @pytest.mark.parametrize("name", ["report.csv", "REPORT.TSV", "a.b.xlsx", "legacy.xls"])
    def test_supported(self, name: str) -> None:
        assert ensure_supported_extension(name) == name.rsplit(".", 1)[-1].lower()

    def test_unsupported_names_the_extension(self) -> None:
        with pytest.raises(UnsupportedFormatError) as exc_info:
            ensure_supported_extension("report.pdf")
        assert exc_info.value.extension == "pdf"
        assert str(exc_info.value) == "Unsupported file format: .pdf"


class TestDetectEncoding:
    def test_bom_selects_utf16(self) -> None:
        assert detect_encoding("Campaign,Clicks".encode("utf-16")) == "utf-16"

    def test_little_endian_without_bom(self) -> None:
        assert detect_encoding("Campaign,Clicks".encode("utf-16-le")) == "utf-16-le"

    def test_big_endian_without_bom(self) -> None:
        assert detect_encoding("Campaign,Clicks".encode("utf-16-be")) == "utf-16-be"

    def test_plain_ascii_is_utf8(self) -> None:
        assert detect_encoding(b"Campaign,Clicks\nA,1\n") == "utf-8"

    def test_short_input_is_never_sniffed(self) -> None:
        assert detect_encoding("ab".encode("utf-16-le")) == "utf-8"

    def test_probe_window_is_tunable(self) -> None:
        data = "Campaign".encode("utf-16-le") + "ü".encode("utf-8") * 4
        assert detect_encoding(data, probe_bytes=8) == "utf-16-le"
        assert detect_encoding(data, probe_bytes=len(data) - 1) == "utf-8"


class TestHeaderDetection:
    def test_skips_report_banner_lines(self) -> None:
        lines = [
            "Campaign performance report",
            "January 1, 2026 - January 31, 2026",
            "Campaign,Impr.,Clicks,Cost",
            "A,1,2,3",
        ]
        assert find_header_index(lines) == 2

    def test_dated_header(self) -> None:
        assert find_header_index(["Report", "Date,Impressions,Clicks"]) == 1

    def test_falls_back_to_first_line(self) -> None:
        assert find_header_index(["foo,bar", "1,2"]) == 0

    def test_scan_window_limits_search(self) -> None:
        lines = ["banner"] * 3 + ["Campaign,Clicks"]
        assert find_header_index(lines, scan_lines=3) == 0
        assert find_header_index(lines, scan_lines=4) == 3


class TestDelimiter:
    def test_tab_needs_strictly_more_tabs(self) -> None:
        assert detect_delimiter("Campaign\tClicks\tCost") == "\t"
        assert detect_delimiter("Campaign,Clicks\tCost") == ","
        assert detect_delimiter("Campaign,Clicks,Cost") == ","


class TestParseDelimitedText:
    def test_clean_text_drops_bom_and_nuls(self) -> None:
        assert clean_text("\ufeffa\x00b") == "ab"

    def test_clean_text_folds_line_endings(self) -> None:
        assert clean_text("a\r\nb\rc\n") == "a\nb\nc\n"

    def test_carriage_return_only_line_endings(self) -> None:
        decoded = parse_delimited_text("Campaign,Impressions,Cost\rFortnite - A,100,5\rValorant - B,200,9\r")
        assert decoded.headers == ("Campaign", "Impressions", "Cost")
        assert [row["Campaign"] for row in decoded.rows] == ["Fortnite - A", "Valorant - B"]

    def test_reader_errors_are_unreadable_file_errors(self) -> None:
        oversized = "x" * (csv.field_size_limit() + 1)
        with pytest.raises(UnreadableFileError, match="malformed delimited text"):
            parse_delimited_text(f"Campaign,Clicks\n{oversized},1\n")

    def test_tsv_with_banner_and_blank_lines(self) -> None:
        text = "Report title\n\nCampaign\tClicks\r\nA\t5\r\n\r\nB\t7\r\n"
        decoded = parse_delimited_text(text)
        assert decoded.headers == ("Campaign", "Clicks")
        assert decoded.rows == [{"Campaign": "A", "Clicks": "5"}, {"Campaign": "B", "Clicks": "7"}]

    def test_quoted_commas_are_kept_in_cell(self) -> None:
        decoded = parse_delimited_text('Campaign,Cost\n"Brand, US","$1,200.00"\n')
        assert decoded.rows == [{"Campaign": "Brand, US", "Cost": "$1,200.00"}]

    def test_short_rows_leave_cells_missing_and_long_rows_are_trimmed(self) -> None:
        decoded = parse_delimited_text("Campaign,Clicks,Cost\nA,1\nB,2,3,extra\n")
        assert decoded.rows[0] == {"Campaign": "A", "Clicks": "1", "Cost": None}
        assert decoded.rows[1] == {"Campaign": "B", "Clicks": "2", "Cost": "3"}

    def test_empty_text_has_no_rows(self) -> None:
        assert parse_delimited_text("").rows == []


class TestSpreadsheet:
    @staticmethod
    def _xlsx_bytes(frame: pd.DataFrame) -> bytes:
        buffer = io.BytesIO()
        frame.to_excel(buffer, index=False, engine="openpyxl")
        return buffer.getvalue()

    def test_blank_cells_are_absent_and_values_are_python_types(self) -> None:
        frame = pd.DataFrame(
            {
                "Day": [datetime(2026, 1, 5), datetime(2026, 1, 6)],
                "Impressions": [100, 200],
                "Cost": [1.5, None],
            }
        )
        decoded = read_spreadsheet(self._xlsx_bytes(frame))

        assert decoded.headers == ("Day", "Impressions", "Cost")
        assert decoded.rows[0]["Impressions"] == 100
        assert type(decoded.rows[0]["Impressions"]) is int
        assert decoded.rows[0]["Cost"] == 1.5
        assert "Cost" not in decoded.rows[1]

    def test_rows_from_bytes_dispatches_by_extension(self) -> None:
        frame = pd.DataFrame({"Campaign": ["A"], "Clicks": [3]})
        decoded = rows_from_bytes(self._xlsx_bytes(frame), "export.XLSX")
        assert decoded.rows == [{"Campaign": "A", "Clicks": 3}]

    def test_rows_from_bytes_rejects_unknown_extension(self) -> None:
        with pytest.raises(UnsupportedFormatError):
            rows_from_bytes(b"whatever", "export.json")

    @pytest.mark.parametrize("name", ["report.xlsx", "report.xls"])
    def test_non_workbook_bytes_are_unreadable(self, name: str) -> None:
        with pytest.raises(UnreadableFileError) as exc_info:
            rows_from_bytes(b"not a workbook", name)
        assert str(exc_info.value) == "Could not read file: not a valid Excel workbook"
        assert exc_info.value.__cause__ is not None

    def test_truncated_workbook_is_unreadable(self) -> None:
        data = self._xlsx_bytes(pd.DataFrame({"Campaign": ["A"], "Clicks": [3]}))
        with pytest.raises(UnreadableFileError):
            read_spreadsheet(data[: len(data) // 2])
