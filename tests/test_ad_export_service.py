"""
tests/test_ad_export_service.py

End-to-end tests for AdExportParseService and parse_google_ads_file.

Coverage
--------
- Reference creative export -> one record
- UTF-8 / UTF-16 (BOM and heuristic) equivalence
- Idempotence across repeated parses
- Path, text and upload-like sources
- XLSX time-series and creative exports
- Fatal errors: unsupported format, unreadable file, empty file, no valid data
- CR-only line endings
- Structured log line on success
"""

from __future__ import annotations

import asyncio
import io
import json
import logging
from datetime import datetime
from pathlib import Path

import pandas as pd
import pytest

from app.domain.ad_export import CreativeRecord, DataType, TimeSeriesPoint
from app.parsing.errors import EmptyFileError, NoValidDataError, UnreadableFileError, UnsupportedFormatError
from app.services.ad_export_service import AdExportParseService, parse_google_ads_file

REFERENCE_CSV = (
    "Campaign,Impressions,Clicks,Cost,Conversions\n"
    "Fortnite - Gameplay Montage,10000,500,250.00,50\n"
    "Total: All campaigns,10000,500,250.00,50\n"
)

TIME_SERIES_CSV = (
    "Time series report\n"
    "Date,Impressions,Clicks,Cost\n"
    "2026-02-02,2000,20,$10.00\n"
    "2026-01-05,1000,10,$5.50\n"
)


class FakeUpload:
    """Stand-in for FastAPI's UploadFile."""

    def __init__(self, filename: str | None, data: bytes) -> None:
        self.filename = filename
        self._data = data

    async def read(self, size: int = -1) -> bytes:
        return self._data


@pytest.fixture()
def svc() -> AdExportParseService:
    return AdExportParseService()


def _xlsx_bytes(frame: pd.DataFrame) -> bytes:
    buffer = io.BytesIO()
    frame.to_excel(buffer, index=False, engine="openpyxl")
    return buffer.getvalue()


class TestReferenceExport:
    def test_yields_exactly_one_creative(self, svc: AdExportParseService) -> None:
        result = svc.parse_text(REFERENCE_CSV)

        assert result.type is DataType.CREATIVES
        assert len(result.data) == 1
        record = result.data[0]
        assert isinstance(record, CreativeRecord)
        assert record.id == "GAD-001"
        assert record.creator == "Fortnite - Gameplay Montage"
        assert record.game == "Fortnite"
        assert record.impressions == 10000
        assert record.clicks == 500
        assert record.installs == 50
        assert record.spend == 250
        assert record.cpa == 5

    def test_columns_are_canonical_keys_in_header_order(self, svc: AdExportParseService) -> None:
        result = svc.parse_text(REFERENCE_CSV)
        assert result.columns == ("campaign", "impressions", "clicks", "cost", "conversions")

    def test_serialized_shape_is_camel_case(self, svc: AdExportParseService) -> None:
        payload = svc.parse_text(REFERENCE_CSV).to_dict()
        record = payload["data"][0]
        assert payload["type"] == "creatives"
        assert record["hookType"] == "Campaign"
        assert record["campaignName"] == "Fortnite - Gameplay Montage"
        assert record["status"] == "running"


class TestEncodings:
    @pytest.mark.parametrize("encoding", ["utf-8", "utf-8-sig", "utf-16", "utf-16-le", "utf-16-be"])
    def test_creative_export_is_identical_across_encodings(
        self, svc: AdExportParseService, encoding: str
    ) -> None:
        expected = svc.parse_bytes(data=REFERENCE_CSV.encode("utf-8"), filename="report.csv")
        actual = svc.parse_bytes(data=REFERENCE_CSV.encode(encoding), filename="report.csv")
        assert actual == expected

    @pytest.mark.parametrize("encoding", ["utf-16", "utf-16-le"])
    def test_tab_separated_utf16_export(self, svc: AdExportParseService, encoding: str) -> None:
        text = TIME_SERIES_CSV.replace(",", "\t").replace("$10.00", "10").replace("$5.50", "5.5")
        expected = svc.parse_text(text)
        actual = svc.parse_bytes(data=text.encode(encoding), filename="report.tsv")
        assert actual == expected
        assert actual.type is DataType.TIMESERIES


class TestTimeSeries:
    def test_banner_skipped_and_sorted(self, svc: AdExportParseService) -> None:
        result = svc.parse_text(TIME_SERIES_CSV)

        assert result.type is DataType.TIMESERIES
        assert [point.date for point in result.data] == ["2026-01-05", "2026-02-02"]
        first = result.data[0]
        assert isinstance(first, TimeSeriesPoint)
        assert first.to_dict() == {"date": "2026-01-05", "impressions": 1000, "clicks": 10, "cost": 5.5}

    def test_idempotent(self, svc: AdExportParseService) -> None:
        assert svc.parse_text(TIME_SERIES_CSV).data == svc.parse_text(TIME_SERIES_CSV).data
        assert svc.parse_text(REFERENCE_CSV).data == svc.parse_text(REFERENCE_CSV).data


class TestSources:
    def test_path_source(self, tmp_path: Path) -> None:
        path = tmp_path / "report.csv"
        path.write_text(REFERENCE_CSV, encoding="utf-8")

        result = asyncio.run(parse_google_ads_file(path, service=AdExportParseService()))
        assert len(result.data) == 1

    def test_text_source(self) -> None:
        result = asyncio.run(parse_google_ads_file(REFERENCE_CSV, service=AdExportParseService()))
        assert result.type is DataType.CREATIVES

    def test_upload_source(self) -> None:
        upload = FakeUpload("report.csv", REFERENCE_CSV.encode("utf-16"))
        result = asyncio.run(parse_google_ads_file(upload, service=AdExportParseService()))
        assert result.data[0].id == "GAD-001"

    def test_upload_with_unsupported_extension(self) -> None:
        upload = FakeUpload("report.pdf", b"%PDF")
        with pytest.raises(UnsupportedFormatError):
            asyncio.run(parse_google_ads_file(upload, service=AdExportParseService()))

    def test_upload_without_filename(self) -> None:
        with pytest.raises(UnsupportedFormatError):
            asyncio.run(parse_google_ads_file(FakeUpload(None, b"x"), service=AdExportParseService()))


class TestSpreadsheets:
    def test_xlsx_time_series(self, svc: AdExportParseService) -> None:
        frame = pd.DataFrame(
            {
                "Day": [datetime(2026, 1, 6), datetime(2026, 1, 5)],
                "Impr.": [200, 100],
                "Clicks": [4, None],
            }
        )
        result = svc.parse_bytes(data=_xlsx_bytes(frame), filename="series.xlsx")

        assert result.type is DataType.TIMESERIES
        assert [point.to_dict() for point in result.data] == [
            {"date": "2026-01-05", "impressions": 100},
            {"date": "2026-01-06", "impressions": 200, "clicks": 4},
        ]

    def test_xlsx_creatives(self, svc: AdExportParseService) -> None:
        frame = pd.DataFrame(
            {
                "Campaign": ["Valorant | Tutorial", "Minecraft - Build", "Total"],
                "Impressions": [1000, 5000, 6000],
                "Cost": [12.345, 99.5, 111.845],
                "Conversions": [3, 10, 13],
                "Campaign status": ["Enabled", "Paused", ""],
            }
        )
        result = svc.parse_bytes(data=_xlsx_bytes(frame), filename="campaigns.xlsx")

        assert [record.game for record in result.data] == ["Minecraft", "Valorant"]
        assert result.data[0].spend == 99.5
        assert result.data[0].cpa == 9.95
        assert result.data[0].status.value == "paused"
        assert result.data[1].id == "GAD-001"


def test_carriage_return_only_export(svc: AdExportParseService) -> None:
    data = b"Campaign,Impressions,Cost\rFortnite - A,100,5\rValorant - B,200,9\r"
    result = svc.parse_bytes(data=data, filename="mac.csv")

    assert result.type is DataType.CREATIVES
    assert [record.game for record in result.data] == ["Valorant", "Fortnite"]
    assert [record.spend for record in result.data] == [9, 5]


class TestFatalErrors:
    def test_unsupported_extension(self, svc: AdExportParseService) -> None:
        with pytest.raises(UnsupportedFormatError, match=r"\.json"):
            svc.parse_bytes(data=b"{}", filename="export.json")

    def test_header_only_file_is_empty(self, svc: AdExportParseService) -> None:
        with pytest.raises(EmptyFileError):
            svc.parse_text("Campaign,Impressions,Clicks\n")

    def test_blank_file_is_empty(self, svc: AdExportParseService) -> None:
        with pytest.raises(EmptyFileError):
            svc.parse_bytes(data=b"", filename="export.csv")

    def test_only_summary_rows_is_no_valid_data(self, svc: AdExportParseService) -> None:
        with pytest.raises(NoValidDataError):
            svc.parse_text("Campaign,Impressions\nTotal,100\n,5\n")

    def test_non_workbook_bytes_are_rejected_and_logged(
        self, svc: AdExportParseService, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.WARNING, logger="app.services.ad_export_service")
        with pytest.raises(UnreadableFileError):
            svc.parse_bytes(data=b"not a workbook", filename="report.xlsx")

        events = [json.loads(record.getMessage()) for record in caplog.records]
        assert events[-1]["event"] == "ad_export_rejected"
        assert events[-1]["error"] == "UnreadableFileError"

    def test_rejection_is_logged(self, svc: AdExportParseService, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.WARNING, logger="app.services.ad_export_service")
        with pytest.raises(EmptyFileError):
            svc.parse_text("Campaign,Impressions\n")

        events = [json.loads(record.getMessage()) for record in caplog.records]
        assert events[-1]["event"] == "ad_export_rejected"
        assert events[-1]["error"] == "EmptyFileError"


def test_success_emits_structured_log(svc: AdExportParseService, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="app.services.ad_export_service")
    svc.parse_text(REFERENCE_CSV)

    event = json.loads(caplog.records[-1].getMessage())
    assert event["event"] == "ad_export_parsed"
    assert event["data_type"] == "creatives"
    assert event["rows_read"] == 2
    assert event["records"] == 1
