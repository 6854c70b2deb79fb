"""
app/services/ad_export_service.py

Pipeline orchestration for ad-platform export uploads.

    File Decoder -> Row Classifier -> (Time-Series Builder | Creative Builder)

Reading the upload is the only awaited step; decoding and building run as a
single synchronous pass. Every call owns its own state, so concurrent parses
of different files never interfere.
"""

from __future__ import annotations

import asyncio
import logging
from functools import lru_cache
from pathlib import Path
from typing import Protocol, Union

from app.config import get_ad_export_settings
from app.domain.ad_export import DataType, ParseResult
from app.logging_utils import log_event
from app.mappers.column_normalizer import build_column_key_map
from app.parsing.builders import DEFAULT_ID_PREFIX, build_creatives, build_time_series
from app.parsing.classifier import classify_columns
from app.parsing.decoder import (
    DEFAULT_HEADER_SCAN_LINES,
    DEFAULT_UTF16_PROBE_BYTES,
    DecodedRows,
    ensure_supported_extension,
    parse_delimited_text,
    rows_from_bytes,
)
from app.parsing.errors import AdExportError, EmptyFileError

logger = logging.getLogger(__name__)

_TEXT_SOURCE_NAME = "<text>"


class UploadedExport(Protocol):
    """
    Minimal async upload interface (satisfied by FastAPI's UploadFile).
    """

    filename: str | None

    async def read(self, size: int = -1) -> bytes:
        ...


ExportSource = Union[str, Path, UploadedExport]


class AdExportParseService:
    """
    Parses one export file (or raw CSV/TSV text) into a ParseResult.
    """

    def __init__(
        self,
        *,
        header_scan_lines: int = DEFAULT_HEADER_SCAN_LINES,
        utf16_probe_bytes: int = DEFAULT_UTF16_PROBE_BYTES,
        id_prefix: str = DEFAULT_ID_PREFIX,
    ) -> None:
        self._header_scan_lines = max(1, header_scan_lines)
        self._utf16_probe_bytes = max(2, utf16_probe_bytes)
        self._id_prefix = id_prefix

    async def parse(self, source: ExportSource) -> ParseResult:
        """
        Parse a file upload, a path on disk, or raw CSV/TSV text.

        Raises:
            UnsupportedFormatError: the file extension is not recognized.
            EmptyFileError:         no data rows after header detection.
            NoValidDataError:       every creative row was filtered out.
        """

        if isinstance(source, str):
            return self.parse_text(source)

        if isinstance(source, Path):
            ensure_supported_extension(source.name)
            data = await asyncio.to_thread(source.read_bytes)
            return self.parse_bytes(data=data, filename=source.name)

        filename = source.filename or ""
        ensure_supported_extension(filename)
        data = await source.read()
        return self.parse_bytes(data=data, filename=filename)

    def parse_bytes(self, *, data: bytes, filename: str) -> ParseResult:
        """
        Parse raw file bytes, dispatching on the file extension.
        """

        try:
            decoded = rows_from_bytes(
                data,
                filename,
                scan_lines=self._header_scan_lines,
                probe_bytes=self._utf16_probe_bytes,
            )
            return self._build_result(decoded, source_name=filename)
        except AdExportError as exc:
            self._log_failure(filename, exc)
            raise

    def parse_text(self, text: str) -> ParseResult:
        """
        Parse CSV/TSV text directly (fixtures, tests, pasted exports).
        """

        try:
            decoded = parse_delimited_text(text, scan_lines=self._header_scan_lines)
            return self._build_result(decoded, source_name=_TEXT_SOURCE_NAME)
        except AdExportError as exc:
            self._log_failure(_TEXT_SOURCE_NAME, exc)
            raise

    def _build_result(self, decoded: DecodedRows, *, source_name: str) -> ParseResult:
        if not decoded.rows:
            raise EmptyFileError()

        key_map = build_column_key_map(decoded.headers)
        columns = tuple(key_map.values())
        data_type = classify_columns(columns)

        if data_type is DataType.TIMESERIES:
            records: tuple = tuple(build_time_series(decoded.rows, key_map))
        else:
            records = tuple(build_creatives(decoded.rows, key_map, id_prefix=self._id_prefix))

        log_event(
            logger,
            logging.INFO,
            "ad_export_parsed",
            source=source_name,
            data_type=data_type.value,
            rows_read=len(decoded.rows),
            records=len(records),
            columns=list(columns),
        )
        return ParseResult(type=data_type, data=records, columns=columns)

    @staticmethod
    def _log_failure(source_name: str, exc: AdExportError) -> None:
        log_event(
            logger,
            logging.WARNING,
            "ad_export_rejected",
            source=source_name,
            error=type(exc).__name__,
            message=str(exc),
        )


@lru_cache(maxsize=1)
def get_ad_export_service() -> AdExportParseService:
    """
    Build and cache the parse service with env-driven settings.
    """

    settings = get_ad_export_settings()
    return AdExportParseService(
        header_scan_lines=settings.header_scan_lines,
        utf16_probe_bytes=settings.utf16_probe_bytes,
        id_prefix=settings.creative_id_prefix,
    )


async def parse_google_ads_file(
    source: ExportSource,
    *,
    service: AdExportParseService | None = None,
) -> ParseResult:
    """
    Auto-detect and parse any Google Ads export into a ParseResult.
    """

    return await (service or get_ad_export_service()).parse(source)
