"""
app/parsing package marker.
"""

from app.parsing.builders import build_creatives, build_time_series, extract_game
from app.parsing.classifier import classify_columns
from app.parsing.decoder import (
    SUPPORTED_EXTENSIONS,
    DecodedRows,
    ensure_supported_extension,
    parse_delimited_text,
    rows_from_bytes,
)
from app.parsing.errors import (
    AdExportError,
    EmptyFileError,
    NoValidDataError,
    UnreadableFileError,
    UnsupportedFormatError,
)
from app.parsing.values import coerce_date, coerce_number, coerce_status

__all__ = [
    "AdExportError",
    "DecodedRows",
    "EmptyFileError",
    "NoValidDataError",
    "SUPPORTED_EXTENSIONS",
    "UnreadableFileError",
    "UnsupportedFormatError",
    "build_creatives",
    "build_time_series",
    "classify_columns",
    "coerce_date",
    "coerce_number",
    "coerce_status",
    "ensure_supported_extension",
    "extract_game",
    "parse_delimited_text",
    "rows_from_bytes",
]
