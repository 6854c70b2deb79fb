"""
app/parsing/errors.py

Fatal ad-export parsing errors. Per-cell problems never raise; these
conditions end the current upload attempt without a partial result.
"""

from __future__ import annotations


class AdExportError(ValueError):
    """Base exception for ad-export parsing failures."""


class UnsupportedFormatError(AdExportError):
    """
    Raised when the file extension is not one of csv, tsv, xlsx, xls.
    """

    def __init__(self, extension: str) -> None:
        self.extension = extension
        super().__init__(f"Unsupported file format: .{extension}")


class EmptyFileError(AdExportError):
    """Raised when no data rows remain after header detection."""

    def __init__(self, message: str = "File appears to be empty or has no data rows") -> None:
        super().__init__(message)


class NoValidDataError(AdExportError):
    """Raised when every creative row is filtered out."""

    def __init__(self, message: str = "No valid ad data found in file.") -> None:
        super().__init__(message)


class UnreadableFileError(AdExportError):
    """Raised when the bytes cannot be read as the format their extension claims."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Could not read file: {detail}")
