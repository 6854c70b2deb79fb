"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from fastapi import File, HTTPException, UploadFile, status

from app.parsing.decoder import ensure_supported_extension
from app.parsing.errors import UnsupportedFormatError


def get_ad_export_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Validate that the uploaded export is CSV, TSV, XLSX or XLS by extension.
    """

    try:
        ensure_supported_extension((file.filename or "").strip())
    except UnsupportedFormatError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    return file
