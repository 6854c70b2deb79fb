"""
app/api/routers/ad_imports.py

Ad-export import HTTP endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, UploadFile, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_ad_export_upload
from app.parsing.errors import AdExportError
from app.schemas.ad_imports import AdImportTextRequest, ParseResultResponse, parse_result_response
from app.services.ad_export_service import AdExportParseService, get_ad_export_service
from app.services.ad_import_store import AdImportStore, get_ad_import_store
from db.session import get_db

router = APIRouter(prefix="/api/ad-imports", tags=["ad-imports"])


@router.post("", response_model=ParseResultResponse, response_model_exclude_none=True)
def upload_ad_export(
    file: UploadFile = Depends(get_ad_export_upload),
    db: Session = Depends(get_db),
    parse_service: AdExportParseService = Depends(get_ad_export_service),
    store: AdImportStore = Depends(get_ad_import_store),
):
    """
    Parse one Google Ads export and keep it as the latest import.
    """

    try:
        result = parse_service.parse_bytes(data=file.file.read(), filename=file.filename or "")
    except AdExportError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    finally:
        file.file.close()

    stored = store.save(db, result, source_filename=file.filename)
    return parse_result_response(result, stored=stored)


@router.post("/text", response_model=ParseResultResponse, response_model_exclude_none=True)
def import_ad_export_text(
    payload: AdImportTextRequest,
    db: Session = Depends(get_db),
    parse_service: AdExportParseService = Depends(get_ad_export_service),
    store: AdImportStore = Depends(get_ad_import_store),
):
    """
    Parse CSV/TSV export text sent in the request body.
    """

    try:
        result = parse_service.parse_text(payload.text)
    except AdExportError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc

    stored = store.save(db, result)
    return parse_result_response(result, stored=stored)


@router.get("/latest", response_model=ParseResultResponse, response_model_exclude_none=True)
def get_latest_import(
    db: Session = Depends(get_db),
    store: AdImportStore = Depends(get_ad_import_store),
):
    result = store.load(db)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No stored ad import.",
        )
    return parse_result_response(result, stored=True)


@router.delete("/latest", status_code=status.HTTP_204_NO_CONTENT)
def clear_latest_import(
    db: Session = Depends(get_db),
    store: AdImportStore = Depends(get_ad_import_store),
) -> Response:
    store.clear(db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
