"""
app/services/ad_import_store.py

Best-effort persistence of the most recent ParseResult.

A storage failure never fails an upload: writes are rolled back and logged,
and reads report "nothing stored".
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_ad_export_settings
from app.domain.ad_export import ParseResult
from app.logging_utils import log_event
from app.repositories.parse_result_repository import ParseResultRepository

logger = logging.getLogger(__name__)


class AdImportStore:
    """
    Single-slot store keyed by a fixed storage key.
    """

    def __init__(self, *, storage_key: str, enabled: bool = True) -> None:
        self._storage_key = storage_key
        self._enabled = enabled

    @property
    def storage_key(self) -> str:
        return self._storage_key

    def save(self, db: Session, result: ParseResult, *, source_filename: str | None = None) -> bool:
        """
        Overwrite the stored result; returns whether it was persisted.
        """

        if not self._enabled:
            return False

        try:
            ParseResultRepository(db).save(
                storage_key=self._storage_key,
                data_type=result.type.value,
                payload=result.to_dict(),
                source_filename=source_filename,
            )
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            log_event(
                logger,
                logging.WARNING,
                "ad_import_store_failed",
                operation="save",
                storage_key=self._storage_key,
                error=str(exc),
            )
            return False

        log_event(
            logger,
            logging.INFO,
            "ad_import_stored",
            storage_key=self._storage_key,
            data_type=result.type.value,
            records=len(result.data),
        )
        return True

    def load(self, db: Session) -> ParseResult | None:
        if not self._enabled:
            return None

        try:
            stored = ParseResultRepository(db).get(self._storage_key)
        except SQLAlchemyError as exc:
            db.rollback()
            log_event(
                logger,
                logging.WARNING,
                "ad_import_store_failed",
                operation="load",
                storage_key=self._storage_key,
                error=str(exc),
            )
            return None

        if stored is None:
            return None

        try:
            return ParseResult.from_dict(stored.payload_json)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning(
                "Discarding unreadable stored parse result storage_key=%s error=%s",
                self._storage_key,
                exc,
            )
            return None

    def clear(self, db: Session) -> bool:
        """
        Delete the stored result; returns whether a row was removed.
        """

        if not self._enabled:
            return False

        try:
            deleted = ParseResultRepository(db).delete(self._storage_key)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            log_event(
                logger,
                logging.WARNING,
                "ad_import_store_failed",
                operation="clear",
                storage_key=self._storage_key,
                error=str(exc),
            )
            return False
        return deleted > 0


def get_ad_import_store() -> AdImportStore:
    settings = get_ad_export_settings()
    return AdImportStore(
        storage_key=settings.storage_key,
        enabled=settings.persist_results,
    )
