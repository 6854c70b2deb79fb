"""
app/repositories/parse_result_repository.py

Persistence helpers for the latest parsed ad export.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from db.models.stored_parse_result import StoredParseResult


class ParseResultRepository:
    """
    Repository for the single-slot parse result store.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, storage_key: str) -> StoredParseResult | None:
        stmt = select(StoredParseResult).where(StoredParseResult.storage_key == storage_key)
        return self._session.execute(stmt).scalars().first()

    def save(
        self,
        *,
        storage_key: str,
        data_type: str,
        payload: dict[str, Any],
        source_filename: str | None = None,
    ) -> StoredParseResult:
        """
        Insert or overwrite the row for ``storage_key``.
        """

        existing = self.get(storage_key)
        if existing is None:
            existing = StoredParseResult(
                storage_key=storage_key,
                data_type=data_type,
                payload_json=payload,
                source_filename=source_filename,
            )
            self._session.add(existing)
        else:
            existing.data_type = data_type
            existing.payload_json = payload
            existing.source_filename = source_filename

        self._session.flush()
        return existing

    def delete(self, storage_key: str) -> int:
        """
        Remove the slot; returns the number of deleted rows.
        """

        result = self._session.execute(
            delete(StoredParseResult).where(StoredParseResult.storage_key == storage_key)
        )
        return int(result.rowcount or 0)
