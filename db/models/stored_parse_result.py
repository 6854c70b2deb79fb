"""
db/models/stored_parse_result.py

Latest parsed ad export, persisted so the dashboard survives a restart.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, JSONPayload, TimestampMixin


class StoredParseResult(Base, TimestampMixin):
    __tablename__ = "stored_parse_results"

    storage_key: Mapped[str] = mapped_column(
        String(120),
        primary_key=True,
        comment="Fixed slot name; one row per slot",
    )
    data_type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="timeseries | creatives",
    )
    source_filename: Mapped[str | None] = mapped_column(String(255), nullable=True)
    payload_json: Mapped[dict[str, Any]] = mapped_column(
        JSONPayload,
        nullable=False,
        comment="Serialized ParseResult (type, data, columns)",
    )
