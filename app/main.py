from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_db() -> bool:
    """Open a session and run SELECT 1. Returns False if the DB is unreachable."""
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError

    from db.session import SessionLocal

    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
    except SQLAlchemyError as exc:
        logging.getLogger(__name__).warning("Database unavailable; imports will not be persisted: %s", exc)
        return False
    return True


def _check_schema() -> None:
    """
    Warn when a table registered on Base.metadata is absent from the database.

    Uploads keep working without persistence, so a missing table is reported
    rather than fatal. Does NOT auto-migrate.
    """
    from sqlalchemy import inspect as sa_inspect

    import db.models  # noqa: F401  registers ORM models on Base.metadata
    from db.base import Base
    from db.session import get_engine

    inspector = sa_inspect(get_engine())
    actual: set[str] = set(inspector.get_table_names())
    expected: set[str] = set(Base.metadata.tables.keys())
    missing = expected - actual

    if missing:
        logging.getLogger(__name__).warning(
            "Schema mismatch: %d table(s) missing from the database: %s. "
            "Run 'alembic upgrade head' to enable import persistence.",
            len(missing),
            ", ".join(sorted(missing)),
        )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Check DB connectivity and schema on boot."""
    if _check_db():
        logging.getLogger(__name__).info("Database connectivity confirmed")
        _check_schema()
    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _configure_logging()

    application = FastAPI(
        title="Ad Performance Dashboard API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import ad_imports_router, google_ads_router

    application.include_router(ad_imports_router)
    application.include_router(google_ads_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
