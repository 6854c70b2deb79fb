"""
db/config.py

Database URL resolution for the ad-import store.

``DATABASE_URL`` wins when set; otherwise a SQLite file under ``output/`` is
used so the service runs with nothing configured.
"""

from __future__ import annotations

import os
from pathlib import Path

from sqlalchemy.engine import make_url

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ENV_FILES: tuple[str, ...] = (".env", ".env.local")
DEFAULT_SQLITE_PATH = PROJECT_ROOT / "output" / "ad_dashboard.db"

_POSTGRES_BACKENDS = {"postgres", "postgresql"}


def _parse_env_line(line: str) -> tuple[str, str] | None:
    line = line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    key, value = line.split("=", 1)
    key = key.strip()
    if not key:
        return None
    return key, value.strip().strip('"').strip("'")


def load_env_files(root: Path | None = None) -> None:
    """
    Load KEY=VALUE pairs from `.env` then `.env.local`; the process environment wins.
    """

    base = root or PROJECT_ROOT
    for filename in ENV_FILES:
        env_path = base / filename
        if not env_path.is_file():
            continue
        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            pair = _parse_env_line(raw_line)
            if pair is not None:
                os.environ.setdefault(*pair)


def with_psycopg_driver(url: str) -> str:
    """
    Pin Postgres URLs to the psycopg (v3) driver; other URLs pass through.

    >>> with_psycopg_driver("postgres://u:p@db/ads")
    'postgresql+psycopg://u:p@db/ads'
    """

    parsed = make_url(url)
    if parsed.get_backend_name() not in _POSTGRES_BACKENDS:
        return url
    return parsed.set(drivername="postgresql+psycopg").render_as_string(hide_password=False)


def default_sqlite_url() -> str:
    DEFAULT_SQLITE_PATH.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{DEFAULT_SQLITE_PATH}"


def resolve_database_url() -> str:
    load_env_files()
    configured = (os.getenv("DATABASE_URL") or "").strip()
    if configured:
        return with_psycopg_driver(configured)
    return default_sqlite_url()
