"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.stored_parse_result import StoredParseResult

__all__ = [
    "StoredParseResult",
]
