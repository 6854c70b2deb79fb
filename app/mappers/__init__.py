"""
app/mappers package marker.
"""

from app.mappers.column_normalizer import (
    CAMPAIGN_KEYS,
    COLUMN_SYNONYMS,
    apply_column_map,
    build_column_key_map,
    clean_header,
    normalize_column_name,
)

__all__ = [
    "CAMPAIGN_KEYS",
    "COLUMN_SYNONYMS",
    "apply_column_map",
    "build_column_key_map",
    "clean_header",
    "normalize_column_name",
]
