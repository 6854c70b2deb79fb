"""
app/parsing/classifier.py

Decides whether an export holds daily time-series rows or per-campaign rows.
"""

from __future__ import annotations

from typing import Iterable

from app.domain.ad_export import DataType
from app.mappers.column_normalizer import CAMPAIGN_KEYS


def classify_columns(canonical_keys: Iterable[str]) -> DataType:
    """
    Classify an export from its canonical column keys.

    Campaign identity takes precedence: a file carrying both a date column and
    a campaign/ad column is a per-campaign export, not a daily series.
    """

    keys = set(canonical_keys)
    has_date = "date" in keys
    has_campaign = any(key in keys for key in CAMPAIGN_KEYS)

    if has_date and not has_campaign:
        return DataType.TIMESERIES
    if has_campaign:
        return DataType.CREATIVES
    if has_date:
        return DataType.TIMESERIES
    return DataType.CREATIVES
