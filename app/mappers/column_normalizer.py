"""
app/mappers/column_normalizer.py

Header normalization for ad-platform exports.

Free-text export headers ("Impr.", "Cost / conv.", "Avg. CPA", ...) are mapped
onto a fixed internal vocabulary. The synonym table is append-only and
case-insensitive; unmapped headers pass through in their cleaned form so
unexpected columns are preserved rather than dropped.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from app.domain.ad_export import ColumnKeyMap, RawRow

CAMPAIGN_KEYS: tuple[str, ...] = ("campaign", "adGroup", "adName")

COLUMN_SYNONYMS: Mapping[str, str] = MappingProxyType(
    {
        # Campaign / ad identifiers
        "campaign": "campaign",
        "campaign name": "campaign",
        "ad group": "adGroup",
        "ad group name": "adGroup",
        "ad": "adName",
        "ad name": "adName",
        "ad group ad": "adName",
        "headline": "adName",
        # Status
        "status": "status",
        "campaign status": "status",
        "ad group status": "status",
        "ad status": "status",
        # Metrics
        "impressions": "impressions",
        "impr.": "impressions",
        "impr": "impressions",
        "clicks": "clicks",
        "interactions": "interactions",
        "interaction rate": "interactionRate",
        "conversions": "conversions",
        "conv.": "conversions",
        "conv": "conversions",
        "all conv.": "conversions",
        "all conversions": "conversions",
        "conv. (platform comparable)": "conversions",
        "cost": "cost",
        "cost / conv.": "cpa",
        "cost/conv.": "cpa",
        "cost / conversion": "cpa",
        "cost / conv. (platform comparable)": "cpa",
        "avg. cpa": "cpa",
        "cpa": "cpa",
        "cost / conv": "cpa",
        "video views": "videoViews",
        "views": "videoViews",
        "ctr": "ctr",
        "viewable ctr": "viewableCtr",
        "avg. cpc": "avgCpc",
        "avg. cpm": "avgCpm",
        "avg. cpv": "avgCpv",
        "trueview avg. cpv": "avgCpv",
        "avg. cost": "avgCost",
        "conv. rate": "convRate",
        "conv. value": "convValue",
        "conv. value / cost": "convValuePerCost",
        "view rate": "viewRate",
        "viewable impr.": "viewableImpressions",
        # Budget & account
        "budget": "budget",
        "budget type": "budgetType",
        "account": "account",
        "campaign type": "campaignType",
        "type": "campaignType",
        "currency": "currency",
        "currency code": "currencyCode",
        "bid strategy type": "bidStrategy",
        "optimization score": "optimizationScore",
        # Dates
        "day": "date",
        "date": "date",
        "date range": "date",
        "start date": "startDate",
    }
)

# Zero-width characters, byte-order marks and NUL bytes left behind by
# UTF-16 exports.
_INVISIBLE_CHARS = re.compile("[\u200b-\u200d\ufeff\x00]")
_WHITESPACE_RUN = re.compile(r"\s+")


def clean_header(raw: str) -> str:
    """
    Lowercase, trim and strip invisible characters from one header.
    """

    cleaned = _INVISIBLE_CHARS.sub("", str(raw)).lower().strip()
    return _WHITESPACE_RUN.sub(" ", cleaned)


def normalize_column_name(raw: str) -> str:
    """
    Return the canonical identifier for one raw export header.
    """

    cleaned = clean_header(raw)
    return COLUMN_SYNONYMS.get(cleaned, cleaned)


def build_column_key_map(headers: Iterable[str]) -> ColumnKeyMap:
    """
    Map every raw header to exactly one canonical key, in header order.
    """

    return {header: normalize_column_name(header) for header in headers}


def apply_column_map(row: RawRow, key_map: ColumnKeyMap) -> dict[str, Any]:
    """
    Re-key one raw row by canonical key.

    When several raw headers share a canonical key the rightmost column wins.
    Cells missing from the row map to ``None``.
    """

    return {canonical: row.get(raw) for raw, canonical in key_map.items()}
