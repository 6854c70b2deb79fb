"""
app/parsing/values.py

Cell value coercion for ad exports.

Every function here is total: malformed cells degrade to a default value
instead of raising, so one bad cell never blocks an otherwise valid file.
"""

from __future__ import annotations

import math
import numbers
import re
from datetime import date, datetime
from typing import Any

from dateutil import parser as date_parser

from app.domain.ad_export import CreativeStatus

_MISSING_TOKENS = frozenset({"", "--", " --", "N/A"})

# Currency symbols, thousands separators, whitespace, percent signs, quotes.
_NUMBER_NOISE = re.compile(r'[$€£¥,\s%"]')

# Leading float literal, matching how spreadsheet tools read "12.5abc" as 12.5.
_FLOAT_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _normalize_number(value: float) -> int | float:
    if math.isnan(value) or math.isinf(value):
        return 0
    if value.is_integer():
        return int(value)
    return value


def coerce_number(value: Any) -> int | float:
    """
    Convert a raw cell into a number; never raises.

    >>> coerce_number("$1,234.50")
    1234.5
    >>> coerce_number("--")
    0
    """

    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, numbers.Number):
        if isinstance(value, numbers.Integral):
            return int(value)
        return _normalize_number(float(value))  # type: ignore[arg-type]

    raw = str(value)
    if raw in _MISSING_TOKENS:
        return 0

    match = _FLOAT_PREFIX.match(_NUMBER_NOISE.sub("", raw))
    if match is None:
        return 0
    try:
        return _normalize_number(float(match.group(0)))
    except (OverflowError, ValueError):
        return 0


def coerce_date(value: Any) -> str:
    """
    Convert a raw cell into an ISO ``YYYY-MM-DD`` string.

    Blank cells return ``""`` (callers skip those rows). Unparseable text is
    returned trimmed and unchanged.
    """

    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if value is None or isinstance(value, bool) or value == "" or value == 0:
        return ""

    raw = str(value).strip()
    if not raw:
        return ""
    try:
        return date_parser.parse(raw).strftime("%Y-%m-%d")
    except (ValueError, OverflowError, TypeError):
        return raw


def coerce_status(value: Any) -> CreativeStatus:
    """
    Map a free-text delivery status onto running/paused. Unknown text is
    treated as running.
    """

    if not value:
        return CreativeStatus.RUNNING

    text = str(value).strip().lower()
    if "enabled" in text or text in {"active", "running"} or "eligible" in text:
        return CreativeStatus.RUNNING
    if "paused" in text:
        return CreativeStatus.PAUSED
    if "removed" in text or "deleted" in text:
        return CreativeStatus.PAUSED
    return CreativeStatus.RUNNING
