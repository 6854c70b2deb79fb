"""
app/parsing/builders.py

Turns raw export rows into canonical time-series points or creative records.

Both builders make one sequential pass over the rows. All state (the output
list and the creative id counter) is local to a single call.
"""

from __future__ import annotations

import math
import re
from typing import Any, Iterable

from app.domain.ad_export import (
    TIME_SERIES_METRICS,
    ColumnKeyMap,
    CreativeRecord,
    RawRow,
    TimeSeriesPoint,
)
from app.mappers.column_normalizer import apply_column_map
from app.parsing.errors import NoValidDataError
from app.parsing.values import coerce_date, coerce_number, coerce_status

DEFAULT_ID_PREFIX = "GAD"
DEFAULT_HOOK_TYPE = "Campaign"

# Checked in order; the first title found in a name segment wins.
GAME_TITLES: tuple[str, ...] = (
    "Fortnite",
    "Valorant",
    "CS2",
    "CSGO",
    "Minecraft",
    "Roblox",
    "GTA",
    "GTA V",
    "League of Legends",
    "Apex",
    "Call of Duty",
    "Overwatch",
    "Rocket League",
    "PUBG",
    "Destiny",
    "Halo",
    "Rainbow Six",
    "Dota",
    "TFT",
    "Elden Ring",
    "Arma",
    "EA Sports",
    "Brawlhalla",
    "Fall Guys",
    "War Thunder",
    "Escape from Tarkov",
    "Garrys Mod",
    "Helldivers",
    "Dead by Daylight",
    "Lethal Company",
    "Content Warning",
)

_NAME_SEPARATORS = re.compile(r"[-–—|:]")
_SUMMARY_ROW_MARKER = "total"


def round_half_up(value: float, digits: int = 2) -> float:
    """
    Round like a spreadsheet does (halves go up), not banker's rounding.
    """

    factor = 10**digits
    rounded = math.floor(value * factor + 0.5) / factor
    return int(rounded) if float(rounded).is_integer() else rounded


def _as_count(value: int | float) -> int:
    return int(math.floor(value + 0.5))


def _text(value: Any) -> str:
    if value is None or value == "" or value == 0 or isinstance(value, bool):
        return ""
    return str(value).strip()


def extract_game(campaign_name: str) -> str:
    """
    Derive the promoted game title from a campaign name.

    >>> extract_game("Fortnite - Gameplay Montage")
    'Fortnite'
    >>> extract_game("Brand | Awareness")
    'Brand'
    """

    parts = [part.strip() for part in _NAME_SEPARATORS.split(campaign_name)]
    parts = [part for part in parts if part]

    for part in parts:
        lowered = part.lower()
        for title in GAME_TITLES:
            if title.lower() in lowered:
                return title

    if len(parts) >= 2:
        return parts[0]
    return campaign_name


def build_time_series(rows: Iterable[RawRow], key_map: ColumnKeyMap) -> list[TimeSeriesPoint]:
    """
    Build date-sorted time-series points.

    Rows with no usable date are skipped. A metric is populated only when the
    file has that column and the row carries a cell for it; same-date rows are
    kept as separate points.
    """

    points: list[TimeSeriesPoint] = []
    for row in rows:
        norm = apply_column_map(row, key_map)
        point_date = coerce_date(norm.get("date"))
        if not point_date:
            continue

        metrics = {
            attr: coerce_number(norm[key])
            for attr, key in TIME_SERIES_METRICS
            if norm.get(key) is not None
        }
        points.append(TimeSeriesPoint(date=point_date, **metrics))

    points.sort(key=lambda point: point.date)
    return points


def build_creatives(
    rows: Iterable[RawRow],
    key_map: ColumnKeyMap,
    *,
    id_prefix: str = DEFAULT_ID_PREFIX,
) -> list[CreativeRecord]:
    """
    Build per-campaign creative records sorted by spend, highest first.

    Summary/footer rows (blank name or containing "total") and placeholder rows
    with no impressions, clicks, cost or viewable impressions are dropped
    before ids are assigned.

    Raises:
        NoValidDataError: every row was filtered out.
    """

    creatives: list[CreativeRecord] = []
    for row in rows:
        norm = apply_column_map(row, key_map)

        campaign = _text(norm.get("campaign"))
        if not campaign or _SUMMARY_ROW_MARKER in campaign.lower():
            continue

        impressions = coerce_number(norm.get("impressions"))
        clicks = coerce_number(norm.get("clicks"))
        interactions = coerce_number(norm.get("interactions"))
        conversions = coerce_number(norm.get("conversions"))
        cost = coerce_number(norm.get("cost"))
        video_views = coerce_number(norm.get("videoViews"))
        viewable_impressions = coerce_number(norm.get("viewableImpressions"))

        effective_clicks = clicks or interactions
        if not (impressions or effective_clicks or cost or viewable_impressions):
            continue

        if _text(norm.get("cpa")):
            cpa = coerce_number(norm.get("cpa"))
        else:
            cpa = cost / conversions if conversions > 0 else 0

        campaign_type = _text(norm.get("campaignType"))
        creatives.append(
            CreativeRecord(
                id=f"{id_prefix}-{len(creatives) + 1:03d}",
                creator=campaign,
                game=extract_game(campaign),
                hook_type=campaign_type or _text(norm.get("adGroup")) or DEFAULT_HOOK_TYPE,
                campaign_name=campaign,
                launch_date=coerce_date(norm.get("date") or norm.get("startDate") or ""),
                impressions=_as_count(impressions),
                clicks=_as_count(effective_clicks),
                installs=_as_count(conversions),
                spend=round_half_up(cost),
                cpa=round_half_up(cpa),
                video_views=_as_count(video_views),
                viewable_impressions=_as_count(viewable_impressions),
                status=coerce_status(norm.get("status")),
                budget=coerce_number(norm.get("budget")),
                campaign_type=campaign_type,
                bid_strategy=_text(norm.get("bidStrategy")),
                account=_text(norm.get("account")),
            )
        )

    if not creatives:
        raise NoValidDataError()

    creatives.sort(key=lambda record: record.spend, reverse=True)
    return creatives
