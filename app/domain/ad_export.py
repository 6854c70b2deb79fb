"""
app/domain/ad_export.py

Canonical records produced by the ad-export ingestion pipeline.

Records are immutable and serialize to the camelCase JSON shape consumed by
the dashboard views and shared with the live query service.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

RawRow = dict[str, Any]
ColumnKeyMap = dict[str, str]


class StrEnum(str, Enum):
    """String-valued enum that serializes as its value."""

    def __str__(self) -> str:
        return self.value


class DataType(StrEnum):
    TIMESERIES = "timeseries"
    CREATIVES = "creatives"


class CreativeStatus(StrEnum):
    RUNNING = "running"
    PAUSED = "paused"


# Optional time-series metrics, in output order: (attribute, canonical key).
TIME_SERIES_METRICS: tuple[tuple[str, str], ...] = (
    ("impressions", "impressions"),
    ("clicks", "clicks"),
    ("conversions", "conversions"),
    ("cost", "cost"),
    ("video_views", "videoViews"),
    ("ctr", "ctr"),
    ("cpa", "cpa"),
)


@dataclass(frozen=True)
class TimeSeriesPoint:
    """
    One dated row of a time-series export.

    Metric fields are ``None`` when the source file had no such column, which
    is distinct from a present column whose value coerced to zero.
    """

    date: str
    impressions: int | float | None = None
    clicks: int | float | None = None
    conversions: int | float | None = None
    cost: int | float | None = None
    video_views: int | float | None = None
    ctr: int | float | None = None
    cpa: int | float | None = None

    @property
    def present_fields(self) -> frozenset[str]:
        return frozenset(
            key for attr, key in TIME_SERIES_METRICS if getattr(self, attr) is not None
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"date": self.date}
        for attr, key in TIME_SERIES_METRICS:
            value = getattr(self, attr)
            if value is not None:
                payload[key] = value
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "TimeSeriesPoint":
        return cls(
            date=str(payload["date"]),
            **{attr: payload.get(key) for attr, key in TIME_SERIES_METRICS},
        )


# (attribute, JSON key) for every CreativeRecord field.
_CREATIVE_KEYS: dict[str, str] = {
    "id": "id",
    "creator": "creator",
    "game": "game",
    "hook_type": "hookType",
    "campaign_name": "campaignName",
    "launch_date": "launchDate",
    "impressions": "impressions",
    "clicks": "clicks",
    "installs": "installs",
    "spend": "spend",
    "cpa": "cpa",
    "video_views": "videoViews",
    "viewable_impressions": "viewableImpressions",
    "status": "status",
    "budget": "budget",
    "campaign_type": "campaignType",
    "bid_strategy": "bidStrategy",
    "account": "account",
}


@dataclass(frozen=True)
class CreativeRecord:
    """
    One campaign/ad entity from a creative export or the live query service.
    """

    id: str
    creator: str
    game: str
    hook_type: str
    campaign_name: str
    launch_date: str
    impressions: int
    clicks: int
    installs: int
    spend: float
    cpa: float
    video_views: int = 0
    viewable_impressions: int = 0
    status: CreativeStatus = CreativeStatus.RUNNING
    budget: int | float = 0
    campaign_type: str = ""
    bid_strategy: str = ""
    account: str = ""

    def to_dict(self) -> dict[str, Any]:
        payload = {key: getattr(self, attr) for attr, key in _CREATIVE_KEYS.items()}
        payload["status"] = self.status.value
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "CreativeRecord":
        kwargs = {attr: payload[key] for attr, key in _CREATIVE_KEYS.items() if key in payload}
        if "status" in kwargs:
            kwargs["status"] = CreativeStatus(kwargs["status"])
        return cls(**kwargs)


@dataclass(frozen=True)
class ParseResult:
    """
    The single artifact crossing the ingestion pipeline boundary.
    """

    type: DataType
    data: tuple[TimeSeriesPoint, ...] | tuple[CreativeRecord, ...]
    columns: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "data": [record.to_dict() for record in self.data],
            "columns": list(self.columns),
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ParseResult":
        data_type = DataType(payload["type"])
        raw_records = payload.get("data") or []
        if data_type is DataType.TIMESERIES:
            records: tuple[Any, ...] = tuple(TimeSeriesPoint.from_dict(item) for item in raw_records)
        else:
            records = tuple(CreativeRecord.from_dict(item) for item in raw_records)
        return cls(
            type=data_type,
            data=records,
            columns=tuple(str(column) for column in payload.get("columns") or ()),
        )
