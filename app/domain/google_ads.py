"""
app/domain/google_ads.py

Records returned by the live Google Ads query service and its fixture fallback.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from app.domain.ad_export import CreativeStatus

T = TypeVar("T")


@dataclass(frozen=True)
class CPATrendPoint:
    """
    One day of cost-per-acquisition for a single creative.

    Fixture trends only carry ``cpa``; live trends add spend and conversions.
    """

    date: str
    cpa: int | float
    spend: int | float | None = None
    conversions: int | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"date": self.date, "cpa": self.cpa}
        if self.spend is not None:
            payload["spend"] = self.spend
        if self.conversions is not None:
            payload["conversions"] = self.conversions
        return payload


CPATrends = dict[str, list[CPATrendPoint]]


@dataclass(frozen=True)
class CampaignSummary:
    name: str
    id: str
    status: CreativeStatus
    impressions: int
    clicks: int
    conversions: float
    spend: float
    video_views: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "id": self.id,
            "status": self.status.value,
            "impressions": self.impressions,
            "clicks": self.clicks,
            "conversions": self.conversions,
            "spend": self.spend,
            "videoViews": self.video_views,
        }


@dataclass(frozen=True)
class ConnectionStatus:
    """
    Outcome of a live-account connectivity check.
    """

    connected: bool
    configured: bool
    message: str | None = None
    account_name: str | None = None
    customer_id: str | None = None


@dataclass(frozen=True)
class WeeklySummary:
    """
    Headline numbers across a creative list; spend and installs count running creatives only.
    """

    total_spend: int | float
    total_installs: int | float
    avg_cpa: int | float
    creatives_total: int
    running: int
    paused: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalSpend": self.total_spend,
            "totalInstalls": self.total_installs,
            "avgCpa": self.avg_cpa,
            "creativesTotal": self.creatives_total,
            "running": self.running,
            "paused": self.paused,
        }


@dataclass(frozen=True)
class LiveData(Generic[T]):
    """
    Payload plus whether it came from the live account (``False`` means fixtures).
    """

    data: T
    is_live: bool
    message: str | None = None
