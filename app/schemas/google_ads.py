"""
app/schemas/google_ads.py

Response schemas for the live Google Ads endpoints.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from app.schemas.ad_imports import CamelModel, CreativeResponse, Number


class ConnectionStatusResponse(CamelModel):
    connected: bool
    configured: bool
    message: str | None = None
    account_name: str | None = None
    customer_id: str | None = None


class WeeklySummaryResponse(CamelModel):
    total_spend: Number
    total_installs: Number
    avg_cpa: Number
    creatives_total: int = Field(..., ge=0)
    running: int = Field(..., ge=0)
    paused: int = Field(..., ge=0)


class CreativesResponse(CamelModel):
    creatives: list[CreativeResponse]
    summary: WeeklySummaryResponse
    is_live: bool
    message: str | None = None


class CPATrendPointResponse(CamelModel):
    date: str
    cpa: Number
    spend: Number | None = None
    conversions: int | None = None


class CPATrendsResponse(CamelModel):
    trends: dict[str, list[CPATrendPointResponse]]
    is_live: bool
    message: str | None = None


class CampaignSummaryResponse(CamelModel):
    name: str
    id: str
    status: Literal["running", "paused"]
    impressions: int
    clicks: int
    conversions: Number
    spend: Number
    video_views: int


class CampaignsResponse(CamelModel):
    campaigns: list[CampaignSummaryResponse]
    is_live: bool
    message: str | None = None
