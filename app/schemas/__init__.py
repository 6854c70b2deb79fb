"""
app/schemas package marker.
"""

from app.schemas.ad_imports import (
    AdImportTextRequest,
    CreativeResponse,
    CreativesResultResponse,
    ParseResultResponse,
    TimeSeriesPointResponse,
    TimeSeriesResultResponse,
    parse_result_response,
)
from app.schemas.google_ads import (
    CampaignsResponse,
    CampaignSummaryResponse,
    ConnectionStatusResponse,
    CPATrendPointResponse,
    CPATrendsResponse,
    CreativesResponse,
    WeeklySummaryResponse,
)

__all__ = [
    "AdImportTextRequest",
    "CreativeResponse",
    "CreativesResultResponse",
    "ParseResultResponse",
    "TimeSeriesPointResponse",
    "TimeSeriesResultResponse",
    "parse_result_response",
    "CampaignsResponse",
    "CampaignSummaryResponse",
    "ConnectionStatusResponse",
    "CPATrendPointResponse",
    "CPATrendsResponse",
    "CreativesResponse",
    "WeeklySummaryResponse",
]
