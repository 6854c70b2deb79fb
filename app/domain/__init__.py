"""
app/domain package marker.
"""

from app.domain.ad_export import (
    ColumnKeyMap,
    CreativeRecord,
    CreativeStatus,
    DataType,
    ParseResult,
    RawRow,
    TimeSeriesPoint,
)
from app.domain.google_ads import (
    CampaignSummary,
    ConnectionStatus,
    CPATrendPoint,
    CPATrends,
    LiveData,
    WeeklySummary,
)

__all__ = [
    "CPATrendPoint",
    "CPATrends",
    "CampaignSummary",
    "ColumnKeyMap",
    "ConnectionStatus",
    "CreativeRecord",
    "CreativeStatus",
    "DataType",
    "LiveData",
    "ParseResult",
    "RawRow",
    "TimeSeriesPoint",
    "WeeklySummary",
]
