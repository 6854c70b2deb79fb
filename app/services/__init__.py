"""
app/services package marker.
"""

from app.services.ad_export_service import (
    AdExportParseService,
    get_ad_export_service,
    parse_google_ads_file,
)
from app.services.ad_import_store import AdImportStore, get_ad_import_store
from app.services.live_ads_service import LiveAdsService, get_live_ads_service

__all__ = [
    "AdExportParseService",
    "get_ad_export_service",
    "parse_google_ads_file",
    "AdImportStore",
    "get_ad_import_store",
    "LiveAdsService",
    "get_live_ads_service",
]
