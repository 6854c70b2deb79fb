"""
app/api/routers package marker.
"""

from app.api.routers.ad_imports import router as ad_imports_router
from app.api.routers.google_ads import router as google_ads_router

__all__ = [
    "ad_imports_router",
    "google_ads_router",
]
