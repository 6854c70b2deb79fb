"""
app/connectors package marker.
"""

from app.connectors.base import BaseConnector, ConnectorRequestError
from app.connectors.google_ads_connector import GoogleAdsConnector

__all__ = [
    "BaseConnector",
    "ConnectorRequestError",
    "GoogleAdsConnector",
]
