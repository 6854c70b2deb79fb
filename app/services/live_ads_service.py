"""
app/services/live_ads_service.py

Live Google Ads reads with a fixture fallback.

Every read returns a LiveData wrapper: ``is_live`` is False whenever the
account is not configured, the API call fails, or it returns nothing, and the
payload is then built from app.sample_data instead.
"""

from __future__ import annotations

import logging
import random
from functools import lru_cache
from typing import Callable, Sequence, TypeVar

from app.config import GoogleAdsSettings, get_external_http_settings, get_google_ads_settings
from app.connectors.base import ConnectorRequestError
from app.connectors.google_ads_connector import GoogleAdsConnector, validate_date_range
from app.domain.ad_export import CreativeRecord
from app.domain.google_ads import (
    CampaignSummary,
    ConnectionStatus,
    CPATrends,
    LiveData,
    WeeklySummary,
)
from app.logging_utils import log_event
from app.sample_data import SAMPLE_CREATIVES, compute_weekly_summary, generate_cpa_trends

logger = logging.getLogger(__name__)

T = TypeVar("T")

FALLBACK_MESSAGE = "Google Ads API unavailable. Using sample data."


class LiveAdsService:
    """
    Serves creatives, CPA trends and campaign summaries for a date range.
    """

    def __init__(
        self,
        *,
        settings: GoogleAdsSettings,
        connector: GoogleAdsConnector | None,
        rng: random.Random | None = None,
    ) -> None:
        self._settings = settings
        self._connector = connector
        self._rng = rng or random.Random()

    @property
    def configured(self) -> bool:
        return self._connector is not None and not self._settings.missing_credentials()

    def status(self) -> ConnectionStatus:
        missing = self._settings.missing_credentials()
        if missing:
            return ConnectionStatus(
                connected=False,
                configured=False,
                message=f"Missing env vars: {', '.join(missing)}",
            )
        if self._connector is None:
            return ConnectionStatus(connected=False, configured=True, message=FALLBACK_MESSAGE)

        try:
            return self._connector.test_connection()
        except ConnectorRequestError as exc:
            logger.warning("Google Ads connection check failed error=%s", exc)
            return ConnectionStatus(connected=False, configured=True, message=str(exc))
        except Exception as exc:
            logger.exception("Unhandled Google Ads connection check failure error=%s", exc)
            return ConnectionStatus(connected=False, configured=True, message=str(exc))

    def creatives(self, date_from: str | None, date_to: str | None) -> LiveData[list[CreativeRecord]]:
        """
        Raises:
            ValueError: a date bound is not YYYY-MM-DD.
        """

        validate_date_range(date_from, date_to)
        return self._live_or_fixture(
            "creatives",
            lambda connector: connector.fetch_creatives(date_from, date_to),
            lambda: list(SAMPLE_CREATIVES),
        )

    def cpa_trends(
        self,
        date_from: str | None,
        date_to: str | None,
        *,
        creatives: Sequence[CreativeRecord] | None = None,
    ) -> LiveData[CPATrends]:
        """
        Live daily CPA per ad, or synthesized trends for ``creatives`` (fixtures by default).

        Raises:
            ValueError: a date bound is not YYYY-MM-DD.
        """

        validate_date_range(date_from, date_to)
        fallback_creatives = list(creatives) if creatives else list(SAMPLE_CREATIVES)
        return self._live_or_fixture(
            "cpa_trends",
            lambda connector: connector.fetch_cpa_trends(date_from, date_to),
            lambda: generate_cpa_trends(fallback_creatives, rng=self._rng),
        )

    def campaigns(self, date_from: str | None, date_to: str | None) -> LiveData[list[CampaignSummary]]:
        """
        Raises:
            ValueError: a date bound is not YYYY-MM-DD.
        """

        validate_date_range(date_from, date_to)
        return self._live_or_fixture(
            "campaigns",
            lambda connector: connector.fetch_campaign_summary(date_from, date_to),
            lambda: [_campaign_from_creative(item) for item in SAMPLE_CREATIVES],
        )

    @staticmethod
    def weekly_summary(creatives: Sequence[CreativeRecord]) -> WeeklySummary:
        return compute_weekly_summary(creatives)

    def _live_or_fixture(
        self,
        resource: str,
        fetch: Callable[[GoogleAdsConnector], T],
        fixture: Callable[[], T],
    ) -> LiveData[T]:
        if not self.configured or self._connector is None:
            return LiveData(data=fixture(), is_live=False, message=FALLBACK_MESSAGE)

        try:
            data = fetch(self._connector)
        except ConnectorRequestError as exc:
            log_event(logger, logging.WARNING, "google_ads_fallback", resource=resource, error=str(exc))
            return LiveData(data=fixture(), is_live=False, message=str(exc))
        except Exception as exc:
            logger.exception("Unhandled Google Ads failure resource=%s error=%s", resource, exc)
            return LiveData(data=fixture(), is_live=False, message=str(exc))

        if not data:
            log_event(logger, logging.INFO, "google_ads_fallback", resource=resource, error="empty")
            return LiveData(data=fixture(), is_live=False, message=FALLBACK_MESSAGE)

        return LiveData(data=data, is_live=True)


def _campaign_from_creative(creative: CreativeRecord) -> CampaignSummary:
    return CampaignSummary(
        name=creative.campaign_name,
        id=creative.id,
        status=creative.status,
        impressions=creative.impressions,
        clicks=creative.clicks,
        conversions=creative.installs,
        spend=creative.spend,
        video_views=creative.video_views,
    )


@lru_cache(maxsize=1)
def get_live_ads_service() -> LiveAdsService:
    """
    Build and cache the live ads service; no connector is created without credentials.
    """

    settings = get_google_ads_settings()
    connector = None
    if not settings.missing_credentials():
        connector = GoogleAdsConnector(
            settings=settings,
            http_settings=get_external_http_settings(),
        )
    return LiveAdsService(settings=settings, connector=connector)
