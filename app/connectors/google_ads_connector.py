"""
app/connectors/google_ads_connector.py

Google Ads REST connector for YouTube (VIDEO) campaign performance.

Queries are GAQL sent to ``googleAds:searchStream``; the stream response is a
JSON array of batches, each holding a ``results`` list. Access tokens come from
an OAuth2 refresh-token exchange and are cached until shortly before expiry.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Any

import requests

from app.config import ExternalHTTPSettings, GoogleAdsSettings
from app.connectors.base import BaseConnector, ConnectorRequestError
from app.domain.ad_export import CreativeRecord, CreativeStatus
from app.domain.google_ads import CampaignSummary, ConnectionStatus, CPATrendPoint, CPATrends
from app.parsing.builders import round_half_up

logger = logging.getLogger(__name__)

MICROS_PER_UNIT = 1_000_000
TOKEN_EXPIRY_MARGIN_SECONDS = 60
HOOK_NAME_MAX_LENGTH = 30

KNOWN_HOOKS: tuple[str, ...] = (
    "Gameplay Montage",
    "Tutorial",
    "Highlight Reel",
    "UGC Integration",
    "How-To",
    "Social Proof",
    "Before/After",
    "Feature Demo",
    "Testimonial",
    "Search",
    "Discovery",
    "In-Stream",
    "Bumper",
)

_STATUS_MAP: dict[str, CreativeStatus] = {
    "ENABLED": CreativeStatus.RUNNING,
    "PAUSED": CreativeStatus.PAUSED,
    "REMOVED": CreativeStatus.PAUSED,
}

_CAMPAIGN_NAME_SEPARATORS = re.compile(r"[-–—|]")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_CREATIVES_QUERY = """
    SELECT
      campaign.name,
      campaign.id,
      campaign.status,
      ad_group.name,
      ad_group.id,
      ad_group_ad.ad.name,
      ad_group_ad.ad.id,
      ad_group_ad.status,
      ad_group_ad.ad.type,
      metrics.impressions,
      metrics.clicks,
      metrics.conversions,
      metrics.cost_micros,
      metrics.video_views,
      metrics.all_conversions
    FROM ad_group_ad
    WHERE campaign.advertising_channel_type = 'VIDEO'
      AND segments.date BETWEEN '{date_from}' AND '{date_to}'
    ORDER BY metrics.cost_micros DESC
"""

_CPA_TRENDS_QUERY = """
    SELECT
      ad_group_ad.ad.id,
      ad_group_ad.ad.name,
      ad_group.name,
      segments.date,
      metrics.conversions,
      metrics.cost_micros
    FROM ad_group_ad
    WHERE campaign.advertising_channel_type = 'VIDEO'
      AND ad_group_ad.status = 'ENABLED'
      AND segments.date BETWEEN '{date_from}' AND '{date_to}'
    ORDER BY segments.date ASC
"""

_CAMPAIGNS_QUERY = """
    SELECT
      campaign.name,
      campaign.id,
      campaign.status,
      campaign.advertising_channel_type,
      metrics.impressions,
      metrics.clicks,
      metrics.conversions,
      metrics.cost_micros,
      metrics.video_views
    FROM campaign
    WHERE campaign.advertising_channel_type = 'VIDEO'
      AND segments.date BETWEEN '{date_from}' AND '{date_to}'
    ORDER BY metrics.cost_micros DESC
"""

_CUSTOMER_QUERY = """
    SELECT customer.descriptive_name, customer.id
    FROM customer
    LIMIT 1
"""


def map_status(google_status: str | None) -> CreativeStatus:
    """ENABLED is running; PAUSED, REMOVED and anything unknown are paused."""

    return _STATUS_MAP.get(google_status or "", CreativeStatus.PAUSED)


def campaign_game(campaign_name: str) -> str:
    """
    Second segment of a "Brand - Game - Goal" style campaign name.

    >>> campaign_game("Medal - Fortnite - CPA")
    'Fortnite'
    """

    parts = _CAMPAIGN_NAME_SEPARATORS.split(campaign_name)
    if len(parts) >= 2:
        return parts[1].strip()
    return campaign_name


def extract_hook(name: str) -> str:
    lowered = name.lower()
    for hook in KNOWN_HOOKS:
        if hook.lower() in lowered:
            return hook
    if len(name) > HOOK_NAME_MAX_LENGTH:
        return name[:HOOK_NAME_MAX_LENGTH] + "..."
    return name


def validate_date_range(date_from: str | None, date_to: str | None) -> None:
    """
    Raise ValueError unless both bounds are YYYY-MM-DD strings.

    Dates are interpolated into GAQL, so nothing else may pass.
    """

    for label, value in (("from", date_from), ("to", date_to)):
        if not value or not _ISO_DATE.match(value):
            raise ValueError(f"Invalid '{label}' date {value!r}; expected YYYY-MM-DD.")


def _int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _float(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


class GoogleAdsConnector(BaseConnector):
    """
    Read-only client for one Google Ads customer account.
    """

    def __init__(
        self,
        *,
        settings: GoogleAdsSettings,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(source="google_ads", http_settings=http_settings, session=session)
        self._settings = settings
        self._access_token: str | None = None
        self._access_token_expires_at: float = 0.0

    def fetch_creatives(self, date_from: str, date_to: str) -> list[CreativeRecord]:
        """
        Per-ad performance for VIDEO campaigns, one record per ad id.
        """

        validate_date_range(date_from, date_to)
        rows = self._search(_CREATIVES_QUERY.format(date_from=date_from, date_to=date_to))

        by_ad: dict[str, dict[str, Any]] = {}
        for row in rows:
            campaign = row.get("campaign", {})
            ad_group = row.get("adGroup", {})
            ad_group_ad = row.get("adGroupAd", {})
            ad = ad_group_ad.get("ad", {})
            metrics = row.get("metrics", {})

            ad_id = str(ad.get("id", ""))
            entry = by_ad.get(ad_id)
            if entry is None:
                entry = {
                    "campaign_name": campaign.get("name", ""),
                    "ad_name": ad.get("name") or ad_group.get("name", ""),
                    "status": map_status(ad_group_ad.get("status")),
                    "impressions": 0,
                    "clicks": 0,
                    "installs": 0.0,
                    "spend": 0.0,
                    "video_views": 0,
                }
                by_ad[ad_id] = entry

            entry["impressions"] += _int(metrics.get("impressions"))
            entry["clicks"] += _int(metrics.get("clicks"))
            entry["installs"] += _float(metrics.get("conversions"))
            entry["spend"] += _int(metrics.get("costMicros")) / MICROS_PER_UNIT
            entry["video_views"] += _int(metrics.get("videoViews"))

        creatives: list[CreativeRecord] = []
        for ad_id, entry in by_ad.items():
            installs = entry["installs"]
            spend = entry["spend"]
            creatives.append(
                CreativeRecord(
                    id=f"AD-{ad_id}",
                    creator=entry["ad_name"],
                    game=campaign_game(entry["campaign_name"]),
                    hook_type=extract_hook(entry["ad_name"]),
                    campaign_name=entry["campaign_name"],
                    launch_date=date_from,
                    impressions=entry["impressions"],
                    clicks=entry["clicks"],
                    installs=int(round_half_up(installs, 0)),
                    spend=round_half_up(spend),
                    cpa=round_half_up(spend / installs) if installs > 0 else 0,
                    video_views=entry["video_views"],
                    status=entry["status"],
                )
            )

        logger.info(
            "Fetched Google Ads creatives from=%s to=%s rows=%d creatives=%d",
            date_from,
            date_to,
            len(rows),
            len(creatives),
        )
        return creatives

    def fetch_cpa_trends(self, date_from: str, date_to: str) -> CPATrends:
        """
        Daily CPA per enabled ad, keyed by ``AD-<adId>``, oldest day first.
        """

        validate_date_range(date_from, date_to)
        rows = self._search(_CPA_TRENDS_QUERY.format(date_from=date_from, date_to=date_to))

        trends: CPATrends = {}
        for row in rows:
            ad_id = row.get("adGroupAd", {}).get("ad", {}).get("id", "")
            metrics = row.get("metrics", {})
            spend = _int(metrics.get("costMicros")) / MICROS_PER_UNIT
            conversions = _float(metrics.get("conversions"))
            cpa = spend / conversions if conversions > 0 else 0

            trends.setdefault(f"AD-{ad_id}", []).append(
                CPATrendPoint(
                    date=str(row.get("segments", {}).get("date", "")),
                    cpa=round_half_up(cpa),
                    spend=round_half_up(spend),
                    conversions=int(round_half_up(conversions, 0)),
                )
            )
        return trends

    def fetch_campaign_summary(self, date_from: str, date_to: str) -> list[CampaignSummary]:
        validate_date_range(date_from, date_to)
        rows = self._search(_CAMPAIGNS_QUERY.format(date_from=date_from, date_to=date_to))

        summaries: list[CampaignSummary] = []
        for row in rows:
            campaign = row.get("campaign", {})
            metrics = row.get("metrics", {})
            summaries.append(
                CampaignSummary(
                    name=campaign.get("name", ""),
                    id=str(campaign.get("id", "")),
                    status=map_status(campaign.get("status")),
                    impressions=_int(metrics.get("impressions")),
                    clicks=_int(metrics.get("clicks")),
                    conversions=_float(metrics.get("conversions")),
                    spend=_int(metrics.get("costMicros")) / MICROS_PER_UNIT,
                    video_views=_int(metrics.get("videoViews")),
                )
            )
        return summaries

    def test_connection(self) -> ConnectionStatus:
        """
        Fetch the account's descriptive name.

        Raises:
            ConnectorRequestError: the API call failed or returned no customer.
        """

        rows = self._search(_CUSTOMER_QUERY, timeout=self._settings.status_timeout_seconds)
        if not rows:
            raise ConnectorRequestError(f"{self.source}: no customer data returned.")

        customer = rows[0].get("customer", {})
        return ConnectionStatus(
            connected=True,
            configured=True,
            account_name=customer.get("descriptiveName"),
            customer_id=str(customer.get("id", "")) or None,
        )

    def _search(self, query: str, *, timeout: float | None = None) -> list[dict[str, Any]]:
        customer_id = (self._settings.customer_id or "").replace("-", "")
        url = f"{self._settings.customers_url}/{customer_id}/googleAds:searchStream"

        headers = {
            "Authorization": f"Bearer {self._get_access_token()}",
            "developer-token": self._settings.developer_token or "",
            "Content-Type": "application/json",
        }
        if self._settings.login_customer_id:
            headers["login-customer-id"] = self._settings.login_customer_id.replace("-", "")

        payload = self._request_json(
            method="POST",
            url=url,
            headers=headers,
            json_body={"query": query},
            timeout=timeout,
        )

        batches = payload if isinstance(payload, list) else [payload]
        rows: list[dict[str, Any]] = []
        for batch in batches:
            if isinstance(batch, dict):
                rows.extend(batch.get("results") or [])
        return rows

    def _get_access_token(self) -> str:
        if self._access_token and time.monotonic() < self._access_token_expires_at:
            return self._access_token

        payload = self._request_json(
            method="POST",
            url=self._settings.token_url,
            form_body={
                "grant_type": "refresh_token",
                "client_id": self._settings.client_id or "",
                "client_secret": self._settings.client_secret or "",
                "refresh_token": self._settings.refresh_token or "",
            },
        )
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise ConnectorRequestError(f"{self.source}: OAuth token response had no access_token.")

        expires_in = _int(payload.get("expires_in")) or 3600
        self._access_token = str(token)
        self._access_token_expires_at = (
            time.monotonic() + max(0, expires_in - TOKEN_EXPIRY_MARGIN_SECONDS)
        )
        return self._access_token
