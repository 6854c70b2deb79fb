"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class AdExportSettings:
    """
    Runtime settings for ad-export parsing and result persistence.
    """

    header_scan_lines: int = 10
    utf16_probe_bytes: int = 10
    creative_id_prefix: str = "GAD"
    storage_key: str = "medal_google_ads_data"
    persist_results: bool = True


@dataclass(frozen=True)
class ExternalHTTPSettings:
    """
    Shared HTTP behavior settings for external connectors.
    """

    timeout_seconds: float = 5.0
    max_retries: int = 2
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0
    rate_limit_per_second: float = 5.0


GOOGLE_ADS_REQUIRED_ENV_VARS: tuple[str, ...] = (
    "GOOGLE_ADS_DEVELOPER_TOKEN",
    "GOOGLE_ADS_CLIENT_ID",
    "GOOGLE_ADS_CLIENT_SECRET",
    "GOOGLE_ADS_REFRESH_TOKEN",
    "GOOGLE_ADS_CUSTOMER_ID",
)


@dataclass(frozen=True)
class GoogleAdsSettings:
    """
    Google Ads REST API credentials and endpoints.
    """

    developer_token: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    refresh_token: str | None = None
    customer_id: str | None = None
    login_customer_id: str | None = None
    api_version: str = "v18"
    base_url: str = "https://googleads.googleapis.com"
    token_url: str = "https://oauth2.googleapis.com/token"
    status_timeout_seconds: float = 3.0

    @property
    def customers_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.api_version}/customers"

    def missing_credentials(self) -> list[str]:
        """
        Return required env var names that are unset or still template values.
        """

        values = {
            "GOOGLE_ADS_DEVELOPER_TOKEN": self.developer_token,
            "GOOGLE_ADS_CLIENT_ID": self.client_id,
            "GOOGLE_ADS_CLIENT_SECRET": self.client_secret,
            "GOOGLE_ADS_REFRESH_TOKEN": self.refresh_token,
            "GOOGLE_ADS_CUSTOMER_ID": self.customer_id,
        }
        return [
            name
            for name in GOOGLE_ADS_REQUIRED_ENV_VARS
            if not values[name] or values[name].startswith("your-")
        ]


@lru_cache(maxsize=1)
def get_ad_export_settings() -> AdExportSettings:
    """
    Return cached ad-export settings from environment variables.
    """

    return AdExportSettings(
        header_scan_lines=max(1, _get_int_env("AD_EXPORT_HEADER_SCAN_LINES", 10)),
        utf16_probe_bytes=max(2, _get_int_env("AD_EXPORT_UTF16_PROBE_BYTES", 10)),
        creative_id_prefix=_get_str_env("AD_EXPORT_ID_PREFIX", "GAD"),
        storage_key=_get_str_env("AD_EXPORT_STORAGE_KEY", "medal_google_ads_data"),
        persist_results=_get_bool_env("AD_EXPORT_PERSIST_RESULTS", True),
    )


@lru_cache(maxsize=1)
def get_external_http_settings() -> ExternalHTTPSettings:
    """
    Return shared connector HTTP settings from environment variables.
    """

    return ExternalHTTPSettings(
        timeout_seconds=max(1.0, _get_float_env("EXTERNAL_HTTP_TIMEOUT_SECONDS", 5.0)),
        max_retries=max(0, _get_int_env("EXTERNAL_HTTP_MAX_RETRIES", 2)),
        backoff_initial_seconds=max(0.1, _get_float_env("EXTERNAL_HTTP_BACKOFF_INITIAL_SECONDS", 0.5)),
        backoff_multiplier=max(1.0, _get_float_env("EXTERNAL_HTTP_BACKOFF_MULTIPLIER", 2.0)),
        rate_limit_per_second=max(0.1, _get_float_env("EXTERNAL_HTTP_RATE_LIMIT_PER_SECOND", 5.0)),
    )


@lru_cache(maxsize=1)
def get_google_ads_settings() -> GoogleAdsSettings:
    """
    Return Google Ads API settings from environment variables.
    """

    return GoogleAdsSettings(
        developer_token=_get_optional_str_env("GOOGLE_ADS_DEVELOPER_TOKEN"),
        client_id=_get_optional_str_env("GOOGLE_ADS_CLIENT_ID"),
        client_secret=_get_optional_str_env("GOOGLE_ADS_CLIENT_SECRET"),
        refresh_token=_get_optional_str_env("GOOGLE_ADS_REFRESH_TOKEN"),
        customer_id=_get_optional_str_env("GOOGLE_ADS_CUSTOMER_ID"),
        login_customer_id=_get_optional_str_env("GOOGLE_ADS_LOGIN_CUSTOMER_ID"),
        api_version=_get_str_env("GOOGLE_ADS_API_VERSION", "v18"),
        base_url=_get_str_env("GOOGLE_ADS_BASE_URL", "https://googleads.googleapis.com"),
        token_url=_get_str_env("GOOGLE_ADS_TOKEN_URL", "https://oauth2.googleapis.com/token"),
        status_timeout_seconds=max(0.5, _get_float_env("GOOGLE_ADS_STATUS_TIMEOUT_SECONDS", 3.0)),
    )
