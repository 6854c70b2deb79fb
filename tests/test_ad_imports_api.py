"""
tests/test_ad_imports_api.py

HTTP contract tests for the ad-import and Google Ads endpoints.

The database is an in-memory SQLite engine shared through StaticPool; the
live service runs without credentials so every Google Ads call is served
from fixtures.
"""

from __future__ import annotations

import random
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import db.models  # noqa: F401  registers ORM models on Base.metadata
from app.config import GoogleAdsSettings
from app.main import create_app
from app.services.ad_export_service import AdExportParseService, get_ad_export_service
from app.services.ad_import_store import AdImportStore, get_ad_import_store
from app.services.live_ads_service import LiveAdsService, get_live_ads_service
from db.base import Base
from db.session import get_db

REFERENCE_CSV = (
    "Campaign,Impressions,Clicks,Cost,Conversions\n"
    "Fortnite - Gameplay Montage,10000,500,250.00,50\n"
    "Total: All campaigns,10000,500,250.00,50\n"
)


@pytest.fixture()
def client() -> Iterator[TestClient]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    def _get_test_db() -> Iterator[Session]:
        db = factory()
        try:
            yield db
        finally:
            db.close()

    application = create_app()
    application.dependency_overrides[get_db] = _get_test_db
    application.dependency_overrides[get_ad_export_service] = lambda: AdExportParseService()
    application.dependency_overrides[get_ad_import_store] = lambda: AdImportStore(storage_key="test-slot")
    application.dependency_overrides[get_live_ads_service] = lambda: LiveAdsService(
        settings=GoogleAdsSettings(),
        connector=None,
        rng=random.Random(7),
    )

    yield TestClient(application)
    engine.dispose()


class TestAdImportUpload:
    def test_upload_returns_parse_result(self, client: TestClient) -> None:
        response = client.post(
            "/api/ad-imports",
            files={"file": ("report.csv", REFERENCE_CSV.encode("utf-16"), "text/csv")},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["type"] == "creatives"
        assert body["stored"] is True
        assert body["columns"] == ["campaign", "impressions", "clicks", "cost", "conversions"]
        assert len(body["data"]) == 1
        record = body["data"][0]
        assert record["id"] == "GAD-001"
        assert record["game"] == "Fortnite"
        assert record["hookType"] == "Campaign"
        assert record["spend"] == 250
        assert record["cpa"] == 5

    def test_unsupported_extension_is_400(self, client: TestClient) -> None:
        response = client.post(
            "/api/ad-imports",
            files={"file": ("report.pdf", b"%PDF-1.4", "application/pdf")},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Unsupported file format: .pdf"

    def test_empty_file_is_400(self, client: TestClient) -> None:
        response = client.post(
            "/api/ad-imports",
            files={"file": ("report.csv", b"Campaign,Impressions\n", "text/csv")},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "File appears to be empty or has no data rows"

    def test_non_workbook_bytes_are_400(self, client: TestClient) -> None:
        response = client.post(
            "/api/ad-imports",
            files={"file": ("report.xlsx", b"not a workbook", "application/octet-stream")},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Could not read file: not a valid Excel workbook"

    def test_carriage_return_only_csv(self, client: TestClient) -> None:
        response = client.post(
            "/api/ad-imports",
            files={"file": ("mac.csv", REFERENCE_CSV.replace("\n", "\r").encode(), "text/csv")},
        )
        assert response.status_code == 200
        assert [record["id"] for record in response.json()["data"]] == ["GAD-001"]

    def test_no_valid_rows_is_400(self, client: TestClient) -> None:
        response = client.post(
            "/api/ad-imports",
            files={"file": ("report.csv", b"Campaign,Impressions\nTotal,1\n", "text/csv")},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "No valid ad data found in file."


class TestAdImportText:
    def test_time_series_omits_absent_fields(self, client: TestClient) -> None:
        response = client.post(
            "/api/ad-imports/text",
            json={"text": "Date,Impressions\n2026-02-02,20\n2026-01-05,10\n"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["type"] == "timeseries"
        assert body["data"] == [
            {"date": "2026-01-05", "impressions": 10},
            {"date": "2026-02-02", "impressions": 20},
        ]

    def test_blank_text_is_rejected(self, client: TestClient) -> None:
        response = client.post("/api/ad-imports/text", json={"text": ""})
        assert response.status_code == 422


class TestLatestImport:
    def test_latest_round_trip_and_clear(self, client: TestClient) -> None:
        assert client.get("/api/ad-imports/latest").status_code == 404

        uploaded = client.post("/api/ad-imports/text", json={"text": REFERENCE_CSV}).json()
        latest = client.get("/api/ad-imports/latest")
        assert latest.status_code == 200
        assert latest.json() == uploaded

        assert client.delete("/api/ad-imports/latest").status_code == 204
        assert client.get("/api/ad-imports/latest").status_code == 404

    def test_failed_upload_keeps_previous_result(self, client: TestClient) -> None:
        client.post("/api/ad-imports/text", json={"text": REFERENCE_CSV})
        client.post("/api/ad-imports/text", json={"text": "Campaign,Impressions\n"})

        latest = client.get("/api/ad-imports/latest").json()
        assert latest["data"][0]["creator"] == "Fortnite - Gameplay Montage"


class TestGoogleAdsEndpoints:
    def test_status_reports_missing_env_vars(self, client: TestClient) -> None:
        body = client.get("/api/google-ads/status").json()
        assert body["connected"] is False
        assert body["configured"] is False
        assert body["message"].startswith("Missing env vars: GOOGLE_ADS_DEVELOPER_TOKEN")

    def test_creatives_fall_back_to_fixtures(self, client: TestClient) -> None:
        response = client.get("/api/google-ads/creatives", params={"from": "2026-01-01", "to": "2026-01-31"})

        assert response.status_code == 200
        body = response.json()
        assert body["isLive"] is False
        assert [item["id"] for item in body["creatives"]] == [
            "GAD-001",
            "GAD-002",
            "GAD-003",
            "GAD-004",
            "GAD-005",
        ]
        assert body["summary"] == {
            "totalSpend": 151651,
            "totalInstalls": 44673,
            "avgCpa": 3.39,
            "creativesTotal": 5,
            "running": 3,
            "paused": 2,
        }

    def test_cpa_trends_fall_back_to_generated_series(self, client: TestClient) -> None:
        body = client.get("/api/google-ads/cpa-trends", params={"from": "2026-01-01", "to": "2026-01-31"}).json()

        assert body["isLive"] is False
        assert set(body["trends"]) == {"GAD-001", "GAD-002", "GAD-003", "GAD-004", "GAD-005"}
        assert all(len(points) == 14 for points in body["trends"].values())
        assert set(body["trends"]["GAD-001"][0]) == {"date", "cpa"}

    def test_campaigns_fall_back_to_fixtures(self, client: TestClient) -> None:
        body = client.get("/api/google-ads/campaigns", params={"from": "2026-01-01", "to": "2026-01-31"}).json()
        assert body["isLive"] is False
        assert body["campaigns"][0]["name"] == "Utility Ads-Register"
        assert body["campaigns"][0]["videoViews"] == 0

    @pytest.mark.parametrize(
        "params",
        [{}, {"from": "2026-01-01"}, {"from": "2026-01-01", "to": "31/01/2026"}, {"from": "x", "to": "2026-01-31"}],
    )
    def test_missing_or_invalid_dates_are_400(self, client: TestClient, params: dict[str, str]) -> None:
        for path in ("/api/google-ads/creatives", "/api/google-ads/cpa-trends", "/api/google-ads/campaigns"):
            assert client.get(path, params=params).status_code == 400


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
