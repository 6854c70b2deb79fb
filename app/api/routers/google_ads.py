"""
app/api/routers/google_ads.py

Live Google Ads HTTP endpoints with fixture fallback.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.schemas.ad_imports import creative_response
from app.schemas.google_ads import (
    CampaignsResponse,
    CampaignSummaryResponse,
    ConnectionStatusResponse,
    CPATrendPointResponse,
    CPATrendsResponse,
    CreativesResponse,
    WeeklySummaryResponse,
)
from app.services.live_ads_service import LiveAdsService, get_live_ads_service

router = APIRouter(prefix="/api/google-ads", tags=["google-ads"])

_DATE_DESCRIPTION = "Inclusive date bound (YYYY-MM-DD)"


def _bad_range(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("/status", response_model=ConnectionStatusResponse, response_model_exclude_none=True)
def get_status(
    live_service: LiveAdsService = Depends(get_live_ads_service),
) -> ConnectionStatusResponse:
    """
    Report whether credentials are configured and the account is reachable.
    """

    result = live_service.status()
    return ConnectionStatusResponse(
        connected=result.connected,
        configured=result.configured,
        message=result.message,
        account_name=result.account_name,
        customer_id=result.customer_id,
    )


@router.get("/creatives", response_model=CreativesResponse)
def get_creatives(
    date_from: str | None = Query(default=None, alias="from", description=_DATE_DESCRIPTION),
    date_to: str | None = Query(default=None, alias="to", description=_DATE_DESCRIPTION),
    live_service: LiveAdsService = Depends(get_live_ads_service),
) -> CreativesResponse:
    try:
        result = live_service.creatives(date_from, date_to)
    except ValueError as exc:
        raise _bad_range(exc) from exc

    summary = live_service.weekly_summary(result.data)
    return CreativesResponse(
        creatives=[creative_response(item) for item in result.data],
        summary=WeeklySummaryResponse.model_validate(summary.to_dict()),
        is_live=result.is_live,
        message=result.message,
    )


@router.get("/cpa-trends", response_model=CPATrendsResponse, response_model_exclude_none=True)
def get_cpa_trends(
    date_from: str | None = Query(default=None, alias="from", description=_DATE_DESCRIPTION),
    date_to: str | None = Query(default=None, alias="to", description=_DATE_DESCRIPTION),
    live_service: LiveAdsService = Depends(get_live_ads_service),
) -> CPATrendsResponse:
    try:
        result = live_service.cpa_trends(date_from, date_to)
    except ValueError as exc:
        raise _bad_range(exc) from exc

    return CPATrendsResponse(
        trends={
            ad_id: [CPATrendPointResponse.model_validate(point.to_dict()) for point in points]
            for ad_id, points in result.data.items()
        },
        is_live=result.is_live,
        message=result.message,
    )


@router.get("/campaigns", response_model=CampaignsResponse)
def get_campaigns(
    date_from: str | None = Query(default=None, alias="from", description=_DATE_DESCRIPTION),
    date_to: str | None = Query(default=None, alias="to", description=_DATE_DESCRIPTION),
    live_service: LiveAdsService = Depends(get_live_ads_service),
) -> CampaignsResponse:
    try:
        result = live_service.campaigns(date_from, date_to)
    except ValueError as exc:
        raise _bad_range(exc) from exc

    return CampaignsResponse(
        campaigns=[CampaignSummaryResponse.model_validate(item.to_dict()) for item in result.data],
        is_live=result.is_live,
        message=result.message,
    )
