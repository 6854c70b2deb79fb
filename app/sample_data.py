"""
app/sample_data.py

Fixture creatives and derived views served when the live Google Ads account
is unavailable.
"""

from __future__ import annotations

import random
from datetime import date, timedelta
from typing import Iterable, Sequence

from app.domain.ad_export import CreativeRecord, CreativeStatus
from app.domain.google_ads import CPATrendPoint, CPATrends, WeeklySummary
from app.parsing.builders import round_half_up

CPA_TREND_DAYS = 14
CPA_JITTER_LOW = 0.7
CPA_JITTER_SPAN = 0.6

SAMPLE_CREATIVES: tuple[CreativeRecord, ...] = (
    CreativeRecord(
        id="GAD-001",
        creator="Utility Ads-Register",
        game="Any",
        hook_type="Search",
        campaign_name="Utility Ads-Register",
        launch_date="2025-10-01",
        impressions=1_842_000,
        clicks=189_000,
        installs=32_907,
        spend=59_687,
        cpa=1.81,
        campaign_type="Search",
        bid_strategy="Maximize conversions",
        status=CreativeStatus.RUNNING,
    ),
    CreativeRecord(
        id="GAD-002",
        creator="YouTube General Audience",
        game="Any",
        hook_type="Video",
        campaign_name="YouTube General Audience",
        launch_date="2025-11-01",
        impressions=48_200_000,
        clicks=320_000,
        installs=11_478,
        spend=90_464,
        cpa=7.88,
        campaign_type="Demand Gen",
        bid_strategy="Target CPA",
        status=CreativeStatus.RUNNING,
    ),
    CreativeRecord(
        id="GAD-003",
        creator="Android Remarketing",
        game="Any",
        hook_type="Remarketing",
        campaign_name="Android Remarketing",
        launch_date="2026-01-15",
        impressions=2_100_000,
        clicks=12_000,
        installs=288,
        spend=1_500,
        cpa=5.19,
        campaign_type="Display",
        bid_strategy="Maximize conversions",
        status=CreativeStatus.RUNNING,
    ),
    CreativeRecord(
        id="GAD-004",
        creator="Remarketing Display",
        game="Any",
        hook_type="Remarketing",
        campaign_name="Remarketing Display",
        launch_date="2025-10-01",
        impressions=6_500_000,
        clicks=18_000,
        installs=73,
        spend=7_752,
        cpa=105.85,
        campaign_type="Display",
        bid_strategy="Target CPA",
        status=CreativeStatus.PAUSED,
    ),
    CreativeRecord(
        id="GAD-005",
        creator="iOS Remarketing",
        game="Any",
        hook_type="Remarketing",
        campaign_name="iOS Remarketing",
        launch_date="2026-02-01",
        impressions=15_000,
        clicks=80,
        installs=0,
        spend=32,
        cpa=0,
        campaign_type="Display",
        bid_strategy="Maximize conversions",
        status=CreativeStatus.PAUSED,
    ),
)


def generate_cpa_trends(
    creatives: Iterable[CreativeRecord],
    *,
    today: date | None = None,
    rng: random.Random | None = None,
    days: int = CPA_TREND_DAYS,
) -> CPATrends:
    """
    Synthesize a daily CPA series per creative ending today.

    Each day's value is the creative's CPA scaled by a factor in [0.7, 1.3).
    Pass a seeded ``rng`` for reproducible output.
    """

    end = today or date.today()
    generator = rng or random.Random()
    trends: CPATrends = {}
    for creative in creatives:
        points: list[CPATrendPoint] = []
        for offset in range(days - 1, -1, -1):
            factor = CPA_JITTER_LOW + generator.random() * CPA_JITTER_SPAN
            points.append(
                CPATrendPoint(
                    date=(end - timedelta(days=offset)).isoformat(),
                    cpa=round_half_up(creative.cpa * factor),
                )
            )
        trends[creative.id] = points
    return trends


def compute_weekly_summary(creatives: Sequence[CreativeRecord]) -> WeeklySummary:
    running = [item for item in creatives if item.status is CreativeStatus.RUNNING]
    total_spend = sum(item.spend for item in running)
    total_installs = sum(item.installs for item in running)
    avg_cpa = total_spend / total_installs if total_installs > 0 else 0
    return WeeklySummary(
        total_spend=total_spend,
        total_installs=total_installs,
        avg_cpa=round_half_up(avg_cpa),
        creatives_total=len(creatives),
        running=len(running),
        paused=sum(1 for item in creatives if item.status is CreativeStatus.PAUSED),
    )
