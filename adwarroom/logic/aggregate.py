"""Brand-level ad aggregation and dashboard statistics."""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Iterable, Protocol, Sequence

from adwarroom.config import COMPETITOR_DELAY_SECONDS
from adwarroom.ingest.models import Ad, AdFetchResult, BrandResult, CompetitorAds, Dashboard, DashboardSummary

logger = logging.getLogger(__name__)

TOP_LIMIT = 5


class AdSource(Protocol):
    async def fetch_ads(self, competitor: str) -> AdFetchResult: ...


async def collect_brand_ads(
    client: AdSource,
    competitors: Sequence[str],
    *,
    delay: float = COMPETITOR_DELAY_SECONDS,
) -> BrandResult:
    """Fetch ads for each competitor one at a time.

    Calls are paced by ``delay`` seconds to stay under the upstream rate limit,
    so they must not be gathered concurrently. A failed competitor is recorded
    in ``errors`` and the loop carries on.
    """
    brand_result = BrandResult()
    for idx, competitor in enumerate(competitors):
        if idx:
            await asyncio.sleep(delay)
        result = await client.fetch_ads(competitor)
        if result.ok:
            brand_result.results[competitor] = CompetitorAds(ads=result.ads)
        else:
            brand_result.errors[competitor] = result.error or "Unknown error"
    return brand_result


def average_days_running(ads: Iterable[Ad]) -> int:
    known = [ad.days_running for ad in ads if ad.days_running is not None]
    if not known:
        return 0
    # Round half up.
    return math.floor(sum(known) / len(known) + 0.5)


def rank_by_days_running(ads: Iterable[Ad], limit: int = TOP_LIMIT) -> list[Ad]:
    ranked = sorted(
        ads,
        key=lambda ad: (ad.days_running is not None, ad.days_running or 0),
        reverse=True,
    )
    return ranked[:limit]


def top_long_running(ads: Iterable[Ad], limit: int = TOP_LIMIT) -> list[Ad]:
    return rank_by_days_running((ad for ad in ads if ad.is_long_running), limit)


def build_dashboard(brand: str, competitors: Sequence[str], brand_result: BrandResult) -> Dashboard:
    for competitor, error in brand_result.errors.items():
        logger.warning("Failed to fetch ads for %s: %s", competitor, error)
    all_ads = brand_result.all_ads()
    summary = DashboardSummary(
        total_ads=len(all_ads),
        competitors_tracked=len(competitors),
        long_running_ads=sum(1 for ad in all_ads if ad.is_long_running),
        avg_days_running=average_days_running(all_ads),
    )
    return Dashboard(
        brand=brand,
        summary=summary,
        top_long_running=top_long_running(all_ads),
        all_ads=all_ads,
    )
