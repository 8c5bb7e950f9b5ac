"""Meta Ad Library search client."""

from __future__ import annotations

import logging
from typing import Any

import httpx
import pendulum

from adwarroom.config import MissingCredentialError
from adwarroom.ingest.models import Ad, AdFetchResult
from adwarroom.utils.dates import parse_timestamp, utc_now, whole_days_between

logger = logging.getLogger(__name__)

META_ENDPOINT = "https://graph.facebook.com/v19.0/ads_archive"
AD_FIELDS = (
    "id",
    "ad_creation_time",
    "ad_delivery_start_time",
    "ad_creative_bodies",
    "ad_creative_link_captions",
    "page_name",
    "ad_snapshot_url",
)
REACHED_COUNTRIES = "['IN']"
PAGE_SIZE = 25


class MetaAdsClient:
    def __init__(self, token: str | None, *, session: httpx.AsyncClient | None = None) -> None:
        if not token:
            raise MissingCredentialError("META_ACCESS_TOKEN not found in environment variables")
        self.token = token
        self.session = session or httpx.AsyncClient()

    async def close(self) -> None:
        await self.session.aclose()

    async def fetch_ads(self, competitor: str) -> AdFetchResult:
        if not competitor:
            raise ValueError("competitor name must not be empty")
        params = {
            "access_token": self.token,
            "search_terms": competitor,
            "ad_reached_countries": REACHED_COUNTRIES,
            "ad_active_status": "ACTIVE",
            "ad_type": "ALL",
            "fields": ",".join(AD_FIELDS),
            "limit": PAGE_SIZE,
        }
        try:
            response = await self.session.get(META_ENDPOINT, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            message = _graph_error_message(exc.response) or str(exc)
            logger.warning("Meta API error for %s: %s", competitor, message)
            return AdFetchResult(competitor=competitor, error=message)
        except (httpx.HTTPError, ValueError) as exc:
            message = str(exc) or exc.__class__.__name__
            logger.warning("Meta request failed for %s: %s", competitor, message)
            return AdFetchResult(competitor=competitor, error=message)

        items = data.get("data") if isinstance(data, dict) else None
        now = utc_now()
        ads = [build_ad(item, competitor, now) for item in items or []]
        logger.info("Fetched %s ads for %s", len(ads), competitor)
        return AdFetchResult(competitor=competitor, ads=ads)


def build_ad(raw: dict[str, Any], competitor: str, now: pendulum.DateTime) -> Ad:
    start = parse_timestamp(raw.get("ad_delivery_start_time") or raw.get("ad_creation_time"))
    days_running = whole_days_between(start, now) if start else None
    return Ad(
        id=raw.get("id"),
        competitor=competitor,
        ad_creation_time=raw.get("ad_creation_time"),
        ad_delivery_start_time=raw.get("ad_delivery_start_time"),
        ad_creative_bodies=list(raw.get("ad_creative_bodies") or []),
        ad_creative_link_captions=list(raw.get("ad_creative_link_captions") or []),
        page_name=raw.get("page_name"),
        ad_snapshot_url=raw.get("ad_snapshot_url"),
        days_running=days_running,
    )


def _graph_error_message(response: httpx.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if isinstance(error, dict):
        return error.get("message")
    return None
