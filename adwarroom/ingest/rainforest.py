"""Rainforest API product lookup."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from adwarroom.config import MissingCredentialError
from adwarroom.ingest.models import NO_PRICE, ProductFetchResult, ProductSummary

logger = logging.getLogger(__name__)

RAINFOREST_ENDPOINT = "https://api.rainforestapi.com/request"
AMAZON_DOMAIN = "amazon.in"
MAX_IMAGES = 3


class RainforestClient:
    def __init__(self, api_key: str | None, *, session: httpx.AsyncClient | None = None) -> None:
        if not api_key:
            raise MissingCredentialError("RAINFOREST_API_KEY not configured")
        self.api_key = api_key
        self.session = session or httpx.AsyncClient()

    async def close(self) -> None:
        await self.session.aclose()

    async def fetch_product(self, asin: str) -> ProductFetchResult:
        params = {
            "api_key": self.api_key,
            "type": "product",
            "asin": asin,
            "amazon_domain": AMAZON_DOMAIN,
        }
        try:
            response = await self.session.get(RAINFOREST_ENDPOINT, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            message = _request_info_message(exc.response) or str(exc)
            logger.warning("Rainforest error for %s: %s", asin, message)
            return ProductFetchResult(asin=asin, error=message)
        except (httpx.HTTPError, ValueError) as exc:
            message = str(exc) or exc.__class__.__name__
            logger.warning("Rainforest request failed for %s: %s", asin, message)
            return ProductFetchResult(asin=asin, error=message)

        product = data.get("product") if isinstance(data, dict) else None
        if not isinstance(product, dict):
            info = data.get("request_info") if isinstance(data, dict) else None
            message = (info or {}).get("message") or f"No product data returned for {asin}"
            logger.warning("Rainforest returned no product for %s: %s", asin, message)
            return ProductFetchResult(asin=asin, error=message)
        return ProductFetchResult(asin=asin, product=summarize_product(asin, product))


def summarize_product(asin: str, product: dict[str, Any]) -> ProductSummary:
    price = ((product.get("buybox_winner") or {}).get("price") or {}).get("raw")
    ranks = product.get("bestsellers_rank") or []
    return ProductSummary(
        asin=asin,
        title=product.get("title"),
        price=price or NO_PRICE,
        rating=product.get("rating"),
        total_reviews=product.get("ratings_total"),
        bsr=ranks[0] if ranks else None,
        images=[_image_url(image) for image in (product.get("images") or [])[:MAX_IMAGES]],
    )


def _image_url(image: Any) -> str:
    if isinstance(image, dict):
        return image.get("link", "")
    return str(image)


def _request_info_message(response: httpx.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    return (payload.get("request_info") or {}).get("message")
