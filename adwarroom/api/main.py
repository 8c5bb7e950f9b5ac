"""FastAPI application exposing competitor ad and product lookups."""

from __future__ import annotations

import logging
from dataclasses import asdict
from functools import lru_cache
from typing import Any, AsyncIterator

import httpx
import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from pydantic import BaseModel

from adwarroom.config import MissingCredentialError, Settings, configure_logging
from adwarroom.ingest import CompetitorRegistry, UnknownBrandError, get_registry
from adwarroom.ingest.meta_ads import MetaAdsClient
from adwarroom.ingest.rainforest import RainforestClient
from adwarroom.logic.aggregate import build_dashboard, collect_brand_ads
from adwarroom.utils.dates import isoformat_utc

logger = logging.getLogger(__name__)

app = FastAPI(title="Ad War Room API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class ApisConfigured(BaseModel):
    meta: bool
    rainforest: bool


class HealthResponse(BaseModel):
    status: str
    message: str
    timestamp: str
    apis_configured: ApisConfigured


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


async def get_session() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient() as session:
        yield session


@app.exception_handler(MissingCredentialError)
async def missing_credential(request: Request, exc: MissingCredentialError) -> JSONResponse:
    logger.error("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse({"status": "ERROR", "error": str(exc)}, status_code=500)


def _invalid_brand(exc: UnknownBrandError, message: str) -> JSONResponse:
    return JSONResponse(
        {"error": message, "valid_brands": list(exc.valid_brands)},
        status_code=400,
    )


def _brand_hint(brands: tuple[str, ...]) -> str:
    return "Invalid brand. Use " + " or ".join(f"?brand={brand}" for brand in brands)


@app.get("/test", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    return HealthResponse(
        status="SUCCESS",
        message="Ad War Room Backend is running",
        timestamp=isoformat_utc(),
        apis_configured=ApisConfigured(
            meta=settings.meta_configured,
            rainforest=settings.rainforest_configured,
        ),
    )


@app.get("/meta")
async def competitor_ads(
    competitor: str | None = None,
    settings: Settings = Depends(get_settings),
    session: httpx.AsyncClient = Depends(get_session),
) -> Any:
    competitor = (competitor or "").strip()
    if not competitor:
        return JSONResponse(
            {"error": "Missing competitor parameter. Use ?competitor=BrandName"},
            status_code=400,
        )
    client = MetaAdsClient(settings.require_meta_token(), session=session)
    result = await client.fetch_ads(competitor)
    if not result.ok:
        return JSONResponse(
            {"status": "ERROR", "competitor": competitor, "error": result.error},
            status_code=500,
        )
    return {
        "status": "SUCCESS",
        "competitor": competitor,
        "total_ads": len(result.ads),
        "ads": [ad.to_dict() for ad in result.ads],
    }


@app.get("/meta/brand")
async def brand_ads(
    brand: str | None = None,
    settings: Settings = Depends(get_settings),
    registry: CompetitorRegistry = Depends(get_registry),
    session: httpx.AsyncClient = Depends(get_session),
) -> Any:
    try:
        competitors = registry.competitors_for(brand)
    except UnknownBrandError as exc:
        return _invalid_brand(exc, _brand_hint(exc.valid_brands))
    client = MetaAdsClient(settings.require_meta_token(), session=session)
    brand_result = await collect_brand_ads(client, competitors, delay=settings.competitor_delay)
    payload: dict[str, Any] = {
        "status": "SUCCESS",
        "brand": brand,
        "competitors_tracked": len(competitors),
        "total_ads_fetched": brand_result.total_ads,
        "results": {name: entry.to_dict() for name, entry in brand_result.results.items()},
    }
    if brand_result.errors:
        payload["errors"] = dict(brand_result.errors)
    return payload


@app.get("/amazon")
async def amazon_product(
    asin: str | None = None,
    settings: Settings = Depends(get_settings),
    session: httpx.AsyncClient = Depends(get_session),
) -> Any:
    asin = (asin or "").strip()
    if not asin:
        return JSONResponse(
            {"error": "Missing asin parameter. Use ?asin=ASIN_CODE"},
            status_code=400,
        )
    client = RainforestClient(settings.require_rainforest_key(), session=session)
    result = await client.fetch_product(asin)
    if not result.ok or result.product is None:
        return JSONResponse(
            {"status": "ERROR", "asin": asin, "error": result.error},
            status_code=500,
        )
    return {"status": "SUCCESS", **asdict(result.product)}


@app.get("/dashboard")
async def dashboard(
    brand: str | None = None,
    settings: Settings = Depends(get_settings),
    registry: CompetitorRegistry = Depends(get_registry),
    session: httpx.AsyncClient = Depends(get_session),
) -> Any:
    try:
        competitors = registry.competitors_for(brand)
    except UnknownBrandError as exc:
        return _invalid_brand(exc, "Invalid brand")
    client = MetaAdsClient(settings.require_meta_token(), session=session)
    brand_result = await collect_brand_ads(client, competitors, delay=settings.competitor_delay)
    board = build_dashboard(brand, competitors, brand_result)
    return {
        "status": "SUCCESS",
        "brand": board.brand,
        "summary": asdict(board.summary),
        "top_long_running": [ad.to_dict() for ad in board.top_long_running],
        "all_ads": [ad.to_dict() for ad in board.all_ads],
    }


def run() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Ad War Room backend running on port %s", settings.port)
    for route in app.routes:
        if isinstance(route, APIRoute):
            logger.info("  %s %s", ",".join(sorted(route.methods)), route.path)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
