"""Ingestion data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

LONG_RUNNING_DAYS = 30
NO_COPY = "No copy available"
NO_PRICE = "N/A"


@dataclass(slots=True)
class Ad:
    id: str | None
    competitor: str
    ad_creation_time: str | None = None
    ad_delivery_start_time: str | None = None
    ad_creative_bodies: list[str] = field(default_factory=list)
    ad_creative_link_captions: list[str] = field(default_factory=list)
    page_name: str | None = None
    ad_snapshot_url: str | None = None
    days_running: int | None = None

    @property
    def is_long_running(self) -> bool:
        return self.days_running is not None and self.days_running > LONG_RUNNING_DAYS

    @property
    def ad_copy(self) -> str:
        if self.ad_creative_bodies and self.ad_creative_bodies[0]:
            return self.ad_creative_bodies[0]
        return NO_COPY

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "ad_creation_time": self.ad_creation_time,
            "ad_delivery_start_time": self.ad_delivery_start_time,
            "ad_creative_bodies": list(self.ad_creative_bodies),
            "ad_creative_link_captions": list(self.ad_creative_link_captions),
            "page_name": self.page_name,
            "ad_snapshot_url": self.ad_snapshot_url,
            "competitor": self.competitor,
            "days_running": self.days_running,
            "is_long_running": self.is_long_running,
            "ad_copy": self.ad_copy,
        }


@dataclass(slots=True)
class AdFetchResult:
    competitor: str
    ads: list[Ad] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class CompetitorAds:
    ads: list[Ad]

    @property
    def total_ads(self) -> int:
        return len(self.ads)

    @property
    def long_running_ads(self) -> int:
        return sum(1 for ad in self.ads if ad.is_long_running)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_ads": self.total_ads,
            "long_running_ads": self.long_running_ads,
            "ads": [ad.to_dict() for ad in self.ads],
        }


@dataclass(slots=True)
class BrandResult:
    results: dict[str, CompetitorAds] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def total_ads(self) -> int:
        return sum(entry.total_ads for entry in self.results.values())

    def all_ads(self) -> list[Ad]:
        return [ad for entry in self.results.values() for ad in entry.ads]


@dataclass(slots=True)
class DashboardSummary:
    total_ads: int
    competitors_tracked: int
    long_running_ads: int
    avg_days_running: int


@dataclass(slots=True)
class Dashboard:
    brand: str
    summary: DashboardSummary
    top_long_running: list[Ad]
    all_ads: list[Ad]


@dataclass(slots=True)
class ProductSummary:
    asin: str
    title: str | None
    price: str
    rating: float | None
    total_reviews: int | None
    bsr: dict[str, Any] | None
    images: list[str]


@dataclass(slots=True)
class ProductFetchResult:
    asin: str
    product: ProductSummary | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
