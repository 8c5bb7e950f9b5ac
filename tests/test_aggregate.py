import time

import pytest

from adwarroom.ingest import load_competitors
from adwarroom.ingest.models import Ad, AdFetchResult, BrandResult, CompetitorAds
from adwarroom.logic import aggregate


def make_ad(ad_id: str, days: int | None, competitor: str = "A") -> Ad:
    return Ad(id=ad_id, competitor=competitor, days_running=days)


class FakeAdSource:
    def __init__(self, events: list, failing: set[str] | None = None) -> None:
        self.events = events
        self.failing = failing or set()

    async def fetch_ads(self, competitor: str) -> AdFetchResult:
        self.events.append(("fetch", competitor, time.monotonic()))
        if competitor in self.failing:
            return AdFetchResult(competitor=competitor, error=f"{competitor} is throttled")
        return AdFetchResult(competitor=competitor, ads=[make_ad(f"{competitor}-1", 40, competitor)])


@pytest.mark.asyncio
async def test_collect_brand_ads_is_sequential_and_paced(monkeypatch):
    events: list = []

    async def fake_sleep(seconds):
        events.append(("sleep", seconds, None))

    monkeypatch.setattr(aggregate.asyncio, "sleep", fake_sleep)
    competitors = load_competitors().competitors_for("manMatters")
    result = await aggregate.collect_brand_ads(FakeAdSource(events), competitors)

    fetches = [name for kind, name, _ in events if kind == "fetch"]
    assert fetches == list(competitors)
    assert len(fetches) == 7
    kinds = [kind for kind, _, _ in events]
    assert kinds == ["fetch"] + ["sleep", "fetch"] * 6
    assert all(value >= 0.5 for kind, value, _ in events if kind == "sleep")
    assert result.total_ads == 7


@pytest.mark.asyncio
async def test_collect_brand_ads_waits_between_calls():
    events: list = []
    await aggregate.collect_brand_ads(FakeAdSource(events), ["A", "B", "C"], delay=0.05)
    stamps = [stamp for _, _, stamp in events]
    assert all(later - earlier >= 0.045 for earlier, later in zip(stamps, stamps[1:]))


@pytest.mark.asyncio
async def test_collect_brand_ads_keeps_going_after_failure():
    events: list = []
    source = FakeAdSource(events, failing={"B"})
    result = await aggregate.collect_brand_ads(source, ["A", "B", "C"], delay=0)
    assert list(result.results) == ["A", "C"]
    assert result.errors == {"B": "B is throttled"}
    assert result.total_ads == 2


def test_average_days_running():
    ads = [make_ad("1", 10), make_ad("2", None), make_ad("3", 15)]
    assert aggregate.average_days_running(ads) == 13
    assert aggregate.average_days_running([make_ad("1", 1), make_ad("2", 2)]) == 2
    assert aggregate.average_days_running([make_ad("1", None)]) == 0
    assert aggregate.average_days_running([]) == 0


def test_rank_by_days_running_puts_unknown_last():
    ads = [make_ad("1", None), make_ad("2", 3), make_ad("3", 90)]
    ranked = aggregate.rank_by_days_running(ads)
    assert [ad.id for ad in ranked] == ["3", "2", "1"]


def test_top_long_running():
    ads = [make_ad(str(days), days) for days in (5, 31, 120, 45, 60, 33, 200, None, 30)]
    top = aggregate.top_long_running(ads)
    assert [ad.days_running for ad in top] == [200, 120, 60, 45, 33]
    assert all(ad.is_long_running for ad in top)
    assert aggregate.top_long_running([make_ad("1", 2)]) == []


def test_build_dashboard_omits_failed_competitors(caplog):
    brand_result = BrandResult(
        results={
            "A": CompetitorAds(ads=[make_ad("a1", 50, "A"), make_ad("a2", None, "A")]),
            "C": CompetitorAds(ads=[make_ad("c1", 10, "C")]),
        },
        errors={"B": "rate limited"},
    )
    board = aggregate.build_dashboard("manMatters", ["A", "B", "C"], brand_result)
    assert board.summary.total_ads == 3
    assert board.summary.competitors_tracked == 3
    assert board.summary.long_running_ads == 1
    assert board.summary.avg_days_running == 30
    assert [ad.id for ad in board.top_long_running] == ["a1"]
    assert [ad.id for ad in board.all_ads] == ["a1", "a2", "c1"]
    assert "rate limited" in caplog.text
