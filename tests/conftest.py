import json
from pathlib import Path

import pendulum
import pytest
from fastapi.testclient import TestClient

from adwarroom.api import main
from adwarroom.config import Settings

FIXTURES = Path(__file__).parent / "fixtures" / "http"


@pytest.fixture()
def load_fixture():
    def _load(path: str) -> dict:
        return json.loads((FIXTURES / path).read_text())

    return _load


@pytest.fixture()
def raw_ad():
    """Build a raw ads_archive record that started ``days_ago`` days back."""

    def _build(ad_id: str, days_ago: int | None, *, page_name: str = "Page", body: str | None = "Copy") -> dict:
        record = {
            "id": ad_id,
            "page_name": page_name,
            "ad_snapshot_url": f"https://www.facebook.com/ads/archive/render_ad/?id={ad_id}",
        }
        if days_ago is not None:
            start = pendulum.now("UTC").subtract(days=days_ago, hours=1)
            record["ad_delivery_start_time"] = start.format("YYYY-MM-DD[T]HH:mm:ssZZ")
        if body is not None:
            record["ad_creative_bodies"] = [body]
        return record

    return _build


@pytest.fixture()
def settings():
    return Settings(
        meta_access_token="test-token",
        rainforest_api_key="test-key",
        competitor_delay=0,
    )


@pytest.fixture()
def api_client(settings):
    main.app.dependency_overrides[main.get_settings] = lambda: settings
    with TestClient(main.app) as client:
        yield client
    main.app.dependency_overrides.clear()


@pytest.fixture()
def unconfigured_client():
    main.app.dependency_overrides[main.get_settings] = lambda: Settings(competitor_delay=0)
    with TestClient(main.app) as client:
        yield client
    main.app.dependency_overrides.clear()
