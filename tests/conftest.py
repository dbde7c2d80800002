"""
Pytest configuration and shared fixtures.

Provider calls never leave the process: a FakePlacesAPI is mounted as an
httpx.MockTransport on the PlacesService under test.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from maps_api.core.config import settings
from maps_api.main import create_app
from maps_api.repos.cache_repo import InMemoryCache
from maps_api.services.Places_service import PlacesService

TEST_API_KEY = "AIzaTestKey1234567890"


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakePlacesAPI:
    """Scripted stand-in for maps.googleapis.com, recording every request."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, object] = {}

    def respond(self, path: str, payload=None, status_code: int = 200, exc: Exception = None):
        self.routes[path] = (payload, status_code, exc)

    def calls_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(path)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for path, (payload, status_code, exc) in self.routes.items():
            if request.url.path.endswith(path):
                if exc is not None:
                    raise exc
                return httpx.Response(status_code, json=payload)
        return httpx.Response(404, json={"error_message": "no fake route"})


def make_place(index: int, **overrides) -> dict:
    place = {
        "place_id": f"place-{index}",
        "name": f"Cafe {index}",
        "formatted_address": f"{index} Main St, New York, NY",
        "geometry": {"location": {"lat": round(40.71 + index / 100, 4), "lng": round(-74.0 - index / 100, 4)}},
        "rating": 4.5,
        "opening_hours": {"open_now": True},
    }
    place.update(overrides)
    return place


@pytest.fixture
def fake_api():
    return FakePlacesAPI()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return InMemoryCache(ttl=3600, clock=clock)


@pytest.fixture
def places_service(fake_api, cache):
    return PlacesService(
        api_key=TEST_API_KEY,
        cache=cache,
        transport=httpx.MockTransport(fake_api.handler),
    )


@pytest.fixture
def dev_mode(monkeypatch):
    monkeypatch.setattr(settings, "ENVIRONMENT", "development")


@pytest.fixture
def client(places_service, dev_mode):
    app = create_app(places_service=places_service)
    return TestClient(app)
