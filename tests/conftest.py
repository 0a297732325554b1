import json
import os
from pathlib import Path

import httpx
import pytest

os.environ.setdefault("GOOGLE_API_KEY", "test-key")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/0")

from address_weather.services.cache import MemoryCache  # noqa: E402
from address_weather.services.google import (  # noqa: E402
    CURRENT_WEATHER,
    DAILY_FORECAST,
    HOURLY_FORECAST,
    GeocodeFetcher,
    HttpTransport,
    WeatherFetcher,
)
from address_weather.services.weather_by_address import WeatherByAddress  # noqa: E402

FIXTURES = Path(__file__).parent / "fixtures"


def load_fixture(name):
    return json.loads((FIXTURES / f"{name}.json").read_text(encoding="utf-8"))


class FakeGoogle:
    """httpx.MockTransport routing by path; records every request it serves."""

    GEOCODE = "/maps/api/geocode/json"
    CURRENT = "/v1/currentConditions:lookup"
    HOURLY = "/v1/forecast/hours:lookup"
    DAILY = "/v1/forecast/days:lookup"

    def __init__(self):
        self.routes = {}
        self.requests = []

    def reply(self, path, body, status_code=200):
        self.routes[path] = (status_code, body)
        return self

    def calls_to(self, path):
        return [r for r in self.requests if r.url.path == path]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status_code, body = self.routes.get(request.url.path, (404, {"error": "no route"}))
        if isinstance(body, Exception):
            raise body
        if isinstance(body, (bytes, str)):
            return httpx.Response(status_code, content=body)
        return httpx.Response(status_code, json=body)

    def transport(self) -> HttpTransport:
        return HttpTransport(transport=httpx.MockTransport(self._handle))


@pytest.fixture()
def cache():
    return MemoryCache()


@pytest.fixture()
def google():
    return (
        FakeGoogle()
        .reply(FakeGoogle.GEOCODE, load_fixture("geocode_sao_paulo"))
        .reply(FakeGoogle.CURRENT, load_fixture("current_weather"))
        .reply(FakeGoogle.HOURLY, load_fixture("hourly_forecast"))
        .reply(FakeGoogle.DAILY, load_fixture("daily_forecast"))
    )


@pytest.fixture()
def service(google, cache):
    transport = google.transport()
    return WeatherByAddress(
        geocode_fetcher=GeocodeFetcher("test-key", cache, transport),
        current_weather_fetcher=WeatherFetcher(CURRENT_WEATHER, "test-key", cache, transport),
        hourly_forecast_fetcher=WeatherFetcher(HOURLY_FORECAST, "test-key", cache, transport),
        daily_forecast_fetcher=WeatherFetcher(DAILY_FORECAST, "test-key", cache, transport),
    )


@pytest.fixture()
def payload():
    return load_fixture
