"""Cache-aware adapters for the Google Geocoding and Weather APIs.

Each adapter returns a ``FetchResponse`` holding the raw JSON payload and the
``Source`` it came from. Failures are raised as ``FetchError`` carrying a
``FetchErrorKind``; callers decide how to translate them.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Protocol

import httpx

from address_weather.models import Source

logger = logging.getLogger(__name__)

GEOCODE_TTL_SECONDS = 7 * 24 * 60 * 60
WEATHER_TTL_SECONDS = 30 * 60


class FetchErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    TRANSPORT = "transport"


class FetchError(Exception):
    def __init__(self, message: str, kind: FetchErrorKind):
        super().__init__(message)
        self.kind = kind


class Cache(Protocol):
    def read(self, key: str) -> Optional[Any]: ...

    def write(self, key: str, payload: Any, ttl_seconds: int) -> None: ...


@dataclass(frozen=True)
class FetchResponse:
    data: Dict[str, Any]
    source: Source


class HttpTransport:
    def __init__(
        self,
        timeout_seconds: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout_seconds
        self._transport = transport

    async def get(self, url: str, params: Dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await client.get(url, params=params)


async def _get_json(transport: HttpTransport, url: str, params: Dict[str, Any], label: str) -> Dict[str, Any]:
    """Issue the GET and parse the body; every failure is a TRANSPORT error."""
    try:
        r = await transport.get(url, params)
    except httpx.HTTPError as exc:
        logger.warning("%s request failed: %s", label, exc)
        raise FetchError(f"Failed to fetch {label} data", FetchErrorKind.TRANSPORT) from exc

    if not r.is_success:
        logger.warning("%s request returned HTTP %s", label, r.status_code)
        raise FetchError(f"Failed to fetch {label} data", FetchErrorKind.TRANSPORT)

    try:
        data = r.json()
    except ValueError as exc:
        raise FetchError(f"Malformed {label} response", FetchErrorKind.TRANSPORT) from exc
    if not isinstance(data, dict):
        raise FetchError(f"Malformed {label} response", FetchErrorKind.TRANSPORT)
    return data


class GeocodeFetcher:
    BASE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
    CACHE_PREFIX = "geocode"

    def __init__(
        self,
        api_key: str,
        cache: Cache,
        transport: Optional[HttpTransport] = None,
        base_url: str = BASE_URL,
        ttl_seconds: int = GEOCODE_TTL_SECONDS,
    ):
        self.api_key = api_key
        self.cache = cache
        self.transport = transport or HttpTransport()
        self.base_url = base_url
        self.ttl_seconds = ttl_seconds

    def cache_key(self, address: str) -> str:
        return f"{self.CACHE_PREFIX}_{address}"

    async def call(self, address: str) -> FetchResponse:
        """Geocode ``address``; results are cached for a week per address.

        Raises ``FetchError`` with kind NOT_FOUND when the provider reports
        ``ZERO_RESULTS`` and TRANSPORT for any failed or malformed request.
        """
        key = self.cache_key(address)
        cached = self.cache.read(key)
        if cached:
            logger.debug("Cache hit for %s", key)
            return FetchResponse(cached, Source.CACHED_RESPONSE)

        params = {"address": address, "key": self.api_key}
        data = await _get_json(self.transport, self.base_url, params, "geocode")
        if data.get("status") == "ZERO_RESULTS":
            raise FetchError(f"No geocode data found for address: {address}", FetchErrorKind.NOT_FOUND)

        # Every other status is cached for the full TTL, REQUEST_DENIED and
        # OVER_QUERY_LIMIT included; those bodies have no results, so the
        # address keeps failing Location construction until the entry expires.
        self.cache.write(key, data, self.ttl_seconds)
        return FetchResponse(data, Source.API_RESPONSE)


@dataclass(frozen=True)
class WeatherEndpoint:
    """What differs between the current, hourly and daily weather lookups."""

    url: str
    cache_prefix: str
    response_key: str
    error_label: str
    extra_params: Dict[str, Any] = field(default_factory=dict)


CURRENT_WEATHER = WeatherEndpoint(
    url="https://weather.googleapis.com/v1/currentConditions:lookup",
    cache_prefix="current_weather",
    response_key="currentTime",
    error_label="current weather",
)

HOURLY_FORECAST = WeatherEndpoint(
    url="https://weather.googleapis.com/v1/forecast/hours:lookup",
    cache_prefix="hourly_forecast",
    response_key="forecastHours",
    error_label="hourly forecast",
    extra_params={"hours": 12},
)

DAILY_FORECAST = WeatherEndpoint(
    url="https://weather.googleapis.com/v1/forecast/days:lookup",
    cache_prefix="daily_forecast",
    response_key="forecastDays",
    error_label="daily forecast",
    extra_params={"days": 7},
)


class WeatherFetcher:
    def __init__(
        self,
        endpoint: WeatherEndpoint,
        api_key: str,
        cache: Cache,
        transport: Optional[HttpTransport] = None,
        ttl_seconds: int = WEATHER_TTL_SECONDS,
    ):
        self.endpoint = endpoint
        self.api_key = api_key
        self.cache = cache
        self.transport = transport or HttpTransport()
        self.ttl_seconds = ttl_seconds

    def cache_key(self, latitude: float, longitude: float, zipcode: Optional[str] = None) -> str:
        # Addresses sharing a postal code share one entry, even when their
        # coordinates differ slightly.
        if zipcode:
            return f"{self.endpoint.cache_prefix}_{zipcode}"
        return f"{self.endpoint.cache_prefix}_{latitude}_{longitude}"

    async def call(self, latitude: float, longitude: float, zipcode: Optional[str] = None) -> FetchResponse:
        key = self.cache_key(latitude, longitude, zipcode)
        cached = self.cache.read(key)
        if cached:
            logger.debug("Cache hit for %s", key)
            return FetchResponse(cached, Source.CACHED_RESPONSE)

        label = self.endpoint.error_label
        params = {
            "key": self.api_key,
            "location.latitude": latitude,
            "location.longitude": longitude,
            **self.endpoint.extra_params,
        }
        data = await _get_json(self.transport, self.endpoint.url, params, label)
        if not data.get(self.endpoint.response_key):
            raise FetchError(
                f"No {label} data found for coordinates: {latitude}, {longitude}",
                FetchErrorKind.NOT_FOUND,
            )

        self.cache.write(key, data, self.ttl_seconds)
        return FetchResponse(data, Source.API_RESPONSE)
