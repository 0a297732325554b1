"""Weather by address: geocode, fetch three weather views, assemble a Result.

Adapter failures (``FetchError``) never leave this module; they are mapped to
``AddressNotFoundError``, ``WeatherNotFoundError`` or ``ServiceError``.
"""
import asyncio
import logging
from types import MappingProxyType
from typing import Mapping, Tuple, Type

from address_weather.models import (
    CurrentWeather,
    DailyForecastEntry,
    HourlyForecastEntry,
    Location,
    Source,
    WeatherAtLocation,
)
from address_weather.services import acl
from address_weather.services.google import (
    FetchError,
    FetchErrorKind,
    FetchResponse,
    GeocodeFetcher,
    WeatherFetcher,
)

logger = logging.getLogger(__name__)


class WeatherByAddressError(Exception):
    """Base class for the errors the presentation layer is expected to catch."""


class AddressNotFoundError(WeatherByAddressError):
    pass


class WeatherNotFoundError(WeatherByAddressError):
    pass


class ServiceError(WeatherByAddressError):
    pass


GEOCODE_ERRORS = {
    FetchErrorKind.NOT_FOUND: AddressNotFoundError,
    FetchErrorKind.TRANSPORT: ServiceError,
}

WEATHER_ERRORS = {
    FetchErrorKind.NOT_FOUND: WeatherNotFoundError,
    FetchErrorKind.TRANSPORT: ServiceError,
}


class Result:
    """Weather at a location plus where each piece of data came from."""

    __slots__ = ("_weather_at_location", "_sources")

    def __init__(self, weather_at_location: WeatherAtLocation, sources: Mapping[str, Source]):
        self._weather_at_location = weather_at_location
        self._sources = MappingProxyType(dict(sources))

    @property
    def weather_at_location(self) -> WeatherAtLocation:
        return self._weather_at_location

    @property
    def sources(self) -> Mapping[str, Source]:
        return self._sources

    @property
    def location(self) -> Location:
        return self._weather_at_location.location

    @property
    def current_weather(self) -> CurrentWeather:
        return self._weather_at_location.current_weather

    @property
    def hourly_forecast_entries(self) -> Tuple[HourlyForecastEntry, ...]:
        return self._weather_at_location.hourly_forecast_entries

    @property
    def daily_forecast_entries(self) -> Tuple[DailyForecastEntry, ...]:
        return self._weather_at_location.daily_forecast_entries

    def from_cache(self, key: str) -> bool:
        return self._sources.get(key) == Source.CACHED_RESPONSE

    def __repr__(self) -> str:
        return f"Result(location={self.location!r}, sources={dict(self._sources)!r})"


class WeatherByAddress:
    def __init__(
        self,
        geocode_fetcher: GeocodeFetcher,
        current_weather_fetcher: WeatherFetcher,
        hourly_forecast_fetcher: WeatherFetcher,
        daily_forecast_fetcher: WeatherFetcher,
    ):
        self.geocode_fetcher = geocode_fetcher
        self.current_weather_fetcher = current_weather_fetcher
        self.hourly_forecast_fetcher = hourly_forecast_fetcher
        self.daily_forecast_fetcher = daily_forecast_fetcher

    async def call(self, address: str) -> Result:
        """Resolve ``address`` and return its weather.

        Raises AddressNotFoundError, WeatherNotFoundError or ServiceError.
        """
        address = (address or "").strip()
        geocode = await self._geocode(address)

        try:
            location = acl.build_location(geocode.data)
        except ValueError as exc:
            logger.warning("Unusable coordinates for %r: %s", address, exc)
            raise ServiceError(f"Could not resolve coordinates for address: {address}") from exc

        current, hourly, daily = await self._fetch_weather(location)

        weather = WeatherAtLocation(
            location=location,
            current_weather=acl.build_current_weather(current.data),
            hourly_forecast_entries=acl.build_hourly_forecast_entries(hourly.data),
            daily_forecast_entries=acl.build_daily_forecast_entries(daily.data),
        )
        return Result(
            weather_at_location=weather,
            sources={
                "geocode": geocode.source,
                "current_weather": current.source,
                "hourly_forecast": hourly.source,
                "daily_forecast": daily.source,
            },
        )

    async def _geocode(self, address: str) -> FetchResponse:
        try:
            return await self.geocode_fetcher.call(address)
        except FetchError as exc:
            raise _translate(exc, GEOCODE_ERRORS) from exc

    async def _fetch_weather(self, location: Location) -> Tuple[FetchResponse, FetchResponse, FetchResponse]:
        # gather re-raises whichever failure happens first; the other fetches
        # keep running and their results are dropped.
        args = (location.latitude, location.longitude, location.zipcode)
        try:
            current, hourly, daily = await asyncio.gather(
                self.current_weather_fetcher.call(*args),
                self.hourly_forecast_fetcher.call(*args),
                self.daily_forecast_fetcher.call(*args),
            )
        except FetchError as exc:
            raise _translate(exc, WEATHER_ERRORS) from exc
        return current, hourly, daily


def _translate(
    exc: FetchError, mapping: Mapping[FetchErrorKind, Type[WeatherByAddressError]]
) -> WeatherByAddressError:
    error_class = mapping.get(exc.kind, ServiceError)
    logger.info("%s: %s", error_class.__name__, exc)
    return error_class(str(exc))
