import dataclasses
import logging
from urllib.parse import urlencode

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse, RedirectResponse

from address_weather.config import Settings, get_settings
from address_weather.schemas import WeatherPayload, WeatherResponse
from address_weather.services.cache import RedisCache
from address_weather.services.google import (
    CURRENT_WEATHER,
    DAILY_FORECAST,
    HOURLY_FORECAST,
    GeocodeFetcher,
    HttpTransport,
    WeatherFetcher,
)
from address_weather.services.weather_by_address import WeatherByAddress, WeatherByAddressError

settings = get_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


def build_service(settings: Settings, cache) -> WeatherByAddress:
    """Wire the fetchers from settings; nothing below reads settings itself."""
    transport = HttpTransport(timeout_seconds=settings.http_timeout_seconds)

    def weather_fetcher(endpoint, url, **extra_params):
        endpoint = dataclasses.replace(endpoint, url=url, extra_params=extra_params)
        return WeatherFetcher(
            endpoint,
            settings.google_api_key,
            cache,
            transport,
            ttl_seconds=settings.cache_ttl_weather_seconds,
        )

    return WeatherByAddress(
        geocode_fetcher=GeocodeFetcher(
            settings.google_api_key,
            cache,
            transport,
            base_url=settings.geocode_url,
            ttl_seconds=settings.cache_ttl_geocode_seconds,
        ),
        current_weather_fetcher=weather_fetcher(CURRENT_WEATHER, settings.current_weather_url),
        hourly_forecast_fetcher=weather_fetcher(
            HOURLY_FORECAST, settings.hourly_forecast_url, hours=settings.hourly_forecast_hours
        ),
        daily_forecast_fetcher=weather_fetcher(
            DAILY_FORECAST, settings.daily_forecast_url, days=settings.daily_forecast_days
        ),
    )


app = FastAPI(title=settings.app_name)

cache = RedisCache(settings.redis_url)
service = build_service(settings, cache)


@app.get("/health")
def health():
    return {"status": "ok", "service": settings.app_name}


@app.get("/")
def root():
    return JSONResponse({"service": settings.app_name, "docs": "/docs", "search": "/weather?address="})


@app.get("/weather", response_model=WeatherResponse)
async def weather_by_address(
    address: str = Query("", description="Address or place name, e.g. 'São Paulo, Brazil'"),
):
    address = address.strip()
    if not address:
        return WeatherResponse(address=address)

    try:
        result = await service.call(address)
    except WeatherByAddressError as exc:
        logger.info("Weather lookup for %r failed: %s", address, exc)
        return WeatherResponse(address=address, error=str(exc))

    return WeatherResponse(address=address, result=WeatherPayload.from_result(result))


@app.get("/weather/search")
def search(address: str = Query("")):
    return RedirectResponse(f"/weather?{urlencode({'address': address})}")
