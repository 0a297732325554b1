from typing import Dict, Optional, Tuple

from pydantic import BaseModel

from address_weather.models import (
    CurrentWeather,
    DailyForecastEntry,
    HourlyForecastEntry,
    Location,
    Source,
)
from address_weather.services.weather_by_address import Result


class WeatherPayload(BaseModel):
    location: Location
    current_weather: CurrentWeather
    hourly_forecast_entries: Tuple[HourlyForecastEntry, ...] = ()
    daily_forecast_entries: Tuple[DailyForecastEntry, ...] = ()
    sources: Dict[str, Source]
    from_cache: Dict[str, bool]

    @classmethod
    def from_result(cls, result: Result) -> "WeatherPayload":
        return cls(
            location=result.location,
            current_weather=result.current_weather,
            hourly_forecast_entries=result.hourly_forecast_entries,
            daily_forecast_entries=result.daily_forecast_entries,
            sources=dict(result.sources),
            from_cache={key: result.from_cache(key) for key in result.sources},
        )


class WeatherResponse(BaseModel):
    address: str
    result: Optional[WeatherPayload] = None
    error: Optional[str] = None
