"""Domain value objects for weather at a resolved location.

Every model is frozen: a "change" means building a new instance.
"""
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator


class Source(str, Enum):
    """Where a fetched payload came from."""

    API_RESPONSE = "api_response"
    CACHED_RESPONSE = "cached_response"


class _ValueObject(BaseModel):
    model_config = ConfigDict(frozen=True)


def _presence(value):
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class Location(_ValueObject):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    latitude: float
    longitude: float
    zipcode: Optional[str] = None
    formatted_address: Optional[str] = None

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _reject_bool(cls, value):
        if isinstance(value, bool):
            raise ValueError("coordinate must be a number, not a boolean")
        return value

    @field_validator("zipcode", "formatted_address", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        return _presence(value)

    @property
    def coordinates(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)


class WeatherCondition(_ValueObject):
    description: str = "Unknown"
    type: str = "UNKNOWN"
    icon_base_uri: Optional[str] = None

    @field_validator("icon_base_uri", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        return _presence(value)

    @classmethod
    def unknown(cls) -> "WeatherCondition":
        return cls()


class CurrentWeather(_ValueObject):
    current_time: Optional[datetime] = None
    time_zone_id: str = "UTC"
    is_daytime: Optional[bool] = None
    weather_condition: WeatherCondition = WeatherCondition()
    temperature_degrees: float = 0.0
    feels_like_degrees: Optional[float] = None


class HourlyForecastEntry(_ValueObject):
    display_date_time: Optional[str] = None
    is_daytime: Optional[bool] = None
    weather_condition: WeatherCondition = WeatherCondition()
    temperature_degrees: float = 0.0
    feels_like_degrees: Optional[float] = None


class DailyForecastEntry(_ValueObject):
    display_date: Optional[str] = None
    max_temperature_degrees: float = 0.0
    min_temperature_degrees: float = 0.0
    weather_condition: WeatherCondition = WeatherCondition()


class WeatherAtLocation(_ValueObject):
    """Aggregate root: a location with its current weather and forecasts.

    Forecast sequences are copied into tuples, so later changes to the lists
    passed in are not visible here. ``None`` becomes an empty tuple.
    """

    location: Location
    current_weather: CurrentWeather
    hourly_forecast_entries: Tuple[HourlyForecastEntry, ...] = ()
    daily_forecast_entries: Tuple[DailyForecastEntry, ...] = ()

    @field_validator("hourly_forecast_entries", "daily_forecast_entries", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        if value is None:
            return ()
        return tuple(value)
