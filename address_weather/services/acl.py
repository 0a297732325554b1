"""Anti-corruption layer: raw Google payloads -> domain value objects.

Everything here is a pure mapping with no I/O. Missing optional fields fall
back to defaults instead of raising; the only failure is ``Location``
rejecting coordinates that are not numbers.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from address_weather.models import (
    CurrentWeather,
    DailyForecastEntry,
    HourlyForecastEntry,
    Location,
    WeatherCondition,
)


def _dig(data: Any, *path: str) -> Any:
    for key in path:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _to_float(value: Any) -> float:
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _to_optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_bool(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


def _mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _mappings(value: Any) -> List[Dict[str, Any]]:
    """List items that are objects; anything else in the list is skipped."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _first_result(geocode_payload: Dict[str, Any]) -> Dict[str, Any]:
    results = geocode_payload.get("results")
    return _mapping(results[0]) if isinstance(results, list) and results else {}


def build_location(geocode_payload: Dict[str, Any]) -> Location:
    """Build a Location from the first geocoding result.

    Ambiguous matches beyond the first result are ignored. Raises
    ``ValueError`` when the coordinates are missing or not numeric.
    """
    result = _first_result(geocode_payload)
    zipcode = None
    for component in _mappings(result.get("address_components")):
        types = component.get("types")
        if isinstance(types, list) and "postal_code" in types:
            zipcode = component.get("short_name")
            break

    return Location(
        latitude=_dig(result, "geometry", "location", "lat"),
        longitude=_dig(result, "geometry", "location", "lng"),
        zipcode=zipcode,
        formatted_address=result.get("formatted_address"),
    )


def build_weather_condition(data: Any) -> WeatherCondition:
    if not isinstance(data, dict) or not data:
        return WeatherCondition.unknown()

    return WeatherCondition(
        description=_text(_dig(data, "description", "text")) or "Unknown",
        type=_text(data.get("type")) or "UNKNOWN",
        icon_base_uri=_text(data.get("iconBaseUri")),
    )


def parse_time(value: Any) -> Optional[datetime]:
    text = _text(value)
    if text is None:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # Google sends nanosecond precision; datetime only keeps microseconds.
    head, dot, tail = text.partition(".")
    if dot:
        digits = len(tail) - len(tail.lstrip("0123456789"))
        tail = tail[:min(digits, 6)] + tail[digits:]
        text = f"{head}.{tail}"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def build_current_weather(data: Dict[str, Any]) -> CurrentWeather:
    return CurrentWeather(
        current_time=parse_time(data.get("currentTime")),
        time_zone_id=_text(_dig(data, "timeZone", "id")) or "UTC",
        is_daytime=_to_bool(data.get("isDaytime")),
        weather_condition=build_weather_condition(data.get("weatherCondition")),
        temperature_degrees=_to_float(_dig(data, "temperature", "degrees")),
        feels_like_degrees=_to_optional_float(_dig(data, "feelsLikeTemperature", "degrees")),
    )


def format_display_date(display_date: Any) -> Optional[str]:
    """Return ``YYYY-MM-DD``, or None unless year, month and day are all present."""
    if not isinstance(display_date, dict) or not display_date:
        return None
    year, month, day = (display_date.get(k) for k in ("year", "month", "day"))
    if year is None or month is None or day is None:
        return None
    return f"{year}-{str(month).zfill(2)}-{str(day).zfill(2)}"


def format_display_date_time(display_date_time: Any) -> Optional[str]:
    """Return ``YYYY-MM-DD HH:00``; a missing hour is rendered as ``00``."""
    date = format_display_date(display_date_time)
    if date is None:
        return None
    hours = display_date_time.get("hours")
    hour = "00" if hours is None else str(hours).zfill(2)
    return f"{date} {hour}:00"


def build_hourly_forecast_entries(data: Dict[str, Any]) -> List[HourlyForecastEntry]:
    return [
        HourlyForecastEntry(
            display_date_time=format_display_date_time(hour.get("displayDateTime")),
            is_daytime=_to_bool(hour.get("isDaytime")),
            weather_condition=build_weather_condition(hour.get("weatherCondition")),
            temperature_degrees=_to_float(_dig(hour, "temperature", "degrees")),
            feels_like_degrees=_to_optional_float(_dig(hour, "feelsLikeTemperature", "degrees")),
        )
        for hour in _mappings(data.get("forecastHours"))
    ]


def build_daily_forecast_entries(data: Dict[str, Any]) -> List[DailyForecastEntry]:
    # The condition comes from the daytime half of each day, not the day itself.
    return [
        DailyForecastEntry(
            display_date=format_display_date(day.get("displayDate")),
            max_temperature_degrees=_to_float(_dig(day, "maxTemperature", "degrees")),
            min_temperature_degrees=_to_float(_dig(day, "minTemperature", "degrees")),
            weather_condition=build_weather_condition(_dig(day, "daytimeForecast", "weatherCondition")),
        )
        for day in _mappings(data.get("forecastDays"))
    ]
