from datetime import datetime, timezone

import pytest

from address_weather.models import WeatherCondition
from address_weather.services import acl


# ---------------------------------------------------------------------------
# build_location
# ---------------------------------------------------------------------------

def test_build_location_from_first_result(payload):
    location = acl.build_location(payload("geocode_sao_paulo"))
    assert location.latitude == -23.55
    assert location.longitude == -46.63
    assert location.zipcode == "01310-100"
    assert location.formatted_address == "São Paulo, State of São Paulo, 01310-100, Brazil"


def test_build_location_ignores_later_results(payload):
    data = payload("geocode_sao_paulo")
    data["results"].append({"geometry": {"location": {"lat": 1.0, "lng": 2.0}}})
    assert acl.build_location(data).coordinates == (-23.55, -46.63)


def test_build_location_without_postal_code():
    data = {
        "results": [
            {
                "address_components": [{"short_name": "BR", "types": ["country"]}],
                "geometry": {"location": {"lat": 10, "lng": 20}},
            }
        ]
    }
    location = acl.build_location(data)
    assert location.zipcode is None
    assert location.formatted_address is None


def test_build_location_without_results_fails():
    with pytest.raises(ValueError):
        acl.build_location({"results": [], "status": "OK"})


# ---------------------------------------------------------------------------
# build_weather_condition
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("data", [None, {}])
def test_blank_condition_is_unknown(data):
    assert acl.build_weather_condition(data) == WeatherCondition.unknown()


def test_condition_fields():
    condition = acl.build_weather_condition(
        {"description": {"text": "Rain"}, "type": "RAIN", "iconBaseUri": "https://example.test/rain"}
    )
    assert condition.description == "Rain"
    assert condition.type == "RAIN"
    assert condition.icon_base_uri == "https://example.test/rain"


def test_condition_blank_fields_fall_back():
    condition = acl.build_weather_condition({"description": {"text": ""}, "type": "", "iconBaseUri": ""})
    assert condition == WeatherCondition.unknown()


# ---------------------------------------------------------------------------
# build_current_weather
# ---------------------------------------------------------------------------

def test_build_current_weather(payload):
    current = acl.build_current_weather(payload("current_weather"))
    assert current.time_zone_id == "America/Sao_Paulo"
    assert current.current_time == datetime(2025, 1, 28, 22, 4, 12, 25273, tzinfo=timezone.utc)
    assert current.is_daytime is False
    assert current.temperature_degrees == 25.3
    assert current.feels_like_degrees == 26.1
    assert current.weather_condition.description == "Partly cloudy"
    assert current.weather_condition.type == "PARTLY_CLOUDY"


def test_build_current_weather_defaults():
    current = acl.build_current_weather({"currentTime": "not a time"})
    assert current.current_time is None
    assert current.time_zone_id == "UTC"
    assert current.is_daytime is None
    assert current.temperature_degrees == 0.0
    assert current.feels_like_degrees is None
    assert current.weather_condition == WeatherCondition.unknown()


# ---------------------------------------------------------------------------
# display formatting
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "fields, expected",
    [
        ({"year": 2025, "month": 1, "day": 28, "hours": 19}, "2025-01-28 19:00"),
        ({"year": 2025, "month": 1, "day": 28}, "2025-01-28 00:00"),
        ({"year": 2025, "month": 12, "day": 5, "hours": 7}, "2025-12-05 07:00"),
        ({"month": 1, "day": 28, "hours": 19}, None),
        ({"year": 2025, "day": 28}, None),
        (None, None),
    ],
)
def test_format_display_date_time(fields, expected):
    assert acl.format_display_date_time(fields) == expected


@pytest.mark.parametrize(
    "fields, expected",
    [
        ({"year": 2025, "month": 1, "day": 28}, "2025-01-28"),
        ({"year": 2025, "month": 1}, None),
        ({"month": 1, "day": 28}, None),
        ({}, None),
    ],
)
def test_format_display_date(fields, expected):
    assert acl.format_display_date(fields) == expected


# ---------------------------------------------------------------------------
# forecasts
# ---------------------------------------------------------------------------

def test_build_hourly_forecast_entries(payload):
    entries = acl.build_hourly_forecast_entries(payload("hourly_forecast"))
    assert [e.display_date_time for e in entries] == ["2025-01-28 19:00", "2025-01-28 20:00"]
    assert entries[0].is_daytime is True
    assert entries[0].temperature_degrees == 25.3
    assert entries[1].feels_like_degrees is None
    assert entries[1].weather_condition.type == "CLEAR"


def test_build_daily_forecast_entries_use_daytime_condition(payload):
    entries = acl.build_daily_forecast_entries(payload("daily_forecast"))
    assert entries[0].display_date == "2025-01-28"
    assert entries[0].max_temperature_degrees == 29.4
    assert entries[0].min_temperature_degrees == 19.2
    assert entries[0].weather_condition.type == "PARTLY_CLOUDY"
    assert entries[1].weather_condition == WeatherCondition.unknown()


def test_missing_forecast_lists_are_empty():
    assert acl.build_hourly_forecast_entries({}) == []
    assert acl.build_daily_forecast_entries({}) == []


# ---------------------------------------------------------------------------
# mistyped fields
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("data", ["PARTLY_CLOUDY", ["RAIN"], 3])
def test_non_object_condition_is_unknown(data):
    assert acl.build_weather_condition(data) == WeatherCondition.unknown()


@pytest.mark.parametrize("fields", ["2025-01-28", [2025, 1, 28], 20250128])
def test_non_object_display_date_is_none(fields):
    assert acl.format_display_date(fields) is None
    assert acl.format_display_date_time(fields) is None


def test_forecast_lists_skip_non_object_items():
    assert acl.build_hourly_forecast_entries({"forecastHours": ["x", None]}) == []
    assert acl.build_daily_forecast_entries({"forecastDays": "not a list"}) == []


def test_build_location_tolerates_mistyped_components():
    data = {
        "results": [
            {
                "address_components": ["01310-100", {"types": "postal_code", "short_name": "x"}],
                "geometry": {"location": {"lat": 1, "lng": 2}},
            }
        ]
    }
    assert acl.build_location(data).zipcode is None


def test_build_location_with_non_object_result_fails():
    with pytest.raises(ValueError):
        acl.build_location({"results": ["São Paulo"]})
