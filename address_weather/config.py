from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App
    app_name: str = "address-weather"
    log_level: str = "INFO"

    # Provider
    google_api_key: str
    geocode_url: str = "https://maps.googleapis.com/maps/api/geocode/json"
    current_weather_url: str = "https://weather.googleapis.com/v1/currentConditions:lookup"
    hourly_forecast_url: str = "https://weather.googleapis.com/v1/forecast/hours:lookup"
    daily_forecast_url: str = "https://weather.googleapis.com/v1/forecast/days:lookup"
    hourly_forecast_hours: int = 12
    daily_forecast_days: int = 7
    http_timeout_seconds: float = 5.0

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # Cache tuning
    cache_ttl_geocode_seconds: int = 7 * 24 * 60 * 60
    cache_ttl_weather_seconds: int = 30 * 60


def get_settings() -> Settings:
    return Settings()
