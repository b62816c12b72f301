"""Application settings loaded from environment variables and ``.env``."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

#: Placeholder shipped in sample ``.env`` files.
DEFAULT_API_KEY = "DEFAULT_API_KEY"
MIN_API_KEY_LENGTH = 10


class Settings(BaseSettings):
    """Runtime configuration. Every field maps to ``CITY_FORECAST_<NAME>``."""

    model_config = SettingsConfigDict(
        env_prefix="CITY_FORECAST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "city-forecast"
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    openweather_api_key: str = DEFAULT_API_KEY
    units: str = "metric"
    lang: str = "en"
    request_timeout: float = 10.0

    search_limit: int = 10
    search_debounce_ms: int = 300
    search_min_length: int = 2

    data_dir: Path = Path("data")
    site_dir: Path = Path("site")
    default_city: str = "Taipei"
    api_port: int = 8000


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings (cached after first load)."""
    return Settings()


def api_key_is_valid(api_key: str) -> bool:
    """Whether an OpenWeatherMap key looks configured.

    OpenWeather keys are 32 characters; anything blank, the shipped
    placeholder, or suspiciously short is treated as missing.
    """
    key = api_key.strip()
    return bool(key) and key != DEFAULT_API_KEY and len(key) > MIN_API_KEY_LENGTH
