"""OpenWeatherMap data source.

Fetches current weather, the 5-day / 3-hour forecast, and geocoding
candidates. Needs an API key (``CITY_FORECAST_OPENWEATHER_API_KEY``).

Public API:
  - current: fetch_current (raw current-weather JSON)
  - forecast: fetch_forecast (raw 3-hour forecast JSON)
  - geocoding: search_cities (raw geocoding JSON)
  - models: parsers to schemas
  - provider: OpenWeatherProvider (WeatherFetcher + CitySearcher)
"""

from city_forecast.datasources.openweather.client import (
    CURRENT_API,
    FORECAST_API,
    GEOCODING_API,
)
from city_forecast.datasources.openweather.current import fetch_current
from city_forecast.datasources.openweather.forecast import fetch_forecast
from city_forecast.datasources.openweather.geocoding import search_cities
from city_forecast.datasources.openweather.models import (
    city_result_from_api,
    current_from_api,
    forecast_from_api,
    sample_from_api,
)
from city_forecast.datasources.openweather.provider import OpenWeatherProvider

__all__ = [
    "CURRENT_API",
    "FORECAST_API",
    "GEOCODING_API",
    "OpenWeatherProvider",
    "city_result_from_api",
    "current_from_api",
    "fetch_current",
    "fetch_forecast",
    "forecast_from_api",
    "sample_from_api",
    "search_cities",
]
