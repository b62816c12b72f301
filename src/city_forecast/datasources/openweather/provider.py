"""OpenWeatherMap implementation of the WeatherFetcher and CitySearcher protocols."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from city_forecast.datasources.base import ForecastBatch
from city_forecast.datasources.openweather import current, forecast, geocoding
from city_forecast.datasources.openweather.client import (
    DEFAULT_LANG,
    DEFAULT_SEARCH_LIMIT,
    DEFAULT_UNITS,
)
from city_forecast.datasources.openweather.models import (
    city_result_from_api,
    current_from_api,
    forecast_from_api,
)
from city_forecast.services.http import create_session

if TYPE_CHECKING:
    import requests

    from city_forecast.config import Settings
    from city_forecast.schemas import CitySearchResult, CurrentConditions, Location

logger = logging.getLogger(__name__)


class OpenWeatherProvider:
    """Weather and city search backed by a static OpenWeatherMap API key."""

    def __init__(
        self,
        api_key: str,
        *,
        units: str = DEFAULT_UNITS,
        lang: str = DEFAULT_LANG,
        search_limit: int = DEFAULT_SEARCH_LIMIT,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.units = units
        self.lang = lang
        self.search_limit = search_limit
        # None means the shared module session
        self.session = session

    @classmethod
    def from_settings(cls, settings: Settings) -> OpenWeatherProvider:
        return cls(
            settings.openweather_api_key,
            units=settings.units,
            lang=settings.lang,
            search_limit=settings.search_limit,
            session=create_session(timeout=settings.request_timeout),
        )

    def fetch_current(self, location: Location) -> CurrentConditions:
        logger.info("Fetching current weather for %s", location.query_params())
        data = current.fetch_current(
            location, self.api_key, units=self.units, lang=self.lang, session=self.session
        )
        return current_from_api(data)

    def fetch_forecast(self, location: Location) -> ForecastBatch:
        logger.info("Fetching forecast for %s", location.query_params())
        data = forecast.fetch_forecast(
            location, self.api_key, units=self.units, lang=self.lang, session=self.session
        )
        city, country, samples = forecast_from_api(data)
        logger.debug("Forecast for %s, %s has %d samples", city, country, len(samples))
        return ForecastBatch(city=city, country=country, samples=samples)

    def search(self, query: str) -> list[CitySearchResult]:
        logger.info("Searching cities for %r", query)
        raw = geocoding.search_cities(
            query, self.api_key, limit=self.search_limit, session=self.session
        )
        return [city_result_from_api(item) for item in raw][: self.search_limit]
