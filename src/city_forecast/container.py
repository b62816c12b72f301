"""Composition root: build every long-lived object exactly once."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from city_forecast.cities import CityStore
from city_forecast.config import api_key_is_valid, get_settings
from city_forecast.datasources.openweather import OpenWeatherProvider
from city_forecast.store import FileKeyValueStore
from city_forecast.viewmodels import CitySelectionViewModel, WeatherViewModel

if TYPE_CHECKING:
    from city_forecast.config import Settings
    from city_forecast.datasources.base import CitySearcher, WeatherFetcher
    from city_forecast.store import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass
class App:
    """Handles shared by the CLI, the flows and any UI front end."""

    settings: Settings
    kv: KeyValueStore
    cities: CityStore
    fetcher: WeatherFetcher
    searcher: CitySearcher
    weather: WeatherViewModel
    city_selection: CitySelectionViewModel

    def start(self) -> None:
        """Begin observing the city store (triggers the first weather load)."""
        self.city_selection.start()
        self.weather.start()

    def close(self) -> None:
        self.weather.close()
        self.city_selection.close()


def build_app(
    settings: Settings | None = None,
    *,
    kv: KeyValueStore | None = None,
    provider: OpenWeatherProvider | None = None,
) -> App:
    """Wire the application. View models are built but not started."""
    settings = settings or get_settings()
    if not api_key_is_valid(settings.openweather_api_key):
        logger.warning(
            "OpenWeatherMap API key is missing or a placeholder; "
            "set CITY_FORECAST_OPENWEATHER_API_KEY"
        )

    kv = kv or FileKeyValueStore(settings.data_dir)
    cities = CityStore(kv)
    provider = provider or OpenWeatherProvider.from_settings(settings)

    return App(
        settings=settings,
        kv=kv,
        cities=cities,
        fetcher=provider,
        searcher=provider,
        weather=WeatherViewModel(provider, cities, default_city=settings.default_city),
        city_selection=CitySelectionViewModel(
            cities,
            provider,
            debounce_seconds=settings.search_debounce_ms / 1000,
            min_query_length=settings.search_min_length,
        ),
    )
