"""City Forecast - current conditions and 7-day outlooks for saved cities.

Architecture::

    datasources/   External APIs (OpenWeatherMap current, forecast, geocoding)
    analysis/      Pure aggregation (3-hour samples -> daily summaries)
    cities.py      Saved cities with single selection, persisted to store.py
    store.py       File-backed key-value store (one JSON envelope per key)
    viewmodels/    Subscribe-able screen state (weather, city selection)
    renderers/     Pure data -> text / HTML
    flows/         Prefect orchestration (refresh forecast, build page)
    services/      Shared utilities (HTTP session)

Data flow: datasources -> analysis -> viewmodels / renderers. Independently,
cities.py holds the selection that decides which city gets fetched.

Everything is wired once in ``container.build_app()``.
"""

__version__ = "0.1.0"

from city_forecast.config import Settings
from city_forecast.schemas import City, CitySearchResult, DailySummary, WeatherSample

__all__ = ["City", "CitySearchResult", "DailySummary", "Settings", "WeatherSample", "__version__"]
