"""External data source integrations.

Each subdirectory is one data source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs, constants, the shared GET helper
    ├── models.py         # Parsers: raw API JSON -> schemas
    ├── {feature}.py      # Fetch functions (one per endpoint)
    └── provider.py       # Class implementing the protocols in base.py

``base.py`` holds the contracts the rest of the application codes against
(``WeatherFetcher``, ``CitySearcher``), so view models never import a
concrete datasource.
"""

from city_forecast.datasources.base import CitySearcher, ForecastBatch, WeatherFetcher

__all__ = ["CitySearcher", "ForecastBatch", "WeatherFetcher"]
