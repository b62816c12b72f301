"""Error taxonomy.

- ``UpstreamFailure``: a fetch or search call failed (network or HTTP).
- ``CityAlreadyExists`` / ``CityNotFound``: local validation in the city store.
- ``PersistenceFailure``: a key-value write or read failed. The city store
  absorbs these; they never reach store callers.
"""

from __future__ import annotations


class CityForecastError(Exception):
    """Base class for all application errors."""


class UpstreamFailure(CityForecastError):
    """An OpenWeatherMap call failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class CityAlreadyExists(CityForecastError):
    """Adding a city whose (name, country) is already saved."""

    def __init__(self, name: str, country: str) -> None:
        super().__init__(f"City already exists in saved list: {name}, {country}")
        self.name = name
        self.country = country


class CityNotFound(CityForecastError):
    """Removing a city name that is not saved."""

    def __init__(self, name: str) -> None:
        super().__init__(f"City not found in saved list: {name}")
        self.name = name


class PersistenceFailure(CityForecastError):
    """Reading or writing the key-value store failed."""
