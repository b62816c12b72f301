"""Contracts for weather and city-search providers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from city_forecast.schemas import CitySearchResult, CurrentConditions, Location, WeatherSample


@dataclass
class ForecastBatch:
    """Raw 3-hour samples for one place, plus the place the API resolved."""

    city: str
    country: str
    samples: list[WeatherSample] = field(default_factory=list)


class WeatherFetcher(Protocol):
    """Fetches weather for a location. Raises ``UpstreamFailure`` on any failure."""

    def fetch_current(self, location: Location) -> CurrentConditions: ...

    def fetch_forecast(self, location: Location) -> ForecastBatch: ...


class CitySearcher(Protocol):
    """Finds cities by free-text name. Raises ``UpstreamFailure`` on any failure."""

    def search(self, query: str) -> list[CitySearchResult]: ...
