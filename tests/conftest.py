"""Shared fixtures: fake providers, a deterministic clock, an inline executor."""

from __future__ import annotations

from concurrent.futures import Executor, Future
from typing import TYPE_CHECKING, Any

import pytest

from city_forecast.cities import CityStore
from city_forecast.datasources.base import ForecastBatch
from city_forecast.schemas import CitySearchResult, CurrentConditions, WeatherSample
from city_forecast.store import MemoryKeyValueStore

if TYPE_CHECKING:
    from collections.abc import Callable

    from city_forecast.schemas import Location


def make_sample(
    dt_txt: str,
    temp_min: float = 10.0,
    temp_max: float = 20.0,
    humidity: int = 50,
    pop: float | None = 0.0,
    description: str = "clear sky",
    icon: str = "01d",
) -> WeatherSample:
    """Build a forecast sample with only the fields a test cares about."""
    return WeatherSample(
        timestamp=0,
        datetime_text=dt_txt,
        temperature=(temp_min + temp_max) / 2,
        feels_like=(temp_min + temp_max) / 2,
        min_temperature=temp_min,
        max_temperature=temp_max,
        humidity=humidity,
        pressure=1013,
        description=description,
        icon_code=icon,
        precipitation_probability=pop,
    )


class InlineExecutor(Executor):
    """Runs submitted work on the calling thread."""

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future[Any]:
        future: Future[Any] = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:  # noqa: BLE001
            future.set_exception(e)
        return future


class FakeClock:
    """Monotonic epoch-millis clock; each call advances by one second."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        self.now += 1000
        return self.now


class FakeFetcher:
    """WeatherFetcher returning canned data, or raising the configured errors."""

    def __init__(self) -> None:
        self.current = CurrentConditions(
            temperature=21.5, humidity=60, description="few clouds", city="Taipei", country="TW"
        )
        self.batch = ForecastBatch(
            city="Taipei",
            country="TW",
            samples=[
                make_sample("2024-01-15 09:00:00", 10.0, 18.0),
                make_sample("2024-01-16 09:00:00", 12.0, 20.0),
            ],
        )
        self.current_error: Exception | None = None
        self.forecast_error: Exception | None = None
        self.locations: list[Location] = []

    def fetch_current(self, location: Location) -> CurrentConditions:
        self.locations.append(location)
        if self.current_error is not None:
            raise self.current_error
        return self.current

    def fetch_forecast(self, location: Location) -> ForecastBatch:
        self.locations.append(location)
        if self.forecast_error is not None:
            raise self.forecast_error
        return self.batch


class FakeSearcher:
    """CitySearcher returning canned results and recording every query."""

    def __init__(self, results: list[CitySearchResult] | None = None) -> None:
        self.results = results or []
        self.queries: list[str] = []
        self.error: Exception | None = None

    def search(self, query: str) -> list[CitySearchResult]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.results


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def kv() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def city_store(kv: MemoryKeyValueStore, clock: FakeClock) -> CityStore:
    return CityStore(kv, clock=clock)


@pytest.fixture
def inline_executor() -> InlineExecutor:
    return InlineExecutor()
