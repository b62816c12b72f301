"""Weather screen: current conditions and the 7-day outlook.

Current weather and the forecast are fetched concurrently. Each result
lands on its own: a failed forecast never discards a good current reading,
and vice versa. Only the first error of a load is kept, so a later,
unrelated failure cannot overwrite it; successes never clear an error.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from city_forecast.analysis.forecast import summarize_daily
from city_forecast.errors import UpstreamFailure
from city_forecast.observable import Observable
from city_forecast.schemas import Location

if TYPE_CHECKING:
    from collections.abc import Callable

    from city_forecast.cities import CityStore
    from city_forecast.datasources.base import WeatherFetcher
    from city_forecast.schemas import City, CurrentConditions, DailySummary

logger = logging.getLogger(__name__)

DEFAULT_CITY = "Taipei"


@dataclass(frozen=True)
class WeatherUiState:
    current: CurrentConditions | None = None
    daily: list[DailySummary] = field(default_factory=list)
    selected_city: str = ""
    is_loading: bool = False
    is_refreshing: bool = False
    error: str | None = None


class WeatherViewModel:
    """Loads weather for the selected city and publishes ``WeatherUiState``."""

    def __init__(
        self,
        fetcher: WeatherFetcher,
        cities: CityStore | None = None,
        *,
        default_city: str = DEFAULT_CITY,
        executor: Executor | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._cities = cities
        self.default_city = default_city
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=4, thread_name_prefix="weather")
        self._generation = 0
        self._gen_lock = threading.Lock()
        self._unsubscribe: Callable[[], None] | None = None
        self.state: Observable[WeatherUiState] = Observable(WeatherUiState())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Follow the city store's selection, loading weather whenever it changes."""
        if self._cities is not None and self._unsubscribe is None:
            self._unsubscribe = self._cities.observe_selected().subscribe(self._on_selected)

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)

    def _on_selected(self, city: City | None) -> None:
        name = city.name if city is not None else self.default_city
        if name != self.state.value.selected_city:
            self.load_for_city(name)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def load_for_city(self, city_name: str) -> Future[None]:
        """Fetch current weather and forecast for ``city_name`` in parallel."""
        generation = self._next_generation()
        self.state.update(
            lambda s: replace(s, is_loading=True, error=None, selected_city=city_name)
        )
        return self._load(generation, self._location_for(city_name), adopt_city_name=False)

    def load_for_coordinates(self, lat: float, lon: float) -> Future[None]:
        """Fetch weather for a coordinate pair; the city name comes from the response."""
        generation = self._next_generation()
        self.state.update(lambda s: replace(s, is_loading=True, error=None))
        return self._load(generation, Location(lat=lat, lon=lon), adopt_city_name=True)

    def refresh(self) -> Future[None] | None:
        """Reload the current city. Returns None when no city is shown yet."""
        city_name = self.state.value.selected_city
        if not city_name:
            return None
        self.state.update(lambda s: replace(s, is_refreshing=True))
        done = self.load_for_city(city_name)
        done.add_done_callback(
            lambda _f: self.state.update(lambda s: replace(s, is_refreshing=False))
        )
        return done

    def clear_error(self) -> None:
        """Dismiss the error. Nothing is retried."""
        self.state.update(lambda s: replace(s, error=None))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _next_generation(self) -> int:
        with self._gen_lock:
            self._generation += 1
            return self._generation

    def _is_current(self, generation: int) -> bool:
        with self._gen_lock:
            return generation == self._generation

    def _location_for(self, city_name: str) -> Location:
        if self._cities is not None:
            for city in self._cities.cities:
                if city.matches(city_name):
                    return Location.for_city(city)
        return Location(name=city_name)

    def _load(
        self, generation: int, location: Location, *, adopt_city_name: bool
    ) -> Future[None]:
        done: Future[None] = Future()
        remaining = [2]
        lock = threading.Lock()

        def finished(f: Future[None]) -> None:
            if not f.cancelled() and f.exception() is not None:
                logger.error("Weather load crashed", exc_info=f.exception())
            with lock:
                remaining[0] -= 1
                last = remaining[0] == 0
            if not last:
                return
            if self._is_current(generation):
                self.state.update(lambda s: replace(s, is_loading=False))
            done.set_result(None)

        current = self._executor.submit(self._load_current, generation, location, adopt_city_name)
        forecast = self._executor.submit(self._load_forecast, generation, location)
        current.add_done_callback(finished)
        forecast.add_done_callback(finished)
        return done

    def _load_current(self, generation: int, location: Location, adopt_city_name: bool) -> None:
        try:
            conditions = self._fetcher.fetch_current(location)
        except UpstreamFailure as e:
            logger.warning("Current weather failed: %s", e)
            self._record_error(generation, str(e))
            return
        if not self._is_current(generation):
            return
        if adopt_city_name:
            self.state.update(
                lambda s: replace(s, current=conditions, selected_city=conditions.city)
            )
        else:
            self.state.update(lambda s: replace(s, current=conditions))

    def _load_forecast(self, generation: int, location: Location) -> None:
        try:
            batch = self._fetcher.fetch_forecast(location)
        except UpstreamFailure as e:
            logger.warning("Forecast failed: %s", e)
            self._record_error(generation, str(e))
            return
        daily = summarize_daily(batch.samples)
        if self._is_current(generation):
            self.state.update(lambda s: replace(s, daily=daily))

    def _record_error(self, generation: int, message: str) -> None:
        if not self._is_current(generation):
            return
        self.state.update(lambda s: s if s.error is not None else replace(s, error=message))
