"""City-selection screen: saved cities, the selection, and city search."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from city_forecast.errors import CityAlreadyExists, CityNotFound, UpstreamFailure
from city_forecast.observable import Observable
from city_forecast.results import Failure, Result, Success
from city_forecast.schemas import City, CitySearchResult
from city_forecast.search import (
    DEFAULT_DEBOUNCE_SECONDS,
    DEFAULT_MIN_QUERY_LENGTH,
    Debouncer,
    QueryGate,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from city_forecast.cities import CityStore
    from city_forecast.datasources.base import CitySearcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CitySelectionUiState:
    saved_cities: list[City] = field(default_factory=list)
    selected_city: City | None = None
    search_query: str = ""
    search_results: list[CitySearchResult] = field(default_factory=list)
    is_searching: bool = False
    is_loading: bool = False
    error: str | None = None


class CitySelectionViewModel:
    """Mirrors the city store into ``CitySelectionUiState`` and runs searches."""

    def __init__(
        self,
        store: CityStore,
        searcher: CitySearcher,
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        min_query_length: int = DEFAULT_MIN_QUERY_LENGTH,
        executor: Executor | None = None,
    ) -> None:
        self._store = store
        self._searcher = searcher
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="search")
        self._debouncer: Debouncer[str] = Debouncer(self._on_query_settled, debounce_seconds)
        self._gate = QueryGate(min_query_length)
        self._search_generation = 0
        self._gen_lock = threading.Lock()
        self._unsubscribers: list[Callable[[], None]] = []
        self.state: Observable[CitySelectionUiState] = Observable(CitySelectionUiState())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start mirroring saved cities and the selection into screen state."""
        if self._unsubscribers:
            return
        self._unsubscribers = [
            self._store.observe_cities().subscribe(
                lambda cities: self.state.update(lambda s: replace(s, saved_cities=cities))
            ),
            self._store.observe_selected().subscribe(
                lambda city: self.state.update(lambda s: replace(s, selected_city=city))
            ),
        ]

    def close(self) -> None:
        self._debouncer.cancel()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def update_query(self, text: str) -> None:
        """Keystroke entry point: record the text and (re)start the debounce timer."""
        self.state.update(lambda s: replace(s, search_query=text))
        self._debouncer.submit(text)

    def flush_query(self) -> None:
        """Run the pending debounced query now (e.g. on Enter)."""
        self._debouncer.flush()

    def _on_query_settled(self, text: str) -> None:
        query = self._gate.admit(text)
        if query is not None:
            self.search(query)

    def search(self, query: str) -> Future[Result[list[CitySearchResult]]]:
        """Search immediately, bypassing debounce. Results of older searches are dropped."""
        with self._gen_lock:
            self._search_generation += 1
            generation = self._search_generation
        self.state.update(lambda s: replace(s, is_searching=True, error=None))
        return self._executor.submit(self._run_search, generation, query)

    def _run_search(self, generation: int, query: str) -> Result[list[CitySearchResult]]:
        try:
            results = self._searcher.search(query)
        except UpstreamFailure as e:
            logger.warning("City search for %r failed: %s", query, e)
            if self._is_latest_search(generation):
                self.state.update(lambda s: replace(s, error=str(e), is_searching=False))
            return Failure(e)

        if self._is_latest_search(generation):
            self.state.update(
                lambda s: replace(s, search_results=results, is_searching=False)
            )
        else:
            logger.debug("Discarding stale results for %r", query)
        return Success(results)

    def _is_latest_search(self, generation: int) -> bool:
        with self._gen_lock:
            return generation == self._search_generation

    def clear_search(self) -> None:
        """Empty the query and results; the same query may be searched again."""
        self._debouncer.cancel()
        self._gate.reset()
        with self._gen_lock:
            self._search_generation += 1
        self.state.update(
            lambda s: replace(s, search_query="", search_results=[], is_searching=False)
        )

    # ------------------------------------------------------------------
    # Saved cities
    # ------------------------------------------------------------------

    def add_city(self, candidate: CitySearchResult | City) -> Result[City]:
        """Save a search result (or a ready-made City)."""
        city = candidate.to_city() if isinstance(candidate, CitySearchResult) else candidate
        try:
            added = self._store.add(city)
        except CityAlreadyExists as e:
            return self._fail(e)
        self.clear_search()
        return Success(added)

    def remove_city(self, city_name: str) -> Result[None]:
        try:
            self._store.remove(city_name)
        except CityNotFound as e:
            return self._fail(e)
        return Success(None)

    def select_city(self, city_name: str) -> Result[City]:
        """Select a city; unknown names become placeholder entries, so this always succeeds."""
        return Success(self._store.set_selected(city_name))

    def clear_error(self) -> None:
        self.state.update(lambda s: replace(s, error=None))

    def _fail(self, error: Exception) -> Failure:
        self.state.update(lambda s: replace(s, error=str(error)))
        return Failure(error)
