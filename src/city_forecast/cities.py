"""Saved cities with a single selection, persisted to a key-value store.

The store holds two independent snapshots:

  - ``saved_cities``: the whole collection as a JSON list
  - ``selected_city``: the selected City (may be absent from the collection)

Both are rewritten after every mutation. Write failures are logged and
swallowed: a mutation that succeeded in memory is reported as a success
even if it did not reach disk.

All mutations run under one lock, so at most one stored City is ever
selected no matter how many threads call ``set_selected``.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import timedelta
from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

from city_forecast.errors import CityAlreadyExists, CityNotFound, PersistenceFailure
from city_forecast.observable import Observable
from city_forecast.schemas import UNKNOWN_COUNTRY, City, now_millis

if TYPE_CHECKING:
    from city_forecast.store import KeyValueStore

logger = logging.getLogger(__name__)

SAVED_CITIES_KEY = "saved_cities"
SELECTED_CITY_KEY = "selected_city"

_CITY_LIST = TypeAdapter(list[City])

# (name, country, lat, lon), most recently used first
DEFAULT_CITIES: list[tuple[str, str, float, float]] = [
    ("Taipei", "TW", 25.0330, 121.5654),
    ("New York", "US", 40.7128, -74.0060),
    ("London", "GB", 51.5074, -0.1278),
    ("Tokyo", "JP", 35.6762, 139.6503),
    ("Sydney", "AU", -33.8688, 151.2093),
]


def default_cities(now: int) -> list[City]:
    """The seed list, each city used 1-5 days before ``now`` (epoch millis)."""
    day_ms = int(timedelta(days=1).total_seconds() * 1000)
    return [
        City(
            name=name,
            country=country,
            latitude=lat,
            longitude=lon,
            last_used_time=now - offset * day_ms,
        )
        for offset, (name, country, lat, lon) in enumerate(DEFAULT_CITIES, start=1)
    ]


def by_recency(cities: list[City]) -> list[City]:
    """Most recently used first; ties keep insertion order."""
    return sorted(cities, key=lambda c: c.last_used_time, reverse=True)


class CityStore:
    """Owns the saved-city list and the selection.

    Construct once (see ``container.build_app``) and share the instance.
    State is loaded from ``kv`` on first access.
    """

    def __init__(self, kv: KeyValueStore, clock: Callable[[], int] = now_millis) -> None:
        self._kv = kv
        self._clock = clock
        self._lock = threading.RLock()
        self._loaded = False
        self._cities: list[City] = []
        self._selected: City | None = None
        self._cities_stream: Observable[list[City]] = Observable([])
        self._selected_stream: Observable[City | None] = Observable(None)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Load both snapshots from storage. Runs once; later calls are no-ops."""
        with self._lock:
            if self._loaded:
                return
            self._cities = self._load_cities()
            self._selected = self._load_selected()
            self._loaded = True
            self._publish()

    def _load_cities(self) -> list[City]:
        try:
            raw = self._kv.get(SAVED_CITIES_KEY)
            if raw is not None:
                return _CITY_LIST.validate_json(raw)
        except (PersistenceFailure, ValidationError, ValueError):
            logger.warning("Could not read saved cities, using defaults", exc_info=True)
        return default_cities(self._clock())

    def _load_selected(self) -> City | None:
        try:
            raw = self._kv.get(SELECTED_CITY_KEY)
            if raw is not None:
                return City.model_validate_json(raw)
        except (PersistenceFailure, ValidationError, ValueError):
            logger.warning("Could not read selected city, starting without one", exc_info=True)
        return None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def observe_cities(self) -> Observable[list[City]]:
        """Saved cities, most recently used first, re-emitted on every change."""
        self.initialize()
        return self._cities_stream

    def observe_selected(self) -> Observable[City | None]:
        """The selected city (or None), re-emitted on every change."""
        self.initialize()
        return self._selected_stream

    @property
    def cities(self) -> list[City]:
        """Snapshot of saved cities, most recently used first."""
        return self.observe_cities().value

    @property
    def selected(self) -> City | None:
        return self.observe_selected().value

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, city: City) -> City:
        """Save a copy of ``city`` stamped with the current time.

        Raises:
            CityAlreadyExists: (name, country) is already saved, ignoring case.
        """
        self.initialize()
        with self._lock:
            if any(c.matches(city.name, city.country) for c in self._cities):
                raise CityAlreadyExists(city.name, city.country)

            added = city.model_copy(update={"last_used_time": self._clock()})
            self._cities = [*self._cities, added]
            self._persist_cities()
            self._publish()
            logger.info("Added city %s, %s", added.name, added.country)
            return added

    def remove(self, city_name: str) -> None:
        """Remove every saved city named ``city_name``, ignoring case and country.

        Clears the selection when it names the same city.

        Raises:
            CityNotFound: no saved city has that name.
        """
        self.initialize()
        with self._lock:
            kept = [c for c in self._cities if not c.matches(city_name)]
            if len(kept) == len(self._cities):
                raise CityNotFound(city_name)

            self._cities = kept
            self._persist_cities()
            if self._selected is not None and self._selected.matches(city_name):
                self._selected = None
                self._persist_selected()
            self._publish()
            logger.info("Removed city %s", city_name)

    def set_selected(self, city_name: str) -> City:
        """Select ``city_name``. Never fails.

        A name that is not saved gets a placeholder City (country
        ``"Unknown"``, coordinates (0, 0)) appended to the list.

        Returns:
            The selected City as stored.
        """
        self.initialize()
        with self._lock:
            now = self._clock()
            existing = next((c for c in self._cities if c.matches(city_name)), None)

            if existing is not None:
                selected = existing.model_copy(update={"is_selected": True, "last_used_time": now})
                self._cities = [
                    selected if c is existing else c.model_copy(update={"is_selected": False})
                    for c in self._cities
                ]
            else:
                logger.info("Selecting unsaved city %r, adding placeholder", city_name)
                selected = City(
                    name=city_name,
                    country=UNKNOWN_COUNTRY,
                    latitude=0.0,
                    longitude=0.0,
                    is_selected=True,
                    last_used_time=now,
                )
                self._cities = [
                    *(c.model_copy(update={"is_selected": False}) for c in self._cities),
                    selected,
                ]

            self._selected = selected
            self._persist_cities()
            self._persist_selected()
            self._publish()
            return selected

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _publish(self) -> None:
        self._cities_stream.set(by_recency(self._cities))
        self._selected_stream.set(self._selected)

    def _persist_cities(self) -> None:
        self._write(SAVED_CITIES_KEY, _CITY_LIST.dump_json(self._cities).decode())

    def _persist_selected(self) -> None:
        if self._selected is None:
            self._write(SELECTED_CITY_KEY, None)
        else:
            self._write(SELECTED_CITY_KEY, self._selected.model_dump_json())

    def _write(self, key: str, value: str | None) -> None:
        try:
            if value is None:
                self._kv.remove(key)
            else:
                self._kv.put(key, value)
        except (PersistenceFailure, OSError):
            logger.warning("Failed to persist %s; change kept in memory only", key, exc_info=True)
