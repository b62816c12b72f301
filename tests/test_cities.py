"""Tests for the saved-city store."""

from __future__ import annotations

import json
import threading
from typing import TYPE_CHECKING

import pytest

from city_forecast.cities import (
    DEFAULT_CITIES,
    SAVED_CITIES_KEY,
    SELECTED_CITY_KEY,
    CityStore,
    by_recency,
    default_cities,
)
from city_forecast.errors import CityAlreadyExists, CityNotFound, PersistenceFailure
from city_forecast.schemas import City
from city_forecast.store import FileKeyValueStore, MemoryKeyValueStore

if TYPE_CHECKING:
    from pathlib import Path

    from conftest import FakeClock


class FailingKeyValueStore(MemoryKeyValueStore):
    """Reads work; every write fails."""

    def put(self, key: str, value: str) -> None:
        msg = f"disk full writing {key}"
        raise PersistenceFailure(msg)

    def remove(self, key: str) -> None:
        msg = f"disk full removing {key}"
        raise PersistenceFailure(msg)


class TestDefaults:
    """Seed list used when nothing is stored yet."""

    def test_default_cities(self) -> None:
        cities = default_cities(now=10 * 86_400_000)
        assert [c.name for c in cities] == [name for name, *_ in DEFAULT_CITIES]
        assert cities[0].name == "Taipei"
        assert cities[0].last_used_time > cities[-1].last_used_time
        assert not any(c.is_selected for c in cities)

    def test_empty_store_lists_defaults(self, city_store: CityStore) -> None:
        names = [c.name for c in city_store.cities]
        assert names == ["Taipei", "New York", "London", "Tokyo", "Sydney"]

    def test_no_selection_by_default(self, city_store: CityStore) -> None:
        assert city_store.selected is None

    def test_initialize_is_idempotent(self, city_store: CityStore) -> None:
        city_store.initialize()
        city_store.add(City(name="Oslo", country="NO"))
        city_store.initialize()
        assert any(c.name == "Oslo" for c in city_store.cities)


class TestAdd:
    """Adding cities."""

    def test_add_appears_first(self, city_store: CityStore) -> None:
        """A new city is stamped with the current time, so it sorts first."""
        added = city_store.add(City(name="Portland", country="US", latitude=45.5, longitude=-122.6))

        assert city_store.cities[0] == added
        assert added.last_used_time > 0

    def test_add_twice_case_varied(self, city_store: CityStore) -> None:
        """Second add with same (name, country) in different case fails; one entry stored."""
        city_store.add(City(name="Portland", country="US"))

        with pytest.raises(CityAlreadyExists) as exc_info:
            city_store.add(City(name="PORTLAND", country="us"))

        assert "already exists" in str(exc_info.value)
        matches = [c for c in city_store.cities if c.matches("portland", "US")]
        assert len(matches) == 1

    def test_same_name_other_country_allowed(self, city_store: CityStore) -> None:
        city_store.add(City(name="Portland", country="US"))
        city_store.add(City(name="Portland", country="AU"))
        assert len([c for c in city_store.cities if c.matches("Portland")]) == 2

    def test_add_persists(self, city_store: CityStore, kv: MemoryKeyValueStore) -> None:
        city_store.add(City(name="Oslo", country="NO"))
        stored = json.loads(kv.data[SAVED_CITIES_KEY])
        assert any(c["name"] == "Oslo" for c in stored)

    def test_failing_write_does_not_fail_add(self, clock: FakeClock) -> None:
        store = CityStore(FailingKeyValueStore(), clock=clock)

        added = store.add(City(name="Oslo", country="NO"))

        assert added.name == "Oslo"
        assert store.cities[0].name == "Oslo"


class TestRemove:
    """Removing cities."""

    def test_remove_case_insensitive(self, city_store: CityStore) -> None:
        city_store.remove("lonDON")
        assert not any(c.name == "London" for c in city_store.cities)

    def test_remove_unknown_raises(self, city_store: CityStore) -> None:
        with pytest.raises(CityNotFound):
            city_store.remove("Atlantis")

    def test_remove_selected_clears_selection(
        self, city_store: CityStore, kv: MemoryKeyValueStore
    ) -> None:
        """Removing the selected city empties the selection stream."""
        emitted: list[City | None] = []
        city_store.observe_selected().subscribe(emitted.append)
        city_store.set_selected("Tokyo")

        city_store.remove("tokyo")

        assert city_store.selected is None
        assert emitted[-1] is None
        assert SELECTED_CITY_KEY not in kv.data

    def test_remove_other_keeps_selection(self, city_store: CityStore) -> None:
        city_store.set_selected("Tokyo")
        city_store.remove("London")
        selected = city_store.selected
        assert selected is not None
        assert selected.name == "Tokyo"


class TestSetSelected:
    """Selecting a city."""

    def test_select_tokyo_scenario(self, city_store: CityStore) -> None:
        """Selecting a seed city moves it to the front and emits it as selected."""
        emitted: list[City | None] = []
        city_store.observe_selected().subscribe(emitted.append)

        city_store.set_selected("Tokyo")

        first = city_store.cities[0]
        assert first.name == "Tokyo"
        assert first.is_selected is True
        assert emitted[-1] is not None
        assert emitted[-1].name == "Tokyo"
        assert emitted[-1].is_selected is True

    def test_at_most_one_selected(self, city_store: CityStore) -> None:
        for name in ["Tokyo", "London", "Nowhere", "tokyo", "Sydney", "Elsewhere"]:
            city_store.set_selected(name)
            assert sum(c.is_selected for c in city_store.cities) == 1

    def test_unknown_city_added_as_placeholder(self, city_store: CityStore) -> None:
        selected = city_store.set_selected("CityNeverAdded")

        assert selected.country == "Unknown"
        assert (selected.latitude, selected.longitude) == (0.0, 0.0)
        assert selected.is_placeholder
        stored = [c for c in city_store.cities if c.name == "CityNeverAdded"]
        assert len(stored) == 1
        assert stored[0].country == "Unknown"

    def test_reselecting_placeholder_does_not_duplicate(self, city_store: CityStore) -> None:
        city_store.set_selected("Atlantis")
        city_store.set_selected("Tokyo")
        city_store.set_selected("atlantis")
        assert len([c for c in city_store.cities if c.matches("Atlantis")]) == 1

    def test_concurrent_selects_keep_single_selection(self, city_store: CityStore) -> None:
        names = ["Taipei", "New York", "London", "Tokyo", "Sydney"] * 10
        threads = [threading.Thread(target=city_store.set_selected, args=(n,)) for n in names]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert sum(c.is_selected for c in city_store.cities) == 1


class TestPersistence:
    """Reloading state from the key-value store."""

    def test_round_trip_through_files(self, tmp_path: Path, clock: FakeClock) -> None:
        first = CityStore(FileKeyValueStore(tmp_path), clock=clock)
        first.add(City(name="Oslo", country="NO", latitude=59.9, longitude=10.7))
        first.set_selected("Oslo")

        second = CityStore(FileKeyValueStore(tmp_path), clock=clock)

        assert second.cities[0].name == "Oslo"
        selected = second.selected
        assert selected is not None
        assert selected.name == "Oslo"
        assert selected.latitude == 59.9

    def test_corrupt_list_falls_back_to_defaults(self, clock: FakeClock) -> None:
        kv = MemoryKeyValueStore({SAVED_CITIES_KEY: "{not json"})
        store = CityStore(kv, clock=clock)
        assert len(store.cities) == len(DEFAULT_CITIES)

    def test_corrupt_selection_is_ignored(self, clock: FakeClock) -> None:
        kv = MemoryKeyValueStore({SELECTED_CITY_KEY: '{"name": 5}'})
        store = CityStore(kv, clock=clock)
        assert store.selected is None

    def test_unreadable_file_falls_back(self, tmp_path: Path, clock: FakeClock) -> None:
        (tmp_path / f"{SAVED_CITIES_KEY}.json").write_text("garbage")
        store = CityStore(FileKeyValueStore(tmp_path), clock=clock)
        assert len(store.cities) == len(DEFAULT_CITIES)


class TestObserve:
    """Streams re-emit on every change."""

    def test_cities_stream_emits_on_change(self, city_store: CityStore) -> None:
        emitted: list[list[City]] = []
        city_store.observe_cities().subscribe(emitted.append)

        city_store.add(City(name="Oslo", country="NO"))

        assert len(emitted) >= 2
        assert emitted[-1][0].name == "Oslo"

    def test_by_recency(self) -> None:
        cities = [
            City(name="A", country="X", last_used_time=1),
            City(name="B", country="X", last_used_time=3),
            City(name="C", country="X", last_used_time=2),
        ]
        assert [c.name for c in by_recency(cities)] == ["B", "C", "A"]
