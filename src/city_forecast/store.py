"""Key-value persistence for small application state.

Each key is one JSON file under the base directory, wrapped in a metadata
envelope::

    {"meta": {"key": "saved_cities", "written_at": "..."}, "data": "<serialized>"}

Values are opaque strings; callers own their serialization. ``MemoryKeyValueStore``
has the same interface without touching disk.
"""

from __future__ import annotations

import json
import re
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003 - used at runtime, not just annotations
from typing import Any, Protocol

from city_forecast.errors import PersistenceFailure

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(Protocol):
    """Synchronous, durable string storage scoped to the application."""

    def get(self, key: str) -> str | None: ...

    def put(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class FileKeyValueStore:
    """Stores each key as ``<base_dir>/<key>.json``."""

    def __init__(self, base_dir: Path) -> None:
        self.base = base_dir

    def get(self, key: str) -> str | None:
        """Return the stored string, or None if the key was never written."""
        full = self._resolve(key)
        if not full.exists():
            return None
        try:
            with full.open(encoding="utf-8") as f:
                envelope: dict[str, Any] = json.load(f)
        except (OSError, ValueError) as e:
            msg = f"Failed to read {key!r} from {full}: {e}"
            raise PersistenceFailure(msg) from e
        data = envelope.get("data")
        return data if isinstance(data, str) else None

    def put(self, key: str, value: str) -> None:
        """Write ``value`` under ``key``, replacing any previous value."""
        full = self._resolve(key)
        envelope = {
            "meta": {"key": key, "written_at": datetime.now(UTC).isoformat()},
            "data": value,
        }
        tmp = full.with_suffix(".json.tmp")
        try:
            full.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(envelope, f, indent=2)
            tmp.replace(full)
        except OSError as e:
            msg = f"Failed to write {key!r} to {full}: {e}"
            raise PersistenceFailure(msg) from e

    def remove(self, key: str) -> None:
        """Delete ``key``; missing keys are ignored."""
        full = self._resolve(key)
        try:
            full.unlink(missing_ok=True)
        except OSError as e:
            msg = f"Failed to remove {key!r} at {full}: {e}"
            raise PersistenceFailure(msg) from e

    def _resolve(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key) or key in {".", ".."}:
            msg = f"Invalid store key: {key!r}"
            raise ValueError(msg)
        full = self.base / f"{key}.json"
        try:
            full.resolve().relative_to(self.base.resolve())
        except ValueError:
            msg = f"Key escapes store base directory: {key}"
            raise ValueError(msg) from None
        return full


class MemoryKeyValueStore:
    """In-process store for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def put(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)
