"""Success / Failure result type for view-model commands.

Loading is not a variant: pending work is a flag on screen state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Command completed; ``value`` carries its payload (may be None)."""

    value: T

    @property
    def is_success(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Command failed with ``error``."""

    error: Exception

    @property
    def is_success(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return str(self.error)


Result = Success[T] | Failure
