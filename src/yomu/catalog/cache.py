"""Time-boxed cache for catalog listings.

The cache is an explicit object handed to the catalog collaborator; the
reading pipeline never touches it.
"""

from __future__ import annotations

from dataclasses import dataclass
import threading
import time
from typing import Any, Callable, Generic, TypeVar

from yomu.config import DEFAULT_CATALOG_TTL_SECONDS, ReaderSettings


T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class _CacheSlot:
    value: Any
    stored_at: float


class CatalogCache(Generic[T]):
    """Hold one value per key until ``ttl_seconds`` have passed."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CATALOG_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._slots: dict[str, _CacheSlot] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: ReaderSettings, *, clock: Callable[[], float] = time.monotonic) -> "CatalogCache[T]":
        return cls(settings.catalog_ttl_seconds, clock=clock)

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def get(self, key: str) -> T | None:
        with self._lock:
            slot = self._slots.get(key)
            if slot is None:
                return None
            if self._clock() - slot.stored_at >= self._ttl_seconds:
                del self._slots[key]
                return None
            return slot.value

    def put(self, key: str, value: T) -> None:
        with self._lock:
            self._slots[key] = _CacheSlot(value=value, stored_at=self._clock())

    def get_or_load(self, key: str, loader: Callable[[], T]) -> T:
        cached = self.get(key)
        if cached is not None:
            return cached
        value = loader()
        self.put(key, value)
        return value

    def invalidate(self, key: str | None = None) -> None:
        """Drop ``key``, or every entry when no key is given."""

        with self._lock:
            if key is None:
                self._slots.clear()
            else:
                self._slots.pop(key, None)
