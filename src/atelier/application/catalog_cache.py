"""Short-lived read-through cache for catalog listings.

One instance is created by the composition root and handed both to the
readers that fill it and to the product repository, which calls
``invalidate()`` after every write.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Generic, Hashable, TypeVar

T = TypeVar("T")


class CatalogCache(Generic[T]):

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds cannot be negative")
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, tuple[float, T]] = {}
        self._generation = 0
        self._lock = threading.Lock()

    def get_or_load(self, key: Hashable, loader: Callable[[], T]) -> T:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry[0] > now:
                return entry[1]
            generation = self._generation
        value = loader()
        with self._lock:
            # Skip the store if an invalidation happened while loading.
            if self._generation == generation and self._ttl > 0:
                self._entries[key] = (now + self._ttl, value)
        return value

    def invalidate(self) -> None:
        with self._lock:
            self._entries = {}
            self._generation += 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
