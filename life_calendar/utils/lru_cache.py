"""Bounded LRU cache for memoizing pure computations."""

import threading
from collections import OrderedDict
from typing import Callable, Generic, Hashable, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class LRUCache(Generic[K, V]):
    """
    LRU cache with a maximum size and hit/miss counters.

    When the cache exceeds max_size, the least recently used items are evicted.
    """

    def __init__(self, max_size: int = 128):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self._cache: "OrderedDict[K, V]" = OrderedDict()
        self._max_size = max_size
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get_or_compute(self, key: K, compute: Callable[[], V]) -> V:
        """Return the cached value for key, computing and storing it on a miss."""
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
                self.hits += 1
                return self._cache[key]
            self.misses += 1

        value = compute()

        with self._lock:
            self._cache[key] = value
            self._cache.move_to_end(key)
            while len(self._cache) > self._max_size:
                self._cache.popitem(last=False)
        return value

    def __contains__(self, key: K) -> bool:
        with self._lock:
            return key in self._cache

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def clear(self) -> None:
        """Clear all items and reset counters."""
        with self._lock:
            self._cache.clear()
            self.hits = 0
            self.misses = 0
