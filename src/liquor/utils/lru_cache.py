"""Bounded, thread-safe LRU cache.

Used by the Environment to cache compiled templates by name, so an
``include`` inside a loop compiles its target once.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from collections.abc import Callable
from typing import Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class LRUCache(Generic[K, V]):
    """Least-recently-used cache with a fixed capacity.

    Args:
        maxsize: Maximum number of entries (0 disables caching)
        name: Label used in ``stats()`` and repr

    Example:
        >>> cache: LRUCache[str, int] = LRUCache(maxsize=2)
        >>> cache.get_or_set("a", lambda: 1)
        1
        >>> cache.stats()["misses"]
        1
    """

    __slots__ = ("_data", "_hits", "_lock", "_misses", "maxsize", "name")

    def __init__(self, maxsize: int = 400, name: str = "cache"):
        self.maxsize = maxsize
        self.name = name
        self._data: OrderedDict[K, V] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: K, default: V | None = None) -> V | None:
        with self._lock:
            if key in self._data:
                self._data.move_to_end(key)
                self._hits += 1
                return self._data[key]
            self._misses += 1
            return default

    def set(self, key: K, value: V) -> None:
        if self.maxsize <= 0:
            return
        with self._lock:
            self._data[key] = value
            self._data.move_to_end(key)
            while len(self._data) > self.maxsize:
                self._data.popitem(last=False)

    def get_or_set(self, key: K, factory: Callable[[], V]) -> V:
        """Return the cached value, computing and storing it on a miss.

        ``factory`` runs outside the lock, so two threads missing the same
        key may both compute it; the last one stored wins.
        """
        with self._lock:
            if key in self._data:
                self._data.move_to_end(key)
                self._hits += 1
                return self._data[key]
            self._misses += 1
        value = factory()
        self.set(key, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> dict[str, int | str]:
        with self._lock:
            return {
                "name": self.name,
                "size": len(self._data),
                "maxsize": self.maxsize,
                "hits": self._hits,
                "misses": self._misses,
            }

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __repr__(self) -> str:
        return f"<LRUCache {self.name!r} {len(self)}/{self.maxsize}>"
