"""Bounded, thread-safe memoization cache."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True)
class CacheInfo:
    """Snapshot of cache statistics.

    Attributes:
        hits: Lookups served from the cache.
        misses: Lookups that ran the computation.
        size: Entries currently held.
        maxsize: LRU capacity.
    """

    hits: int
    misses: int
    size: int
    maxsize: int


class MemoCache(Generic[K, V]):
    """LRU cache with at-most-once computation per key.

    Concurrent callers asking for the same missing key wait for the first
    caller's computation instead of repeating it. If that computation
    raises, the waiters retry it themselves.

    Args:
        maxsize: Maximum number of entries; least recently used entries are
            evicted beyond this.
        name: Label used in log messages.
    """

    def __init__(self, maxsize: int, name: str = "memo") -> None:
        if maxsize < 1:
            raise ValueError(f"Cache maxsize must be >= 1, got {maxsize}")
        self.maxsize = maxsize
        self.name = name
        self._data: OrderedDict[K, V] = OrderedDict()
        self._pending: dict[K, threading.Event] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def get_or_compute(self, key: K, compute: Callable[[], V]) -> V:
        """Return the cached value for ``key``, computing it on a miss."""
        while True:
            with self._lock:
                if key in self._data:
                    self._data.move_to_end(key)
                    self._hits += 1
                    return self._data[key]
                event = self._pending.get(key)
                if event is None:
                    event = threading.Event()
                    self._pending[key] = event
                    self._misses += 1
                    break
            event.wait()

        try:
            value = compute()
        except BaseException:
            with self._lock:
                self._pending.pop(key).set()
            raise

        with self._lock:
            self._data[key] = value
            self._data.move_to_end(key)
            while len(self._data) > self.maxsize:
                self._data.popitem(last=False)
            self._pending.pop(key).set()
        return value

    def clear(self) -> None:
        """Drop all entries and reset statistics."""
        with self._lock:
            self._data.clear()
            self._hits = 0
            self._misses = 0
        logger.debug("Cleared %s cache", self.name)

    def info(self) -> CacheInfo:
        with self._lock:
            return CacheInfo(
                hits=self._hits,
                misses=self._misses,
                size=len(self._data),
                maxsize=self.maxsize,
            )
