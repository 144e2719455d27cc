"""A thread-safe LRU cache of search results with an optional time to live."""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from typing import Any, Optional

DEFAULT_MAX_ENTRIES = 1000
DEFAULT_TTL_SECONDS = 60.0


@dataclass(frozen=True)
class CacheStatistics:
    """Counters describing cache usage."""

    hit_count: int = 0
    miss_count: int = 0
    eviction_count: int = 0
    current_size: int = 0
    max_size: int = 0
    hit_rate: float = 0.0


@dataclass
class _Entry:
    results: list[Any]
    timestamp: float


class QueryCache:
    """Least-recently-used cache; entries older than ``ttl`` seconds are misses.

    A ``ttl`` of zero or less disables expiry.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        ttl: float = DEFAULT_TTL_SECONDS,
    ) -> None:
        self._max_entries = max_entries
        self._ttl = ttl
        self._entries: OrderedDict[Hashable, _Entry] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _expired(self, entry: _Entry, now: float) -> bool:
        return self._ttl > 0 and now - entry.timestamp > self._ttl

    def _evict_if_needed(self) -> None:
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)
            self._evictions += 1

    def get(self, key: Hashable) -> Optional[list[Any]]:
        """Return a copy of the cached results, or None on a miss."""
        now = time.monotonic()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            if self._expired(entry, now):
                del self._entries[key]
                self._evictions += 1
                self._misses += 1
                return None
            self._entries.move_to_end(key)
            self._hits += 1
            return list(entry.results)

    def put(self, key: Hashable, results: Sequence[Any]) -> None:
        """Store results under a key, making it the most recently used."""
        now = time.monotonic()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                entry.results = list(results)
                entry.timestamp = now
                self._entries.move_to_end(key)
                return
            self._entries[key] = _Entry(list(results), now)
            self._evict_if_needed()

    def clear(self) -> None:
        """Drop every entry; the counters are kept."""
        with self._lock:
            self._entries.clear()

    def resize(self, max_entries: int) -> None:
        """Change the capacity, evicting least recently used entries if needed."""
        with self._lock:
            self._max_entries = max_entries
            self._evict_if_needed()

    def set_ttl(self, ttl: float) -> None:
        """Change the time to live in seconds."""
        with self._lock:
            self._ttl = ttl

    def stats(self) -> CacheStatistics:
        """Return a snapshot of the cache counters."""
        with self._lock:
            total = self._hits + self._misses
            return CacheStatistics(
                hit_count=self._hits,
                miss_count=self._misses,
                eviction_count=self._evictions,
                current_size=len(self._entries),
                max_size=self._max_entries,
                hit_rate=self._hits / total if total else 0.0,
            )