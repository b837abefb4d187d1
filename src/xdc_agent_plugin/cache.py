"""In-process result cache with per-entry expiry.

Used by the portfolio action to avoid fanning out RPC calls for the same
chain and address within a short window.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

DEFAULT_TTL_SECONDS = 60.0
DEFAULT_MAX_SIZE = 1000


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


class ResultCache:
    """Key/value store whose entries expire ``ttl`` seconds after insertion.

    Expired entries are purged on every write. Once ``max_size`` live entries
    are held, the least recently used one is evicted.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        max_size: int = DEFAULT_MAX_SIZE,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self._clock = clock
        # Insertion order doubles as recency order
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        """Return the cached value, or ``None`` if absent or expired."""
        with self._lock:
            entry = self._entries.pop(key, None)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                return None
            self._entries[key] = entry
            return entry.value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        ttl = self.ttl_seconds if ttl is None else ttl
        with self._lock:
            now = self._clock()
            self._purge_expired(now)
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(value=value, expires_at=now + ttl)
            while len(self._entries) > self.max_size:
                del self._entries[next(iter(self._entries))]

    def _purge_expired(self, now: float) -> None:
        expired = [k for k, e in self._entries.items() if now >= e.expires_at]
        for key in expired:
            del self._entries[key]

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for e in self._entries.values() if now < e.expires_at)


# Shared by every portfolio action in the process
portfolio_cache = ResultCache()
