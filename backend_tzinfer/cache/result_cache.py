"""
TTL cache for inference results, keyed by the canonical address set.

Expired entries are never returned; they are evicted lazily on lookup. There is
no per-key coalescing: two concurrent misses for the same key may both compute,
and the last write wins.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Iterable

DEFAULT_CACHE_TTL_SEC = 300.0


def canonical_key(addresses: Iterable[str]) -> str:
    """Sorted, lower-cased, de-duplicated addresses joined by ','; order and case do not matter."""
    return ",".join(sorted({str(a).strip().lower() for a in addresses}))


class ResultCache:
    """Thread-safe cache with a fixed TTL from write time. Key -> (value, expiry_ts)."""

    def __init__(
        self,
        ttl_sec: float = DEFAULT_CACHE_TTL_SEC,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_sec <= 0:
            raise ValueError("ttl_sec must be positive")
        self._ttl = ttl_sec
        self._clock = clock
        self._store: dict[str, tuple[Any, float]] = {}
        self._lock = threading.Lock()

    @property
    def ttl_sec(self) -> float:
        return self._ttl

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            value, expiry = entry
            if self._clock() >= expiry:
                del self._store[key]
                return None
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._store[key] = (value, self._clock() + self._ttl)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
