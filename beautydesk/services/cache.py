"""
beautydesk/services/cache.py – in-memory TTL cache for backend collections.

Keyed by a logical resource name ("services", "main-categories", …) rather
than by URL. Expiry is lazy: a stale entry is treated as absent on read and
overwritten by the next store. There is no background sweep and no size
bound; the set of resource keys is small and fixed.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    data: Any
    timestamp: float


class TTLCache:
    """Minimal in-memory key/value store with a single TTL for every entry."""

    def __init__(
        self,
        ttl_seconds: float = 600,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store: dict[str, CacheEntry] = {}
        self._ttl = ttl_seconds
        self._clock = clock

    @property
    def ttl(self) -> float:
        return self._ttl

    # ── Public API ────────────────────────────────────────────────────────────

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if absent or stale."""
        entry = self._store.get(key)
        if entry is None:
            return None
        if self._clock() - entry.timestamp >= self._ttl:
            return None
        logger.debug("Cache hit for %s", key)
        return entry.data

    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, stamped with the current time."""
        self._store[key] = CacheEntry(data=value, timestamp=self._clock())
        logger.debug("Cached data for %s", key)

    def delete(self, key: str) -> None:
        if self._store.pop(key, None) is not None:
            logger.info("Cleared cache for %s", key)

    def clear(self) -> None:
        self._store.clear()
        logger.info("Cleared all cache")

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        """Raw store size. Stale entries count until overwritten or deleted,
        so ``len()`` can exceed the number of keys for which ``in`` is true."""
        return len(self._store)
