"""
In-memory TTL cache for normalized player profiles.

Entries expire at insertion time + TTL and are evicted lazily on access.
There is no size bound: keys are per player and a match roster has at most
ten players.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from cs2brief.core.constants import PROFILE_CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)


def profile_cache_key(provider: str, player_id: str) -> str:
    """Build the cache key for a player profile."""
    return f"profile:{provider}:{player_id}"


@dataclass
class CacheStats:
    """Cache statistics."""

    size: int
    hit_count: int = 0
    miss_count: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hit_count + self.miss_count
        return self.hit_count / total if total > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "size": self.size,
            "hits": self.hit_count,
            "misses": self.miss_count,
            "hit_rate": round(self.hit_rate, 3),
        }


class TTLCache:
    """
    Thread-safe key/value store with a fixed time-to-live.

    Example:
        >>> cache = TTLCache(ttl_seconds=60)
        >>> cache.set("profile:trackergg:123", profile)
        >>> cache.get("profile:trackergg:123") is profile
        True
    """

    def __init__(
        self,
        ttl_seconds: float = PROFILE_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None on a miss or an expired entry."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                self._misses += 1
                logger.debug(f"Evicted expired cache entry: {key}")
                return None

            self._hits += 1
            return value

    def set(self, key: str, value: Any) -> None:
        """Store a value; it expires ttl_seconds from now."""
        with self._lock:
            self._entries[key] = (self._clock() + self.ttl_seconds, value)

    def purge_expired(self) -> int:
        """Drop every expired entry. Returns the number removed."""
        with self._lock:
            now = self._clock()
            expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.info(f"Purged {len(expired)} expired cache entries")
        return len(expired)

    def clear(self) -> int:
        """Drop every entry. Returns the number removed."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        return count

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(size=len(self._entries), hit_count=self._hits, miss_count=self._misses)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and self._clock() < entry[0]
