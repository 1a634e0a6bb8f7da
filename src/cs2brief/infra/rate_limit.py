"""
Per-provider request pacing.

Each provider gets a minimum interval of 60 / rate_per_minute seconds between
requests. A caller reserves the next free slot under a lock and then sleeps
until that slot, so concurrent callers never read the same "last request"
time and burst past the limit. Calls are delayed, never rejected.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from collections.abc import Awaitable, Callable

from cs2brief.core.constants import DEFAULT_RATE_PER_MINUTE

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Minimum-interval gate keyed by provider name.

    Example:
        >>> limiter = RateLimiter({"trackergg": 30})
        >>> await limiter.wait("trackergg")  # returns immediately
        >>> await limiter.wait("trackergg")  # waits ~2 seconds
    """

    def __init__(
        self,
        rates_per_minute: dict[str, int] | None = None,
        default_rate_per_minute: int = DEFAULT_RATE_PER_MINUTE,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._rates = dict(rates_per_minute or {})
        self._default_rate = default_rate_per_minute
        self._clock = clock
        self._sleep = sleep
        self._last_slot: dict[str, float] = {}
        self._lock = threading.Lock()

    def set_rate(self, provider: str, rate_per_minute: int) -> None:
        if rate_per_minute <= 0:
            raise ValueError(f"rate_per_minute must be positive, got {rate_per_minute}")
        with self._lock:
            self._rates[provider] = rate_per_minute

    def min_interval(self, provider: str) -> float:
        """Seconds that must separate two requests to the provider."""
        return 60.0 / self._rates.get(provider, self._default_rate)

    def reserve(self, provider: str) -> float:
        """
        Claim the next request slot for a provider.

        Returns:
            Seconds the caller must wait before issuing its request.
        """
        with self._lock:
            now = self._clock()
            last = self._last_slot.get(provider)
            slot = now if last is None else max(now, last + self.min_interval(provider))
            self._last_slot[provider] = slot
        return slot - now

    async def wait(self, provider: str) -> None:
        """Block until the caller may send its next request to the provider."""
        delay = self.reserve(provider)
        if delay > 0:
            logger.debug(f"Rate limit: waiting {delay * 1000:.0f}ms for {provider}")
            await self._sleep(delay)

    def reset(self, provider: str | None = None) -> None:
        """Forget request history for one provider, or for all of them."""
        with self._lock:
            if provider is None:
                self._last_slot.clear()
            else:
                self._last_slot.pop(provider, None)
