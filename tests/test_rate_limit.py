"""Tests for the per-provider rate limiter."""

import asyncio
import time

import pytest

from cs2brief.infra.rate_limit import RateLimiter


class FakeTime:
    """Clock and sleep pair where sleeping advances the clock."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def clock(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_time():
    return FakeTime()


@pytest.fixture
def limiter(fake_time):
    return RateLimiter({"trackergg": 30}, clock=fake_time.clock, sleep=fake_time.sleep)


class TestMinInterval:
    def test_interval_from_rate(self, limiter):
        """30 requests per minute means 2 seconds between requests."""
        assert limiter.min_interval("trackergg") == pytest.approx(2.0)

    def test_unknown_provider_uses_default_rate(self):
        limiter = RateLimiter(default_rate_per_minute=60)
        assert limiter.min_interval("leetify") == pytest.approx(1.0)

    def test_set_rate_rejects_non_positive(self, limiter):
        with pytest.raises(ValueError):
            limiter.set_rate("trackergg", 0)


class TestWait:
    def test_first_request_does_not_wait(self, limiter, fake_time):
        asyncio.run(limiter.wait("trackergg"))
        assert fake_time.sleeps == []

    def test_back_to_back_requests_are_spaced(self, limiter, fake_time):
        """The second immediate request waits the full interval."""

        async def run():
            await limiter.wait("trackergg")
            await limiter.wait("trackergg")

        asyncio.run(run())
        assert fake_time.sleeps == [pytest.approx(2.0)]

    def test_no_wait_after_interval_elapsed(self, limiter, fake_time):
        async def run():
            await limiter.wait("trackergg")
            fake_time.now += 5
            await limiter.wait("trackergg")

        asyncio.run(run())
        assert fake_time.sleeps == []

    def test_partial_wait(self, limiter, fake_time):
        """Only the remainder of the interval is waited."""

        async def run():
            await limiter.wait("trackergg")
            fake_time.now += 0.5
            await limiter.wait("trackergg")

        asyncio.run(run())
        assert fake_time.sleeps == [pytest.approx(1.5)]

    def test_providers_are_independent(self, limiter, fake_time):
        async def run():
            await limiter.wait("trackergg")
            await limiter.wait("leetify")

        asyncio.run(run())
        assert fake_time.sleeps == []


class TestSlotReservation:
    def test_concurrent_reservations_are_staggered(self, limiter):
        """Callers arriving at the same instant get successive slots."""
        delays = [limiter.reserve("trackergg") for _ in range(3)]
        assert delays == [pytest.approx(0.0), pytest.approx(2.0), pytest.approx(4.0)]

    def test_gathered_waits_never_burst(self):
        """Concurrent tasks on one provider are spaced by the interval."""
        limiter = RateLimiter({"trackergg": 600})  # 0.1s interval
        stamps: list[float] = []

        async def call():
            await limiter.wait("trackergg")
            stamps.append(time.monotonic())

        async def run():
            await asyncio.gather(*(call() for _ in range(3)))

        asyncio.run(run())
        stamps.sort()
        gaps = [b - a for a, b in zip(stamps, stamps[1:])]
        assert all(gap >= 0.09 for gap in gaps)

    def test_reset_forgets_history(self, limiter):
        limiter.reserve("trackergg")
        limiter.reset("trackergg")
        assert limiter.reserve("trackergg") == pytest.approx(0.0)


class TestWallClock:
    def test_back_to_back_calls_separated_in_real_time(self):
        """Two real calls are at least 60000/rate ms apart."""
        limiter = RateLimiter({"trackergg": 600})

        async def run() -> float:
            start = time.monotonic()
            await limiter.wait("trackergg")
            await limiter.wait("trackergg")
            return time.monotonic() - start

        elapsed = asyncio.run(run())
        assert elapsed >= 0.095
