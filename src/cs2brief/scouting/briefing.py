"""
Briefing Orchestrator - Compose a PreMatchBriefing from player ids.

Shared state (profile cache, rate limiter, provider client) lives on an
explicit BriefingContext handed to BriefingService, so tests can swap in
fake clocks and transports and nothing is kept in module globals.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

import httpx

from cs2brief.core.config import Cs2BriefConfig
from cs2brief.core.constants import RECENT_DATA_MIN_MATCHES, normalize_map_name
from cs2brief.core.errors import FetchError, ParseError
from cs2brief.infra.cache import TTLCache, profile_cache_key
from cs2brief.infra.rate_limit import RateLimiter
from cs2brief.integrations.tracker import TrackerClient
from cs2brief.scouting.aggregate import aggregate
from cs2brief.scouting.models import BriefingError, PlayerProfile, PreMatchBriefing
from cs2brief.scouting.normalize import normalize, synthetic_profile
from cs2brief.scouting.recommendations import generate_recommendations
from cs2brief.scouting.threats import detect_opportunities, detect_threats

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class UsageStats:
    """Counters for provider usage over the life of a service."""

    api_calls: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    errors: int = 0
    synthetic_profiles: int = 0

    @property
    def cache_hit_rate(self) -> float:
        total = self.cache_hits + self.cache_misses
        return self.cache_hits / total if total > 0 else 0.0


@dataclass
class BriefingContext:
    """Process-wide collaborators shared by every briefing request."""

    config: Cs2BriefConfig
    cache: TTLCache
    rate_limiter: RateLimiter
    client: TrackerClient
    now: Callable[[], datetime] = field(default=_utcnow)

    @classmethod
    def from_config(
        cls,
        config: Cs2BriefConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> BriefingContext:
        """Wire a cache, limiter, and Tracker.gg client from configuration."""
        config = config or Cs2BriefConfig()
        rate_limiter = RateLimiter({config.provider.name: config.provider.rate_per_minute})
        return cls(
            config=config,
            cache=TTLCache(ttl_seconds=config.cache.ttl_seconds),
            rate_limiter=rate_limiter,
            client=TrackerClient(config.provider, rate_limiter, transport=transport),
        )


def matches_played_bonus(matches_played: float) -> int:
    if matches_played > 100:
        return 10
    if matches_played > 50:
        return 5
    if matches_played > 20:
        return 3
    return 0


def calculate_confidence(profiles: Sequence[PlayerProfile], max_confidence: int = 95) -> int:
    """
    Confidence percentage for a briefing built from these profiles.

    10 per profile, plus a per-profile bonus for match volume, plus 15 when
    any profile has a usable recent history; capped at max_confidence.
    """
    confidence = 10 * len(profiles)
    confidence += sum(matches_played_bonus(p.stats.matches_played) for p in profiles)
    if any(len(p.recent_matches) >= RECENT_DATA_MIN_MATCHES for p in profiles):
        confidence += 15
    return min(confidence, max_confidence)


class BriefingService:
    """
    Builds pre-match briefings.

    Usage:
        service = BriefingService(BriefingContext.from_config(config))
        result = await service.build_briefing(team_ids, enemy_ids, "de_mirage")
        if result.error:
            print(result.fallback_strategy)
    """

    def __init__(self, context: BriefingContext) -> None:
        self.context = context
        self.usage = UsageStats()

    @property
    def config(self) -> Cs2BriefConfig:
        return self.context.config

    async def get_profile(self, player_id: str) -> PlayerProfile:
        """
        Cached, rate-limited fetch and normalization of one player.

        A failed recent-matches request keeps the profile and leaves its
        match history empty.

        Raises:
            FetchError: If the profile request fails
            ParseError: If the profile payload is malformed
        """
        client = self.context.client
        key = profile_cache_key(client.provider, player_id)

        cached = self.context.cache.get(key)
        if cached is not None:
            self.usage.cache_hits += 1
            logger.debug(f"Cache hit for {player_id}")
            return cached
        self.usage.cache_misses += 1

        raw_profile = await client.fetch_profile(player_id)
        self.usage.api_calls += 1

        try:
            raw_matches = await client.fetch_recent_matches(player_id)
            self.usage.api_calls += 1
        except (FetchError, ParseError) as e:
            self.usage.errors += 1
            logger.warning(f"Recent matches unavailable for {player_id}: {e}")
            raw_matches = []

        profile = normalize(
            raw_profile, raw_matches, player_id=player_id, provider=client.provider
        )
        self.context.cache.set(key, profile)
        return profile

    async def load_profile(self, player_id: str) -> PlayerProfile:
        """get_profile, degrading to a synthetic profile when fallback is enabled."""
        try:
            return await self.get_profile(player_id)
        except (FetchError, ParseError) as e:
            self.usage.errors += 1
            if not self.config.briefing.synthetic_fallback:
                raise
            logger.warning(f"Using synthetic data for {player_id}: {e}")
            self.usage.synthetic_profiles += 1
            return synthetic_profile(player_id, platform=self.config.provider.platform)

    async def build_briefing(
        self, team_ids: Sequence[str], enemy_ids: Sequence[str], map_name: str = ""
    ) -> PreMatchBriefing | BriefingError:
        """
        Generate the pre-match briefing for two rosters.

        All players are loaded concurrently. Per-player failures become
        synthetic profiles; only a failure of orchestration itself yields a
        BriefingError, which carries a fallback strategy.

        Args:
            team_ids: Player ids of the requesting team
            enemy_ids: Player ids of the opposing team
            map_name: Map id, e.g. "de_mirage"

        Returns:
            PreMatchBriefing, or BriefingError on total failure
        """
        logger.info(
            f"Generating briefing: {len(team_ids)} vs {len(enemy_ids)} players on "
            f"{map_name or 'unknown map'}"
        )

        try:
            profiles = await asyncio.gather(
                *(self.load_profile(pid) for pid in [*team_ids, *enemy_ids])
            )
            team_profiles = list(profiles[: len(team_ids)])
            enemy_profiles = list(profiles[len(team_ids) :])

            team_analysis = aggregate(team_profiles)
            enemy_analysis = aggregate(enemy_profiles)
            synthetic = sum(1 for p in profiles if p.is_synthetic)

            return PreMatchBriefing(
                generated_at=self.context.now(),
                map_name=normalize_map_name(map_name),
                team_analysis=team_analysis,
                enemy_analysis=enemy_analysis,
                threats=detect_threats(enemy_profiles),
                opportunities=detect_opportunities(enemy_profiles),
                recommendations=generate_recommendations(
                    team_analysis, enemy_analysis, map_name
                ),
                confidence=calculate_confidence(
                    enemy_profiles, self.config.briefing.max_confidence
                ),
                real_profiles=len(profiles) - synthetic,
                synthetic_profiles=synthetic,
            )
        except Exception as e:
            logger.exception("Error generating briefing")
            return BriefingError(message=f"Failed to generate briefing: {e}")

    def get_stats(self) -> dict[str, Any]:
        """
        Usage counters plus cache size and hit rate.

        Expired profiles are purged first so cache_size only counts entries
        that would still be served.
        """
        self.context.cache.purge_expired()
        return {
            **asdict(self.usage),
            "cache_size": self.context.cache.stats().size,
            "cache_hit_rate": round(self.usage.cache_hit_rate, 3),
        }

    def clear_cache(self) -> int:
        """Drop every cached profile. Returns the number removed."""
        removed = self.context.cache.clear()
        logger.info(f"Cleared {removed} cached profiles")
        return removed


async def build_briefing(
    team_ids: Sequence[str],
    enemy_ids: Sequence[str],
    map_name: str = "",
    config: Cs2BriefConfig | None = None,
) -> PreMatchBriefing | BriefingError:
    """
    Convenience function for a one-off briefing with a fresh context.

    Args:
        team_ids: Player ids of the requesting team
        enemy_ids: Player ids of the opposing team
        map_name: Map id
        config: Optional configuration (defaults are used otherwise)

    Returns:
        PreMatchBriefing or BriefingError
    """
    service = BriefingService(BriefingContext.from_config(config))
    return await service.build_briefing(team_ids, enemy_ids, map_name)
