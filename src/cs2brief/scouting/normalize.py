"""
Profile Normalizer - Raw provider payloads to PlayerProfile.

Role, play style, strengths and weaknesses are pure functions of
PlayerStats. Role and play style are ordered (predicate, label) tables where
the first matching rule wins; strength and weakness tags are evaluated
independently, so a profile can carry several of each or none.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any, TypeVar

from pydantic import ValidationError

from cs2brief.core.constants import (
    DEFAULT_PLATFORM,
    MAP_PREFERENCE_COUNT,
    MAX_RECENT_MATCHES,
    RECENT_FORM_MATCHES,
    TRACKER_PROVIDER,
    DataSource,
    PlayStyle,
    RecentForm,
    Role,
)
from cs2brief.core.errors import ParseError
from cs2brief.scouting.models import (
    MapPreferences,
    MapStats,
    PlayerAnalysis,
    PlayerProfile,
    PlayerRating,
    PlayerStats,
    RecentMatch,
)
from cs2brief.scouting.payloads import MatchSegment, ProfilePayload, StatBlock

logger = logging.getLogger(__name__)

T = TypeVar("T")
StatPredicate = Callable[[PlayerStats], bool]

# ============================================================================
# Inference rule tables
# ============================================================================

ROLE_RULES: list[tuple[StatPredicate, Role]] = [
    (lambda s: s.headshot_pct > 50 and s.kd > 1.2, Role.AWPER),
    (lambda s: s.adr > 85 and s.kd > 1.1, Role.ENTRY_FRAGGER),
    (lambda s: s.mvp_count > 0.25 * s.matches_played, Role.PLAYMAKER),
    (lambda s: s.kd < 0.9 and s.accuracy > 20, Role.SUPPORT),
]
ROLE_FALLBACK = Role.RIFLER

PLAY_STYLE_RULES: list[tuple[StatPredicate, PlayStyle]] = [
    (lambda s: s.kd > 1.3 and s.accuracy > 25, PlayStyle.AGGRESSIVE),
    (lambda s: s.win_rate > 55 and s.kd > 1.0, PlayStyle.BALANCED),
    (lambda s: s.accuracy > 22 and s.kd < 1.0, PlayStyle.SUPPORTIVE),
]
PLAY_STYLE_FALLBACK = PlayStyle.PASSIVE

STRENGTH_RULES: list[tuple[StatPredicate, str]] = [
    (lambda s: s.headshot_pct > 50, "high_headshot_rate"),
    (lambda s: s.kd > 1.2, "good_fragger"),
    (lambda s: s.win_rate > 55, "winner_mentality"),
    (lambda s: s.accuracy > 25, "good_aim"),
    (lambda s: s.mvp_count > 0.25 * s.matches_played, "mvp_player"),
]

WEAKNESS_RULES: list[tuple[StatPredicate, str]] = [
    (lambda s: s.kd < 0.8, "low_kd"),
    (lambda s: s.headshot_pct < 35, "low_headshot_rate"),
    (lambda s: s.win_rate < 45, "low_win_rate"),
    (lambda s: s.accuracy < 15, "poor_aim"),
]

# Tracker.gg overview stat name -> PlayerStats attribute
STAT_FIELDS: dict[str, str] = {
    "kills": "kills",
    "deaths": "deaths",
    "kd": "kd",
    "headshotPct": "headshot_pct",
    "wlPercentage": "win_rate",
    "matchesPlayed": "matches_played",
    "shotsAccuracy": "accuracy",
    "mvp": "mvp_count",
    "damagePerRound": "adr",
    "timePlayed": "time_played",
    "score": "score",
    "damage": "damage",
    "headshots": "headshots",
    "shotsFired": "shots_fired",
    "shotsHit": "shots_hit",
    "wins": "wins",
    "losses": "losses",
    "roundsPlayed": "rounds_played",
    "roundsWon": "rounds_won",
}


def first_match(rules: list[tuple[StatPredicate, T]], stats: PlayerStats, fallback: T) -> T:
    """Return the label of the first rule whose predicate holds."""
    for predicate, label in rules:
        if predicate(stats):
            return label
    return fallback


def infer_role(stats: PlayerStats) -> Role:
    return first_match(ROLE_RULES, stats, ROLE_FALLBACK)


def infer_play_style(stats: PlayerStats) -> PlayStyle:
    return first_match(PLAY_STYLE_RULES, stats, PLAY_STYLE_FALLBACK)


def identify_strengths(stats: PlayerStats) -> frozenset[str]:
    return frozenset(tag for predicate, tag in STRENGTH_RULES if predicate(stats))


def identify_weaknesses(stats: PlayerStats) -> frozenset[str]:
    return frozenset(tag for predicate, tag in WEAKNESS_RULES if predicate(stats))


def analyze_stats(stats: PlayerStats) -> PlayerAnalysis:
    """Derive every inferred label for a stats block."""
    return PlayerAnalysis(
        role=infer_role(stats),
        play_style=infer_play_style(stats),
        strengths=identify_strengths(stats),
        weaknesses=identify_weaknesses(stats),
    )


# ============================================================================
# Payload conversion
# ============================================================================


def parse_stats(block: StatBlock) -> PlayerStats:
    return PlayerStats(**{attr: block.value(name) for name, attr in STAT_FIELDS.items()})


def parse_rating(block: StatBlock) -> PlayerRating:
    rank = block.stat("rank")
    return PlayerRating(
        rating=block.value("rating"),
        rank_name=rank.display_value or "Unranked",
        rank_icon_url=str(rank.metadata.get("iconUrl") or ""),
        percentile=block.stat("rankScore").percentile,
    )


def parse_match(segment: MatchSegment) -> RecentMatch:
    meta = segment.metadata
    return RecentMatch(
        match_id=segment.attributes.id,
        map_name=meta.map_name,
        result=meta.result,
        score=meta.score,
        kd=segment.value("kd"),
        kills=segment.value("kills"),
        deaths=segment.value("deaths"),
        assists=segment.value("assists"),
        headshot_pct=segment.value("headshotPct"),
        adr=segment.value("damagePerRound"),
        rating=segment.value("rating"),
        timestamp=meta.timestamp,
    )


def parse_matches(raw_matches: list[Any], player_id: str = "") -> list[RecentMatch]:
    """
    Parse recent-match segments, skipping any that fail validation.

    A malformed match costs only that match; the profile it belongs to is
    still real data.
    """
    matches: list[RecentMatch] = []
    for raw in raw_matches[:MAX_RECENT_MATCHES]:
        try:
            segment = MatchSegment.model_validate(raw)
        except ValidationError as e:
            logger.warning(
                f"Skipping malformed match for {player_id}: {e.error_count()} validation error(s)"
            )
            continue
        matches.append(parse_match(segment))
    return matches


def parse_map_stats(payload: ProfilePayload) -> dict[str, MapStats]:
    """Collect per-map records from the profile's ``map`` segments, keyed by map name."""
    map_stats: dict[str, MapStats] = {}
    for segment in payload.segments_of("map"):
        name = segment.metadata.name
        if not name:
            continue
        map_stats[name] = MapStats(
            map_name=name,
            matches=segment.value("matchesPlayed"),
            win_rate=segment.value("wlPercentage"),
            kd=segment.value("kd"),
            rating=segment.value("rating"),
        )
    return map_stats


def calculate_recent_form(matches: list[RecentMatch]) -> RecentForm:
    """
    Classify short-term form from the newest matches.

    Hot needs both a high average rating and a winning record; either a low
    rating or a losing record is enough for cold.
    """
    recent = matches[:RECENT_FORM_MATCHES]
    if not recent:
        return RecentForm.UNKNOWN

    avg_rating = sum(m.rating for m in recent) / len(recent)
    win_share = sum(1 for m in recent if m.result.lower() == "win") / len(recent)

    if avg_rating > 1.1 and win_share > 0.6:
        return RecentForm.HOT
    if avg_rating < 0.9 or win_share < 0.4:
        return RecentForm.COLD
    return RecentForm.AVERAGE


def identify_map_preferences(map_stats: dict[str, MapStats]) -> MapPreferences:
    """
    Rank maps by win rate x kd.

    ``strongest`` is best first and ``weakest`` is worst first. With fewer
    maps than twice the preference count the two lists overlap.
    """
    ranked = sorted(map_stats.values(), key=lambda m: m.performance, reverse=True)
    return MapPreferences(
        strongest=ranked[:MAP_PREFERENCE_COUNT],
        weakest=ranked[::-1][:MAP_PREFERENCE_COUNT],
    )


def normalize(
    raw_profile: dict[str, Any],
    raw_matches: list[dict[str, Any]] | None = None,
    *,
    player_id: str = "",
    provider: str = TRACKER_PROVIDER,
) -> PlayerProfile:
    """
    Convert raw provider payloads into a PlayerProfile.

    Args:
        raw_profile: The profile response's ``data`` object
        raw_matches: Raw recent-match segments, newest first
        player_id: Requested id, used when the payload omits its own
        provider: Provider name for error context

    Returns:
        A PlayerProfile tagged as real data

    Raises:
        ParseError: If the profile payload shape cannot be validated.
            Malformed match segments are skipped instead.
    """
    try:
        payload = ProfilePayload.model_validate(raw_profile)
    except ValidationError as e:
        raise ParseError(provider, player_id, e) from e

    overview = payload.overview
    stats = parse_stats(overview)
    info = payload.platform_info
    matches = parse_matches(raw_matches or [], player_id)
    map_stats = parse_map_stats(payload)

    return PlayerProfile(
        platform_user_id=info.platform_user_id or player_id,
        handle=info.platform_user_handle,
        avatar_url=info.avatar_url,
        platform=info.platform_slug,
        stats=stats,
        rating=parse_rating(overview),
        analysis=analyze_stats(stats),
        recent_matches=matches,
        recent_form=calculate_recent_form(matches),
        map_stats=map_stats,
        map_preferences=identify_map_preferences(map_stats),
        source=DataSource.REAL,
    )


# ============================================================================
# Synthetic fallback
# ============================================================================

SYNTHETIC_STATS = PlayerStats(
    kills=15420,
    deaths=13200,
    kd=1.17,
    headshot_pct=50.6,
    win_rate=52.0,
    matches_played=1000,
    accuracy=19.2,
    mvp_count=156,
    time_played=120000,
    damage=1842000,
    headshots=7800,
    wins=520,
    losses=480,
)


def synthetic_profile(player_id: str, platform: str = DEFAULT_PLATFORM) -> PlayerProfile:
    """
    Build the placeholder profile used when a player's data can't be fetched.

    The profile is tagged DataSource.SYNTHETIC and its handle is prefixed
    "Synthetic_" so it is never mistaken for provider data.
    """
    logger.info(f"Using synthetic profile for {player_id}")
    stats = PlayerStats(**vars(SYNTHETIC_STATS))
    recent_matches = [
        RecentMatch(
            map_name="de_mirage",
            result="win",
            score="16-12",
            kd=1.33,
            kills=24,
            deaths=18,
            rating=1.22,
            timestamp=datetime.now(timezone.utc),
        )
    ]

    return PlayerProfile(
        platform_user_id=player_id,
        handle=f"Synthetic_{player_id[-4:]}",
        platform=platform,
        stats=stats,
        rating=PlayerRating(
            rating=1850, rank_name="Distinguished Master Guardian", percentile=72
        ),
        analysis=analyze_stats(stats),
        recent_matches=recent_matches,
        recent_form=calculate_recent_form(recent_matches),
        source=DataSource.SYNTHETIC,
    )
