"""
Team Aggregator - Combine player profiles into a TeamAnalysis.
"""

import logging
from collections.abc import Callable, Sequence
from statistics import fmean

from cs2brief.core.constants import Level, TeamStyle
from cs2brief.core.errors import AggregationError
from cs2brief.scouting.models import (
    NoTeamData,
    PlayerProfile,
    PlayerSummary,
    TeamAnalysis,
    TeamComposition,
    TeamResult,
    WeakestPlayer,
)

logger = logging.getLogger(__name__)

# Predicates receive (average_kd, composition)
TEAM_STYLE_RULES: list[tuple[Callable[[float, TeamComposition], bool], TeamStyle]] = [
    (lambda kd, comp: kd > 1.1 and comp.entry_fraggers >= 2, TeamStyle.AGGRESSIVE),
    (lambda kd, comp: comp.has_awper and kd > 1.0, TeamStyle.TACTICAL),
    (lambda kd, comp: kd < 0.9, TeamStyle.DEFENSIVE),
]
TEAM_STYLE_FALLBACK = TeamStyle.BALANCED

DEFAULT_STRATEGY = "Standard defaults and mid-round calls"

# (team_style, has_awper) -> predicted strategy
STRATEGY_TABLE: dict[tuple[TeamStyle, bool], str] = {
    (TeamStyle.AGGRESSIVE, True): "Fast executes and map control",
    (TeamStyle.AGGRESSIVE, False): "Fast executes and map control",
    (TeamStyle.TACTICAL, True): "Slow defaults with AWP control",
    (TeamStyle.TACTICAL, False): DEFAULT_STRATEGY,
    (TeamStyle.DEFENSIVE, True): "Passive holds and late rotates",
    (TeamStyle.DEFENSIVE, False): "Passive holds and late rotates",
    (TeamStyle.BALANCED, True): DEFAULT_STRATEGY,
    (TeamStyle.BALANCED, False): DEFAULT_STRATEGY,
}

# Weakest player below this kd is a high vulnerability
HIGH_VULNERABILITY_KD = 0.8


def mean_of(values: Sequence[float]) -> float:
    """Arithmetic mean; raises AggregationError on an empty sequence."""
    if not values:
        raise AggregationError("Cannot average an empty set of profiles")
    return fmean(values)


def build_composition(profiles: Sequence[PlayerProfile]) -> TeamComposition:
    composition = TeamComposition()
    for profile in profiles:
        composition.role_counts[profile.role] = composition.role_counts.get(profile.role, 0) + 1
    return composition


def classify_team_style(average_kd: float, composition: TeamComposition) -> TeamStyle:
    for predicate, style in TEAM_STYLE_RULES:
        if predicate(average_kd, composition):
            return style
    return TEAM_STYLE_FALLBACK


def predict_strategy(team_style: TeamStyle, has_awper: bool) -> str:
    return STRATEGY_TABLE.get((team_style, has_awper), DEFAULT_STRATEGY)


def aggregate(profiles: Sequence[PlayerProfile]) -> TeamResult:
    """
    Summarize a roster.

    Args:
        profiles: Player profiles in roster order

    Returns:
        TeamAnalysis, or NoTeamData when the roster is empty
    """
    try:
        average_kd = mean_of([p.kd for p in profiles])
    except AggregationError:
        logger.warning("Aggregation requested for an empty roster")
        return NoTeamData()

    average_win_rate = mean_of([p.stats.win_rate for p in profiles])
    average_rating = mean_of([p.rating.rating for p in profiles])

    # sorted() is stable: equal kd keeps roster order, so the first seen wins
    by_kd = sorted(profiles, key=lambda p: p.kd, reverse=True)
    top = by_kd[0]
    lowest_kd = by_kd[-1].kd
    weakest = next(p for p in profiles if p.kd == lowest_kd)

    composition = build_composition(profiles)
    team_style = classify_team_style(average_kd, composition)

    return TeamAnalysis(
        player_count=len(profiles),
        average_kd=average_kd,
        average_win_rate=average_win_rate,
        average_rating=average_rating,
        top_player=PlayerSummary(handle=top.handle, kd=top.kd, role=top.role),
        weakest_player=WeakestPlayer(
            handle=weakest.handle,
            kd=weakest.kd,
            vulnerability=(
                Level.HIGH if weakest.kd < HIGH_VULNERABILITY_KD else Level.MEDIUM
            ),
        ),
        team_composition=composition,
        team_style=team_style,
        predicted_strategy=predict_strategy(team_style, composition.has_awper),
    )
