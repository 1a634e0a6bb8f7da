"""
Threat and opportunity detection over an opposing roster.

Threat rules run independently for every player, so one player can raise
several threats. The result is ordered from high to low severity; equal
severities keep detection order.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from statistics import fmean
from typing import Any

from cs2brief.core.constants import LEVEL_RANK, Level, PlayStyle, Role
from cs2brief.scouting.models import Opportunity, PlayerProfile, Threat

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThreatRule:
    """One threat check applied to each enemy player."""

    type: str
    severity: Level
    counter_strategy: str
    applies: Callable[[PlayerProfile], bool]
    details: Callable[[PlayerProfile], dict[str, Any]]


THREAT_RULES: list[ThreatRule] = [
    ThreatRule(
        type="star_player",
        severity=Level.HIGH,
        counter_strategy="Focus fire, use utility to isolate",
        applies=lambda p: p.kd > 1.5,
        details=lambda p: {"kd": p.kd, "role": p.role.value},
    ),
    ThreatRule(
        type="skilled_awper",
        severity=Level.HIGH,
        counter_strategy="Smoke key angles, use flashes for peeks",
        applies=lambda p: p.role == Role.AWPER and p.stats.headshot_pct > 50,
        details=lambda p: {"headshot_rate": p.stats.headshot_pct},
    ),
    ThreatRule(
        type="aggressive_player",
        severity=Level.MEDIUM,
        counter_strategy="Stack sites, prepare for rushes",
        applies=lambda p: p.analysis.play_style == PlayStyle.AGGRESSIVE and p.kd > 1.2,
        details=lambda p: {"kd": p.kd},
    ),
]

WEAK_PLAYER_KD = 0.8
LOW_CONFIDENCE_WIN_RATE = 45


def sort_by_severity(threats: list[Threat]) -> list[Threat]:
    # reverse=True keeps equal keys in their original order
    return sorted(threats, key=lambda t: LEVEL_RANK[t.severity], reverse=True)


def detect_threats(enemy_profiles: Sequence[PlayerProfile]) -> list[Threat]:
    """Scan enemy players for standout risks, highest severity first."""
    threats = [
        Threat(
            type=rule.type,
            player=profile.handle,
            severity=rule.severity,
            counter_strategy=rule.counter_strategy,
            details=rule.details(profile),
        )
        for profile in enemy_profiles
        for rule in THREAT_RULES
        if rule.applies(profile)
    ]
    logger.debug(f"Detected {len(threats)} threats across {len(enemy_profiles)} players")
    return sort_by_severity(threats)


def detect_opportunities(enemy_profiles: Sequence[PlayerProfile]) -> list[Opportunity]:
    """Find exploitable weaknesses in the enemy roster, in detection order."""
    if not enemy_profiles:
        logger.warning("Opportunity detection skipped: no enemy profiles")
        return []

    opportunities: list[Opportunity] = []

    weak_players = [p.handle for p in enemy_profiles if p.kd < WEAK_PLAYER_KD]
    if weak_players:
        opportunities.append(
            Opportunity(
                type="weak_players",
                targets=weak_players,
                exploitation="Target these players for easy picks",
            )
        )

    average_win_rate = fmean(p.stats.win_rate for p in enemy_profiles)
    if average_win_rate < LOW_CONFIDENCE_WIN_RATE:
        opportunities.append(
            Opportunity(
                type="low_confidence_team",
                exploitation="Apply pressure early to break morale",
                details={"win_rate": round(average_win_rate, 1)},
            )
        )

    if not any(p.role == Role.AWPER for p in enemy_profiles):
        opportunities.append(
            Opportunity(type="no_awper", exploitation="Control long ranges with AWP")
        )

    return opportunities
