"""
Recommendation Generator - Tactical actions from two team analyses.

Rules fire independently and are evaluated in a fixed order: style, AWP,
weakness, then map guidance. The final list is sorted from high to low priority
and equal priorities keep that evaluation order.
"""

import logging

from cs2brief.core.constants import LEVEL_RANK, Level, TeamStyle, normalize_map_name
from cs2brief.scouting.models import Recommendation, TeamAnalysis, TeamResult

logger = logging.getLogger(__name__)


MAP_RECOMMENDATIONS: dict[str, Recommendation] = {
    "de_mirage": Recommendation(
        type="map_control",
        priority=Level.HIGH,
        title="Control Middle",
        description="Mid control is crucial on Mirage",
        actions=["Smoke window/connector early", "Contest mid with 2 players"],
    ),
    "de_dust2": Recommendation(
        type="map_control",
        priority=Level.HIGH,
        title="Long A Control",
        description="Take long control for map presence",
        actions=["Rush long with flash support", "Smoke CT cross"],
    ),
    "de_inferno": Recommendation(
        type="map_control",
        priority=Level.HIGH,
        title="Banana Control",
        description="Control banana for B site pressure",
        actions=["Molly car position", "Flash over for control"],
    ),
    "de_nuke": Recommendation(
        type="map_control",
        priority=Level.HIGH,
        title="Outside Control",
        description="Outside control opens secret and split options",
        actions=["Smoke mini and garage", "Take outside with 2 players and an AWP"],
    ),
    "de_ancient": Recommendation(
        type="map_control",
        priority=Level.HIGH,
        title="Mid Control",
        description="Mid splits both sites on Ancient",
        actions=["Smoke CT and cave", "Take donut with flash support"],
    ),
    "de_anubis": Recommendation(
        type="map_control",
        priority=Level.HIGH,
        title="Canal Control",
        description="Canals connect mid to both sites",
        actions=["Clear canals early", "Smoke connector before pushing mid"],
    ),
    "de_overpass": Recommendation(
        type="map_control",
        priority=Level.HIGH,
        title="Connector Control",
        description="Connector control lets you rotate faster than the defense",
        actions=["Take connector with a flash", "Lurk toilets for B pressure"],
    ),
    "de_vertigo": Recommendation(
        type="map_control",
        priority=Level.HIGH,
        title="Ramp Control",
        description="A ramp is the main battleground on Vertigo",
        actions=["Molly sandbags on ramp", "Trade ramp duels in pairs"],
    ),
    "de_train": Recommendation(
        type="map_control",
        priority=Level.HIGH,
        title="Ivy Control",
        description="Ivy control opens A site and T connector",
        actions=["Smoke ivy exit", "Flash over trains for site entry"],
    ),
}

DEFAULT_MAP_RECOMMENDATION = Recommendation(
    type="generic",
    priority=Level.MEDIUM,
    title="Default Setup",
    description="Play standard positions and gather info",
    actions=["Spread across map", "Look for picks"],
)


def _copy(rec: Recommendation) -> Recommendation:
    return Recommendation(
        type=rec.type,
        priority=rec.priority,
        title=rec.title,
        description=rec.description,
        actions=list(rec.actions),
    )


def counter_style(own: TeamResult, enemy: TeamResult) -> Recommendation | None:
    if not (isinstance(own, TeamAnalysis) and isinstance(enemy, TeamAnalysis)):
        return None
    if enemy.team_style == TeamStyle.AGGRESSIVE and own.team_style == TeamStyle.TACTICAL:
        return Recommendation(
            type="counter_style",
            priority=Level.HIGH,
            title="Counter Aggressive Play",
            description=(
                "Enemy team plays aggressive. Use utility to slow pushes and play for trades."
            ),
            actions=[
                "Stack bombsites early in rounds",
                "Use incendiaries on chokepoints",
                "Play crossfires and trade frags",
            ],
        )
    return None


def counter_awp(enemy: TeamResult) -> Recommendation | None:
    if isinstance(enemy, TeamAnalysis) and enemy.team_composition.has_awper:
        return Recommendation(
            type="counter_awp",
            priority=Level.HIGH,
            title="Neutralize Enemy AWPer",
            description="Enemy has dedicated AWPer. Control their angles.",
            actions=[
                "Smoke common AWP angles immediately",
                "Use coordinated flashes for peeks",
                "Force close-range engagements",
            ],
        )
    return None


def exploit_weakness(enemy: TeamResult) -> Recommendation | None:
    if isinstance(enemy, TeamAnalysis) and enemy.weakest_player.vulnerability == Level.HIGH:
        return Recommendation(
            type="exploit_weakness",
            priority=Level.MEDIUM,
            title="Target Weak Link",
            description=(
                f"Focus {enemy.weakest_player.handle} - lowest performer on enemy team."
            ),
            actions=[
                "Push their typical positions",
                "Force duels against this player",
                "Exploit for map control",
            ],
        )
    return None


def map_recommendations(map_name: str) -> list[Recommendation]:
    """Canned guidance for a known map, or the generic default setup."""
    rec = MAP_RECOMMENDATIONS.get(normalize_map_name(map_name), DEFAULT_MAP_RECOMMENDATION)
    return [_copy(rec)]


def sort_by_priority(recommendations: list[Recommendation]) -> list[Recommendation]:
    return sorted(recommendations, key=lambda r: LEVEL_RANK[r.priority], reverse=True)


def generate_recommendations(
    own: TeamResult, enemy: TeamResult, map_name: str
) -> list[Recommendation]:
    """
    Build the prioritized recommendation list for a match.

    Args:
        own: Analysis of the requesting team
        enemy: Analysis of the opposing team
        map_name: Map id, with or without the 'de_' prefix

    Returns:
        Recommendations sorted by priority, ties in rule order
    """
    candidates = [counter_style(own, enemy), counter_awp(enemy), exploit_weakness(enemy)]
    recommendations = [rec for rec in candidates if rec is not None]
    recommendations.extend(map_recommendations(map_name))

    logger.debug(f"Generated {len(recommendations)} recommendations for {map_name or 'no map'}")
    return sort_by_priority(recommendations)
