"""
Pre-match Scouting - Player profiles to a strategic briefing.

This module normalizes provider data into player profiles, aggregates each
roster, detects threats and opportunities, and ranks tactical
recommendations for an upcoming match.
"""

from cs2brief.scouting.aggregate import aggregate
from cs2brief.scouting.briefing import (
    BriefingContext,
    BriefingService,
    build_briefing,
    calculate_confidence,
)
from cs2brief.scouting.models import (
    BriefingError,
    NoTeamData,
    Opportunity,
    PlayerAnalysis,
    PlayerProfile,
    PlayerRating,
    PlayerStats,
    PreMatchBriefing,
    RecentMatch,
    Recommendation,
    TeamAnalysis,
    Threat,
)
from cs2brief.scouting.normalize import infer_play_style, infer_role, normalize, synthetic_profile
from cs2brief.scouting.recommendations import generate_recommendations
from cs2brief.scouting.threats import detect_opportunities, detect_threats

__all__ = [
    # Orchestration
    "BriefingContext",
    "BriefingService",
    "build_briefing",
    "calculate_confidence",
    # Pipeline stages
    "aggregate",
    "detect_opportunities",
    "detect_threats",
    "generate_recommendations",
    "infer_play_style",
    "infer_role",
    "normalize",
    "synthetic_profile",
    # Models
    "BriefingError",
    "NoTeamData",
    "Opportunity",
    "PlayerAnalysis",
    "PlayerProfile",
    "PlayerRating",
    "PlayerStats",
    "PreMatchBriefing",
    "RecentMatch",
    "Recommendation",
    "TeamAnalysis",
    "Threat",
]
