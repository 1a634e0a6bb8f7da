"""
Data models for pre-match briefings.

Defines dataclasses for normalized player profiles, team analyses, threats,
opportunities, recommendations, and the briefing itself.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from cs2brief.core.constants import (
    FALLBACK_STRATEGY,
    NO_DATA_MESSAGE,
    DataSource,
    Level,
    PlayStyle,
    RecentForm,
    Role,
    TeamStyle,
)


@dataclass
class PlayerStats:
    """Lifetime statistics for a player. Absent provider values are 0."""

    kills: float = 0.0
    deaths: float = 0.0
    kd: float = 0.0
    headshot_pct: float = 0.0
    win_rate: float = 0.0
    matches_played: float = 0.0
    accuracy: float = 0.0
    mvp_count: float = 0.0
    adr: float = 0.0
    time_played: float = 0.0
    score: float = 0.0
    damage: float = 0.0
    headshots: float = 0.0
    shots_fired: float = 0.0
    shots_hit: float = 0.0
    wins: float = 0.0
    losses: float = 0.0
    rounds_played: float = 0.0
    rounds_won: float = 0.0


@dataclass
class PlayerRating:
    """Provider rating and rank block."""

    rating: float = 0.0
    rank_name: str = "Unranked"
    rank_icon_url: str = ""
    percentile: float = 0.0


@dataclass(frozen=True)
class PlayerAnalysis:
    """Labels inferred from PlayerStats."""

    role: Role
    play_style: PlayStyle
    strengths: frozenset[str] = frozenset()
    weaknesses: frozenset[str] = frozenset()


@dataclass
class RecentMatch:
    """One entry of a player's recent competitive history."""

    match_id: str = ""
    map_name: str = ""
    result: str = ""
    score: str = ""
    kd: float = 0.0
    kills: float = 0.0
    deaths: float = 0.0
    assists: float = 0.0
    headshot_pct: float = 0.0
    adr: float = 0.0
    rating: float = 0.0
    timestamp: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "match_id": self.match_id,
            "map": self.map_name,
            "result": self.result,
            "score": self.score,
            "kd": round(self.kd, 2),
            "kills": self.kills,
            "deaths": self.deaths,
            "assists": self.assists,
            "headshot_pct": round(self.headshot_pct, 1),
            "adr": round(self.adr, 1),
            "rating": round(self.rating, 2),
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


@dataclass
class MapStats:
    """Lifetime record on one map."""

    map_name: str
    matches: float = 0.0
    win_rate: float = 0.0
    kd: float = 0.0
    rating: float = 0.0

    @property
    def performance(self) -> float:
        return self.win_rate * self.kd

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.map_name,
            "matches": self.matches,
            "win_rate": round(self.win_rate, 1),
            "kd": round(self.kd, 2),
            "rating": self.rating,
        }


@dataclass
class MapPreferences:
    """Best and worst maps by win rate x kd."""

    strongest: list[MapStats] = field(default_factory=list)
    weakest: list[MapStats] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "strongest": [m.to_dict() for m in self.strongest],
            "weakest": [m.to_dict() for m in self.weakest],
        }


@dataclass
class PlayerProfile:
    """Normalized player profile, tagged with where its data came from."""

    platform_user_id: str
    handle: str
    stats: PlayerStats
    analysis: PlayerAnalysis
    rating: PlayerRating = field(default_factory=PlayerRating)
    avatar_url: str = ""
    platform: str = "steam"
    recent_matches: list[RecentMatch] = field(default_factory=list)
    recent_form: RecentForm = RecentForm.UNKNOWN
    map_stats: dict[str, MapStats] = field(default_factory=dict)
    map_preferences: MapPreferences = field(default_factory=MapPreferences)
    source: DataSource = DataSource.REAL

    @property
    def is_synthetic(self) -> bool:
        return self.source == DataSource.SYNTHETIC

    @property
    def kd(self) -> float:
        return self.stats.kd

    @property
    def role(self) -> Role:
        return self.analysis.role

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "platform_user_id": self.platform_user_id,
            "handle": self.handle,
            "avatar_url": self.avatar_url,
            "platform": self.platform,
            "source": self.source.value,
            "stats": {
                "kills": self.stats.kills,
                "deaths": self.stats.deaths,
                "kd": round(self.stats.kd, 2),
                "headshot_pct": round(self.stats.headshot_pct, 1),
                "win_rate": round(self.stats.win_rate, 1),
                "matches_played": self.stats.matches_played,
                "accuracy": round(self.stats.accuracy, 1),
                "mvp_count": self.stats.mvp_count,
                "adr": round(self.stats.adr, 1),
            },
            "rating": {
                "rating": self.rating.rating,
                "rank_name": self.rating.rank_name,
                "rank_icon_url": self.rating.rank_icon_url,
                "percentile": self.rating.percentile,
            },
            "analysis": {
                "role": self.analysis.role.value,
                "play_style": self.analysis.play_style.value,
                "strengths": sorted(self.analysis.strengths),
                "weaknesses": sorted(self.analysis.weaknesses),
            },
            "recent_matches": [m.to_dict() for m in self.recent_matches],
            "recent_form": self.recent_form.value,
            "map_stats": {name: m.to_dict() for name, m in self.map_stats.items()},
            "map_preferences": self.map_preferences.to_dict(),
        }


@dataclass
class PlayerSummary:
    """Short reference to a standout player in a TeamAnalysis."""

    handle: str
    kd: float
    role: Role

    def to_dict(self) -> dict[str, Any]:
        return {"handle": self.handle, "kd": round(self.kd, 2), "role": self.role.value}


@dataclass
class WeakestPlayer:
    """The lowest-kd player and how exploitable they are."""

    handle: str
    kd: float
    vulnerability: Level

    def to_dict(self) -> dict[str, Any]:
        return {
            "handle": self.handle,
            "kd": round(self.kd, 2),
            "vulnerability": self.vulnerability.value,
        }


@dataclass
class TeamComposition:
    """Count of each inferred role on a roster."""

    role_counts: dict[Role, int] = field(default_factory=lambda: {role: 0 for role in Role})

    @property
    def has_awper(self) -> bool:
        return self.role_counts.get(Role.AWPER, 0) > 0

    @property
    def entry_fraggers(self) -> int:
        return self.role_counts.get(Role.ENTRY_FRAGGER, 0)

    @property
    def supports(self) -> int:
        return self.role_counts.get(Role.SUPPORT, 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "has_awper": self.has_awper,
            "entry_fraggers": self.entry_fraggers,
            "supports": self.supports,
            "roles": {role.value: count for role, count in self.role_counts.items()},
        }


@dataclass
class TeamAnalysis:
    """Aggregate view of one roster."""

    player_count: int
    average_kd: float
    average_win_rate: float
    average_rating: float
    top_player: PlayerSummary
    weakest_player: WeakestPlayer
    team_composition: TeamComposition
    team_style: TeamStyle
    predicted_strategy: str

    has_data = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "player_count": self.player_count,
            "average_kd": round(self.average_kd, 2),
            "average_win_rate": round(self.average_win_rate, 1),
            "average_rating": round(self.average_rating),
            "top_player": self.top_player.to_dict(),
            "weakest_player": self.weakest_player.to_dict(),
            "team_composition": self.team_composition.to_dict(),
            "team_style": self.team_style.value,
            "predicted_strategy": self.predicted_strategy,
        }


@dataclass
class NoTeamData:
    """Result of aggregating an empty roster."""

    error: str = NO_DATA_MESSAGE

    has_data = False

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error}


TeamResult = TeamAnalysis | NoTeamData


@dataclass
class Threat:
    """A specific risk posed by one opposing player."""

    type: str
    player: str
    severity: Level
    counter_strategy: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "player": self.player,
            "severity": self.severity.value,
            "counter_strategy": self.counter_strategy,
            **self.details,
        }


@dataclass
class Opportunity:
    """An exploitable weakness in the opposing roster."""

    type: str
    exploitation: str
    targets: list[str] = field(default_factory=list)
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "targets": list(self.targets),
            "exploitation": self.exploitation,
            **self.details,
        }


@dataclass
class Recommendation:
    """A prioritized tactical action for the upcoming match."""

    type: str
    priority: Level
    title: str
    description: str
    actions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "priority": self.priority.value,
            "title": self.title,
            "description": self.description,
            "actions": list(self.actions),
        }


@dataclass
class PreMatchBriefing:
    """Complete strategic output for one upcoming match."""

    generated_at: datetime
    map_name: str
    team_analysis: TeamResult
    enemy_analysis: TeamResult
    threats: list[Threat] = field(default_factory=list)
    opportunities: list[Opportunity] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)
    confidence: int = 0
    real_profiles: int = 0
    synthetic_profiles: int = 0

    error = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "generated_at": self.generated_at.isoformat(),
            "map": self.map_name,
            "team_analysis": self.team_analysis.to_dict(),
            "enemy_analysis": self.enemy_analysis.to_dict(),
            "threats": [t.to_dict() for t in self.threats],
            "opportunities": [o.to_dict() for o in self.opportunities],
            "recommendations": [r.to_dict() for r in self.recommendations],
            "confidence": self.confidence,
            "data_quality": {
                "real_profiles": self.real_profiles,
                "synthetic_profiles": self.synthetic_profiles,
            },
        }


@dataclass
class BriefingError:
    """Returned instead of a briefing when orchestration fails outright."""

    message: str
    fallback_strategy: str = FALLBACK_STRATEGY

    error = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": True,
            "message": self.message,
            "fallback_strategy": self.fallback_strategy,
        }
