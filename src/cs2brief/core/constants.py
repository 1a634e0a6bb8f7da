"""
cs2brief - Constants

Categorical labels, rank tables, and inference thresholds shared by the
normalizer, aggregator, detector, and recommendation generator.
"""

from enum import StrEnum


class Role(StrEnum):
    """Player role inferred from profile statistics."""

    AWPER = "awper"
    ENTRY_FRAGGER = "entry_fragger"
    PLAYMAKER = "playmaker"
    SUPPORT = "support"
    RIFLER = "rifler"


class PlayStyle(StrEnum):
    """Individual play style inferred from profile statistics."""

    AGGRESSIVE = "aggressive"
    BALANCED = "balanced"
    SUPPORTIVE = "supportive"
    PASSIVE = "passive"


class TeamStyle(StrEnum):
    """Team-level style derived from averages and composition."""

    AGGRESSIVE = "aggressive"
    TACTICAL = "tactical"
    DEFENSIVE = "defensive"
    BALANCED = "balanced"


class Level(StrEnum):
    """Shared severity/priority/vulnerability scale."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class DataSource(StrEnum):
    """Provenance of a player profile."""

    REAL = "real"
    SYNTHETIC = "synthetic"


class RecentForm(StrEnum):
    """Short-term form over a player's last few matches."""

    HOT = "hot"
    AVERAGE = "average"
    COLD = "cold"
    UNKNOWN = "unknown"


# Ranking used for severity and priority sorts (higher sorts first)
LEVEL_RANK: dict[Level, int] = {Level.HIGH: 3, Level.MEDIUM: 2, Level.LOW: 1}

# ============================================================================
# Provider defaults (Tracker.gg public API)
# ============================================================================

TRACKER_PROVIDER = "trackergg"
TRACKER_BASE_URL = "https://public-api.tracker.gg/v2/csgo"
TRACKER_API_KEY_HEADER = "TRN-Api-Key"
DEFAULT_PLATFORM = "steam"
DEFAULT_RATE_PER_MINUTE = 30
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_MATCH_LIMIT = 20
DEFAULT_QUEUE = "competitive"
MAX_RECENT_MATCHES = 20

# Recent form looks at the newest matches only
RECENT_FORM_MATCHES = 5
# Strongest and weakest maps reported per player
MAP_PREFERENCE_COUNT = 3

# Cached profiles live for one hour
PROFILE_CACHE_TTL_SECONDS = 3600

# ============================================================================
# Briefing defaults
# ============================================================================

MAX_CONFIDENCE = 95
RECENT_DATA_MIN_MATCHES = 10
FALLBACK_STRATEGY = "Play default setups and gather intel"
NO_DATA_MESSAGE = "No data available"

# Maps with canned control-point guidance
ACTIVE_DUTY_MAPS = [
    "de_ancient",
    "de_anubis",
    "de_dust2",
    "de_inferno",
    "de_mirage",
    "de_nuke",
    "de_overpass",
    "de_train",
    "de_vertigo",
]


def normalize_map_name(map_name: str) -> str:
    """Normalize a map id to the 'de_' form, e.g. 'Mirage' -> 'de_mirage'."""
    name = (map_name or "").lower().strip()
    if name and not name.startswith("de_"):
        name = f"de_{name}"
    return name
