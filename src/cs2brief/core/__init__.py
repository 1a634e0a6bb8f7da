"""
cs2brief Core - Foundation modules shared by every layer.

This module contains:
- constants: Enums, provider defaults, and briefing constants
- config: Application configuration management and logging setup
- errors: Error taxonomy for the briefing pipeline
"""

from cs2brief.core.constants import (
    ACTIVE_DUTY_MAPS,
    LEVEL_RANK,
    DataSource,
    Level,
    PlayStyle,
    RecentForm,
    Role,
    TeamStyle,
    normalize_map_name,
)
from cs2brief.core.errors import (
    AggregationError,
    BriefingDataError,
    FetchError,
    ParseError,
)

__all__ = [
    # Enums
    "DataSource",
    "Level",
    "PlayStyle",
    "RecentForm",
    "Role",
    "TeamStyle",
    # Constants
    "ACTIVE_DUTY_MAPS",
    "LEVEL_RANK",
    "normalize_map_name",
    # Errors
    "AggregationError",
    "BriefingDataError",
    "FetchError",
    "ParseError",
]
