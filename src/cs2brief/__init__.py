"""
cs2brief - CS2 Pre-match Briefings

Pulls player statistics from Tracker.gg, infers roles and play styles, and
turns two rosters into a strategic briefing: team analysis, threats,
opportunities, and ranked tactical recommendations.

Usage:
    import asyncio
    from cs2brief import build_briefing

    briefing = asyncio.run(build_briefing(["7656..."], ["7656..."], "de_mirage"))
    for rec in briefing.recommendations:
        print(f"[{rec.priority}] {rec.title}")
"""

__version__ = "0.1.0"
__author__ = "cs2brief Contributors"


def __getattr__(name):
    """Lazy import for the pipeline entry points."""
    if name == "build_briefing":
        from cs2brief.scouting.briefing import build_briefing
        return build_briefing
    elif name == "BriefingService":
        from cs2brief.scouting.briefing import BriefingService
        return BriefingService
    elif name == "BriefingContext":
        from cs2brief.scouting.briefing import BriefingContext
        return BriefingContext
    elif name == "TrackerClient":
        from cs2brief.integrations.tracker import TrackerClient
        return TrackerClient
    raise AttributeError(f"module 'cs2brief' has no attribute '{name}'")


__all__ = [
    "__version__",
    "build_briefing",
    "BriefingService",
    "BriefingContext",
    "TrackerClient",
]
