"""
cs2brief Integrations - External stats providers.

This module contains:
- tracker: Tracker.gg CS2 profile and match history client
"""

from cs2brief.integrations.tracker import TrackerClient

__all__ = ["TrackerClient"]
