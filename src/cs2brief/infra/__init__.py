"""
cs2brief Infrastructure - Process-wide shared state.

This module contains:
- cache: In-memory TTL cache for player profiles
- rate_limit: Per-provider minimum-interval request gate
"""

from cs2brief.infra.cache import CacheStats, TTLCache, profile_cache_key
from cs2brief.infra.rate_limit import RateLimiter

__all__ = ["CacheStats", "RateLimiter", "TTLCache", "profile_cache_key"]
