"""
Briefing API Routes - Pre-match strategic briefings.

Endpoints:
    POST   /api/briefing           Build a briefing for two rosters
    GET    /api/briefing/stats     Provider usage and cache statistics
    DELETE /api/briefing/cache     Drop every cached player profile
"""

from __future__ import annotations

import logging
import re
import threading
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from cs2brief.core.config import get_config
from cs2brief.scouting.briefing import BriefingContext, BriefingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["briefing"])

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
MAX_ROSTER_SIZE = 5
PLAYER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_.\-]{1,64}$")

# ---------------------------------------------------------------------------
# Shared service
# ---------------------------------------------------------------------------
_service: BriefingService | None = None
_service_lock = threading.Lock()


def get_briefing_service() -> BriefingService:
    """Process-wide BriefingService, created from the global config on first use."""
    global _service
    with _service_lock:
        if _service is None:
            _service = BriefingService(BriefingContext.from_config(get_config()))
            logger.info("Initialized briefing service")
        return _service


ServiceDep = Annotated[BriefingService, Depends(get_briefing_service)]


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------
class BriefingRequest(BaseModel):
    """Request body for generating a briefing."""

    team_ids: list[str] = Field(default_factory=list, description="Player ids of your team")
    enemy_ids: list[str] = Field(..., description="Player ids of the opposing team")
    map_name: str = Field(default="", description="Map id, e.g. de_mirage")


def _validate_roster(ids: list[str], label: str) -> list[str]:
    if len(ids) > MAX_ROSTER_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"Too many {label}: at most {MAX_ROSTER_SIZE} players allowed",
        )
    for player_id in ids:
        if not PLAYER_ID_PATTERN.match(player_id):
            raise HTTPException(status_code=400, detail=f"Invalid player id: {player_id!r}")
    return ids


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@router.post("/api/briefing")
async def create_briefing(body: BriefingRequest, service: ServiceDep) -> dict[str, Any]:
    """
    Build a pre-match briefing.

    Returns the briefing, or ``{"error": true, "message", "fallback_strategy"}``
    when it could not be generated.
    """
    team_ids = _validate_roster(body.team_ids, "team_ids")
    enemy_ids = _validate_roster(body.enemy_ids, "enemy_ids")

    result = await service.build_briefing(team_ids, enemy_ids, body.map_name)
    return result.to_dict()


@router.get("/api/briefing/stats")
async def briefing_stats(service: ServiceDep) -> dict[str, Any]:
    """Provider usage counters and cache statistics."""
    return service.get_stats()


@router.delete("/api/briefing/cache")
async def clear_briefing_cache(service: ServiceDep) -> dict[str, Any]:
    """Drop cached profiles so the next briefing refetches every player."""
    return {"cleared": service.clear_cache()}
