"""
cs2brief Web API

FastAPI application exposing pre-match briefings as plain JSON.

This package exposes:
- app: The FastAPI application (used by uvicorn and `cs2brief serve`)
"""

import logging

from fastapi import FastAPI

from cs2brief import __version__
from cs2brief.api.routes_briefing import router as briefing_router

logger = logging.getLogger(__name__)

app = FastAPI(
    title="cs2brief API",
    description="CS2 pre-match briefings built from Tracker.gg player statistics",
    version=__version__,
)

app.include_router(briefing_router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness check."""
    return {"status": "ok", "version": __version__}


__all__ = ["app"]
