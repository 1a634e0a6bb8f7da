"""Tests for the FastAPI web API."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from cs2brief.api import app
from cs2brief.api.routes_briefing import get_briefing_service
from cs2brief.scouting.models import BriefingError, NoTeamData, PreMatchBriefing

client = TestClient(app)


@pytest.fixture
def service():
    """Replace the shared BriefingService with a mock."""
    mock = MagicMock()
    mock.build_briefing = AsyncMock(
        return_value=PreMatchBriefing(
            generated_at=datetime(2026, 10, 19, tzinfo=timezone.utc),
            map_name="de_mirage",
            team_analysis=NoTeamData(),
            enemy_analysis=NoTeamData(),
            confidence=20,
            real_profiles=2,
        )
    )
    mock.get_stats.return_value = {"api_calls": 4, "cache_hits": 1}
    app.dependency_overrides[get_briefing_service] = lambda: mock
    yield mock
    app.dependency_overrides.clear()


class TestHealthEndpoint:
    """Tests for the /health endpoint."""

    def test_health_returns_ok(self):
        """Health endpoint returns OK status."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert isinstance(data["version"], str)


class TestBriefingEndpoint:
    """Tests for POST /api/briefing."""

    def test_returns_briefing(self, service):
        response = client.post(
            "/api/briefing",
            json={"team_ids": ["own1"], "enemy_ids": ["enemy1"], "map_name": "de_mirage"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["map"] == "de_mirage"
        assert data["confidence"] == 20
        assert data["data_quality"] == {"real_profiles": 2, "synthetic_profiles": 0}
        service.build_briefing.assert_awaited_once_with(["own1"], ["enemy1"], "de_mirage")

    def test_team_ids_optional(self, service):
        response = client.post("/api/briefing", json={"enemy_ids": ["enemy1"]})
        assert response.status_code == 200
        service.build_briefing.assert_awaited_once_with([], ["enemy1"], "")

    def test_enemy_ids_required(self, service):
        response = client.post("/api/briefing", json={"team_ids": ["own1"]})
        assert response.status_code == 422

    def test_too_many_players(self, service):
        """Rosters are limited to five players."""
        response = client.post(
            "/api/briefing", json={"enemy_ids": [f"p{i}" for i in range(6)]}
        )
        assert response.status_code == 400
        assert "at most 5" in response.json()["detail"]
        service.build_briefing.assert_not_awaited()

    def test_invalid_player_id(self, service):
        response = client.post("/api/briefing", json={"enemy_ids": ["../etc/passwd"]})
        assert response.status_code == 400
        assert "Invalid player id" in response.json()["detail"]

    def test_error_result_passed_through(self, service):
        """A failed briefing is still a 200 carrying the fallback strategy."""
        service.build_briefing.return_value = BriefingError(message="boom")
        response = client.post("/api/briefing", json={"enemy_ids": ["enemy1"]})
        assert response.status_code == 200
        assert response.json() == {
            "error": True,
            "message": "boom",
            "fallback_strategy": "Play default setups and gather intel",
        }


class TestStatsEndpoint:
    def test_returns_service_stats(self, service):
        response = client.get("/api/briefing/stats")
        assert response.status_code == 200
        assert response.json() == {"api_calls": 4, "cache_hits": 1}


class TestCacheEndpoint:
    def test_clears_service_cache(self, service):
        service.clear_cache.return_value = 3
        response = client.delete("/api/briefing/cache")
        assert response.status_code == 200
        assert response.json() == {"cleared": 3}
        service.clear_cache.assert_called_once_with()
