"""Tests for roster aggregation."""

import math

import pytest

from cs2brief.core.constants import Level, Role, TeamStyle
from cs2brief.core.errors import AggregationError
from cs2brief.scouting.aggregate import (
    DEFAULT_STRATEGY,
    aggregate,
    build_composition,
    classify_team_style,
    mean_of,
    predict_strategy,
)
from cs2brief.scouting.models import (
    NoTeamData,
    PlayerProfile,
    PlayerRating,
    PlayerStats,
    TeamAnalysis,
    TeamComposition,
)
from cs2brief.scouting.normalize import analyze_stats


def _profile(handle: str, rating: float = 0.0, **stats) -> PlayerProfile:
    s = PlayerStats(**stats)
    return PlayerProfile(
        platform_user_id=handle,
        handle=handle,
        stats=s,
        analysis=analyze_stats(s),
        rating=PlayerRating(rating=rating),
    )


def _awper(handle: str, kd: float = 1.3) -> PlayerProfile:
    return _profile(handle, kd=kd, headshot_pct=55)


def _entry(handle: str, kd: float = 1.2) -> PlayerProfile:
    return _profile(handle, kd=kd, adr=90)


class TestMeanOf:
    def test_mean(self):
        assert mean_of([1.0, 2.0]) == pytest.approx(1.5)

    def test_empty_raises(self):
        with pytest.raises(AggregationError):
            mean_of([])


class TestAggregate:
    def test_averages(self):
        """kd [1.0, 2.0] averages to 1.5."""
        result = aggregate(
            [
                _profile("a", rating=1000, kd=1.0, win_rate=40),
                _profile("b", rating=2000, kd=2.0, win_rate=60),
            ]
        )
        assert isinstance(result, TeamAnalysis)
        assert result.has_data is True
        assert result.player_count == 2
        assert result.average_kd == pytest.approx(1.5)
        assert result.average_win_rate == pytest.approx(50.0)
        assert result.average_rating == pytest.approx(1500)

    def test_empty_roster_is_no_data(self):
        """An empty roster yields the no-data marker, never NaN."""
        result = aggregate([])
        assert isinstance(result, NoTeamData)
        assert result.has_data is False
        assert result.to_dict() == {"error": "No data available"}

    def test_empty_roster_has_no_nan(self):
        values = [v for v in aggregate([]).to_dict().values() if isinstance(v, float)]
        assert not any(math.isnan(v) for v in values)

    def test_top_and_weakest_player(self):
        result = aggregate(
            [_profile("mid", kd=1.0), _profile("star", kd=1.8), _profile("low", kd=0.6)]
        )
        assert result.top_player.handle == "star"
        assert result.top_player.kd == 1.8
        assert result.weakest_player.handle == "low"
        assert result.weakest_player.vulnerability == Level.HIGH

    def test_weakest_tie_takes_first_occurrence(self):
        """Equal lowest kd picks the earlier roster entry."""
        result = aggregate(
            [_profile("x", kd=1.2), _profile("first", kd=0.9), _profile("second", kd=0.9)]
        )
        assert result.weakest_player.handle == "first"
        assert result.weakest_player.vulnerability == Level.MEDIUM

    def test_top_tie_takes_first_occurrence(self):
        result = aggregate([_profile("first", kd=1.5), _profile("second", kd=1.5)])
        assert result.top_player.handle == "first"

    def test_single_player_is_top_and_weakest(self):
        result = aggregate([_profile("solo", kd=1.1)])
        assert result.top_player.handle == "solo"
        assert result.weakest_player.handle == "solo"

    def test_composition_counts_roles(self):
        result = aggregate([_awper("awp"), _entry("e1"), _entry("e2"), _profile("r", kd=1.0)])
        comp = result.team_composition
        assert comp.has_awper is True
        assert comp.entry_fraggers == 2
        assert comp.role_counts[Role.RIFLER] == 1

    def test_to_dict_shape(self):
        d = aggregate([_awper("awp", kd=1.6), _profile("r", kd=1.0)]).to_dict()
        assert d["average_kd"] == 1.3
        assert d["top_player"] == {"handle": "awp", "kd": 1.6, "role": "awper"}
        assert d["team_composition"]["has_awper"] is True
        assert d["team_style"] == "tactical"
        assert d["predicted_strategy"] == "Slow defaults with AWP control"


class TestTeamStyle:
    def _composition(self, **counts) -> TeamComposition:
        comp = TeamComposition()
        for role, count in counts.items():
            comp.role_counts[Role(role)] = count
        return comp

    def test_aggressive(self):
        assert classify_team_style(1.2, self._composition(entry_fragger=2)) == TeamStyle.AGGRESSIVE

    def test_aggressive_needs_two_entries(self):
        assert classify_team_style(1.2, self._composition(entry_fragger=1)) == TeamStyle.BALANCED

    def test_tactical(self):
        assert classify_team_style(1.05, self._composition(awper=1)) == TeamStyle.TACTICAL

    def test_aggressive_wins_over_tactical(self):
        """Rules are checked in order."""
        comp = self._composition(awper=1, entry_fragger=2)
        assert classify_team_style(1.2, comp) == TeamStyle.AGGRESSIVE

    def test_defensive(self):
        assert classify_team_style(0.85, self._composition()) == TeamStyle.DEFENSIVE

    def test_balanced_fallback(self):
        assert classify_team_style(1.0, self._composition()) == TeamStyle.BALANCED

    def test_build_composition_has_every_role(self):
        comp = build_composition([])
        assert set(comp.role_counts) == set(Role)
        assert all(count == 0 for count in comp.role_counts.values())


class TestPredictStrategy:
    @pytest.mark.parametrize(
        "style, has_awper, expected",
        [
            (TeamStyle.AGGRESSIVE, False, "Fast executes and map control"),
            (TeamStyle.TACTICAL, True, "Slow defaults with AWP control"),
            (TeamStyle.DEFENSIVE, False, "Passive holds and late rotates"),
            (TeamStyle.BALANCED, True, DEFAULT_STRATEGY),
        ],
    )
    def test_table(self, style, has_awper, expected):
        assert predict_strategy(style, has_awper) == expected
