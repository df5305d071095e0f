"""
Tests for stats lookup, field aliases and the memoizing cache
Run with: pytest tests/test_stats_provider.py -v
"""

from unittest.mock import MagicMock

import pytest

from cover_edge.core.sport_config import BasketballStats, FootballStats, League
from cover_edge.services.stats_provider import (
    CachedStatsProvider,
    MappingStatsProvider,
    league_average_stats,
    merge_stats,
    normalize_stat_fields,
    stats_from_fields,
)
from cover_edge.services.team_registry import get_team_registry


@pytest.fixture(scope="module")
def registry():
    return get_team_registry()


HAWKS_ROW = {"ppg": 118.2, "pointsAllowed": 117.9, "fgPct": 47.1, "reboundMargin": -1.5}


class TestFieldAliases:
    def test_aliases_map_to_canonical_names(self):
        out = normalize_stat_fields({"ppg": "110.5", "pointsAllowed": 105, "junk": 1})

        assert out == {"points_for": 110.5, "points_against": 105.0}

    def test_first_alias_wins(self):
        assert normalize_stat_fields({"points_for": 100, "ppg": 90}) == {"points_for": 100.0}

    def test_empty_values_are_skipped(self):
        assert normalize_stat_fields({"ppg": "", "pts": 99}) == {"points_for": 99.0}

    def test_non_numeric_raises(self):
        with pytest.raises(ValueError, match="ppg"):
            normalize_stat_fields({"ppg": "lots"})

    def test_football_aliases(self):
        out = normalize_stat_fields({"ypg": 350, "yards_allowed": 320, "to_diff": 0.5})

        assert out == {"offensive_yards": 350.0, "defensive_yards": 320.0, "turnover_diff": 0.5}


class TestBuildingStats:
    def test_basketball_row(self):
        stats = stats_from_fields(HAWKS_ROW, League.NBA)

        assert stats == BasketballStats(118.2, 117.9, 47.1, rebound_margin=-1.5)

    def test_football_row(self):
        row = {"pointsFor": 24, "pointsAgainst": 20, "offensiveYards": 360, "defensiveYards": 330}
        stats = stats_from_fields(row, League.NFL)

        assert isinstance(stats, FootballStats)
        assert stats.turnover_diff == 0.0

    def test_missing_required_field_returns_none(self):
        assert stats_from_fields({"ppg": 110, "papg": 100}, League.NBA) is None

    def test_merge_ignores_other_sport_fields(self):
        base = league_average_stats(League.NBA)
        merged = merge_stats(base, {"ppg": 120, "yards": 400})

        assert merged.points_for == 120.0
        assert merged.fg_pct == base.fg_pct


class TestMappingStatsProvider:
    def test_lookup_by_any_alias(self, registry):
        provider = MappingStatsProvider({League.NBA: {"Hawks": HAWKS_ROW}}, registry)

        for name in ("Hawks", "ATL", "atlanta", "Atlanta Hawks"):
            assert provider.get_team_stats(name, League.NBA).points_for == 118.2

    def test_rows_keyed_by_abbreviation(self, registry):
        provider = MappingStatsProvider({"NBA": {"ATL": HAWKS_ROW}}, registry)

        assert provider.get_team_stats("Hawks", League.NBA) is not None

    def test_unknown_team_and_wrong_league(self, registry):
        provider = MappingStatsProvider({League.NBA: {"Hawks": HAWKS_ROW}}, registry)

        assert provider.get_team_stats("Heat", League.NBA) is None
        assert provider.get_team_stats("Falcons", League.NFL) is None

    def test_bad_rows_are_skipped(self, registry, caplog):
        provider = MappingStatsProvider(
            {League.NBA: {"Zzyzx": HAWKS_ROW, "Heat": {"ppg": 110}, "Hawks": HAWKS_ROW}},
            registry,
        )

        assert len(provider) == 1
        assert "Zzyzx" in caplog.text


class TestCachedStatsProvider:
    def test_aliases_share_one_cache_entry(self, registry):
        inner = MagicMock()
        inner.get_team_stats.return_value = BasketballStats(110, 105, 46)
        cached = CachedStatsProvider(inner, registry)

        first = cached.get_team_stats("Hawks", League.NBA)
        second = cached.get_team_stats("ATL", League.NBA)

        assert first is second
        assert inner.get_team_stats.call_count == 1
        assert tuple(cached.cached_keys) == (("ATL", League.NBA),)

    def test_misses_are_cached(self, registry):
        inner = MagicMock()
        inner.get_team_stats.return_value = None
        cached = CachedStatsProvider(inner, registry)

        assert cached.get_team_stats("Heat", "NBA") is None
        assert cached.get_team_stats("Heat", "NBA") is None
        assert inner.get_team_stats.call_count == 1

    def test_clear(self, registry):
        inner = MagicMock()
        inner.get_team_stats.return_value = None
        cached = CachedStatsProvider(inner, registry)

        cached.get_team_stats("Heat", League.NBA)
        cached.clear()
        cached.get_team_stats("Heat", League.NBA)

        assert inner.get_team_stats.call_count == 2

    def test_unresolvable_identifier_bypasses_cache(self, registry):
        inner = MagicMock()
        inner.get_team_stats.return_value = None
        cached = CachedStatsProvider(inner, registry)

        cached.get_team_stats("Zzyzx", League.NBA)
        cached.get_team_stats("Zzyzx", League.NBA)

        assert inner.get_team_stats.call_count == 2
        assert tuple(cached.cached_keys) == ()
