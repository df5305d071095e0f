"""
Team statistics lookup.

The orchestrator only needs one call::

    provider.get_team_stats(identifier, league) -> TeamStats | None

``identifier`` may be any name the team registry understands ("ATL",
"Hawks", "atlanta"), so providers resolve through the registry before
looking anything up.  Returning None means "no stats"; the orchestrator
substitutes league averages and records an assumption.

Stat rows coming from outside (CSV exports, JSON payloads, request
overrides) use many spellings for the same column.  :data:`STAT_FIELD_ALIASES`
lists the accepted spellings per canonical field and
:func:`normalize_stat_fields` applies it once, at the boundary.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import fields, replace
from typing import Any, Dict, Iterable, Mapping, Optional, Protocol, Tuple

from cover_edge.core.sport_config import (
    BasketballStats,
    FootballStats,
    League,
    SportCategory,
    TeamStats,
    category_for,
    sport_config,
)
from cover_edge.services.team_registry import TeamRegistry, get_team_registry

logger = logging.getLogger(__name__)

#: Canonical field -> accepted spellings, canonical name first.
STAT_FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "points_for": ("points_for", "ppg", "pointsFor", "pts", "points"),
    "points_against": (
        "points_against", "pointsAgainst", "pointsAllowed", "points_allowed", "papg", "opp_ppg",
    ),
    "fg_pct": ("fg_pct", "fgPct", "fg", "field_goal_pct"),
    "rebound_margin": ("rebound_margin", "reboundMargin", "reb_margin", "rebMargin"),
    "turnover_margin": ("turnover_margin", "turnoverMargin", "to_margin", "tov_margin"),
    "offensive_yards": ("offensive_yards", "offensiveYards", "yards", "ypg", "yards_per_game"),
    "defensive_yards": (
        "defensive_yards", "defensiveYards", "yards_allowed", "yardsAllowed", "opp_ypg",
    ),
    "turnover_diff": ("turnover_diff", "turnoverDiff", "to_diff", "turnover_differential"),
}

_STATS_CLASS = {
    SportCategory.FOOTBALL: FootballStats,
    SportCategory.BASKETBALL: BasketballStats,
}


def normalize_stat_fields(row: Mapping[str, Any]) -> Dict[str, float]:
    """Map a raw stat row onto canonical field names.

    The first alias present with a non-empty value wins.  Unknown keys are
    dropped.

    Raises:
        ValueError: If a recognised field holds a non-numeric value.
    """
    out: Dict[str, float] = {}
    for canonical, aliases in STAT_FIELD_ALIASES.items():
        for alias in aliases:
            value = row.get(alias)
            if value is None or value == "":
                continue
            try:
                out[canonical] = float(value)
            except (TypeError, ValueError):
                raise ValueError(f"Stat field {alias!r} must be numeric, got {value!r}")
            break
    return out


def _fields_for(league: League) -> Tuple[str, ...]:
    cls = _STATS_CLASS[category_for(league)]
    return tuple(f.name for f in fields(cls))


def stats_from_fields(values: Mapping[str, Any], league: League) -> Optional[TeamStats]:
    """Build the league's stat record from a raw row.

    Returns None when a required column is missing.  Optional columns
    (rebound margin, turnover figures) default to zero.
    """
    canonical = normalize_stat_fields(values)
    cls = _STATS_CLASS[category_for(league)]
    kwargs = {name: canonical[name] for name in _fields_for(league) if name in canonical}
    try:
        return cls(**kwargs)
    except TypeError:
        return None


def merge_stats(base: TeamStats, overrides: Mapping[str, Any]) -> TeamStats:
    """Overlay ``overrides`` (any accepted spelling) onto ``base``.

    Fields that do not belong to ``base``'s sport are ignored.
    """
    canonical = normalize_stat_fields(overrides)
    allowed = {f.name for f in fields(base)}
    return replace(base, **{k: v for k, v in canonical.items() if k in allowed})


def league_average_stats(league: League) -> TeamStats:
    return sport_config(league).league_average


class StatsProvider(Protocol):
    """Anything that can answer a team stats lookup."""

    def get_team_stats(self, identifier: str, league: League) -> Optional[TeamStats]:
        ...


class MappingStatsProvider:
    """Serves stats from in-memory rows.

    Rows are keyed by any name the registry resolves; keys and lookups are
    both resolved so "Hawks", "ATL" and "Atlanta Hawks" share one entry::

        provider = MappingStatsProvider({
            League.NBA: {"Hawks": {"ppg": 118.2, "papg": 117.9, "fgPct": 47.1}},
        })
    """

    def __init__(
        self,
        rows: Mapping[League, Mapping[str, Mapping[str, Any]]],
        registry: Optional[TeamRegistry] = None,
    ):
        self.registry = registry or get_team_registry()
        self._stats: Dict[Tuple[League, str], TeamStats] = {}
        for league, teams in rows.items():
            league = League(league)
            for name, row in teams.items():
                self._load_row(league, name, row)

    def _load_row(self, league: League, name: str, row: Mapping[str, Any]) -> None:
        match = self.registry.find_team(name, league)
        if match is None:
            logger.warning("Skipping stats row %r: no %s team by that name", name, league)
            return
        stats = stats_from_fields(row, league)
        if stats is None:
            logger.warning("Skipping stats row %r: required %s fields missing", name, league)
            return
        self._stats[match.team.key] = stats

    def get_team_stats(self, identifier: str, league: League) -> Optional[TeamStats]:
        match = self.registry.find_team(identifier, League(league))
        if match is None:
            return None
        return self._stats.get(match.team.key)

    def __len__(self) -> int:
        return len(self._stats)


class CachedStatsProvider:
    """Memoizing wrapper keyed by resolved ``(abbreviation, league)``.

    Misses (None) are cached too.  Entries never change once written, so
    two threads filling the same key just compute the same value twice.
    """

    def __init__(self, inner: StatsProvider, registry: Optional[TeamRegistry] = None):
        self.inner = inner
        self.registry = registry or get_team_registry()
        self._cache: Dict[Tuple[str, League], Optional[TeamStats]] = {}
        self._lock = threading.Lock()

    def get_team_stats(self, identifier: str, league: League) -> Optional[TeamStats]:
        league = League(league)
        match = self.registry.find_team(identifier, league)
        if match is None:
            return self.inner.get_team_stats(identifier, league)
        key = (match.team.abbreviation, league)
        with self._lock:
            if key in self._cache:
                return self._cache[key]
        stats = self.inner.get_team_stats(identifier, league)
        with self._lock:
            self._cache.setdefault(key, stats)
        return stats

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    @property
    def cached_keys(self) -> Iterable[Tuple[str, League]]:
        with self._lock:
            return tuple(self._cache)
