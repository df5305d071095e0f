"""League-level configuration: every constant that differs between leagues.

Nowhere else in the codebase should a standard deviation, a home-advantage
figure, a regression weight or a league-average stat line be hard-coded.

Architecture
------------
A league belongs to exactly one sport category, and each category has its
own stat shape and weights.  The configuration is therefore a small closed
tagged union::

    SportConfig = FootballConfig | BasketballConfig

Each variant is a frozen dataclass carrying its own constants.  Named
constructors (:meth:`FootballConfig.nfl`, :meth:`BasketballConfig.nba`, ...)
return pre-populated instances; :func:`sport_config` maps a :class:`League`
onto the right one.  The probability engine pulls constants from the variant
it receives instead of branching on league strings.

Typical usage::

    from cover_edge.core.sport_config import League, sport_config

    cfg = sport_config(League.NFL)
    cfg.sigma               # 13.5

    # Override a single constant for a custom calibration:
    from dataclasses import replace
    custom_cfg = replace(cfg, home_advantage_pts=2.0)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Final, Union


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------


class League(str, Enum):
    """Leagues supported by the team catalogue and the probability engine."""

    NBA = "NBA"
    NFL = "NFL"
    CFB = "CFB"
    CBB = "CBB"

    def __str__(self) -> str:
        return self.value


class SportCategory(str, Enum):
    FOOTBALL = "football"
    BASKETBALL = "basketball"

    def __str__(self) -> str:
        return self.value


class Venue(str, Enum):
    """Where the game is played, from the picked team's point of view."""

    HOME = "home"
    AWAY = "away"
    NEUTRAL = "neutral"

    def __str__(self) -> str:
        return self.value


#: League → sport category.  Closed mapping; every League must appear.
LEAGUE_CATEGORY: Final[dict[League, SportCategory]] = {
    League.NFL: SportCategory.FOOTBALL,
    League.CFB: SportCategory.FOOTBALL,
    League.NBA: SportCategory.BASKETBALL,
    League.CBB: SportCategory.BASKETBALL,
}


def category_for(league: League) -> SportCategory:
    """Return the sport category a league belongs to."""
    return LEAGUE_CATEGORY[League(league)]


# ---------------------------------------------------------------------------
# Team statistics (value objects)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FootballStats:
    """Per-game football team statistics.

    Attributes:
        points_for: Points scored per game.
        points_against: Points allowed per game.
        offensive_yards: Offensive yards gained per game.
        defensive_yards: Yards allowed per game.
        turnover_diff: Takeaways minus giveaways per game (positive = better).
    """

    points_for: float
    points_against: float
    offensive_yards: float
    defensive_yards: float
    turnover_diff: float = 0.0

    @property
    def point_differential(self) -> float:
        return self.points_for - self.points_against

    @property
    def yard_differential(self) -> float:
        return self.offensive_yards - self.defensive_yards


@dataclass(frozen=True)
class BasketballStats:
    """Per-game basketball team statistics.

    Attributes:
        points_for: Points scored per game.
        points_against: Points allowed per game.
        fg_pct: Field-goal percentage on a 0-100 scale (47.0, not 0.47).
        rebound_margin: Rebounds minus opponent rebounds per game.
        turnover_margin: Turnovers forced minus turnovers committed per game
            (positive = better ball security).
    """

    points_for: float
    points_against: float
    fg_pct: float
    rebound_margin: float = 0.0
    turnover_margin: float = 0.0

    @property
    def point_differential(self) -> float:
        return self.points_for - self.points_against


TeamStats = Union[FootballStats, BasketballStats]


# ---------------------------------------------------------------------------
# Football
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FootballConfig:
    """Walters-protocol constants for a football league.

    The margin model is::

        margin = w_pts · Δpoint_diff
               + w_yds · (Δyard_diff / yards_per_point)
               + w_to  · (Δturnover_diff · points_per_turnover · turnover_regression)

    Yards and turnovers are converted to points before weighting so the
    three weights apply on a common scale.

    Attributes:
        league: NFL or CFB.
        sigma: Standard deviation of the final margin around the prediction.
        home_advantage_pts: Points credited to the home side.
        points_weight: Weight on the point-differential gap.
        yards_weight: Weight on the yardage-differential gap.
        turnover_weight: Weight on the turnover-differential gap.
        yards_per_point: Yards needed to be worth one point.
        points_per_turnover: Scoring value of one turnover.
        turnover_regression: Shrinkage applied to turnover luck.
        league_average: Stat line substituted when a team has no stats.
    """

    league: League
    sigma: float
    home_advantage_pts: float
    league_average: FootballStats
    points_weight: float = 0.40
    yards_weight: float = 0.25
    turnover_weight: float = 0.20
    yards_per_point: float = 25.0
    points_per_turnover: float = 4.0
    turnover_regression: float = 0.5
    category: SportCategory = field(default=SportCategory.FOOTBALL, init=False)

    @classmethod
    def nfl(cls) -> FootballConfig:
        return cls(
            league=League.NFL,
            sigma=13.5,
            home_advantage_pts=2.5,
            league_average=FootballStats(
                points_for=22.5,
                points_against=22.5,
                offensive_yards=340.0,
                defensive_yards=340.0,
                turnover_diff=0.0,
            ),
        )

    @classmethod
    def cfb(cls) -> FootballConfig:
        """College football: wider scoring spread, bigger home crowds."""
        return cls(
            league=League.CFB,
            sigma=16.0,
            home_advantage_pts=3.0,
            league_average=FootballStats(
                points_for=28.0,
                points_against=28.0,
                offensive_yards=380.0,
                defensive_yards=380.0,
                turnover_diff=0.0,
            ),
        )

    def neutral_site(self) -> FootballConfig:
        """Return a copy with home advantage zeroed out (bowl games, etc.)."""
        return replace(self, home_advantage_pts=0.0)


# ---------------------------------------------------------------------------
# Basketball
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BasketballConfig:
    """Walters-protocol constants for a basketball league.

    The weighted margin model is::

        margin = w_pts · Δpoint_diff
               + w_fg  · (ΔFG% · points_per_fg_pct)
               + w_reb · (Δrebound_margin · points_per_rebound)
               + w_tov · (Δturnover_margin · points_per_turnover)

    Two lighter calibrations share the same σ and home court:

    * **base**: half the point-differential gap, nothing else.
    * **hybrid**: base plus an additive tilt of
      ``hybrid_fg_weight · ΔFG% + hybrid_rebound_weight · Δreb
      + hybrid_turnover_weight · Δtov``.

    Attributes:
        league: NBA or CBB.
        sigma: Standard deviation of the final margin.
        home_advantage_pts: Points credited to the home side.
        league_average: Stat line substituted when a team has no stats.
    """

    league: League
    sigma: float
    home_advantage_pts: float
    league_average: BasketballStats
    points_weight: float = 0.35
    fg_weight: float = 0.30
    rebound_weight: float = 0.20
    turnover_weight: float = 0.15
    points_per_fg_pct: float = 1.0
    points_per_rebound: float = 0.5
    points_per_turnover: float = 1.0
    hybrid_fg_weight: float = 0.9
    hybrid_rebound_weight: float = 0.35
    hybrid_turnover_weight: float = 0.6
    category: SportCategory = field(default=SportCategory.BASKETBALL, init=False)

    @classmethod
    def nba(cls) -> BasketballConfig:
        return cls(
            league=League.NBA,
            sigma=11.5,
            home_advantage_pts=3.0,
            league_average=BasketballStats(
                points_for=114.0,
                points_against=114.0,
                fg_pct=47.0,
                rebound_margin=0.0,
                turnover_margin=0.0,
            ),
        )

    @classmethod
    def cbb(cls) -> BasketballConfig:
        """College basketball: lower totals and a tighter σ."""
        return cls(
            league=League.CBB,
            sigma=10.5,
            home_advantage_pts=3.5,
            league_average=BasketballStats(
                points_for=72.0,
                points_against=72.0,
                fg_pct=45.0,
                rebound_margin=0.0,
                turnover_margin=0.0,
            ),
        )

    def neutral_site(self) -> BasketballConfig:
        """Return a copy with home advantage zeroed out (tournament games)."""
        return replace(self, home_advantage_pts=0.0)


SportConfig = Union[FootballConfig, BasketballConfig]

_CONSTRUCTORS: Final = {
    League.NFL: FootballConfig.nfl,
    League.CFB: FootballConfig.cfb,
    League.NBA: BasketballConfig.nba,
    League.CBB: BasketballConfig.cbb,
}


def sport_config(league: League | str) -> SportConfig:
    """Return the canonical configuration for ``league``.

    Raises:
        ValueError: If ``league`` is not one of NBA, NFL, CFB, CBB.
    """
    try:
        key = League(str(league).upper())
    except ValueError:
        raise ValueError(
            f"Unknown league {league!r}; expected one of "
            f"{', '.join(m.value for m in League)}."
        ) from None
    return _CONSTRUCTORS[key]()
