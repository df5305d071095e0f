"""Cover-probability engine (the "Walters Protocol").

Two steps per game:

1. A sport-specific weighted linear model turns the two teams' per-game
   statistics into an expected scoring margin for the picked team, with a
   home-advantage term added or subtracted according to venue.
2. The margin and the spread are converted into a cover probability under a
   normal error model::

       Z = (predicted_margin + spread) / σ
       P(cover) = Φ(Z)

   ``spread`` is negative when the picked team is favoured, so a team expected
   to win by exactly the number it is laying sits at Z = 0 and P = 50%.

Probabilities are clamped to ``[0.1, 99.9]`` so a lopsided stat gap never
reports certainty.

Every constant comes from the league's variant in
:mod:`cover_edge.core.sport_config`.  Nothing here branches on league names.

Run tests with::

    pytest tests/test_probability.py -v
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Optional

from scipy.stats import norm

from cover_edge.core.sport_config import (
    BasketballConfig,
    BasketballStats,
    FootballConfig,
    FootballStats,
    League,
    SportConfig,
    TeamStats,
    Venue,
    sport_config,
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

#: Probability clamp bounds, in percent.
MIN_PROBABILITY: Final[float] = 0.1
MAX_PROBABILITY: Final[float] = 99.9

#: Interpretation bands, inclusive lower bound, checked top-down.
PROBABILITY_BANDS: Final[tuple[tuple[float, str], ...]] = (
    (65.0, "STRONG COVER"),
    (55.0, "FAVORABLE"),
    (45.0, "COIN FLIP"),
    (35.0, "UNFAVORABLE"),
)
LOWEST_BAND: Final[str] = "POOR VALUE"

#: Total-driven σ for basketball: σ = intercept + slope · total.
_TOTAL_SIGMA_INTERCEPT: Final[float] = 8.5
_TOTAL_SIGMA_SLOPE: Final[float] = 0.015

MODEL_WALTERS: Final[str] = "walters"
MODEL_BASE: Final[str] = "base"
MODEL_HYBRID: Final[str] = "hybrid"


@dataclass(frozen=True)
class ProbabilityResult:
    """Cover probability for the picked team.

    Attributes:
        probability: Percent, clamped to ``[0.1, 99.9]``, rounded to 2 dp.
        predicted_margin: Expected final margin for the picked team,
            including the home term, rounded to 2 dp.
        sigma: σ used for the normal conversion.
        home_advantage_applied: Signed home term (+ home, − away, 0 neutral).
        z_score: ``(predicted_margin + spread) / σ`` before clamping.
        model: Which calibration produced the margin.
        league: League whose constants were used.
    """

    probability: float
    predicted_margin: float
    sigma: float
    home_advantage_applied: float
    z_score: float
    model: str
    league: League


# ---------------------------------------------------------------------------
# Normal conversion
# ---------------------------------------------------------------------------


def normal_cdf(z: float) -> float:
    """Standard normal CDF Φ(z)."""
    return float(norm.cdf(z))


def cover_probability(predicted_margin: float, spread: float, sigma: float) -> float:
    """Probability (percent) that a team with ``predicted_margin`` covers.

    Monotonically increasing in ``predicted_margin``;
    ``cover_probability(0, 0, σ) == 50`` for every σ > 0.

    Raises:
        ValueError: If ``sigma`` is not positive.
    """
    if sigma <= 0:
        raise ValueError(f"sigma must be positive, got {sigma!r}.")
    pct = normal_cdf((predicted_margin + spread) / sigma) * 100.0
    return min(MAX_PROBABILITY, max(MIN_PROBABILITY, pct))


def sigma_from_total(total: float) -> float:
    """Basketball σ scaled from the game total (8.5 + 0.015 · total).

    Higher-scoring games carry more possessions and more margin variance.
    """
    if total <= 0:
        raise ValueError(f"total must be positive, got {total!r}.")
    return _TOTAL_SIGMA_INTERCEPT + _TOTAL_SIGMA_SLOPE * total


def home_adjustment(venue: Venue | str, home_advantage_pts: float) -> float:
    """Signed home term for the picked team."""
    venue = Venue(venue)
    if venue is Venue.HOME:
        return home_advantage_pts
    if venue is Venue.AWAY:
        return -home_advantage_pts
    return 0.0


# ---------------------------------------------------------------------------
# Margin models
# ---------------------------------------------------------------------------


def football_margin(
    team: FootballStats, opponent: FootballStats, config: FootballConfig
) -> float:
    """Weighted football margin before the home term.

    Yardage and turnover gaps are first converted to points (25 yards per
    point, 4 points per turnover regressed by half) so the three weights
    act on one scale.
    """
    points = team.point_differential - opponent.point_differential
    yards = (team.yard_differential - opponent.yard_differential) / config.yards_per_point
    turnovers = (
        (team.turnover_diff - opponent.turnover_diff)
        * config.points_per_turnover
        * config.turnover_regression
    )
    return (
        config.points_weight * points
        + config.yards_weight * yards
        + config.turnover_weight * turnovers
    )


def basketball_margin(
    team: BasketballStats, opponent: BasketballStats, config: BasketballConfig
) -> float:
    """Weighted basketball margin before the home term."""
    points = team.point_differential - opponent.point_differential
    shooting = (team.fg_pct - opponent.fg_pct) * config.points_per_fg_pct
    rebounding = (team.rebound_margin - opponent.rebound_margin) * config.points_per_rebound
    ball_security = (
        (team.turnover_margin - opponent.turnover_margin) * config.points_per_turnover
    )
    return (
        config.points_weight * points
        + config.fg_weight * shooting
        + config.rebound_weight * rebounding
        + config.turnover_weight * ball_security
    )


def basketball_base_margin(team: BasketballStats, opponent: BasketballStats) -> float:
    """Base calibration: half the gap in point differential."""
    return (team.point_differential - opponent.point_differential) / 2.0


def basketball_hybrid_tilt(
    team: BasketballStats,
    opponent: BasketballStats,
    config: BasketballConfig,
    *,
    fg_weight: Optional[float] = None,
    rebound_weight: Optional[float] = None,
    turnover_weight: Optional[float] = None,
) -> float:
    """Additive tilt the hybrid calibration puts on top of the base margin.

    Per-unit weights default to the config (0.9 pts per FG%, 0.35 per
    rebound, 0.6 per turnover).
    """
    fg_w = config.hybrid_fg_weight if fg_weight is None else fg_weight
    reb_w = config.hybrid_rebound_weight if rebound_weight is None else rebound_weight
    tov_w = config.hybrid_turnover_weight if turnover_weight is None else turnover_weight
    return (
        fg_w * (team.fg_pct - opponent.fg_pct)
        + reb_w * (team.rebound_margin - opponent.rebound_margin)
        + tov_w * (team.turnover_margin - opponent.turnover_margin)
    )


# ---------------------------------------------------------------------------
# End-to-end estimators
# ---------------------------------------------------------------------------


def _finish(
    raw_margin: float,
    spread: float,
    venue: Venue | str,
    sigma: float,
    home_advantage_pts: float,
    model: str,
    league: League,
) -> ProbabilityResult:
    home = home_adjustment(venue, home_advantage_pts)
    margin = raw_margin + home
    if sigma <= 0:
        raise ValueError(f"sigma must be positive, got {sigma!r}.")
    z = (margin + spread) / sigma
    return ProbabilityResult(
        probability=round(cover_probability(margin, spread, sigma), 2),
        predicted_margin=round(margin, 2),
        sigma=sigma,
        home_advantage_applied=home,
        z_score=z,
        model=model,
        league=league,
    )


def estimate_football_probability(
    team: FootballStats,
    opponent: FootballStats,
    spread: float,
    venue: Venue | str = Venue.NEUTRAL,
    config: Optional[FootballConfig] = None,
) -> ProbabilityResult:
    """Walters football model.  ``config`` defaults to the NFL."""
    cfg = config or FootballConfig.nfl()
    return _finish(
        football_margin(team, opponent, cfg),
        spread,
        venue,
        cfg.sigma,
        cfg.home_advantage_pts,
        MODEL_WALTERS,
        cfg.league,
    )


def estimate_basketball_probability(
    team: BasketballStats,
    opponent: BasketballStats,
    spread: float,
    venue: Venue | str = Venue.NEUTRAL,
    config: Optional[BasketballConfig] = None,
) -> ProbabilityResult:
    """Walters basketball model.  ``config`` defaults to the NBA."""
    cfg = config or BasketballConfig.nba()
    return _finish(
        basketball_margin(team, opponent, cfg),
        spread,
        venue,
        cfg.sigma,
        cfg.home_advantage_pts,
        MODEL_WALTERS,
        cfg.league,
    )


def estimate_basketball_base_probability(
    team: BasketballStats,
    opponent: BasketballStats,
    spread: float,
    venue: Venue | str = Venue.NEUTRAL,
    config: Optional[BasketballConfig] = None,
    *,
    sigma: Optional[float] = None,
) -> ProbabilityResult:
    """Base basketball calibration (point differential only).

    ``sigma`` overrides the league σ, e.g. with :func:`sigma_from_total`.
    """
    cfg = config or BasketballConfig.nba()
    return _finish(
        basketball_base_margin(team, opponent),
        spread,
        venue,
        sigma if sigma is not None else cfg.sigma,
        cfg.home_advantage_pts,
        MODEL_BASE,
        cfg.league,
    )


def estimate_basketball_hybrid_probability(
    team: BasketballStats,
    opponent: BasketballStats,
    spread: float,
    venue: Venue | str = Venue.NEUTRAL,
    config: Optional[BasketballConfig] = None,
    *,
    sigma: Optional[float] = None,
    fg_weight: Optional[float] = None,
    rebound_weight: Optional[float] = None,
    turnover_weight: Optional[float] = None,
) -> ProbabilityResult:
    """Hybrid basketball calibration: base margin plus the stat tilt."""
    cfg = config or BasketballConfig.nba()
    margin = basketball_base_margin(team, opponent) + basketball_hybrid_tilt(
        team,
        opponent,
        cfg,
        fg_weight=fg_weight,
        rebound_weight=rebound_weight,
        turnover_weight=turnover_weight,
    )
    return _finish(
        margin,
        spread,
        venue,
        sigma if sigma is not None else cfg.sigma,
        cfg.home_advantage_pts,
        MODEL_HYBRID,
        cfg.league,
    )


def estimate_cover_probability(
    team: TeamStats,
    opponent: TeamStats,
    spread: float,
    venue: Venue | str,
    config: SportConfig | League | str,
) -> ProbabilityResult:
    """Dispatch to the Walters model matching the config variant.

    Raises:
        TypeError: If the stat objects do not match the config's sport.
    """
    cfg = config if isinstance(config, (FootballConfig, BasketballConfig)) else sport_config(config)
    if isinstance(cfg, FootballConfig):
        if not (isinstance(team, FootballStats) and isinstance(opponent, FootballStats)):
            raise TypeError(f"{cfg.league} requires FootballStats for both teams.")
        return estimate_football_probability(team, opponent, spread, venue, cfg)
    if not (isinstance(team, BasketballStats) and isinstance(opponent, BasketballStats)):
        raise TypeError(f"{cfg.league} requires BasketballStats for both teams.")
    return estimate_basketball_probability(team, opponent, spread, venue, cfg)


# ---------------------------------------------------------------------------
# Interpretation
# ---------------------------------------------------------------------------


def interpret_probability(probability: float) -> str:
    """Human-readable band for a cover probability (percent)."""
    for lower, label in PROBABILITY_BANDS:
        if probability >= lower:
            return label
    return LOWEST_BAND


def describe_cover(probability: float, team_name: str, spread: float) -> str:
    """One-line interpretation, e.g. ``"FAVORABLE: Hawks -3.5 covers 58.2% of the time"``."""
    return (
        f"{interpret_probability(probability)}: {team_name} {spread:+g} "
        f"covers {probability:.1f}% of the time"
    )
