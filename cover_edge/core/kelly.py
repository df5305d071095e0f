"""Kelly criterion sizing: the single source of truth for bet sizing math.

All functions here are **pure**: no I/O, no database, no logging.
Import from this module; never reimplement Kelly locally in services.

Design decisions
----------------
* **Fractional Kelly** is the default posture of the orchestrator (half
  Kelly).  Full Kelly maximises long-run log-wealth only when the edge
  estimate is exact; ours comes from a linear model with a wide σ, so the
  caller scales it down with ``fraction``.
* The raw Kelly value is reported even when negative so callers can show
  how far from value a bet is, but the adjusted fraction and stake are
  floored at zero.  A negative stake is never produced.

Run tests with::

    pytest tests/test_kelly.py -v
"""

from __future__ import annotations

from dataclasses import dataclass

from cover_edge.core.odds_math import (
    american_profit,
    american_to_decimal,
    implied_probability,
)


@dataclass(frozen=True)
class KellyResult:
    """Output of :func:`calculate_kelly_stake`.

    Attributes:
        recommended_stake: Dollars to wager, ``bankroll · adjusted``; ≥ 0.
        stake_percentage: Adjusted Kelly as a percent of bankroll.
        kelly_fraction: Full (raw) Kelly fraction.  May be negative.
        adjusted_kelly_fraction: ``max(0, full) · fraction``; 0 without value.
        edge: Model probability minus implied probability, in points.
        has_value: True iff full Kelly is strictly positive.
        implied_probability: Bookmaker probability (percent).
        decimal_odds: Decimal price of the wager.
        potential_win: Profit if the recommended stake wins.
        potential_payout: Stake plus profit.
    """

    recommended_stake: float
    stake_percentage: float
    kelly_fraction: float
    adjusted_kelly_fraction: float
    edge: float
    has_value: bool
    implied_probability: float
    decimal_odds: float
    potential_win: float
    potential_payout: float


def full_kelly(win_prob: float, decimal_odds: float) -> float:
    """Closed-form Kelly fraction for a win/loss bet (Kelly 1956)::

        f* = (p · b − q) / b

    where ``b`` is profit per unit staked.  Unbounded below: a bad price
    produces a negative fraction, which the caller must floor.

    Args:
        win_prob: Probability of winning, in ``(0, 1)``.
        decimal_odds: Decimal odds, strictly greater than 1.0.

    Raises:
        ValueError: If either argument is out of range.
    """
    if not (0.0 < win_prob < 1.0):
        raise ValueError(
            f"win_prob must be in (0, 1), got {win_prob!r}. "
            "Check upstream probability clamping."
        )
    if decimal_odds <= 1.0:
        raise ValueError(
            f"decimal_odds must be > 1.0 (no profit otherwise), got {decimal_odds!r}."
        )

    profit_per_unit = decimal_odds - 1.0
    loss_prob = 1.0 - win_prob
    return (profit_per_unit * win_prob - loss_prob) / profit_per_unit


def calculate_kelly_stake(
    bankroll: float,
    probability_percent: float,
    american_odds: int | float,
    fraction: float = 1.0,
) -> KellyResult:
    """Size a wager from a cover probability and an American price.

    Args:
        bankroll: Current bankroll in dollars; must be positive.
        probability_percent: Model cover probability on a 0-100 scale.
        american_odds: Price of the bet; ``|odds| ≥ 100``.
        fraction: Kelly multiplier in ``(0, 1]``.  ``0.5`` is half Kelly.

    Returns:
        :class:`KellyResult`.  Stakes and percentages are rounded to cents,
        Kelly fractions to 4 dp, decimal odds to 3 dp.

    Raises:
        ValueError: For a non-positive bankroll, a probability outside
            ``(0, 100)``, a fraction outside ``(0, 1]`` or invalid odds.

    Examples::

        calculate_kelly_stake(1000, 60, +100).adjusted_kelly_fraction  → 0.2
        calculate_kelly_stake(1000, 50, +100).has_value                → False
    """
    if bankroll <= 0:
        raise ValueError(f"bankroll must be positive, got {bankroll!r}.")
    if not (0.0 < probability_percent < 100.0):
        raise ValueError(
            f"probability_percent must be in (0, 100), got {probability_percent!r}."
        )
    if not (0.0 < fraction <= 1.0):
        raise ValueError(f"fraction must be in (0, 1], got {fraction!r}.")

    decimal_odds = american_to_decimal(american_odds)
    implied = implied_probability(american_odds)
    raw_kelly = full_kelly(probability_percent / 100.0, decimal_odds)

    has_value = raw_kelly > 0.0
    adjusted = raw_kelly * fraction if has_value else 0.0
    stake = bankroll * adjusted
    potential_win = american_profit(stake, american_odds)

    return KellyResult(
        recommended_stake=round(stake, 2),
        stake_percentage=round(adjusted * 100.0, 2),
        kelly_fraction=round(raw_kelly, 4),
        adjusted_kelly_fraction=round(adjusted, 4),
        edge=round(probability_percent - implied, 2),
        has_value=has_value,
        implied_probability=round(implied, 2),
        decimal_odds=round(decimal_odds, 3),
        potential_win=round(potential_win, 2),
        potential_payout=round(stake + potential_win, 2),
    )
