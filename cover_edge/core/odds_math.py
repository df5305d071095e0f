"""Fundamental odds mathematics: the single source of truth.

Every function here is **pure**: no I/O, no logging, no side effects.
Import from this module; never reimplement locally in services.

Conventions
-----------
* American odds are accepted as ``int`` (or integral ``float``) because that
  is how sportsbooks quote them and how users type them ("-110", "+150").
* Implied probabilities are returned as **percentages** (52.38, not 0.5238)
  so they compare directly with the cover probabilities produced by
  :mod:`cover_edge.core.probability`.
* Odds strictly between -100 and +100 are not representable American odds.
  :func:`american_to_decimal` rejects them; callers that accept user input
  should screen with :func:`is_valid_american_odds` first.

Run tests with::

    pytest tests/test_odds_math.py -v
"""

from __future__ import annotations

from fractions import Fraction
from typing import Final

# ---------------------------------------------------------------------------
# Module-level constants
# ---------------------------------------------------------------------------

#: American-odds magnitude floor.  Anything inside (-100, +100) is a typo or
#: a decimal price pasted into an American field.
_MIN_ODDS_MAGNITUDE: Final[int] = 100

#: Standard juice on a spread bet, used when the user quotes no price.
STANDARD_JUICE: Final[int] = -110

#: Decimal places kept when turning a decimal price into a fraction.
_FRACTIONAL_PRECISION: Final[int] = 1000

#: (upper bound in percentage points, description) for two-way vig.
_VIG_BANDS: Final[tuple[tuple[float, str], ...]] = (
    (2.0, "Very low vig - excellent value"),
    (4.0, "Low vig - good for bettors"),
    (5.0, "Standard vig - typical sportsbook margin"),
    (7.0, "Above average vig - shop for better lines"),
)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def is_valid_american_odds(american: int | float) -> bool:
    """Return True when ``american`` is a representable American price."""
    try:
        return abs(float(american)) >= _MIN_ODDS_MAGNITUDE
    except (TypeError, ValueError):
        return False


# ---------------------------------------------------------------------------
# Odds conversion
# ---------------------------------------------------------------------------


def american_to_decimal(american: int | float) -> float:
    """American odds to decimal odds (stake included in the payout).

    ``-110`` gives ``1.9091`` and ``+150`` gives ``2.5``; a decimal price is
    never below 1.0.

    Args:
        american: American odds.  Negative = favourite (risk more than you
            win), positive = underdog (win more than you risk).

    Returns:
        Decimal odds ≥ 1.0.

    Raises:
        ValueError: If ``|american| < 100``.

    Note:
        Even-money (+100 / -100) returns exactly 2.0 in both conventions.
    """
    if not is_valid_american_odds(american):
        raise ValueError(
            f"Invalid American odds {american!r}: magnitude must be ≥ 100."
        )
    if american > 0:
        return american / 100.0 + 1.0
    # Negative: risk |american| to win 100
    return 100.0 / abs(american) + 1.0


def implied_probability(american: int | float) -> float:
    """Bookmaker's implied win probability, as a percentage (vig-inclusive).

    Examples::

        implied_probability(-110) → 52.38
        implied_probability(+150) → 40.00
    """
    return 100.0 / american_to_decimal(american)


def decimal_to_american(decimal_odds: float) -> int:
    """Convert decimal odds to the nearest American integer.

    Inverse of :func:`american_to_decimal`.  Values ≥ 2.0 come back positive
    (underdog), values below 2.0 negative (favourite).

    Raises:
        ValueError: If ``decimal_odds <= 1.0`` (no profit is possible).
    """
    if decimal_odds <= 1.0:
        raise ValueError(
            f"Decimal odds {decimal_odds!r} must be > 1.0 to carry a price."
        )
    if decimal_odds >= 2.0:
        return int(round((decimal_odds - 1.0) * 100.0))
    return int(round(-100.0 / (decimal_odds - 1.0)))


def fractional_to_decimal(numerator: int | float, denominator: int | float) -> float:
    """Fractional (UK) odds to decimal: ``5/2`` → 3.5."""
    if denominator <= 0 or numerator <= 0:
        raise ValueError(
            f"Fractional odds need positive terms, got {numerator!r}/{denominator!r}."
        )
    return numerator / denominator + 1.0


def decimal_to_fractional(decimal_odds: float) -> tuple[int, int]:
    """Decimal odds to a reduced ``(numerator, denominator)`` pair.

    The profit part is taken to three decimal places before reducing, so
    ``2.5`` gives ``(3, 2)`` and ``1.909`` gives ``(909, 1000)``.

    Raises:
        ValueError: If ``decimal_odds <= 1.0``.
    """
    if decimal_odds <= 1.0:
        raise ValueError(
            f"Decimal odds {decimal_odds!r} must be > 1.0 to carry a price."
        )
    profit = Fraction(round((decimal_odds - 1.0) * _FRACTIONAL_PRECISION), _FRACTIONAL_PRECISION)
    return profit.numerator, profit.denominator


# ---------------------------------------------------------------------------
# Two-way vig
# ---------------------------------------------------------------------------


def calculate_vig(odds_a: int | float, odds_b: int | float) -> float:
    """Bookmaker margin on a two-way market, in percentage points.

    The two implied probabilities summed, minus 100.  A -110/-110 line
    carries about 4.76.
    """
    return implied_probability(odds_a) + implied_probability(odds_b) - 100.0


def no_vig_probabilities(odds_a: int | float, odds_b: int | float) -> tuple[float, float]:
    """Fair win probabilities (percent) with the margin removed proportionally.

    Each side's implied probability is divided by the market total, so the
    pair sums to 100.
    """
    raw_a = implied_probability(odds_a)
    raw_b = implied_probability(odds_b)
    total = raw_a + raw_b
    return raw_a / total * 100.0, raw_b / total * 100.0


def describe_vig(vig: float) -> str:
    """Plain-language band for a vig percentage (upper bounds inclusive)."""
    for ceiling, label in _VIG_BANDS:
        if vig <= ceiling:
            return label
    return "High vig - consider finding better odds elsewhere"


# ---------------------------------------------------------------------------
# Payouts
# ---------------------------------------------------------------------------


def american_profit(stake: float, american: int | float) -> float:
    """Profit (excluding the returned stake) on a winning wager.

    ``stake · odds / 100`` for positive odds, ``stake · 100 / |odds|`` for
    negative odds.
    """
    if not is_valid_american_odds(american):
        raise ValueError(
            f"Invalid American odds {american!r}: magnitude must be ≥ 100."
        )
    if american > 0:
        return stake * american / 100.0
    return stake * 100.0 / abs(american)


def american_payout(stake: float, american: int | float) -> float:
    """Total return on a winning wager: stake plus profit."""
    return stake + american_profit(stake, american)
