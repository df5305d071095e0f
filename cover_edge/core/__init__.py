"""Core mathematics and configuration for the cover-edge pipeline.

This package contains pure, text-free building blocks that callers with
structured stats can use without the natural-language parser:

- ``odds_math``   : American ↔ decimal ↔ fractional ↔ implied-probability
                    conversion, two-way vig and no-vig probabilities
- ``kelly``       : Kelly criterion stake sizing
- ``probability`` : Walters cover-probability models and banding
- ``sport_config``: per-league constants as a football/basketball union

Nothing in this package imports from ``cover_edge.services`` or
``cover_edge.models``.  All modules are side-effect-free and unit-testable
in isolation.
"""

from cover_edge.core.kelly import KellyResult, calculate_kelly_stake
from cover_edge.core.odds_math import (
    american_to_decimal,
    calculate_vig,
    decimal_to_american,
    decimal_to_fractional,
    fractional_to_decimal,
    implied_probability,
    is_valid_american_odds,
    no_vig_probabilities,
)
from cover_edge.core.probability import (
    ProbabilityResult,
    cover_probability,
    estimate_cover_probability,
    interpret_probability,
)
from cover_edge.core.sport_config import (
    BasketballConfig,
    BasketballStats,
    FootballConfig,
    FootballStats,
    League,
    SportCategory,
    Venue,
    sport_config,
)

__all__ = [
    "BasketballConfig",
    "BasketballStats",
    "FootballConfig",
    "FootballStats",
    "KellyResult",
    "League",
    "ProbabilityResult",
    "SportCategory",
    "Venue",
    "american_to_decimal",
    "calculate_kelly_stake",
    "calculate_vig",
    "cover_probability",
    "decimal_to_american",
    "decimal_to_fractional",
    "estimate_cover_probability",
    "fractional_to_decimal",
    "implied_probability",
    "interpret_probability",
    "is_valid_american_odds",
    "no_vig_probabilities",
    "sport_config",
]
