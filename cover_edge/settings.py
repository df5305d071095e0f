"""
Runtime defaults for an analysis, read from the environment.

Values come from ``os.getenv`` after ``load_dotenv()`` so a local ``.env``
file works the same as exported variables:

    COVER_EDGE_DEFAULT_BANKROLL   bankroll when the request gives none (1000)
    COVER_EDGE_DEFAULT_ODDS       American odds when none are quoted (-110)
    COVER_EDGE_KELLY_FRACTION     Kelly multiplier when none is given (0.5)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from cover_edge.core.odds_math import STANDARD_JUICE, is_valid_american_odds

load_dotenv()


@dataclass(frozen=True)
class AnalysisDefaults:
    bankroll: float = 1000.0
    american_odds: int = STANDARD_JUICE
    kelly_fraction: float = 0.5

    def __post_init__(self) -> None:
        if self.bankroll <= 0:
            raise ValueError(f"Default bankroll must be positive, got {self.bankroll}")
        if not is_valid_american_odds(self.american_odds):
            raise ValueError(f"Default odds must satisfy |odds| >= 100, got {self.american_odds}")
        if not 0.0 < self.kelly_fraction <= 1.0:
            raise ValueError(f"Default Kelly fraction must be in (0, 1], got {self.kelly_fraction}")

    @classmethod
    def from_env(cls) -> AnalysisDefaults:
        return cls(
            bankroll=float(os.getenv("COVER_EDGE_DEFAULT_BANKROLL", "1000")),
            american_odds=int(os.getenv("COVER_EDGE_DEFAULT_ODDS", str(STANDARD_JUICE))),
            kelly_fraction=float(os.getenv("COVER_EDGE_KELLY_FRACTION", "0.5")),
        )
