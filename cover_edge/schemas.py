"""
Pydantic request schema for the analysis entry point.

This is the one place a raw request dict is validated.  Everything past
:class:`AnalyzeRequest` works with plain, already-checked values.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from cover_edge.core.odds_math import is_valid_american_odds
from cover_edge.services.stats_provider import normalize_stat_fields


# ---------------------------------------------------------------------------
# Stat overrides
# ---------------------------------------------------------------------------

class StatsOverride(BaseModel):
    """
    Caller-supplied stats for one side of the matchup.

    Any subset of fields may be given; missing fields fall back to the
    stats provider, then league averages.  Common spellings are accepted
    (``ppg``, ``pointsFor``, ``pointsAllowed``, ``fgPct``, ...).
    """

    points_for: Optional[float] = Field(None, ge=0)
    points_against: Optional[float] = Field(None, ge=0)

    # Basketball
    fg_pct: Optional[float] = Field(None, ge=0, le=100, description="Field-goal %, e.g. 47.2")
    rebound_margin: Optional[float] = None
    turnover_margin: Optional[float] = None

    # Football
    offensive_yards: Optional[float] = Field(None, ge=0)
    defensive_yards: Optional[float] = Field(None, ge=0)
    turnover_diff: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def apply_field_aliases(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return normalize_stat_fields(data)

    def as_fields(self) -> Dict[str, float]:
        """Only the fields the caller actually set."""
        return self.model_dump(exclude_none=True)


# ---------------------------------------------------------------------------
# Analysis request
# ---------------------------------------------------------------------------

class AnalyzeRequest(BaseModel):
    """Payload for one natural-language betting analysis."""

    text: str = Field(..., min_length=1, max_length=1000)
    bankroll: Optional[float] = Field(None, gt=0, description="Dollars; default from settings")
    american_odds: Optional[int] = Field(None, description="Overrides odds found in the text")
    kelly_fraction: Optional[float] = Field(
        None, ge=0.1, le=1.0, description="Kelly multiplier, e.g. 0.5 for half Kelly"
    )
    team_a_stats_override: Optional[StatsOverride] = None
    team_b_stats_override: Optional[StatsOverride] = None
    log_bet: bool = Field(False, description="Hand the result to the bet sink")

    @field_validator("text")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("text must not be blank")
        return v

    @field_validator("american_odds")
    @classmethod
    def validate_american_odds(cls, v: Optional[int]) -> Optional[int]:
        if v is None:
            return v
        if not is_valid_american_odds(v):
            raise ValueError(
                f"american_odds={v} is not valid American odds. "
                "Must be >= +100 or <= -100."
            )
        return v

    model_config = {
        "json_schema_extra": {
            "example": {
                "text": "NBA: Heat vs Hawks, Hawks -3.5, I'm taking Hawks. Game is in Atlanta.",
                "bankroll": 1000.0,
                "american_odds": -110,
                "kelly_fraction": 0.5,
                "log_bet": False,
            }
        }
    }
