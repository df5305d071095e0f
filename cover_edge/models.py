"""Domain records shared by the parser, the registry and the orchestrator.

Everything here is a plain dataclass.  Records that cross a request boundary
(``Team``, ``ParsedMatchup``) are frozen; result envelopes are mutable only
while the producing service is assembling them.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from cover_edge.core.kelly import KellyResult
from cover_edge.core.probability import ProbabilityResult
from cover_edge.core.sport_config import (
    League,
    SportCategory,
    TeamStats,
    Venue,
    category_for,
)


# ---------------------------------------------------------------------------
# Teams
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Team:
    """One franchise or program in one league.

    ``aliases`` and ``home_markers`` are stored lower-case.  ``city`` doubles
    as the school name for college programs ("Alabama" + "Crimson Tide").
    """

    name: str
    city: str
    abbreviation: str
    league: League
    aliases: frozenset = frozenset()
    home_markers: frozenset = frozenset()

    @property
    def full_name(self) -> str:
        return f"{self.city} {self.name}" if self.city else self.name

    @property
    def sport_category(self) -> SportCategory:
        return category_for(self.league)

    @property
    def key(self) -> Tuple[League, str]:
        return (self.league, self.abbreviation)

    def terms(self) -> frozenset:
        """Every lower-case string that names this team, abbreviation excluded."""
        names = {self.name.lower(), self.full_name.lower(), *self.aliases}
        if self.city:
            names.add(self.city.lower())
        return frozenset(names)

    def __str__(self) -> str:
        return f"{self.full_name} ({self.league})"


@dataclass(frozen=True)
class TeamMatch:
    """A successful single-team lookup."""

    team: Team
    match_type: str  # "full_name" | "abbreviation" | "alias" | "substring"
    matched_on: str


RESOLVED = "resolved"
NOT_FOUND = "not_found"
AMBIGUOUS = "ambiguous"
LEAGUE_CONFLICT = "league_conflict"
MIXED_LEAGUES = "mixed_leagues"


@dataclass(frozen=True)
class TeamResolution:
    """Outcome of resolving one free-text team reference.

    ``matches`` holds every team hit by the first matching step that produced
    any hit.  ``error`` always quotes ``query`` verbatim.
    """

    query: str
    status: str
    matches: Tuple[TeamMatch, ...] = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == RESOLVED

    @property
    def match(self) -> Optional[TeamMatch]:
        return self.matches[0] if self.ok else None

    @property
    def leagues(self) -> frozenset:
        return frozenset(m.team.league for m in self.matches)


@dataclass(frozen=True)
class MatchupResolution:
    """Outcome of resolving both sides of "X vs Y" against one league."""

    status: str
    teams: Optional[Tuple[Team, Team]] = None
    league: Optional[League] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == RESOLVED


# ---------------------------------------------------------------------------
# Parser output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParsedMatchup:
    """A fully resolved betting request.

    ``spread`` is always from ``team_a``'s perspective and ``team_a`` is
    always the user's pick.  Equality ignores the notes and the raw text so
    two phrasings of the same bet compare equal.
    """

    sport: League
    sport_category: SportCategory
    team_a: Team
    team_b: Team
    spread: float
    venue: Venue
    venue_assumed: bool
    american_odds: Optional[int] = None
    parsing_notes: Tuple[str, ...] = field(default=(), compare=False)
    raw_text: str = field(default="", compare=False)


@dataclass
class ParseResult:
    success: bool
    parsed: Optional[ParsedMatchup] = None
    error: Optional[str] = None
    clarification_needed: List[str] = field(default_factory=list)

    @property
    def needs_clarification(self) -> bool:
        return not self.success and bool(self.clarification_needed)


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Persistence hand-off
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BetRecord:
    """What the orchestrator hands to a bet sink when logging is requested."""

    sport: League
    pick: str
    opponent: str
    spread: float
    venue: Venue
    american_odds: int
    probability: float
    edge: float
    recommended_stake: float
    bankroll: float
    kelly_multiplier: float
    raw_text: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["sport"] = self.sport.value
        data["venue"] = self.venue.value
        data["created_at"] = self.created_at.isoformat()
        return data


@dataclass(frozen=True)
class LoggedBet:
    bet_id: str


# ---------------------------------------------------------------------------
# Orchestrator output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OddsSummary:
    american_odds: int
    decimal_odds: float
    implied_probability: float


@dataclass
class BettingReport:
    """Everything the pipeline produced for one request.

    On an aborted request ``success`` is False, ``stage`` names the step
    that stopped it (``"parse"`` or ``"validation"``) and only the error
    fields are populated.
    """

    success: bool
    raw_text: str
    stage: Optional[str] = None
    error: Optional[str] = None
    errors: List[str] = field(default_factory=list)
    clarification_needed: List[str] = field(default_factory=list)
    parsed: Optional[ParsedMatchup] = None
    team_a_stats: Optional[TeamStats] = None
    team_b_stats: Optional[TeamStats] = None
    probability: Optional[ProbabilityResult] = None
    interpretation: Optional[str] = None
    odds: Optional[OddsSummary] = None
    kelly: Optional[KellyResult] = None
    bankroll: Optional[float] = None
    kelly_multiplier: Optional[float] = None
    recommendation: Optional[str] = None
    summary: str = ""
    assumptions: List[str] = field(default_factory=list)
    logged: bool = False
    bet_id: Optional[str] = None

    @property
    def needs_clarification(self) -> bool:
        return not self.success and bool(self.clarification_needed)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view (enums as strings, teams as names)."""
        data: Dict[str, Any] = {
            "success": self.success,
            "raw_text": self.raw_text,
            "stage": self.stage,
            "error": self.error,
            "errors": list(self.errors),
            "clarification_needed": list(self.clarification_needed),
            "assumptions": list(self.assumptions),
            "summary": self.summary,
            "logged": self.logged,
            "bet_id": self.bet_id,
        }
        if not self.success:
            return data
        p = self.parsed
        data["matchup"] = {
            "sport": p.sport.value,
            "sport_category": p.sport_category.value,
            "pick": p.team_a.full_name,
            "opponent": p.team_b.full_name,
            "spread": p.spread,
            "venue": p.venue.value,
            "venue_assumed": p.venue_assumed,
            "parsing_notes": list(p.parsing_notes),
        }
        data["probability"] = asdict(self.probability)
        data["probability"]["league"] = self.probability.league.value
        data["interpretation"] = self.interpretation
        data["odds"] = asdict(self.odds)
        data["kelly"] = asdict(self.kelly)
        data["bankroll"] = self.bankroll
        data["kelly_multiplier"] = self.kelly_multiplier
        data["recommendation"] = self.recommendation
        return data
