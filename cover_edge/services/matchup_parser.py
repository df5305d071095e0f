"""
Natural-language matchup parser.

Turns a request such as::

    "NBA: Heat vs Hawks, Hawks -3.5, I'm taking Hawks. Game is in Atlanta."

into a :class:`~cover_edge.models.ParsedMatchup`.  Five independent passes
run over the normalized text and are combined at the end:

1. sport detection (explicit league token, then vocabulary, then teams)
2. the two participants ("X vs Y", "X @ Y", "X at Y") and the pick
3. the spread, re-signed so it is always from the pick's side
4. the venue (explicit words, then a city or arena mention, else neutral)
5. American odds, when quoted

The text is split into clauses at commas, semicolons, brackets and
sentence-ending periods.  A bracketed number ("Hawks (-3.5)") is unwrapped
first so it stays with the team before it.  Pick, spread, venue words and
place names only ever attach to a team named in the same clause.

A missing spread or an undecidable pick comes back as a clarification
request, which is not the same as a parse failure.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from cover_edge.core.odds_math import is_valid_american_odds
from cover_edge.core.sport_config import League, Venue, category_for
from cover_edge.models import (
    LEAGUE_CONFLICT,
    ParsedMatchup,
    ParseResult,
    Team,
    ValidationResult,
)
from cover_edge.services.team_registry import TeamRegistry, get_team_registry

logger = logging.getLogger(__name__)

MAX_ABS_SPREAD = 50.0

SPREAD_HELP = (
    'Could not parse point spread. Please provide a spread like "-3.5" or "favored by 7".'
)
PICK_HELP = (
    "Could not tell which team you are betting on. "
    'Please add a phrase like "taking Hawks" or put the spread next to a team name.'
)

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_LEAGUE_TOKEN = re.compile(r"(?<![a-z0-9])(nba|nfl|cfb|cbb|ncaaf|ncaab)(?![a-z0-9])", re.I)
_LEAGUE_WORDS = {
    "nba": League.NBA,
    "nfl": League.NFL,
    "cfb": League.CFB,
    "ncaaf": League.CFB,
    "cbb": League.CBB,
    "ncaab": League.CBB,
}
_VOCABULARY: Tuple[Tuple[re.Pattern, League], ...] = (
    (re.compile(r"\b(?:college|ncaa)\s+football\b", re.I), League.CFB),
    (
        re.compile(
            r"\b(?:college|ncaa)\s+(?:basketball|hoops)\b|\bmarch\s+madness\b|\bncaa\s+tournament\b",
            re.I,
        ),
        League.CBB,
    ),
)

_CLAUSE_SPLIT = re.compile(r"[,;()!?\n]|\.(?!\d)")
_BRACKETED_NUMBER = re.compile(r"\(\s*([+-]?\d+(?:\.\d+)?)\s*\)")
_LABEL_PREFIX = re.compile(r"^[^:\d]{1,40}:\s*")

# Connectors in priority order; "at" never introduces "home" or a number.
_CONNECTORS: Tuple[re.Pattern, ...] = (
    re.compile(r"^(?P<a>.+?)\s+(?:vs|versus|v)\s+(?P<b>.+)$", re.I),
    re.compile(r"^(?P<a>.+?)\s*@\s*(?P<b>.+)$"),
    re.compile(r"^(?P<a>.+?)\s+at\s+(?!home\b)(?![+-]?\d)(?P<b>.+)$", re.I),
)
_TRAILING_NUMBER = re.compile(r"(?:\s+[+-]?\d+(?:\.\d+)?)+\s*$")

_PICK_PATTERNS: Tuple[re.Pattern, ...] = tuple(
    re.compile(p, re.I)
    for p in (
        r"\btak(?:e|ing)\s+(?P<pick>.+)",
        r"\bmy\s+pick\s+(?:is\s+)?(?P<pick>.+)",
        r"\bpick\s*(?:is|:)\s*(?P<pick>.+)",
        r"\bpicking\s+(?P<pick>.+)",
        r"\bbet(?:ting)?\s+on\s+(?P<pick>.+)",
        r"\bgoing\s+with\s+(?P<pick>.+)",
        r"\bbacking\s+(?P<pick>.+)",
        r"\bi\s+(?:like|want|choose)\s+(?P<pick>.+)",
    )
)

_WORD_NUMBERS = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5, "six": 6, "seven": 7,
    "eight": 8, "nine": 9, "ten": 10, "eleven": 11, "twelve": 12, "thirteen": 13,
    "fourteen": 14, "fifteen": 15, "sixteen": 16, "seventeen": 17,
    "eighteen": 18, "nineteen": 19, "twenty": 20,
}
_AMOUNT = r"(?P<num>\d+(?:\.\d+)?|" + "|".join(_WORD_NUMBERS) + r")(?P<half>\s+and\s+a\s+half)?"

# (pattern, sign applied to the captured amount)
_SPREAD_PHRASES: Tuple[Tuple[re.Pattern, int], ...] = (
    (re.compile(r"\bfavou?red\s+by\s+" + _AMOUNT, re.I), -1),
    (re.compile(r"\b" + _AMOUNT + r"[\s-]*(?:points?|pts?)\s+favou?rites?\b", re.I), -1),
    (re.compile(r"\b" + _AMOUNT + r"[\s-]*(?:points?|pts?)\s+(?:underdogs?|dogs?)\b", re.I), 1),
    (re.compile(r"\bgetting\s+" + _AMOUNT + r"(?:\s+points?)?\b", re.I), 1),
    (re.compile(r"\bminus\s+" + _AMOUNT + r"\b", re.I), -1),
    (re.compile(r"\bplus\s+" + _AMOUNT + r"\b", re.I), 1),
)
# A sign may follow a name directly ("Hawks-3.5") but not a digit ("10-3").
_NUMBER = re.compile(
    r"(?P<num>(?:(?<![\d.:$])[+-])?(?<![\w.:$])\d+(?:\.\d+)?)"
    r"(?![\w.:%])(?!\s*(?:dollars?|bucks|units?|pm|am)\b)",
    re.I,
)
_GAP_BEFORE = re.compile(r"^[\s:]*(?:(?:is|are|getting|giving|laying)\s+)?$", re.I)
_GAP_AFTER = re.compile(r"^\s*(?:(?:pts?|points?|on|for|with)\s+)?(?:the\s+)?$", re.I)

_NEUTRAL = re.compile(r"\bneutral(?:\s+(?:site|court|field|venue|floor|ground))?\b", re.I)
_HOME = re.compile(r"\b(?:at\s+home|home)\b", re.I)
_AWAY = re.compile(r"\b(?:on\s+the\s+road|road|away)\b", re.I)
_LOCATION = re.compile(r"(?:\b(?:in|at)\s+|@\s*)(?P<place>[a-z][a-z0-9&'. -]*)", re.I)

_ODDS_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"\bodds\s*(?:of|at|:|=)?\s*(?P<odds>[+-]?\d{3,4})(?!\d)", re.I),
    re.compile(r"(?<![\w.])(?P<odds>[+-]?\d{3,4})\s*odds\b", re.I),
    re.compile(r"\bat\s+(?P<odds>[+-]\d{3,4})(?!\d)", re.I),
    re.compile(r"(?<![\w.$])(?P<odds>[+-]\d{3,4})(?![\w.])"),
)
_EVEN_MONEY = re.compile(r"\b(?:even\s+money|evens)\b", re.I)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _SpreadHit:
    value: float
    team: Optional[Team]
    phrase: bool


def _prepare(text: str) -> str:
    text = (
        text.replace("’", "'")
        .replace("‘", "'")
        .replace("“", '"')
        .replace("”", '"')
        .replace("−", "-")
        .replace("–", "-")
    )
    text = re.sub(r"\bvs\.", "vs", text, flags=re.I)
    text = _BRACKETED_NUMBER.sub(r" \1 ", text)
    return re.sub(r"[ \t]+", " ", text).strip()


def _clauses(text: str) -> List[str]:
    return [c.strip() for c in _CLAUSE_SPLIT.split(text) if c and c.strip()]


def _amount(match: re.Match) -> float:
    raw = match.group("num").lower()
    value = float(_WORD_NUMBERS[raw]) if raw in _WORD_NUMBERS else float(raw)
    if match.group("half"):
        value += 0.5
    return value


def detect_sport(text: str) -> Optional[League]:
    """League named in ``text`` by token or vocabulary, else None.

    The first explicit token wins ("NBA: ..." beats a later "nfl").
    """
    token = _LEAGUE_TOKEN.search(text or "")
    if token:
        return _LEAGUE_WORDS[token.group(1).lower()]
    for pattern, league in _VOCABULARY:
        if pattern.search(text or ""):
            return league
    return None


def _clean_side(side: str) -> str:
    side = _LABEL_PREFIX.sub("", side.strip())
    side = _TRAILING_NUMBER.sub("", side)
    return side.strip(" -:\"'")


def _matchup_candidates(clauses: Sequence[str]) -> List[Tuple[str, str]]:
    found: List[Tuple[str, str]] = []
    for connector in _CONNECTORS:
        for clause in clauses:
            m = connector.match(_LABEL_PREFIX.sub("", clause))
            if not m:
                continue
            a, b = _clean_side(m.group("a")), _clean_side(m.group("b"))
            if a and b and (a, b) not in found:
                found.append((a, b))
    return found


class _Mentions:
    """Finds where either participant is named, ignoring shared names."""

    def __init__(self, registry: TeamRegistry, first: Team, second: Team):
        self.registry = registry
        self.teams = (first, second)
        if first.key == second.key:
            shared = frozenset()
        else:
            shared = first.terms() & second.terms()
            if first.abbreviation == second.abbreviation:
                shared |= {first.abbreviation.lower()}
        self.shared = shared

    def spans(self, text: str) -> List[Tuple[int, int, Team]]:
        found = []
        for team in self.teams:
            for start, end in self.registry.mentions(text, team, exclude=self.shared):
                found.append((start, end, team))
        return sorted(found, key=lambda s: (s[0], -s[1]))

    def first_in(self, text: str) -> Optional[Team]:
        spans = self.spans(text)
        return spans[0][2] if spans else None

    def nearest(self, text: str, start: int, end: int) -> Optional[Team]:
        """Team named closest to ``text[start:end]``; preceding mentions win ties."""
        best: Optional[Tuple[int, int, Team]] = None
        for s, e, team in self.spans(text):
            if e <= start:
                key = (start - e, 0)
            elif s >= end:
                key = (s - end, 1)
            else:
                continue
            if best is None or key < best[:2]:
                best = (key[0], key[1], team)
        return best[2] if best else None

    def adjacent(self, text: str, start: int, end: int) -> Optional[Team]:
        """Team written right next to ``text[start:end]`` ("Hawks -3.5", "-3.5 Hawks")."""
        spans = self.spans(text)
        before = [span for span in spans if span[1] <= start]
        if before:
            _, e, team = max(before, key=lambda span: span[1])
            if _GAP_BEFORE.match(text[e:start]):
                return team
        after = [span for span in spans if span[0] >= end]
        if after:
            s, _, team = min(after, key=lambda span: span[0])
            if _GAP_AFTER.match(text[end:s]):
                return team
        return None


# ---------------------------------------------------------------------------
# Extraction passes
# ---------------------------------------------------------------------------


def _find_pick(clauses: Sequence[str], mentions: _Mentions) -> Optional[Team]:
    for clause in clauses:
        for pattern in _PICK_PATTERNS:
            m = pattern.search(clause)
            if not m:
                continue
            team = mentions.first_in(m.group("pick"))
            if team is not None:
                return team
    return None


def _find_spread(clauses: Sequence[str], mentions: _Mentions) -> Optional[_SpreadHit]:
    phrases: List[_SpreadHit] = []
    attached: List[_SpreadHit] = []
    standalone: List[_SpreadHit] = []
    for clause in clauses:
        taken: List[Tuple[int, int]] = []
        for pattern, sign in _SPREAD_PHRASES:
            for m in pattern.finditer(clause):
                if any(m.start() < e and s < m.end() for s, e in taken):
                    continue
                taken.append(m.span())
                amount = _amount(m)
                if amount >= 100:
                    continue
                team = mentions.nearest(clause, m.start(), m.end())
                phrases.append(_SpreadHit(sign * amount, team, True))
        for m in _NUMBER.finditer(clause):
            if any(m.start() < e and s < m.end() for s, e in taken):
                continue
            value = float(m.group("num"))
            if abs(value) >= 100:
                continue  # an American price, not a spread
            team = mentions.adjacent(clause, m.start(), m.end())
            hit = _SpreadHit(value, team, False)
            (attached if team is not None else standalone).append(hit)
    for group in (phrases, attached, standalone):
        if group:
            return group[0]
    return None


def _venue_from_words(
    clauses: Sequence[str], mentions: _Mentions, pick: Team
) -> Optional[Venue]:
    for clause in clauses:
        if _NEUTRAL.search(clause):
            return Venue.NEUTRAL
    for clause in clauses:
        hits = [(m, Venue.HOME) for m in _HOME.finditer(clause)]
        hits += [(m, Venue.AWAY) for m in _AWAY.finditer(clause)]
        if not hits:
            continue
        m, venue = min(hits, key=lambda h: h[0].start())
        team = mentions.nearest(clause, m.start(), m.end()) or pick
        if team.key == pick.key:
            return venue
        return Venue.AWAY if venue is Venue.HOME else Venue.HOME
    return None


def _venue_from_places(
    clauses: Sequence[str], registry: TeamRegistry, pick: Team, opponent: Team
) -> Optional[Venue]:
    for clause in clauses:
        for m in _LOCATION.finditer(clause):
            place = m.group("place")
            at_pick = registry.is_home_venue(place, pick)
            at_opponent = registry.is_home_venue(place, opponent)
            if at_pick and not at_opponent:
                return Venue.HOME
            if at_opponent and not at_pick:
                return Venue.AWAY
    return None


def extract_odds(text: str) -> Optional[int]:
    """American odds quoted in ``text``, if any valid price is present."""
    for pattern in _ODDS_PATTERNS:
        for m in pattern.finditer(text or ""):
            odds = int(m.group("odds"))
            if is_valid_american_odds(odds):
                return odds
    if _EVEN_MONEY.search(text or ""):
        return 100
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_matchup_request(text: str, registry: Optional[TeamRegistry] = None) -> ParseResult:
    """Parse a free-text betting request.

    Returns a successful :class:`ParseResult` carrying a ``ParsedMatchup``,
    a clarification request (``clarification_needed`` set) when the spread
    or pick is missing, or a hard failure whose error quotes the text that
    could not be resolved.
    """
    registry = registry or get_team_registry()
    prepared = _prepare(text or "")
    if not prepared:
        return ParseResult(success=False, error="Empty betting request.")

    notes: List[str] = []
    clauses = _clauses(prepared)

    # 1. sport
    stated = detect_sport(prepared)

    # 2a. participants
    candidates = _matchup_candidates(clauses)
    if not candidates:
        return ParseResult(
            success=False,
            error=(
                "Could not find a matchup. "
                'Please name both teams like "Heat vs Hawks" or "Pistons @ Clippers".'
            ),
        )
    outcome = None
    first_failure = None
    for side_a, side_b in candidates:
        outcome = registry.resolve_matchup(side_a, side_b, stated)
        if outcome.ok:
            break
        first_failure = first_failure or outcome
    if not outcome.ok:
        failure = first_failure
        logger.debug("Team resolution failed for %r: %s", text, failure.error)
        clarify = ["sport"] if failure.status == LEAGUE_CONFLICT else []
        return ParseResult(success=False, error=failure.error, clarification_needed=clarify)

    first, second = outcome.teams
    sport = outcome.league
    if stated is None:
        notes.append(f"Sport inferred as {sport.value} from team names")

    mentions = _Mentions(registry, first, second)

    # 2b/3. pick and spread
    pick = _find_pick(clauses, mentions)
    spread_hit = _find_spread(clauses, mentions)

    missing: List[str] = []
    if spread_hit is None:
        missing.append("spread")
    if pick is None:
        if spread_hit is not None and spread_hit.team is not None:
            pick = spread_hit.team
            notes.append(f"Pick assumed to be {pick.name} (team named with the spread)")
        else:
            missing.append("pick")
    if missing:
        error = SPREAD_HELP if "spread" in missing else PICK_HELP
        return ParseResult(success=False, error=error, clarification_needed=missing)

    opponent = second if pick.key == first.key else first
    stated_value = spread_hit.value
    if spread_hit.team is None:
        spread = stated_value
        notes.append(f"Spread {stated_value:+g} read from {pick.name}'s side")
    elif spread_hit.team.key == pick.key:
        spread = stated_value
    else:
        spread = -stated_value or 0.0
        notes.append(
            f"Spread {stated_value:+g} was stated for {opponent.name}; "
            f"recorded as {spread:+g} from {pick.name}'s side"
        )

    # 4. venue
    venue_assumed = False
    venue = _venue_from_words(clauses, mentions, pick)
    if venue is None:
        venue = _venue_from_places(clauses, registry, pick, opponent)
    if venue is None:
        venue = Venue.NEUTRAL
        venue_assumed = True
        notes.append("Venue assumed neutral (not stated)")

    # 5. odds
    odds = extract_odds(prepared)

    parsed = ParsedMatchup(
        sport=sport,
        sport_category=category_for(sport),
        team_a=pick,
        team_b=opponent,
        spread=spread,
        venue=venue,
        venue_assumed=venue_assumed,
        american_odds=odds,
        parsing_notes=tuple(notes),
        raw_text=text,
    )
    logger.debug("Parsed %r -> %s %+g vs %s", text, pick, spread, opponent)
    return ParseResult(success=True, parsed=parsed)


def validate_parsed_matchup(parsed: ParsedMatchup) -> ValidationResult:
    """Sanity-check a parsed matchup before any numbers are run on it."""
    errors: List[str] = []
    if parsed.spread == 0:
        errors.append("Spread must be non-zero.")
    elif abs(parsed.spread) > MAX_ABS_SPREAD:
        errors.append(
            f"Spread {parsed.spread:+g} is outside the allowed range "
            f"[-{MAX_ABS_SPREAD:g}, {MAX_ABS_SPREAD:g}]."
        )
    if parsed.team_a.key == parsed.team_b.key:
        errors.append(f"Both sides are the same team ({parsed.team_a.full_name}).")
    if category_for(parsed.sport) != parsed.sport_category:
        errors.append(
            f"Sport category {parsed.sport_category.value} does not match {parsed.sport.value}."
        )
    for team in (parsed.team_a, parsed.team_b):
        if team.league != parsed.sport:
            errors.append(f"{team.full_name} does not play in {parsed.sport.value}.")
    if parsed.american_odds is not None and not is_valid_american_odds(parsed.american_odds):
        errors.append(f"Invalid American odds {parsed.american_odds}.")
    return ValidationResult(valid=not errors, errors=errors)


def render_matchup(parsed: ParsedMatchup) -> str:
    """Canonical text for a parsed matchup; parsing it gives the same matchup."""
    pick = parsed.team_a.full_name
    parts = [
        f"{parsed.sport.value}: {pick} vs {parsed.team_b.full_name}",
        f"{pick} {parsed.spread:+g}",
        f"taking {pick}",
    ]
    if not parsed.venue_assumed:
        if parsed.venue is Venue.HOME:
            parts.append(f"{pick} at home")
        elif parsed.venue is Venue.AWAY:
            parts.append(f"{pick} away")
        else:
            parts.append("neutral site")
    if parsed.american_odds is not None:
        parts.append(f"odds {parsed.american_odds:+d}")
    return ", ".join(parts)
