"""
Team registry: resolves free-text team references to catalogue entries.

Resolution runs four steps in order and stops at the first step that hits
anything:

1. exact full name or nickname ("Atlanta Hawks", "Hawks")
2. exact abbreviation ("ATL")
3. exact alias, city names included ("atlanta", "niners", "philly")
4. substring containment in either direction, on word boundaries

A step that hits more than one team is never broken silently.  Hits from
different leagues are a league conflict (the caller must supply a league);
hits inside one league are ambiguous.  rapidfuzz is only used to build
"did you mean" suggestions for error messages, never to resolve.
"""

from __future__ import annotations

import functools
import logging
import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from rapidfuzz import fuzz, process

from cover_edge.core.sport_config import League
from cover_edge.models import (
    AMBIGUOUS,
    LEAGUE_CONFLICT,
    MIXED_LEAGUES,
    NOT_FOUND,
    RESOLVED,
    MatchupResolution,
    Team,
    TeamMatch,
    TeamResolution,
)
from cover_edge.services.team_catalog import build_catalog

logger = logging.getLogger(__name__)

#: Shortest alias allowed to hit by containment.  Keeps "no", "la", "sf"
#: from matching inside unrelated words.
_MIN_SUBSTRING_LEN = 3

#: rapidfuzz WRatio floor for a "did you mean" suggestion.
_SUGGESTION_CUTOFF = 80

_MATCHUP_SPLIT = re.compile(r"\s+(?:vs\.?|versus|v\.?)\s+|\s*@\s*|\s+at\s+", re.IGNORECASE)


def normalize_team_text(text: str) -> str:
    """Lower-case, turn punctuation into spaces (keeping ``&`` and ``'``), collapse runs."""
    text = text.lower().replace("’", "'")
    text = re.sub(r"[^a-z0-9&'\s]", " ", text)
    return re.sub(r"\s+", " ", text).strip()


@functools.lru_cache(maxsize=4096)
def _term_pattern(terms: Tuple[str, ...]) -> Optional[re.Pattern]:
    if not terms:
        return None
    body = "|".join(re.escape(t) for t in sorted(terms, key=len, reverse=True))
    return re.compile(rf"(?<![a-z0-9])(?:{body})(?![a-z0-9])", re.IGNORECASE)


def _contains_term(haystack: str, term: str) -> bool:
    pattern = _term_pattern((term,))
    return bool(pattern and pattern.search(haystack))


def _starts_word(alias: str, query: str) -> bool:
    return bool(re.search(rf"(?<![a-z0-9]){re.escape(query)}", alias))


class TeamRegistry:
    """Read-only lookup over an injected team catalogue.

    Build once and share; nothing here mutates after ``__init__``.  Tests can
    pass a reduced fixture list instead of the shipped catalogue.
    """

    def __init__(self, teams: Iterable[Team]):
        self._teams: Tuple[Team, ...] = tuple(teams)
        self._by_league: Dict[League, Tuple[Team, ...]] = {}
        for league in League:
            self._by_league[league] = tuple(t for t in self._teams if t.league is league)
        logger.debug("TeamRegistry loaded %d teams", len(self._teams))

    @classmethod
    def default(cls) -> "TeamRegistry":
        return cls(build_catalog())

    @property
    def teams(self) -> Tuple[Team, ...]:
        return self._teams

    def teams_in(self, league: League) -> Tuple[Team, ...]:
        return self._by_league.get(League(league), ())

    def by_abbreviation(self, abbreviation: str, league: League) -> Optional[Team]:
        abbr = abbreviation.upper()
        for team in self.teams_in(league):
            if team.abbreviation == abbr:
                return team
        return None

    # ------------------------------------------------------------------ #
    #  Single-team resolution                                              #
    # ------------------------------------------------------------------ #

    def _step_hits(self, query: str, candidates: Sequence[Team]) -> List[TeamMatch]:
        """Run the four matching steps; return the hits of the first productive one."""
        # 1. full name or nickname
        hits = [
            TeamMatch(t, "full_name", query)
            for t in candidates
            if query in (t.full_name.lower(), t.name.lower())
        ]
        if hits:
            return hits

        # 2. abbreviation
        hits = [
            TeamMatch(t, "abbreviation", query)
            for t in candidates
            if t.abbreviation.lower() == query
        ]
        if hits:
            return hits

        # 3. alias (city included)
        hits = [TeamMatch(t, "alias", query) for t in candidates if query in t.terms()]
        if hits:
            return hits

        # 4. containment either way
        hits = []
        for team in candidates:
            for alias in sorted(team.terms(), key=len, reverse=True):
                forward = len(alias) >= _MIN_SUBSTRING_LEN and _contains_term(query, alias)
                backward = len(query) >= _MIN_SUBSTRING_LEN and _starts_word(alias, query)
                if forward or backward:
                    hits.append(TeamMatch(team, "substring", alias))
                    break
        return hits

    def resolve_team(self, query: str, league_hint: Optional[League] = None) -> TeamResolution:
        """Resolve ``query`` and explain the outcome.  Never raises."""
        normalized = normalize_team_text(query or "")
        if not normalized:
            return TeamResolution(query, NOT_FOUND, (), "No team name given.")

        candidates = self.teams_in(league_hint) if league_hint else self._teams
        hits = self._step_hits(normalized, candidates)

        if not hits:
            scope = f" in {League(league_hint).value}" if league_hint else ""
            error = f'Could not resolve team "{query}"{scope}.'
            suggestions = self.suggest_teams(query)
            if suggestions:
                error += f" Did you mean: {', '.join(suggestions)}?"
            else:
                error += " Please double-check the spelling."
            return TeamResolution(query, NOT_FOUND, (), error)

        distinct = {m.team.key: m for m in hits}
        matches = tuple(distinct.values())
        if len(matches) == 1:
            return TeamResolution(query, RESOLVED, matches)

        leagues = sorted({m.team.league.value for m in matches})
        names = ", ".join(str(m.team) for m in matches)
        if len(leagues) > 1:
            return TeamResolution(
                query,
                LEAGUE_CONFLICT,
                matches,
                f'"{query}" matches teams in {" and ".join(leagues)} ({names}). '
                "Please say which league.",
            )
        return TeamResolution(
            query,
            AMBIGUOUS,
            matches,
            f'"{query}" is ambiguous: {names}. Please use the full team name.',
        )

    def find_team(self, query: str, league_hint: Optional[League] = None) -> Optional[TeamMatch]:
        """Return the single matching team, or None when missing or ambiguous."""
        return self.resolve_team(query, league_hint).match

    # ------------------------------------------------------------------ #
    #  Matchups                                                            #
    # ------------------------------------------------------------------ #

    def resolve_matchup(
        self, side_a: str, side_b: str, league_hint: Optional[League] = None
    ) -> MatchupResolution:
        """Resolve both sides of a matchup against one league.

        Without a hint, the league is the one both sides can belong to.
        When more than one league remains the status is ``league_conflict``
        and the caller should ask which league is meant.
        """
        if league_hint:
            return self._resolve_pair(side_a, side_b, League(league_hint))

        first = self.resolve_team(side_a)
        second = self.resolve_team(side_b)
        for res in (first, second):
            if res.status == NOT_FOUND:
                return MatchupResolution(NOT_FOUND, error=res.error)

        common = first.leagues & second.leagues
        if not common:
            # Fall back to every league each side could belong to at any step.
            common = frozenset(
                league
                for league in League
                if self.resolve_team(side_a, league).matches
                and self.resolve_team(side_b, league).matches
            )
        if not common:
            return MatchupResolution(
                MIXED_LEAGUES,
                error=f'"{side_a}" and "{side_b}" do not play in the same league.',
            )
        if len(common) > 1:
            names = " or ".join(sorted(lg.value for lg in common))
            return MatchupResolution(
                LEAGUE_CONFLICT,
                error=f'"{side_a}" vs "{side_b}" could be {names}. Please say which league.',
            )
        return self._resolve_pair(side_a, side_b, next(iter(common)))

    def _resolve_pair(self, side_a: str, side_b: str, league: League) -> MatchupResolution:
        first = self.resolve_team(side_a, league)
        if not first.ok:
            return MatchupResolution(first.status, error=first.error)
        second = self.resolve_team(side_b, league)
        if not second.ok:
            return MatchupResolution(second.status, error=second.error)
        return MatchupResolution(
            RESOLVED, teams=(first.match.team, second.match.team), league=league
        )

    def find_matchup_teams(
        self, text: str, league_hint: Optional[League] = None
    ) -> Optional[Tuple[Team, Team]]:
        """Split ``text`` on a matchup connector and resolve both sides.

        Returns ``(team_a, team_b)`` in text order, or None if there is no
        connector or either side fails.
        """
        parts = _MATCHUP_SPLIT.split(text.strip(), maxsplit=1)
        if len(parts) != 2 or not all(p.strip() for p in parts):
            return None
        outcome = self.resolve_matchup(parts[0].strip(), parts[1].strip(), league_hint)
        if not outcome.ok:
            logger.debug("find_matchup_teams(%r) failed: %s", text, outcome.error)
        return outcome.teams

    # ------------------------------------------------------------------ #
    #  Suggestions and venue helpers                                       #
    # ------------------------------------------------------------------ #

    def suggest_teams(self, query: str, max_results: int = 5) -> List[str]:
        """Names close to ``query``, for error messages only.

        Substring matches come first, then rapidfuzz near-misses.
        """
        normalized = normalize_team_text(query or "")
        if not normalized or max_results <= 0:
            return []

        suggestions: List[str] = []

        def add(team: Team) -> None:
            label = str(team)
            if label not in suggestions:
                suggestions.append(label)

        for team in self._teams:
            for term in team.terms():
                if len(term) < _MIN_SUBSTRING_LEN or len(normalized) < _MIN_SUBSTRING_LEN:
                    continue
                if normalized in term or term in normalized:
                    add(team)
                    break
            if len(suggestions) >= max_results:
                return suggestions

        choices: List[str] = []
        owners: List[Team] = []
        for team in self._teams:
            for term in team.terms():
                choices.append(term)
                owners.append(team)
        for _, _, idx in process.extract(
            normalized,
            choices,
            scorer=fuzz.WRatio,
            limit=max_results * 4,
            score_cutoff=_SUGGESTION_CUTOFF,
        ):
            add(owners[idx])
            if len(suggestions) >= max_results:
                break
        return suggestions[:max_results]

    @staticmethod
    def is_home_venue(location: str, team: Team) -> bool:
        """True when ``location`` names the team's city or arena."""
        place = normalize_team_text(location or "")
        if len(place) < _MIN_SUBSTRING_LEN:
            return False
        for marker in team.home_markers:
            m = normalize_team_text(marker)
            if m == place or _contains_term(place, m) or _contains_term(m, place):
                return True
        return False

    @staticmethod
    def mentions(text: str, team: Team, exclude: Iterable[str] = ()) -> List[Tuple[int, int]]:
        """Spans of ``text`` that name ``team``.

        Terms in ``exclude`` are skipped, which lets the caller ignore names
        two participants share ("los angeles").  Abbreviations only count
        when written in capitals, so "no" is never the Saints.
        """
        skip = set(exclude)
        terms = tuple(sorted(t for t in team.terms() if t not in skip))
        spans: List[Tuple[int, int]] = []
        pattern = _term_pattern(terms)
        if pattern:
            spans.extend(m.span() for m in pattern.finditer(text))
        if team.abbreviation.lower() not in skip:
            abbr = re.compile(rf"(?<![A-Za-z0-9]){re.escape(team.abbreviation)}(?![A-Za-z0-9])")
            spans.extend(m.span() for m in abbr.finditer(text))
        return sorted(set(spans))


_default_registry: Optional[TeamRegistry] = None


def get_team_registry() -> TeamRegistry:
    """Process-wide registry built from the shipped catalogue."""
    global _default_registry
    if _default_registry is None:
        _default_registry = TeamRegistry.default()
    return _default_registry
