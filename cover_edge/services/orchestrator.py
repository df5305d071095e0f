"""
Betting analysis pipeline: free text in, sized recommendation out.

Workflow:
    1. Parse the request into a ParsedMatchup (clarification requests
       and parse failures return immediately)
    2. Validate the parsed matchup
    3. Look up stats: caller override > stats provider > league averages
    4. Run the Walters model for the sport category
    5. Resolve odds (caller > text > default) and bankroll (caller > default)
    6. Size the stake with fractional Kelly
    7. Optionally hand the bet to a BetSink
    8. Assemble a BettingReport with a deterministic summary

Every default the pipeline fills in is written to ``report.assumptions`` in
the order it was applied, after the parser's own notes.  Missing stats and
sink failures are recorded there and never abort the request.
"""

import logging
from typing import Any, List, Mapping, Optional, Union

from cover_edge.core.kelly import KellyResult, calculate_kelly_stake
from cover_edge.core.odds_math import STANDARD_JUICE, american_to_decimal, implied_probability
from cover_edge.core.probability import (
    ProbabilityResult,
    estimate_cover_probability,
    interpret_probability,
)
from cover_edge.core.sport_config import TeamStats, Venue, sport_config
from cover_edge.models import BetRecord, BettingReport, OddsSummary, ParsedMatchup, Team
from cover_edge.schemas import AnalyzeRequest, StatsOverride
from cover_edge.services.bet_sink import BetSink
from cover_edge.services.matchup_parser import parse_matchup_request, validate_parsed_matchup
from cover_edge.services.stats_provider import StatsProvider, merge_stats, stats_from_fields
from cover_edge.services.team_registry import TeamRegistry, get_team_registry
from cover_edge.settings import AnalysisDefaults

logger = logging.getLogger(__name__)

STAGE_PARSE = "parse"
STAGE_VALIDATION = "validation"


# ---------------------------------------------------------------------------
# Recommendation and summary
# ---------------------------------------------------------------------------

def recommend(kelly: KellyResult, kelly_multiplier: float) -> str:
    """Recommendation tier from the Kelly result's edge (percentage points)."""
    edge = kelly.edge
    if not kelly.has_value:
        return (
            "NO BET: Negative expected value. "
            "Estimated probability is below implied odds probability."
        )
    if edge > 10:
        return f"STRONG VALUE: {edge:.1f}% edge. Verify probability estimate before betting."
    if edge > 5:
        return (
            f"GOOD VALUE: {edge:.1f}% edge. "
            f"Recommended stake: ${kelly.recommended_stake:,.2f}"
        )
    if edge > 2:
        size = "quarter" if kelly_multiplier < 0.5 else "half"
        return f"MODERATE VALUE: {edge:.1f}% edge. Consider {size} Kelly."
    return f"SLIGHT VALUE: {edge:.1f}% edge. Small edge - proceed with caution."


def _venue_label(parsed: ParsedMatchup) -> str:
    pick = parsed.team_a.full_name
    if parsed.venue is Venue.HOME:
        label = f"{pick} at home"
    elif parsed.venue is Venue.AWAY:
        label = f"{pick} on the road"
    else:
        label = "Neutral site"
    return label + (" (assumed)" if parsed.venue_assumed else "")


def build_summary(report: BettingReport) -> str:
    """Markdown summary of a successful report.  Same report, same text."""
    p = report.parsed
    prob = report.probability
    kelly = report.kelly
    odds = report.odds
    lines = [
        f"## {p.team_a.full_name} vs {p.team_b.full_name}",
        "",
        f"**Sport:** {p.sport.value} ({p.sport_category.value})",
        f"**Pick:** {p.team_a.full_name} {p.spread:+g}",
        f"**Venue:** {_venue_label(p)}",
        "",
        "### Probability",
        f"- Cover probability: {prob.probability:.2f}% ({report.interpretation})",
        f"- Predicted margin: {prob.predicted_margin:+.2f} (sigma {prob.sigma:g})",
        "",
        "### Odds",
        f"- American: {odds.american_odds:+d}",
        f"- Decimal: {odds.decimal_odds:.3f}",
        f"- Implied probability: {odds.implied_probability:.2f}%",
        "",
        "### Kelly",
        f"- Bankroll: ${report.bankroll:,.2f}",
        f"- Edge: {kelly.edge:+.2f}%",
        f"- Full Kelly: {kelly.kelly_fraction:.4f}",
        f"- Kelly multiplier: {report.kelly_multiplier:g}",
        f"- Recommended stake: ${kelly.recommended_stake:,.2f} ({kelly.stake_percentage:.2f}% of bankroll)",
        f"- Potential win: ${kelly.potential_win:,.2f}",
        "",
        "### Recommendation",
        report.recommendation,
    ]
    if report.assumptions:
        lines += ["", "### Assumptions"]
        lines += [f"- {a}" for a in report.assumptions]
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

class BettingOrchestrator:
    """Runs one request through parse, validate, model and sizing.

    All collaborators are injected.  ``stats_provider`` and ``bet_sink`` are
    optional; without them every team uses league averages and logging
    requests are noted as skipped.
    """

    def __init__(
        self,
        registry: Optional[TeamRegistry] = None,
        stats_provider: Optional[StatsProvider] = None,
        bet_sink: Optional[BetSink] = None,
        defaults: Optional[AnalysisDefaults] = None,
    ):
        self.registry = registry or get_team_registry()
        self.stats_provider = stats_provider
        self.bet_sink = bet_sink
        self.defaults = defaults or AnalysisDefaults.from_env()

    def analyze(self, request: Union[AnalyzeRequest, Mapping[str, Any], str]) -> BettingReport:
        """Analyse one request.  Never raises for parse or data problems.

        Raises:
            pydantic.ValidationError: If ``request`` is a dict or string that
                does not satisfy :class:`AnalyzeRequest`.
        """
        if isinstance(request, str):
            request = AnalyzeRequest(text=request)
        elif not isinstance(request, AnalyzeRequest):
            request = AnalyzeRequest.model_validate(request)

        logger.info("Analyzing request: %r", request.text)

        # 1. parse
        parse = parse_matchup_request(request.text, self.registry)
        if not parse.success:
            logger.info(
                "Parse stopped (%s): %s",
                "clarification" if parse.needs_clarification else "failure",
                parse.error,
            )
            return BettingReport(
                success=False,
                raw_text=request.text,
                stage=STAGE_PARSE,
                error=parse.error,
                errors=[parse.error] if parse.error else [],
                clarification_needed=list(parse.clarification_needed),
            )
        parsed = parse.parsed

        # 2. validate
        validation = validate_parsed_matchup(parsed)
        if not validation.valid:
            logger.info("Validation failed: %s", "; ".join(validation.errors))
            return BettingReport(
                success=False,
                raw_text=request.text,
                stage=STAGE_VALIDATION,
                error=validation.errors[0],
                errors=list(validation.errors),
                parsed=parsed,
            )

        assumptions: List[str] = list(parsed.parsing_notes)

        # 3. stats
        team_a_stats = self._stats_for(parsed.team_a, request.team_a_stats_override, assumptions)
        team_b_stats = self._stats_for(parsed.team_b, request.team_b_stats_override, assumptions)

        # 4. probability
        probability: ProbabilityResult = estimate_cover_probability(
            team_a_stats, team_b_stats, parsed.spread, parsed.venue, parsed.sport
        )

        # 5. odds and bankroll
        if request.american_odds is not None:
            odds = request.american_odds
        elif parsed.american_odds is not None:
            odds = parsed.american_odds
        else:
            odds = self.defaults.american_odds
            juice = " (standard juice)" if odds == STANDARD_JUICE else ""
            assumptions.append(f"Odds assumed {odds:+d}{juice}")

        if request.bankroll is not None:
            bankroll = request.bankroll
        else:
            bankroll = self.defaults.bankroll
            assumptions.append(f"Bankroll assumed ${bankroll:,.0f} (not provided)")

        multiplier = (
            request.kelly_fraction
            if request.kelly_fraction is not None
            else self.defaults.kelly_fraction
        )

        # 6. Kelly
        kelly = calculate_kelly_stake(bankroll, probability.probability, odds, multiplier)

        report = BettingReport(
            success=True,
            raw_text=request.text,
            parsed=parsed,
            team_a_stats=team_a_stats,
            team_b_stats=team_b_stats,
            probability=probability,
            interpretation=interpret_probability(probability.probability),
            odds=OddsSummary(
                american_odds=odds,
                decimal_odds=round(american_to_decimal(odds), 3),
                implied_probability=round(implied_probability(odds), 2),
            ),
            kelly=kelly,
            bankroll=bankroll,
            kelly_multiplier=multiplier,
            recommendation=recommend(kelly, multiplier),
            assumptions=assumptions,
        )

        # 7. log
        if request.log_bet:
            self._log(report, assumptions)

        # 8. summary
        report.summary = build_summary(report)
        logger.info(
            "%s %+g vs %s: %.2f%% cover, edge %+.2f, stake $%.2f",
            parsed.team_a.full_name,
            parsed.spread,
            parsed.team_b.full_name,
            probability.probability,
            kelly.edge,
            kelly.recommended_stake,
        )
        return report

    # ------------------------------------------------------------------ #

    def _stats_for(
        self,
        team: Team,
        override: Optional[StatsOverride],
        assumptions: List[str],
    ) -> TeamStats:
        given = override.as_fields() if override is not None else {}
        fetched = self._fetch(team)
        if fetched is not None:
            return merge_stats(fetched, given)
        complete = stats_from_fields(given, team.league) if given else None
        if complete is not None:
            return complete
        assumptions.append(
            f"No stats found for {team.full_name}; using {team.league.value} league averages"
        )
        return merge_stats(sport_config(team.league).league_average, given)

    def _fetch(self, team: Team) -> Optional[TeamStats]:
        if self.stats_provider is None:
            return None
        try:
            return self.stats_provider.get_team_stats(team.abbreviation, team.league)
        except Exception:
            logger.warning("Stats lookup failed for %s", team, exc_info=True)
            return None

    def _log(self, report: BettingReport, assumptions: List[str]) -> None:
        if self.bet_sink is None:
            assumptions.append("Bet not logged (no bet sink configured)")
            return
        parsed = report.parsed
        record = BetRecord(
            sport=parsed.sport,
            pick=parsed.team_a.full_name,
            opponent=parsed.team_b.full_name,
            spread=parsed.spread,
            venue=parsed.venue,
            american_odds=report.odds.american_odds,
            probability=report.probability.probability,
            edge=report.kelly.edge,
            recommended_stake=report.kelly.recommended_stake,
            bankroll=report.bankroll,
            kelly_multiplier=report.kelly_multiplier,
            raw_text=report.raw_text,
        )
        try:
            logged = self.bet_sink.log_bet(record)
        except Exception as exc:
            logger.warning("Bet sink failed for %r", report.raw_text, exc_info=True)
            assumptions.append(f"Bet not logged: {exc}")
            return
        report.logged = True
        report.bet_id = logged.bet_id


_default_orchestrator: Optional[BettingOrchestrator] = None


def get_orchestrator() -> BettingOrchestrator:
    global _default_orchestrator
    if _default_orchestrator is None:
        _default_orchestrator = BettingOrchestrator()
    return _default_orchestrator


def analyze_and_log(
    text: str,
    orchestrator: Optional[BettingOrchestrator] = None,
    **options: Any,
) -> BettingReport:
    """Single entry point wrapped by HTTP, CLI or chat-tool adapters.

    ``options`` are the remaining :class:`AnalyzeRequest` fields
    (``bankroll``, ``american_odds``, ``kelly_fraction``, stat overrides,
    ``log_bet``).
    """
    request = AnalyzeRequest(text=text, **options)
    return (orchestrator or get_orchestrator()).analyze(request)
