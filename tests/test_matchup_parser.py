"""
Tests for the natural-language matchup parser
Run with: pytest tests/test_matchup_parser.py -v
"""

from dataclasses import replace

import pytest

from cover_edge.core.sport_config import League, SportCategory, Venue
from cover_edge.services.matchup_parser import (
    detect_sport,
    extract_odds,
    parse_matchup_request,
    render_matchup,
    validate_parsed_matchup,
)
from cover_edge.services.team_registry import get_team_registry


@pytest.fixture(scope="module")
def registry():
    return get_team_registry()


def _parse(text, registry):
    result = parse_matchup_request(text, registry)
    assert result.success, result.error
    return result.parsed


class TestSportDetection:
    @pytest.mark.parametrize(
        "text,league",
        [
            ("NBA: Heat vs Hawks", League.NBA),
            ("nfl sunday, Eagles vs Cowboys", League.NFL),
            ("NCAAF Alabama vs Georgia", League.CFB),
            ("ncaab: Duke vs UNC", League.CBB),
            ("college football tonight", League.CFB),
            ("March Madness pick: Duke vs Kansas", League.CBB),
            ("Heat vs Hawks", None),
        ],
    )
    def test_detect_sport(self, text, league):
        assert detect_sport(text) is league

    def test_first_token_wins(self):
        assert detect_sport("NBA: not the NFL") is League.NBA

    def test_token_must_stand_alone(self):
        assert detect_sport("the snba league") is None

    def test_inferred_sport_is_noted(self, registry):
        parsed = _parse("Heat vs Hawks, Hawks -3.5, taking Hawks", registry)

        assert parsed.sport is League.NBA
        assert parsed.sport_category is SportCategory.BASKETBALL
        assert "Sport inferred as NBA from team names" in parsed.parsing_notes

    def test_explicit_sport_resolves_cross_league_names(self, registry):
        parsed = _parse("NFL: DET @ LAC, LAC -3, taking LAC", registry)

        assert parsed.sport is League.NFL
        assert parsed.team_a.name == "Chargers"
        assert parsed.team_b.name == "Lions"

    def test_cross_league_names_ask_for_sport(self, registry):
        result = parse_matchup_request("DET @ LAC, LAC -3, taking LAC", registry)

        assert not result.success
        assert result.needs_clarification
        assert result.clarification_needed == ["sport"]

    def test_college_vocabulary(self, registry):
        parsed = _parse("college basketball: Duke vs Kansas, Duke -2.5, taking Duke", registry)

        assert parsed.sport is League.CBB
        assert parsed.team_a.full_name == "Duke Blue Devils"


class TestSpreadReconciliation:
    """The stored spread is always from the pick's side"""

    def test_spread_stated_for_pick(self, registry):
        parsed = _parse("Heat vs Hawks, Hawks -3.5, taking Hawks", registry)

        assert parsed.team_a.name == "Hawks"
        assert parsed.team_b.name == "Heat"
        assert parsed.spread == -3.5

    def test_spread_stated_for_opponent_is_flipped(self, registry):
        parsed = _parse("Heat vs Hawks, Hawks -3.5, taking Heat", registry)

        assert parsed.team_a.name == "Heat"
        assert parsed.team_b.name == "Hawks"
        assert parsed.spread == 3.5
        assert any("recorded as +3.5" in n for n in parsed.parsing_notes)

    def test_pick_phrase_before_spread(self, registry):
        parsed = _parse("Heat vs Hawks, I'm taking Heat, Hawks -3.5", registry)

        assert parsed.team_a.name == "Heat"
        assert parsed.spread == 3.5

    def test_spread_after_team_name(self, registry):
        parsed = _parse("Heat vs Hawks, +3.5 Heat, betting on Heat", registry)

        assert parsed.team_a.name == "Heat"
        assert parsed.spread == 3.5

    def test_spread_inside_matchup_clause(self, registry):
        parsed = _parse("Miami Heat vs Atlanta Hawks -3.5, my pick is Atlanta", registry)

        assert parsed.team_a.name == "Hawks"
        assert parsed.spread == -3.5

    def test_standalone_spread_read_from_pick(self, registry):
        parsed = _parse("Heat vs Hawks, taking Heat, line is -2", registry)

        assert parsed.team_a.name == "Heat"
        assert parsed.spread == -2.0
        assert any("read from Heat's side" in n for n in parsed.parsing_notes)

    def test_pick_assumed_from_spread(self, registry):
        parsed = _parse("Heat vs Hawks, Heat +4", registry)

        assert parsed.team_a.name == "Heat"
        assert parsed.spread == 4.0
        assert any(n.startswith("Pick assumed to be Heat") for n in parsed.parsing_notes)

    def test_unsigned_spread_kept_as_written(self, registry):
        parsed = _parse("Heat vs Hawks, Hawks 2.5, taking Hawks", registry)

        assert parsed.spread == 2.5

    @pytest.mark.parametrize(
        "phrase,expected",
        [
            ("Hawks favored by 4", -4.0),
            ("Hawks are 6 point favorites", -6.0),
            ("Hawks 5 point underdogs", 5.0),
            ("Hawks getting 3", 3.0),
            ("Hawks minus three and a half", -3.5),
            ("Hawks plus seven", 7.0),
        ],
    )
    def test_spread_phrases(self, registry, phrase, expected):
        parsed = _parse(f"Heat vs Hawks, {phrase}, taking Hawks", registry)

        assert parsed.spread == expected

    def test_phrase_for_opponent_is_flipped(self, registry):
        parsed = _parse("Heat vs Hawks, Hawks favored by 4, taking Heat", registry)

        assert parsed.team_a.name == "Heat"
        assert parsed.spread == 4.0

    @pytest.mark.parametrize(
        "text,pick,spread",
        [
            ("Heat vs Hawks, Hawks (-3.5), taking Heat", "Heat", 3.5),
            ("Heat vs Hawks, Hawks (-3.5), taking Hawks", "Hawks", -3.5),
            ("Heat vs Hawks, Hawks(+2), taking Heat", "Heat", -2.0),
        ],
    )
    def test_bracketed_spread_keeps_its_team(self, registry, text, pick, spread):
        parsed = _parse(text, registry)

        assert parsed.team_a.name == pick
        assert parsed.spread == spread
        assert not any("read from" in n for n in parsed.parsing_notes)

    @pytest.mark.parametrize(
        "text,pick,spread",
        [
            ("Heat vs Hawks, Hawks-3.5, taking Hawks", "Hawks", -3.5),
            ("Heat vs Hawks, Hawks-3.5, taking Heat", "Heat", 3.5),
            ("Heat vs Hawks, Heat+4, taking Heat", "Heat", 4.0),
        ],
    )
    def test_sign_written_against_the_name(self, registry, text, pick, spread):
        parsed = _parse(text, registry)

        assert parsed.team_a.name == pick
        assert parsed.spread == spread

    def test_unicode_minus(self, registry):
        parsed = _parse("Heat vs Hawks, Hawks −3.5, taking Hawks", registry)

        assert parsed.spread == -3.5

    def test_shared_city_does_not_confuse_sides(self, registry):
        parsed = _parse("NBA: Lakers vs Clippers, Clippers -2, taking Lakers", registry)

        assert parsed.team_a.name == "Lakers"
        assert parsed.spread == 2.0

    def test_longer_name_wins_over_its_prefix(self, registry):
        parsed = _parse(
            "CBB: Michigan vs Michigan State, Michigan State -3.5, taking Michigan State",
            registry,
        )

        assert parsed.team_a.full_name == "Michigan State Spartans"
        assert parsed.team_b.full_name == "Michigan Wolverines"
        assert parsed.spread == -3.5


class TestVenue:
    def test_default_is_assumed_neutral(self, registry):
        parsed = _parse("Heat vs Hawks, Hawks -3.5, taking Hawks", registry)

        assert parsed.venue is Venue.NEUTRAL
        assert parsed.venue_assumed is True
        assert "Venue assumed neutral (not stated)" in parsed.parsing_notes

    def test_city_of_pick_means_home(self, registry):
        parsed = _parse(
            "NBA: Heat vs Hawks, Hawks -3.5, I'm taking Hawks. Game is in Atlanta.", registry
        )

        assert parsed.venue is Venue.HOME
        assert parsed.venue_assumed is False

    def test_city_of_opponent_means_away(self, registry):
        parsed = _parse("Heat vs Hawks, Heat +3.5, taking Heat. Game is in Atlanta.", registry)

        assert parsed.venue is Venue.AWAY

    def test_arena_name(self, registry):
        parsed = _parse("Heat vs Hawks, Heat +3.5, taking Heat, at Kaseya Center", registry)

        assert parsed.venue is Venue.HOME

    def test_home_word_attaches_to_nearest_team(self, registry):
        parsed = _parse("Cowboys vs Eagles, Eagles +2.5, taking Eagles. Philly at home.", registry)

        assert parsed.venue is Venue.HOME

    def test_opponent_at_home_means_away(self, registry):
        parsed = _parse("Cowboys vs Eagles, Eagles +2.5, taking Eagles, Cowboys at home", registry)

        assert parsed.venue is Venue.AWAY

    def test_on_the_road(self, registry):
        parsed = _parse("Heat vs Hawks, Hawks -1, taking Hawks, Hawks on the road", registry)

        assert parsed.venue is Venue.AWAY

    def test_opponent_described_as_away(self, registry):
        parsed = _parse(
            "NBA: Pistons vs Clippers, Clippers -3, taking Clippers. Pistons are away.", registry
        )

        assert parsed.team_a.name == "Clippers"
        assert parsed.venue is Venue.HOME
        assert parsed.venue_assumed is False

    def test_place_stops_at_sentence_end(self, registry):
        parsed = _parse(
            "NFL: Cowboys vs Eagles, Eagles +2.5, taking Eagles. "
            "Game in Philadelphia. Dallas fans travel well.",
            registry,
        )

        assert parsed.venue is Venue.HOME
        assert parsed.venue_assumed is False

    def test_neutral_site(self, registry):
        parsed = _parse("Heat vs Hawks, Hawks -1, taking Hawks, neutral site", registry)

        assert parsed.venue is Venue.NEUTRAL
        assert parsed.venue_assumed is False


class TestOdds:
    @pytest.mark.parametrize(
        "text,odds",
        [
            ("odds -110", -110),
            ("odds of +150", 150),
            ("-120 odds", -120),
            ("Hawks -3.5 at -105", -105),
            ("laying +130 here", 130),
            ("even money", 100),
            ("odds -50", None),
            ("Hawks -3.5", None),
        ],
    )
    def test_extract_odds(self, text, odds):
        assert extract_odds(text) == odds

    def test_odds_do_not_become_the_spread(self, registry):
        parsed = _parse("Heat vs Hawks, Hawks -3.5 at -115, taking Hawks", registry)

        assert parsed.spread == -3.5
        assert parsed.american_odds == -115


class TestFailures:
    def test_misspelled_team_is_quoted(self, registry):
        result = parse_matchup_request("NBA: Pistons vs Clipprs, Clipprs -3, taking Clipprs", registry)

        assert not result.success
        assert not result.needs_clarification
        assert "Clipprs" in result.error

    def test_missing_spread_needs_clarification(self, registry):
        result = parse_matchup_request("Heat vs Hawks, taking Hawks", registry)

        assert not result.success
        assert result.needs_clarification
        assert result.clarification_needed == ["spread"]
        assert "-3.5" in result.error

    def test_missing_pick_needs_clarification(self, registry):
        result = parse_matchup_request("Heat vs Hawks, line is -3.5", registry)

        assert result.clarification_needed == ["pick"]

    def test_missing_both(self, registry):
        result = parse_matchup_request("Heat vs Hawks", registry)

        assert result.clarification_needed == ["spread", "pick"]

    def test_no_matchup_pattern(self, registry):
        result = parse_matchup_request("I like the Hawks tonight", registry)

        assert not result.success
        assert not result.needs_clarification
        assert "Heat vs Hawks" in result.error

    def test_empty_text(self, registry):
        result = parse_matchup_request("   ", registry)

        assert not result.success
        assert result.error == "Empty betting request."


class TestValidation:
    def test_valid(self, registry):
        parsed = _parse("Heat vs Hawks, Hawks -3.5, taking Hawks", registry)
        assert validate_parsed_matchup(parsed).valid

    def test_zero_spread(self, registry):
        parsed = _parse("Heat vs Hawks, Hawks -3.5, taking Hawks", registry)
        result = validate_parsed_matchup(replace(parsed, spread=0.0))

        assert not result.valid
        assert "non-zero" in result.errors[0]

    def test_spread_out_of_range(self, registry):
        parsed = _parse("Heat vs Hawks, Hawks -60, taking Hawks", registry)
        result = validate_parsed_matchup(parsed)

        assert not result.valid
        assert "outside the allowed range" in result.errors[0]

    def test_same_team(self, registry):
        parsed = _parse("Hawks vs Hawks, Hawks -3, taking Hawks", registry)
        result = validate_parsed_matchup(parsed)

        assert not result.valid
        assert any("same team" in e for e in result.errors)

    def test_team_outside_sport(self, registry):
        parsed = _parse("Heat vs Hawks, Hawks -3.5, taking Hawks", registry)
        cowboys = registry.find_team("Cowboys").team
        result = validate_parsed_matchup(replace(parsed, team_b=cowboys))

        assert not result.valid
        assert any("does not play in NBA" in e for e in result.errors)

    def test_category_mismatch(self, registry):
        parsed = _parse("Heat vs Hawks, Hawks -3.5, taking Hawks", registry)
        result = validate_parsed_matchup(replace(parsed, sport_category=SportCategory.FOOTBALL))

        assert not result.valid


class TestIdempotence:
    """Re-parsing the canonical rendering gives the same matchup"""

    @pytest.mark.parametrize(
        "text",
        [
            "Heat vs Hawks, Hawks -3.5, taking Hawks",
            "Heat vs Hawks, Hawks -3.5, taking Heat",
            "NBA: Heat vs Hawks, Hawks -3.5, I'm taking Hawks. Game is in Atlanta.",
            "Heat vs Hawks, Heat +3.5, taking Heat. Game is in Atlanta.",
            "NFL: Cowboys vs Eagles, Eagles +2.5, I'm taking Eagles. Philly at home.",
            "Heat vs Hawks, Hawks -1, taking Hawks, neutral site, odds +150",
            "college football: Alabama vs Georgia, Alabama favored by 7, taking Alabama",
            "NBA: Lakers vs Clippers, Clippers -2, taking Lakers",
        ],
    )
    def test_round_trip(self, registry, text):
        parsed = _parse(text, registry)
        again = _parse(render_matchup(parsed), registry)

        assert again == parsed

    def test_render_format(self, registry):
        parsed = _parse("NBA: Heat vs Hawks, Hawks -3.5, taking Hawks. Game is in Atlanta.", registry)

        assert render_matchup(parsed) == (
            "NBA: Atlanta Hawks vs Miami Heat, Atlanta Hawks -3.5, "
            "taking Atlanta Hawks, Atlanta Hawks at home"
        )

    def test_equality_ignores_notes(self, registry):
        parsed = _parse("Heat vs Hawks, Hawks -3.5, taking Hawks", registry)

        assert replace(parsed, parsing_notes=(), raw_text="other") == parsed
