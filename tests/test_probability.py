"""
Tests for the Walters cover-probability models and league configuration
Run with: pytest tests/test_probability.py -v
"""

from dataclasses import replace

import pytest
from scipy.stats import norm

from cover_edge.core.probability import (
    MODEL_BASE,
    MODEL_HYBRID,
    MODEL_WALTERS,
    basketball_margin,
    cover_probability,
    describe_cover,
    estimate_basketball_base_probability,
    estimate_basketball_hybrid_probability,
    estimate_basketball_probability,
    estimate_cover_probability,
    estimate_football_probability,
    football_margin,
    home_adjustment,
    interpret_probability,
    sigma_from_total,
)
from cover_edge.core.sport_config import (
    BasketballConfig,
    BasketballStats,
    FootballConfig,
    FootballStats,
    League,
    SportCategory,
    Venue,
    category_for,
    sport_config,
)


def _nba_avg() -> BasketballStats:
    return BasketballConfig.nba().league_average


def _strong_nba_team() -> BasketballStats:
    # +8 point differential, +2 FG%, +3 boards, +2 turnovers
    return BasketballStats(
        points_for=118.0, points_against=110.0, fg_pct=49.0, rebound_margin=3.0, turnover_margin=2.0
    )


class TestCoverProbability:
    """Normal-CDF conversion"""

    @pytest.mark.parametrize("sigma", [1.0, 10.5, 11.5, 13.5, 16.0])
    def test_zero_margin_zero_spread_is_fifty(self, sigma):
        assert cover_probability(0, 0, sigma) == 50.0

    def test_monotonic_in_margin(self):
        probs = [cover_probability(m, -3.5, 11.5) for m in range(-15, 16)]
        assert all(a < b for a, b in zip(probs, probs[1:]))

    def test_clamped_to_bounds(self):
        assert cover_probability(500, 0, 1) == 99.9
        assert cover_probability(-500, 0, 1) == 0.1

    def test_matches_normal_cdf(self):
        expected = norm.cdf((4.0 - 2.5) / 11.5) * 100
        assert cover_probability(4.0, -2.5, 11.5) == pytest.approx(expected)

    @pytest.mark.parametrize("sigma", [0, -1.0])
    def test_non_positive_sigma_raises(self, sigma):
        with pytest.raises(ValueError):
            cover_probability(1, 0, sigma)


class TestInterpretation:
    @pytest.mark.parametrize(
        "prob,label",
        [
            (99.9, "STRONG COVER"),
            (65.0, "STRONG COVER"),
            (64.99, "FAVORABLE"),
            (55.0, "FAVORABLE"),
            (50.0, "COIN FLIP"),
            (45.0, "COIN FLIP"),
            (40.0, "UNFAVORABLE"),
            (35.0, "UNFAVORABLE"),
            (34.9, "POOR VALUE"),
            (0.1, "POOR VALUE"),
        ],
    )
    def test_bands(self, prob, label):
        assert interpret_probability(prob) == label

    def test_describe_cover(self):
        assert describe_cover(58.24, "Hawks", -3.5) == "FAVORABLE: Hawks -3.5 covers 58.2% of the time"


class TestHomeAdjustment:
    def test_signs(self):
        assert home_adjustment(Venue.HOME, 3.0) == 3.0
        assert home_adjustment("away", 3.0) == -3.0
        assert home_adjustment(Venue.NEUTRAL, 3.0) == 0.0


class TestFootballModel:
    """Walters football model"""

    def test_weighted_margin(self):
        team = FootballStats(
            points_for=28, points_against=20, offensive_yards=380, defensive_yards=320, turnover_diff=1
        )
        opp = FootballConfig.nfl().league_average

        # 0.40·8 + 0.25·(60/25) + 0.20·(1·4·0.5)
        assert football_margin(team, opp, FootballConfig.nfl()) == pytest.approx(4.2)

    def test_identical_teams_neutral_is_fifty(self):
        avg = FootballConfig.nfl().league_average
        result = estimate_football_probability(avg, avg, 0.0, Venue.NEUTRAL)

        assert result.probability == 50.0
        assert result.predicted_margin == 0.0
        assert result.model == MODEL_WALTERS
        assert result.league is League.NFL

    def test_nfl_home_field_is_two_and_a_half(self):
        avg = FootballConfig.nfl().league_average
        result = estimate_football_probability(avg, avg, 2.5, Venue.HOME)

        assert result.home_advantage_applied == 2.5
        assert result.predicted_margin == 2.5
        assert result.z_score == pytest.approx(5.0 / 13.5)
        assert result.probability == round(norm.cdf(5.0 / 13.5) * 100, 2)

    def test_cfb_uses_wider_sigma(self):
        avg = FootballConfig.cfb().league_average
        result = estimate_football_probability(avg, avg, 7.0, config=FootballConfig.cfb())

        assert result.sigma == 16.0
        assert result.league is League.CFB

    def test_neutral_site_config_drops_home_field(self):
        avg = FootballConfig.nfl().league_average
        cfg = FootballConfig.nfl().neutral_site()
        result = estimate_football_probability(avg, avg, 0.0, Venue.HOME, cfg)

        assert result.probability == 50.0


class TestBasketballModels:
    """Walters, base and hybrid basketball calibrations"""

    def test_weighted_margin(self):
        # 0.35·8 + 0.30·2 + 0.20·(3·0.5) + 0.15·2
        margin = basketball_margin(_strong_nba_team(), _nba_avg(), BasketballConfig.nba())
        assert margin == pytest.approx(4.0)

    def test_better_ball_security_helps(self):
        careful = replace(_nba_avg(), turnover_margin=3.0)
        assert basketball_margin(careful, _nba_avg(), BasketballConfig.nba()) > 0

    def test_away_subtracts_home_court(self):
        result = estimate_basketball_probability(_nba_avg(), _nba_avg(), 0.0, Venue.AWAY)

        assert result.home_advantage_applied == -3.0
        assert result.probability < 50.0

    def test_base_calibration(self):
        result = estimate_basketball_base_probability(_strong_nba_team(), _nba_avg(), 0.0)

        assert result.predicted_margin == pytest.approx(4.0)
        assert result.model == MODEL_BASE

    def test_hybrid_calibration(self):
        # base 4.0 + 0.9·2 + 0.35·3 + 0.6·2
        result = estimate_basketball_hybrid_probability(_strong_nba_team(), _nba_avg(), 0.0)

        assert result.predicted_margin == pytest.approx(8.05)
        assert result.model == MODEL_HYBRID

    def test_hybrid_weight_override(self):
        result = estimate_basketball_hybrid_probability(
            _strong_nba_team(), _nba_avg(), 0.0, fg_weight=0.0, rebound_weight=0.0, turnover_weight=0.0
        )
        assert result.predicted_margin == pytest.approx(4.0)

    def test_sigma_override_from_total(self):
        sigma = sigma_from_total(220)
        result = estimate_basketball_base_probability(
            _strong_nba_team(), _nba_avg(), 0.0, sigma=sigma
        )

        assert sigma == pytest.approx(11.8)
        assert result.sigma == pytest.approx(11.8)

    def test_sigma_from_total_rejects_non_positive(self):
        with pytest.raises(ValueError):
            sigma_from_total(0)


class TestDispatch:
    def test_dispatch_by_league(self):
        avg = sport_config(League.CBB).league_average
        result = estimate_cover_probability(avg, avg, 0.0, Venue.HOME, League.CBB)

        assert result.home_advantage_applied == 3.5
        assert result.sigma == 10.5

    def test_dispatch_accepts_string(self):
        avg = FootballConfig.nfl().league_average
        assert estimate_cover_probability(avg, avg, 0.0, "neutral", "nfl").probability == 50.0

    def test_mismatched_stats_raise(self):
        with pytest.raises(TypeError):
            estimate_cover_probability(_nba_avg(), _nba_avg(), 0.0, Venue.NEUTRAL, League.NFL)


class TestSportConfig:
    @pytest.mark.parametrize(
        "league,sigma,hfa,category",
        [
            (League.NFL, 13.5, 2.5, SportCategory.FOOTBALL),
            (League.CFB, 16.0, 3.0, SportCategory.FOOTBALL),
            (League.NBA, 11.5, 3.0, SportCategory.BASKETBALL),
            (League.CBB, 10.5, 3.5, SportCategory.BASKETBALL),
        ],
    )
    def test_constants(self, league, sigma, hfa, category):
        cfg = sport_config(league)

        assert cfg.sigma == sigma
        assert cfg.home_advantage_pts == hfa
        assert cfg.category is category
        assert category_for(league) is category

    def test_unknown_league_raises(self):
        with pytest.raises(ValueError, match="Unknown league"):
            sport_config("NHL")

    def test_configs_are_frozen(self):
        cfg = sport_config(League.NBA)
        with pytest.raises(Exception):
            cfg.sigma = 1.0
