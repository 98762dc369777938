"""Component Score Calculator Unit Tests"""

import pytest

from libs.rating.src.domain.services.momentum_score_calculator import (
    MomentumScoreCalculator,
    calculate_rate_of_change_score,
    calculate_trend_score,
)
from libs.rating.src.domain.services.risk_score_calculator import (
    RiskScoreCalculator,
    calculate_holder_concentration_score,
    calculate_rug_pull_score,
)
from libs.rating.src.domain.services.technical_score_calculator import (
    TechnicalScoreCalculator,
    calculate_rsi_score,
)
from libs.rating.src.domain.services.volume_score_calculator import (
    VolumeScoreCalculator,
    calculate_spike_score,
    count_recent_spikes,
)


class TestTechnicalScoreCalculator:
    """Technical sub-score"""

    def test_rsi_sweet_spot_beats_overbought(self) -> None:
        """RSI inside 45-65 outscores an overbought reading"""
        assert calculate_rsi_score(55) == 100.0
        assert calculate_rsi_score(80) == pytest.approx(75.0)
        assert calculate_rsi_score(95) == pytest.approx(37.5)

    def test_oversold_rsi_capped_at_80(self) -> None:
        """Oversold RSI is a reversal opportunity but never above 80"""
        assert calculate_rsi_score(20) == 80.0
        assert calculate_rsi_score(5) == 80.0

    def test_bullish_snapshot_scores_high(self, bullish_indicators, bull_context) -> None:
        """Aligned bullish indicators score above 80"""
        score = TechnicalScoreCalculator().calculate(bullish_indicators, bull_context)
        assert 80 < score <= 100

    def test_malformed_input_returns_neutral(self, bull_context) -> None:
        """Missing indicators fall back to 50 instead of raising"""
        score = TechnicalScoreCalculator().calculate({"rsi": 50.0}, bull_context)
        assert score == 50.0

    def test_detailed_analysis_matches_score(self, bullish_indicators, bull_context) -> None:
        """Detailed analysis reports the same weighted score"""
        calculator = TechnicalScoreCalculator()
        analysis = calculator.get_detailed_analysis(bullish_indicators, bull_context)

        assert analysis["score"] == pytest.approx(
            calculator.calculate(bullish_indicators, bull_context)
        )
        assert set(analysis["factors"]) == {
            "rsi",
            "macd",
            "bollinger",
            "moving_averages",
            "confluence",
        }


class TestMomentumScoreCalculator:
    """Momentum sub-score"""

    def test_trend_strength_direction(self) -> None:
        """Strong bullish trends approach 100, strong bearish trends collapse"""
        assert calculate_trend_score("bullish", 100) == 100.0
        assert calculate_trend_score("bearish", 100) == pytest.approx(10.0)
        assert calculate_trend_score("bullish", 50) > calculate_trend_score("neutral", 50)

    def test_rate_of_change_sweet_spot(self) -> None:
        """Moderate positive momentum gets the sweet-spot bonus"""
        assert calculate_rate_of_change_score(1.0) == pytest.approx(67.0)
        assert calculate_rate_of_change_score(0) == pytest.approx(45.0)
        assert calculate_rate_of_change_score(-3.0) < 40

    def test_bullish_momentum_beats_bearish(self, bullish_momentum, bull_context) -> None:
        """The same snapshot scores lower once the trend flips"""
        calculator = MomentumScoreCalculator()
        bearish = {**bullish_momentum, "trend": "bearish", "momentum": -1.5}

        assert calculator.calculate(bullish_momentum, bull_context) > calculator.calculate(
            bearish, bull_context
        )

    def test_malformed_input_returns_neutral(self, bull_context) -> None:
        """Missing fields fall back to 50"""
        assert MomentumScoreCalculator().calculate({}, bull_context) == 50.0


class TestVolumeScoreCalculator:
    """Volume sub-score"""

    def test_spike_tiers(self) -> None:
        """Flagged spikes map onto the spike tiers"""
        assert calculate_spike_score(True, 1.5) == 55.0
        assert calculate_spike_score(True, 3.5) == 82.0
        assert calculate_spike_score(True, 10) == 98.0

    def test_manipulation_penalty(self) -> None:
        """Extreme spikes above 20x are penalized"""
        assert calculate_spike_score(True, 40) == pytest.approx(88.0)

    def test_monotonic_in_spike_factor(self, spike_volume, bull_context) -> None:
        """A larger spike never scores lower"""
        calculator = VolumeScoreCalculator()

        def score(factor: float) -> float:
            volume = {
                **spike_volume,
                "volume_spike_factor": factor,
                "current_volume": spike_volume["average_volume"] * factor,
            }
            return calculator.calculate(volume, bull_context)

        assert score(1.5) < score(3.5) < score(10)

    def test_recent_spikes_counted_against_median(self) -> None:
        """Samples at or above twice the window median count as spikes"""
        samples = [100.0] * 10 + [250.0, 300.0]
        assert count_recent_spikes(samples) == 2
        assert count_recent_spikes([100.0, 500.0]) == 0

    def test_malformed_input_returns_neutral(self, bull_context) -> None:
        """Missing fields fall back to 50"""
        assert VolumeScoreCalculator().calculate({}, bull_context) == 50.0


class TestRiskScoreCalculator:
    """Risk (safety) sub-score"""

    def test_rug_pull_kill_switch(self) -> None:
        """Rug-pull risk above 80 collapses the sub-score to 0-5"""
        assert calculate_rug_pull_score(85) <= 5
        assert calculate_rug_pull_score(100) == 0.0

    def test_holder_concentration_kill_switch(self) -> None:
        """Concentration above 80 collapses the sub-score to 5-20"""
        assert 5 <= calculate_holder_concentration_score(85) <= 20
        assert calculate_holder_concentration_score(100) == 5.0

    def test_low_risk_profile_scores_high(self, low_risk, bull_context) -> None:
        """A low-risk token scores as safe"""
        assert RiskScoreCalculator().calculate(low_risk, bull_context) > 75

    def test_extreme_risk_floor(self, bull_context) -> None:
        """Extreme risk level never drops below the floor of 5"""
        risk = {
            "overall": 95.0,
            "factors": {
                "liquidity": 95.0,
                "volatility": 90.0,
                "holder_concentration": 95.0,
                "market_cap": 90.0,
                "age": 95.0,
                "rug_pull_risk": 95.0,
            },
            "warnings": ["Liquidity can be pulled"],
            "risk_level": "extreme",
        }
        context = {**bull_context, "token_data": {"market_cap": 500_000.0}}

        assert RiskScoreCalculator().calculate(risk, context) == 5.0

    def test_malformed_input_returns_fallback(self, bull_context) -> None:
        """Malformed risk input falls back to 30, not neutral"""
        assert RiskScoreCalculator().calculate({}, bull_context) == 30.0
