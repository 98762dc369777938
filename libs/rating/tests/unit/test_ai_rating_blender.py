"""AI Rating Blender Unit Tests"""

import pytest

from libs.rating.src.domain.services.ai_rating_blender import (
    blend_rating,
    build_advisory_input,
    combine_recommendation,
    should_request_advisory,
)


@pytest.fixture
def technical_result():
    return {
        "rating": 8.0,
        "confidence": 70.0,
        "components": {
            "technical": 85.0,
            "momentum": 80.0,
            "volume": 75.0,
            "risk": 80.0,
            "pattern": 0.0,
            "fundamentals": 0.0,
        },
        "weights": {"technical": 0.25, "volume": 0.75},
        "reasoning": ["Strong technical signals"],
        "alerts": ["🔥 STRONG BUY SIGNAL: High rating with good confidence"],
        "recommendation": "strong_buy",
    }


@pytest.fixture
def advisory():
    return {
        "momentum_quality": 9.0,
        "entry_risk": 3.0,
        "timeframe_analysis": 8.0,
        "volume_analysis": 9.0,
        "final_recommendation": {"rating": 9.0, "action": "STRONG_BUY"},
        "reasoning": ["clean breakout", "volume confirms", "no divergence", "late entry"],
        "confidence": 90.0,
        "warnings": ["thin liquidity"],
        "timestamp": 0.0,
        "token_address": "token-1",
    }


class TestBlendRating:
    """70/30 blend of technical and AI ratings"""

    def test_blend(self, technical_result, advisory) -> None:
        """Rating and confidence are blended 70/30"""
        blended = blend_rating(technical_result, advisory)

        assert blended["rating"] == pytest.approx(8.3)
        assert blended["confidence"] == pytest.approx(76.0)
        assert blended["recommendation"] == "strong_buy"
        assert blended["ai_enhanced"] is True

    def test_reasoning_and_alerts(self, technical_result, advisory) -> None:
        """AI reasons are capped at three, warnings become alerts"""
        blended = blend_rating(technical_result, advisory)

        assert blended["reasoning"] == [
            "Strong technical signals",
            "AI Analysis (90% confidence): STRONG_BUY",
            "clean breakout",
            "volume confirms",
            "no divergence",
        ]
        assert blended["alerts"][-1] == "🤖 AI: thin liquidity"

    def test_input_not_mutated(self, technical_result, advisory) -> None:
        """The technical result is left as it was"""
        blend_rating(technical_result, advisory)

        assert technical_result["rating"] == 8.0
        assert "ai_enhanced" not in technical_result
        assert len(technical_result["reasoning"]) == 1

    def test_blend_clamped(self, technical_result, advisory) -> None:
        """Out-of-range AI answers cannot push the rating off the scale"""
        advisory["final_recommendation"] = {"rating": 50.0, "action": "STRONG_BUY"}

        assert blend_rating(technical_result, advisory)["rating"] == 10.0


class TestCombineRecommendation:
    """Recommendation merge"""

    def test_strong_buy_needs_one_strong_side(self) -> None:
        """At 8+ either side saying strong_buy is enough"""
        assert combine_recommendation("buy", "STRONG_BUY", 8.0, 70.0) == "strong_buy"
        assert combine_recommendation("strong_buy", "AVOID", 8.2, 70.0) == "strong_buy"
        assert combine_recommendation("buy", "AVOID", 8.2, 70.0) == "buy"

    def test_low_confidence_holds(self) -> None:
        """Blended confidence below 50 holds"""
        assert combine_recommendation("strong_buy", "STRONG_BUY", 9.0, 40.0) == "hold"

    def test_rating_bands(self) -> None:
        """Below 8 the rating band decides"""
        assert combine_recommendation("hold", "NEUTRAL", 7.5, 60.0) == "buy"
        assert combine_recommendation("hold", "NEUTRAL", 6.0, 60.0) == "hold"
        assert combine_recommendation("hold", "AVOID", 4.0, 60.0) == "sell"
        assert combine_recommendation("hold", "AVOID", 2.0, 60.0) == "strong_sell"


class TestAdvisoryRequest:
    """Advisory gate and request payload"""

    def test_threshold_inclusive(self) -> None:
        """The threshold itself qualifies"""
        assert should_request_advisory(6.0, 6.0)
        assert not should_request_advisory(5.9, 6.0)

    def test_build_input_fills_missing_timeframes(
        self, bullish_indicators, bullish_momentum, spike_volume, low_risk, bull_context
    ) -> None:
        """Missing timeframes reuse the primary indicators"""
        hourly = {**bullish_indicators, "rsi": 71.0}
        context = {**bull_context, "multi_timeframe_data": {"1h": hourly}}
        risk = {**low_risk, "warnings": ["new pool"]}

        request = build_advisory_input(
            bullish_indicators, bullish_momentum, spike_volume, risk, context, 8.2
        )

        assert set(request["technical_indicators"]) == {"5m", "15m", "1h", "4h"}
        assert request["technical_indicators"]["1h"]["rsi"] == 71.0
        assert request["technical_indicators"]["4h"] is bullish_indicators
        assert request["risk_factors"] == ["new pool"]
        assert request["initial_technical_rating"] == 8.2
        assert request["token_data"] == bull_context["token_data"]
