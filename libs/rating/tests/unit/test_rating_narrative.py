"""Rating Narrative Unit Tests"""

from libs.rating.src.domain.services.rating_narrative import (
    generate_alerts,
    generate_enhanced_alerts,
    generate_enhanced_reasoning,
    generate_reasoning,
)

BULL = {"overall_trend": "bull", "volatility_index": 40.0, "market_sentiment": 65.0}
BEAR = {"overall_trend": "bear", "volatility_index": 40.0, "market_sentiment": 30.0}
SIDEWAYS = {"overall_trend": "sideways", "volatility_index": 50.0, "market_sentiment": 50.0}


def scores(technical=60.0, momentum=60.0, volume=60.0, risk=60.0):
    return {
        "technical": technical,
        "momentum": momentum,
        "volume": volume,
        "risk": risk,
        "pattern": 0.0,
        "fundamentals": 0.0,
    }


class TestReasoning:
    """Reasoning lines"""

    def test_strong_bullish_setup(self) -> None:
        """Strong components and a bull market each add a line"""
        reasoning = generate_reasoning(scores(90.0, 81.0, 78.0, 85.0), BULL)

        assert len(reasoning) == 4
        assert reasoning[0].startswith("Strong technical signals")
        assert reasoning[0].endswith("(90.0/100)")
        assert reasoning[1].startswith("Exceptional momentum")
        assert reasoning[2].startswith("Low risk profile")
        assert reasoning[3] == "Favorable market conditions support bullish outlook"

    def test_weak_bearish_setup(self) -> None:
        """Weak components and a bear market"""
        reasoning = generate_reasoning(scores(30.0, 20.0, 20.0, 20.0), BEAR)

        assert reasoning[0].startswith("Weak technical signals")
        assert reasoning[1].startswith("Poor momentum")
        assert reasoning[2].startswith("Low volume concern")
        assert reasoning[3].startswith("High risk warning")
        assert reasoning[4] == "Challenging market conditions may limit upside potential"

    def test_unremarkable_scores_in_sideways_market(self) -> None:
        """Middling scores produce no reasoning"""
        assert generate_reasoning(scores(), SIDEWAYS) == []


class TestAlerts:
    """Alert strings"""

    def test_exceptional_rating(self) -> None:
        """Top ratings with high confidence trigger both buy alerts"""
        alerts = generate_alerts(scores(volume=95.0, risk=20.0), 9.2, 85.0)

        assert alerts == [
            "🚀 EXCEPTIONAL OPPORTUNITY: Rare high-confidence rating above 9",
            "🔥 STRONG BUY SIGNAL: High rating with good confidence",
            "📈 VOLUME SPIKE: Unusual trading activity detected",
            "⚠️ HIGH RISK: Significant risk factors identified",
        ]

    def test_low_confidence(self) -> None:
        """Low confidence is flagged"""
        alerts = generate_alerts(scores(), 5.0, 40.0)

        assert alerts == ["🤔 LOW CONFIDENCE: Rating based on limited or conflicting data"]


class TestEnhancedNarrative:
    """Reasoning and alerts with the optional subsystems"""

    MULTI_TIMEFRAME = {
        "weighted_score": 80.0,
        "timeframe_alignment": 25.0,
        "exhaustion_penalty": 0.0,
        "final_score": 100.0,
        "confidence": 90.0,
        "timeframe_scores": [],
        "alignment_details": {
            "bullish_timeframes": 2,
            "bearish_timeframes": 0,
            "neutral_timeframes": 0,
            "consensus_strength": 100.0,
            "dominant_direction": "bullish",
        },
    }
    STREAK = {
        "consecutive_count": 3,
        "bonus_percentage": 25.0,
        "score_boost": 20.0,
        "exhaustion_warning": True,
        "trend_break_reset": False,
        "diminishing_returns": False,
        "reasoning": ["3 consecutive bullish periods detected"],
        "periods": [],
    }
    EXHAUSTION = {
        "total_penalty": -42.0,
        "signals": [
            {
                "type": "rsi_overbought",
                "severity": "severe",
                "timeframe": "4h",
                "description": "RSI extremely overbought",
                "penalty": -20.0,
                "confidence": 90.0,
            }
        ],
        "exhaustion_level": "extreme",
        "timeframe_breakdown": {"4h": -42.0},
        "reasoning": ["Total exhaustion penalty: -42.0 points"],
        "recommendations": ["Consider waiting for a pullback"],
    }

    def test_enhanced_reasoning_appends_subsystems(self) -> None:
        """Subsystem lines follow the base reasoning"""
        reasoning = generate_enhanced_reasoning(
            scores(), SIDEWAYS, self.MULTI_TIMEFRAME, self.STREAK, self.EXHAUSTION
        )

        assert reasoning == [
            "Multi-timeframe analysis: 100.0/100 (alignment: 100.0%)",
            "Strong timeframe alignment bonus: +25.0 points",
            "3 consecutive bullish periods detected",
            "Total exhaustion penalty: -42.0 points",
        ]

    def test_enhanced_reasoning_without_subsystems(self) -> None:
        """No optional data means only the base lines"""
        assert generate_enhanced_reasoning(scores(), BULL) == generate_reasoning(scores(), BULL)

    def test_enhanced_alerts(self) -> None:
        """Consensus, streak and exhaustion alerts"""
        alerts = generate_enhanced_alerts(
            scores(), 5.0, 60.0, self.MULTI_TIMEFRAME, self.STREAK, self.EXHAUSTION
        )

        assert alerts == [
            "🎯 EXCEPTIONAL TIMEFRAME ALIGNMENT: All timeframes showing strong consensus",
            "🔥 SUSTAINED MOMENTUM: 3+ consecutive strong periods detected",
            "⚠️ MOMENTUM EXHAUSTION: Signs of momentum fatigue detected",
            "🚨 EXTREME EXHAUSTION: High risk of momentum reversal",
            "📋 Consider waiting for a pullback",
        ]

    def test_timeframe_divergence_alert(self) -> None:
        """Weak consensus is flagged as divergence"""
        diverging = {
            **self.MULTI_TIMEFRAME,
            "alignment_details": {
                **self.MULTI_TIMEFRAME["alignment_details"],
                "consensus_strength": 35.0,
            },
        }

        alerts = generate_enhanced_alerts(scores(), 5.0, 60.0, diverging)

        assert alerts == ["⚠️ TIMEFRAME DIVERGENCE: Conflicting signals across timeframes"]
