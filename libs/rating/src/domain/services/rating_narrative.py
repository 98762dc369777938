"""Rating Narrative

Human-readable reasoning lines and alert strings for a rating.
"""

from libs.shared.src.dtos.rating.analysis_context_dto import MarketContextDTO
from libs.shared.src.dtos.rating.consecutive_momentum_dto import (
    ConsecutiveMomentumResultDTO,
)
from libs.shared.src.dtos.rating.exhaustion_penalty_dto import (
    ExhaustionPenaltyResultDTO,
)
from libs.shared.src.dtos.rating.multi_timeframe_score_dto import (
    MultiTimeframeScoreResultDTO,
)
from libs.shared.src.dtos.rating.score_components_dto import ScoreComponentsDTO
from libs.shared.src.enums.exhaustion_level import ExhaustionLevel
from libs.shared.src.enums.market_trend import MarketTrend

STRONG_ALIGNMENT_BONUS = 20
HIGH_CONSENSUS = 80
LOW_CONSENSUS = 40
SUSTAINED_STREAK = 3


def generate_reasoning(
    scores: ScoreComponentsDTO, market_context: MarketContextDTO
) -> list[str]:
    reasoning = []

    if scores["technical"] > 75:
        reasoning.append(
            "Strong technical signals: RSI, MACD, and moving averages show bullish "
            f"alignment ({scores['technical']:.1f}/100)"
        )
    elif scores["technical"] < 40:
        reasoning.append(
            "Weak technical signals: Indicators suggest bearish or neutral "
            f"conditions ({scores['technical']:.1f}/100)"
        )

    if scores["momentum"] > 80:
        reasoning.append(
            "Exceptional momentum: Strong trend with high breakout potential "
            f"({scores['momentum']:.1f}/100)"
        )
    elif scores["momentum"] < 35:
        reasoning.append(
            "Poor momentum: Weak trend with limited upside potential "
            f"({scores['momentum']:.1f}/100)"
        )

    if scores["volume"] > 85:
        reasoning.append(
            "Outstanding volume activity: Significant buying pressure detected "
            f"({scores['volume']:.1f}/100)"
        )
    elif scores["volume"] < 30:
        reasoning.append(
            "Low volume concern: Limited trading activity may indicate lack of "
            f"interest ({scores['volume']:.1f}/100)"
        )

    if scores["risk"] > 80:
        reasoning.append(
            "Low risk profile: Good liquidity and market cap stability "
            f"({scores['risk']:.1f}/100)"
        )
    elif scores["risk"] < 40:
        reasoning.append(
            "High risk warning: Elevated volatility or liquidity concerns "
            f"({scores['risk']:.1f}/100)"
        )

    trend = market_context["overall_trend"]
    if trend == MarketTrend.BULL.value:
        reasoning.append("Favorable market conditions support bullish outlook")
    elif trend == MarketTrend.BEAR.value:
        reasoning.append("Challenging market conditions may limit upside potential")

    return reasoning


def generate_alerts(
    scores: ScoreComponentsDTO, rating: float, confidence: float
) -> list[str]:
    alerts = []

    if rating >= 9 and confidence > 80:
        alerts.append("🚀 EXCEPTIONAL OPPORTUNITY: Rare high-confidence rating above 9")
    if rating >= 7 and confidence > 75:
        alerts.append("🔥 STRONG BUY SIGNAL: High rating with good confidence")
    if scores["volume"] > 90:
        alerts.append("📈 VOLUME SPIKE: Unusual trading activity detected")
    if scores["risk"] < 30:
        alerts.append("⚠️ HIGH RISK: Significant risk factors identified")
    if confidence < 50:
        alerts.append("🤔 LOW CONFIDENCE: Rating based on limited or conflicting data")

    return alerts


def generate_enhanced_reasoning(
    scores: ScoreComponentsDTO,
    market_context: MarketContextDTO,
    multi_timeframe: MultiTimeframeScoreResultDTO | None = None,
    consecutive_momentum: ConsecutiveMomentumResultDTO | None = None,
    exhaustion: ExhaustionPenaltyResultDTO | None = None,
) -> list[str]:
    """Base reasoning followed by the optional subsystems' own lines"""
    reasoning = generate_reasoning(scores, market_context)

    if multi_timeframe:
        consensus = multi_timeframe["alignment_details"]["consensus_strength"]
        reasoning.append(
            f"Multi-timeframe analysis: {multi_timeframe['final_score']:.1f}/100 "
            f"(alignment: {consensus:.1f}%)"
        )
        if multi_timeframe["timeframe_alignment"] > STRONG_ALIGNMENT_BONUS:
            reasoning.append(
                "Strong timeframe alignment bonus: "
                f"+{multi_timeframe['timeframe_alignment']:.1f} points"
            )

    if consecutive_momentum and consecutive_momentum["consecutive_count"] > 0:
        reasoning.extend(consecutive_momentum["reasoning"])

    if exhaustion and exhaustion["signals"]:
        reasoning.extend(exhaustion["reasoning"])

    return reasoning


def generate_enhanced_alerts(
    scores: ScoreComponentsDTO,
    rating: float,
    confidence: float,
    multi_timeframe: MultiTimeframeScoreResultDTO | None = None,
    consecutive_momentum: ConsecutiveMomentumResultDTO | None = None,
    exhaustion: ExhaustionPenaltyResultDTO | None = None,
) -> list[str]:
    alerts = generate_alerts(scores, rating, confidence)

    if multi_timeframe:
        consensus = multi_timeframe["alignment_details"]["consensus_strength"]
        if consensus > HIGH_CONSENSUS:
            alerts.append(
                "🎯 EXCEPTIONAL TIMEFRAME ALIGNMENT: All timeframes showing strong consensus"
            )
        elif consensus < LOW_CONSENSUS:
            alerts.append("⚠️ TIMEFRAME DIVERGENCE: Conflicting signals across timeframes")

    if consecutive_momentum:
        if consecutive_momentum["consecutive_count"] >= SUSTAINED_STREAK:
            alerts.append("🔥 SUSTAINED MOMENTUM: 3+ consecutive strong periods detected")
        if consecutive_momentum["exhaustion_warning"]:
            alerts.append("⚠️ MOMENTUM EXHAUSTION: Signs of momentum fatigue detected")

    if exhaustion:
        if exhaustion["exhaustion_level"] in (
            ExhaustionLevel.EXTREME.value,
            ExhaustionLevel.SEVERE.value,
        ):
            alerts.append("🚨 EXTREME EXHAUSTION: High risk of momentum reversal")
        alerts.extend(f"📋 {rec}" for rec in exhaustion["recommendations"])

    return alerts
