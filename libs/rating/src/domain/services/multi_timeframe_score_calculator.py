"""Multi-Timeframe Score Calculator

Combines per-timeframe indicator snapshots into one weighted score, then
adds an alignment bonus (directional consensus) and an exhaustion
penalty (share of exhausted timeframes).
"""

import logging
import math

from injector import inject

from libs.shared.src.domain.services.clamp import clamp
from libs.shared.src.dtos.rating.analysis_context_dto import AnalysisContextDTO
from libs.shared.src.dtos.rating.multi_timeframe_score_dto import (
    AlignmentDetailsDTO,
    MultiTimeframeScoreResultDTO,
    ScoreBreakdownDTO,
    TimeframeScoreDTO,
)
from libs.shared.src.dtos.rating.timeframe_indicators_dto import (
    TimeframeIndicatorsDTO,
)
from libs.shared.src.enums.trend_direction import TrendDirection

DEFAULT_TIMEFRAME_WEIGHTS = {
    "4h": 0.60,
    "1h": 0.40,
}
UNKNOWN_TIMEFRAME_WEIGHT = 0.1
EMA_ALIGNMENT_PERIODS = ["9", "21", "50", "200"]

# Neutral answer when no timeframe carries a usable indicator
FALLBACK_SCORE = 50.0
FALLBACK_CONFIDENCE = 20.0


def _is_number(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and not math.isnan(value)
    )


def _has_macd(indicators: TimeframeIndicatorsDTO) -> bool:
    macd = indicators.get("macd")
    return (
        isinstance(macd, dict)
        and _is_number(macd.get("macd"))
        and _is_number(macd.get("signal"))
    )


def _bollinger_position(indicators: TimeframeIndicatorsDTO) -> float | None:
    bollinger = indicators.get("bollinger")
    if isinstance(bollinger, dict) and _is_number(bollinger.get("position")):
        return bollinger["position"]
    return None


def _histogram(indicators: TimeframeIndicatorsDTO) -> float | None:
    macd = indicators.get("macd")
    if isinstance(macd, dict) and _is_number(macd.get("histogram")):
        return macd["histogram"]
    return None


def is_valid_timeframe(indicators: TimeframeIndicatorsDTO | None) -> bool:
    """At least one of RSI, MACD, Bollinger position or EMA is well formed"""
    if not isinstance(indicators, dict):
        return False
    if _is_number(indicators.get("rsi")):
        return True
    if _has_macd(indicators) and _histogram(indicators) is not None:
        return True
    if _bollinger_position(indicators) is not None:
        return True
    ema = indicators.get("ema")
    return isinstance(ema, dict) and len(ema) > 0


def calculate_ema_alignment(ema: dict[str, float] | None) -> float:
    """Strength of EMA ordering over 9/21/50/200 (0-1, direction-agnostic)"""
    if not isinstance(ema, dict):
        return 0.0

    values = [ema[p] for p in EMA_ALIGNMENT_PERIODS if _is_number(ema.get(p))]
    if len(values) < 2:
        return 0.0

    alignment = 0
    for shorter, longer in zip(values, values[1:]):
        if shorter > longer:
            alignment += 1
        elif shorter < longer:
            alignment -= 1
    return abs(alignment / (len(values) - 1))


def calculate_single_timeframe_score(indicators: TimeframeIndicatorsDTO) -> float:
    score = 50.0

    rsi = indicators.get("rsi")
    if _is_number(rsi):
        if rsi < 30:
            score += (30 - rsi) * 0.5
        elif rsi > 70:
            score += (rsi - 70) * 0.3
        else:
            score += abs(50 - rsi) * 0.2

    if _has_macd(indicators):
        macd = indicators["macd"]
        spread = macd["macd"] - macd["signal"]
        if spread > 0:
            score += min(15.0, spread * 100)
        else:
            score += max(-15.0, spread * 100)

        histogram = _histogram(indicators)
        if histogram is not None:
            if histogram > 0:
                score += min(10.0, histogram * 200)
            else:
                score += max(-10.0, histogram * 200)

    position = _bollinger_position(indicators)
    if position is not None:
        if position < 0.2:
            score += (0.2 - position) * 50
        elif position > 0.8:
            score += (position - 0.8) * 30

    score += calculate_ema_alignment(indicators.get("ema")) * 15

    return clamp(score)


def detect_exhaustion_risk(indicators: TimeframeIndicatorsDTO) -> bool:
    rsi = indicators.get("rsi")
    if _is_number(rsi) and (rsi > 85 or rsi < 15):
        return True

    signals = indicators.get("exhaustion_signals")
    if isinstance(signals, dict):
        for key in ("rsi_overbought", "rsi_oversold"):
            signal = signals.get(key) or {}
            if signal.get("active") and signal.get("periods", 0) >= 3:
                return True

        spike = signals.get("volume_spike") or {}
        divergence = signals.get("divergence") or {}
        if spike.get("active") and divergence.get("detected"):
            return True

    histogram = _histogram(indicators)
    return histogram is not None and abs(histogram) < 0.005


def calculate_timeframe_confidence(indicators: TimeframeIndicatorsDTO) -> float:
    confidence = 70.0

    data_points = indicators.get("data_points")
    if _is_number(data_points):
        if data_points >= 50:
            confidence += 15
        elif data_points >= 20:
            confidence += 10
        else:
            confidence -= 20

    rsi = indicators.get("rsi")
    rsi_clear = _is_number(rsi) and (rsi < 30 or rsi > 70)
    histogram = _histogram(indicators)
    macd_clear = histogram is not None and abs(histogram) > 0.01

    if rsi_clear and macd_clear:
        confidence += 15
    elif rsi_clear or macd_clear:
        confidence += 8

    if detect_exhaustion_risk(indicators):
        confidence -= 20

    return clamp(confidence)


def determine_alignment(indicators: TimeframeIndicatorsDTO) -> str:
    """Majority vote of RSI, MACD, histogram and Bollinger signals"""
    bullish = 0
    bearish = 0

    rsi = indicators.get("rsi")
    if _is_number(rsi):
        if rsi < 30:
            bullish += 1
        elif rsi > 70:
            bearish += 1

    if _has_macd(indicators):
        macd = indicators["macd"]
        if macd["macd"] > macd["signal"]:
            bullish += 1
        else:
            bearish += 1

        histogram = _histogram(indicators)
        if histogram is not None:
            if histogram > 0:
                bullish += 1
            else:
                bearish += 1

    position = _bollinger_position(indicators)
    if position is not None:
        if position < 0.3:
            bullish += 1
        elif position > 0.7:
            bearish += 1

    if bullish > bearish + 1:
        return TrendDirection.BULLISH.value
    if bearish > bullish + 1:
        return TrendDirection.BEARISH.value
    return TrendDirection.NEUTRAL.value


def resolve_timeframe_weight(
    timeframe: str,
    indicators: TimeframeIndicatorsDTO,
    weights: dict[str, float],
) -> float:
    """Own weight, else the configured map, else the unknown-label weight"""
    own = indicators.get("weight")
    if _is_number(own) and own > 0:
        return float(own)
    return float(weights.get(timeframe, UNKNOWN_TIMEFRAME_WEIGHT))


def calculate_weighted_score(timeframe_scores: list[TimeframeScoreDTO]) -> float:
    total_weight = sum(s["weight"] for s in timeframe_scores)
    if total_weight <= 0:
        return FALLBACK_SCORE
    return sum(s["score"] * s["weight"] for s in timeframe_scores) / total_weight


def calculate_alignment(
    timeframe_scores: list[TimeframeScoreDTO],
) -> tuple[float, AlignmentDetailsDTO]:
    """Alignment bonus and its consensus details

    Returns:
        tuple[float, AlignmentDetailsDTO]: (bonus in -5..25, details)
    """
    counts = {direction.value: 0 for direction in TrendDirection}
    weights = {direction.value: 0.0 for direction in TrendDirection}
    for s in timeframe_scores:
        counts[s["alignment"]] += 1
        weights[s["alignment"]] += s["weight"]

    total_weight = sum(weights.values())
    bullish_weight = weights[TrendDirection.BULLISH.value]
    bearish_weight = weights[TrendDirection.BEARISH.value]

    if bullish_weight == 0 and bearish_weight == 0:
        dominant = TrendDirection.NEUTRAL.value
        consensus = 0.0
    else:
        dominant = (
            TrendDirection.BULLISH.value
            if bullish_weight >= bearish_weight
            else TrendDirection.BEARISH.value
        )
        consensus = weights[dominant] / total_weight * 100 if total_weight > 0 else 0.0

    if consensus >= 75:
        bonus = 25.0
    elif consensus >= 60:
        bonus = 15.0
    elif consensus >= 50:
        bonus = 8.0
    elif consensus < 30:
        bonus = -5.0
    else:
        bonus = 0.0

    return bonus, {
        "bullish_timeframes": counts[TrendDirection.BULLISH.value],
        "bearish_timeframes": counts[TrendDirection.BEARISH.value],
        "neutral_timeframes": counts[TrendDirection.NEUTRAL.value],
        "consensus_strength": consensus,
        "dominant_direction": dominant,
    }


def calculate_exhaustion_penalty(timeframe_scores: list[TimeframeScoreDTO]) -> float:
    total_weight = sum(s["weight"] for s in timeframe_scores)
    if total_weight <= 0:
        return 0.0

    exhausted = sum(s["weight"] for s in timeframe_scores if s["exhaustion_risk"])
    ratio = exhausted / total_weight

    if ratio >= 0.6:
        return -50.0
    if ratio >= 0.4:
        return -30.0
    if ratio >= 0.2:
        return -15.0
    return 0.0


def calculate_confidence(
    timeframe_scores: list[TimeframeScoreDTO],
    consensus_strength: float,
    data_points: list[float],
) -> float:
    total_weight = sum(s["weight"] for s in timeframe_scores)
    if total_weight > 0:
        confidence = (
            sum(s["confidence"] * s["weight"] for s in timeframe_scores) / total_weight
        )
    else:
        confidence = 50.0

    confidence += consensus_strength / 100 * 20

    if data_points:
        average_points = sum(data_points) / len(data_points)
        if average_points > 40:
            confidence += 5
        elif average_points <= 20:
            confidence -= 10

    return clamp(confidence)


def fallback_result() -> MultiTimeframeScoreResultDTO:
    return {
        "weighted_score": FALLBACK_SCORE,
        "timeframe_alignment": 0.0,
        "exhaustion_penalty": 0.0,
        "final_score": FALLBACK_SCORE,
        "confidence": FALLBACK_CONFIDENCE,
        "timeframe_scores": [],
        "alignment_details": {
            "bullish_timeframes": 0,
            "bearish_timeframes": 0,
            "neutral_timeframes": 0,
            "consensus_strength": 0.0,
            "dominant_direction": TrendDirection.NEUTRAL.value,
        },
    }


def calculate_multi_timeframe_score(
    multi_timeframe_data: dict[str, TimeframeIndicatorsDTO],
    weights: dict[str, float] | None = None,
) -> MultiTimeframeScoreResultDTO:
    weights = DEFAULT_TIMEFRAME_WEIGHTS if weights is None else weights

    timeframe_scores: list[TimeframeScoreDTO] = []
    data_points: list[float] = []
    for timeframe, indicators in (multi_timeframe_data or {}).items():
        if not is_valid_timeframe(indicators):
            continue

        timeframe_scores.append(
            {
                "timeframe": timeframe,
                "score": calculate_single_timeframe_score(indicators),
                "weight": resolve_timeframe_weight(timeframe, indicators, weights),
                "confidence": calculate_timeframe_confidence(indicators),
                "exhaustion_risk": detect_exhaustion_risk(indicators),
                "alignment": determine_alignment(indicators),
            }
        )
        if _is_number(indicators.get("data_points")):
            data_points.append(indicators["data_points"])

    if not timeframe_scores:
        return fallback_result()

    timeframe_scores.sort(key=lambda s: s["weight"], reverse=True)

    weighted_score = calculate_weighted_score(timeframe_scores)
    bonus, details = calculate_alignment(timeframe_scores)
    penalty = calculate_exhaustion_penalty(timeframe_scores)

    return {
        "weighted_score": weighted_score,
        "timeframe_alignment": bonus,
        "exhaustion_penalty": penalty,
        "final_score": clamp(weighted_score + bonus + penalty),
        "confidence": calculate_confidence(
            timeframe_scores, details["consensus_strength"], data_points
        ),
        "timeframe_scores": timeframe_scores,
        "alignment_details": details,
    }


def get_score_breakdown(result: MultiTimeframeScoreResultDTO) -> ScoreBreakdownDTO:
    """Readable lines, recommendations and warnings for one result"""
    breakdown = [
        f"Base weighted score: {result['weighted_score']:.1f}/100",
        f"Timeframe alignment bonus: {result['timeframe_alignment']:.1f} points",
        f"Exhaustion penalty: {result['exhaustion_penalty']:.1f} points",
        f"Final score: {result['final_score']:.1f}/100",
        f"Confidence: {result['confidence']:.1f}%",
    ]
    for s in result["timeframe_scores"]:
        breakdown.append(
            f"{s['timeframe']}: {s['score']:.1f} "
            f"(weight: {s['weight'] * 100:.0f}%, {s['alignment']})"
        )

    details = result["alignment_details"]
    recommendations = []
    if details["consensus_strength"] > 70:
        recommendations.append(
            f"Strong {details['dominant_direction']} consensus across timeframes"
        )
    if result["final_score"] > 75:
        recommendations.append("Exceptional multi-timeframe setup detected")
    elif result["final_score"] > 60:
        recommendations.append("Good multi-timeframe alignment")

    warnings = []
    if result["exhaustion_penalty"] < -20:
        warnings.append("Significant exhaustion signals detected across timeframes")
    if details["consensus_strength"] < 40:
        warnings.append("High timeframe divergence - conflicting signals")

    exhausted = [s["timeframe"] for s in result["timeframe_scores"] if s["exhaustion_risk"]]
    if exhausted:
        warnings.append(f"Exhaustion risk in: {', '.join(exhausted)}")

    return {
        "breakdown": breakdown,
        "recommendations": recommendations,
        "warnings": warnings,
    }


class MultiTimeframeScoreCalculator:
    """Multi-timeframe aligner (Domain Service)"""

    @inject
    def __init__(self) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)
        self._weights = dict(DEFAULT_TIMEFRAME_WEIGHTS)

    def set_timeframe_weights(self, weights: dict[str, float]) -> None:
        self._weights = dict(weights)

    def calculate(
        self,
        multi_timeframe_data: dict[str, TimeframeIndicatorsDTO],
        context: AnalysisContextDTO | None = None,
    ) -> MultiTimeframeScoreResultDTO:
        """Weighted score with alignment bonus and exhaustion penalty

        Args:
            multi_timeframe_data: Timeframe label -> indicators
            context: Analysis context, used for logging only

        Returns:
            MultiTimeframeScoreResultDTO: final_score 50 / confidence 20 when
            no timeframe is valid
        """
        token_address = ((context or {}).get("token_data") or {}).get(
            "address", "unknown"
        )
        result = calculate_multi_timeframe_score(multi_timeframe_data, self._weights)

        if not result["timeframe_scores"]:
            self._logger.warning(
                f"No valid timeframes for {token_address}: "
                f"{list((multi_timeframe_data or {}).keys())}"
            )
            return result

        self._logger.debug(
            f"Multi-timeframe score for {token_address}: "
            f"weighted={result['weighted_score']:.1f} "
            f"bonus={result['timeframe_alignment']:.1f} "
            f"penalty={result['exhaustion_penalty']:.1f} "
            f"final={result['final_score']:.1f}"
        )
        return result

    def get_score_breakdown(
        self, result: MultiTimeframeScoreResultDTO
    ) -> ScoreBreakdownDTO:
        return get_score_breakdown(result)
