"""Confidence Calculator

Aggregates nine independent factors (each 0-1) into one confidence
percentage. The weighted sum is raised to the 0.9 power and clamped to
[10, 95]; confidence never reports zero or full certainty.
"""

import logging
import time

import numpy as np
from injector import inject

from libs.rating.src.domain.services.context_defaults import get_market_context
from libs.rating.src.domain.services.multi_timeframe_score_calculator import (
    DEFAULT_TIMEFRAME_WEIGHTS,
    resolve_timeframe_weight,
)
from libs.shared.src.constants.rating_history import (
    DEFAULT_HISTORICAL_ACCURACY,
    MAX_PREDICTIONS_PER_TOKEN,
    MIN_RATINGS_FOR_ACCURACY,
)
from libs.shared.src.constants.rating_thresholds import MAX_CONFIDENCE, MIN_CONFIDENCE
from libs.shared.src.domain.services.clamp import clamp
from libs.shared.src.dtos.rating.analysis_context_dto import AnalysisContextDTO
from libs.shared.src.dtos.rating.confidence_dto import (
    ConfidenceFactorsDTO,
    ConfidenceIntervalDTO,
    ConfidenceStatisticsDTO,
    DetailedConfidenceDTO,
    PredictionRecordDTO,
    QualityMetricsDTO,
)
from libs.shared.src.dtos.rating.consecutive_momentum_dto import (
    ConsecutiveMomentumResultDTO,
)
from libs.shared.src.dtos.rating.score_components_dto import ScoreComponentsDTO
from libs.shared.src.dtos.rating.timeframe_indicators_dto import (
    TimeframeIndicatorsDTO,
)
from libs.shared.src.enums.market_trend import MarketTrend
from libs.shared.src.enums.reliability_level import ReliabilityLevel

CONFIDENCE_WEIGHTS = {
    "data_quality": 0.16,
    "sample_size": 0.14,
    "historical_accuracy": 0.14,
    "factor_agreement": 0.12,
    "model_stability": 0.12,
    "market_conditions": 0.12,
    "timeframe_alignment": 0.10,
    "consecutive_momentum": 0.06,
    "exhaustion_risk": 0.04,
}
CONFIDENCE_EXPONENT = 0.9
ERROR_CONFIDENCE = 50.0

# Component weights of the 1-10 reference rating used for the interval
INTERVAL_RATING_WEIGHTS = {"technical": 0.4, "momentum": 0.3, "volume": 0.2, "risk": 0.1}

PREDICTION_MATCH_TOLERANCE_MS = 5 * 60 * 1000
BULLISH_RATING = 6  # predictions above this count as bullish calls

TOKEN_FIELDS = ("price", "market_cap", "volume_24h", "holders")


def _std(values: list[float]) -> float:
    if len(values) < 2:
        return 0.0
    return float(np.std(values))


def calculate_data_quality(context: AnalysisContextDTO) -> float:
    quality = 0.8
    chart = context.get("chart_data") or []

    if chart:
        if len(chart) >= 100:
            quality += 0.1
        elif len(chart) < 20:
            quality -= 0.2

        timestamps = [point["timestamp"] for point in chart]
        intervals = np.diff(timestamps)
        if intervals.size > 0:
            average = float(np.mean(intervals))
            if average > 0:
                irregular = np.sum(np.abs(intervals - average) > average * 0.5)
                if irregular / intervals.size > 0.1:
                    quality -= 0.15
    else:
        quality -= 0.3

    token = context.get("token_data") or {}
    complete = sum(1 for field in TOKEN_FIELDS if token.get(field) is not None)
    quality += complete / len(TOKEN_FIELDS) * 0.1

    return clamp(quality, 0.0, 1.0)


def calculate_sample_size(context: AnalysisContextDTO) -> float:
    confidence = 0.5

    history_length = len(context.get("historical_analysis") or [])
    if history_length >= 30:
        confidence = 0.95
    elif history_length >= 15:
        confidence = 0.85
    elif history_length >= 7:
        confidence = 0.70
    elif history_length >= 3:
        confidence = 0.55

    chart_points = len(context.get("chart_data") or [])
    if chart_points > 0:
        if chart_points >= 200:
            chart_confidence = 0.9
        elif chart_points >= 100:
            chart_confidence = 0.8
        elif chart_points >= 50:
            chart_confidence = 0.7
        elif chart_points >= 20:
            chart_confidence = 0.6
        else:
            chart_confidence = 0.5
        confidence = confidence * 0.6 + chart_confidence * 0.4

    return clamp(confidence, 0.0, 1.0)


def calculate_model_stability(
    scores: ScoreComponentsDTO, recent_ratings: list[float]
) -> float:
    """Lower when subscores disagree or the token's recent ratings swing"""
    stability = 0.8

    active = [score for score in scores.values() if score > 0]
    if active:
        spread = float(np.std(active))
        if spread > 30:
            stability -= 0.2
        elif spread > 20:
            stability -= 0.1
        elif spread < 10:
            stability += 0.1

    if len(recent_ratings) >= 3:
        rating_spread = _std(recent_ratings[-5:])
        if rating_spread > 2:
            stability -= 0.15
        elif rating_spread < 0.5:
            stability += 0.1

    return clamp(stability, 0.0, 1.0)


def calculate_market_conditions(context: AnalysisContextDTO) -> float:
    confidence = 0.7
    market = get_market_context(context)

    trend = market["overall_trend"]
    if trend == MarketTrend.BULL.value:
        confidence += 0.15
    elif trend == MarketTrend.BEAR.value:
        confidence -= 0.1
    elif trend == MarketTrend.SIDEWAYS.value:
        confidence -= 0.05

    volatility = market["volatility_index"]
    if volatility < 30:
        confidence += 0.1
    elif volatility > 70:
        confidence -= 0.15

    sentiment = market["market_sentiment"]
    if sentiment > 70 or sentiment < 30:
        confidence += 0.05
    elif 45 <= sentiment <= 55:
        confidence -= 0.05

    return clamp(confidence, 0.0, 1.0)


def calculate_factor_agreement(scores: ScoreComponentsDTO) -> float:
    active = [score for score in scores.values() if score > 0]
    if len(active) < 2:
        return 0.5

    mean = float(np.mean(active))
    average_deviation = float(np.mean([abs(score - mean) / 100 for score in active]))
    agreement = 1 - average_deviation * 2

    bullish = sum(1 for score in active if score > 60)
    bearish = sum(1 for score in active if score < 40)
    neutral = len(active) - bullish - bearish
    if max(bullish, bearish, neutral) / len(active) > 0.7:
        agreement += 0.1

    return clamp(agreement, 0.0, 1.0)


def _timeframe_bias(indicators: TimeframeIndicatorsDTO) -> int:
    bias = 0
    rsi = indicators.get("rsi")
    if isinstance(rsi, (int, float)):
        if rsi < 30:
            bias += 1
        elif rsi > 70:
            bias -= 1

    macd = indicators.get("macd") or {}
    if "macd" in macd and "signal" in macd:
        if macd["macd"] > macd["signal"]:
            bias += 1
        elif macd["macd"] < macd["signal"]:
            bias -= 1

    position = (indicators.get("bollinger") or {}).get("position")
    if isinstance(position, (int, float)):
        if position < 0.3:
            bias += 1
        elif position > 0.7:
            bias -= 1

    return bias


def calculate_timeframe_alignment(
    multi_timeframe_data: dict[str, TimeframeIndicatorsDTO] | None,
) -> float:
    if not multi_timeframe_data:
        return 0.7

    timeframes = [(tf, data) for tf, data in multi_timeframe_data.items() if data]
    if len(timeframes) < 2:
        return 0.6

    bullish = 0.0
    bearish = 0.0
    for timeframe, indicators in timeframes:
        weight = resolve_timeframe_weight(timeframe, indicators, DEFAULT_TIMEFRAME_WEIGHTS)
        bias = _timeframe_bias(indicators)
        if bias > 0:
            bullish += weight
        elif bias < 0:
            bearish += weight

    if bullish + bearish == 0:
        return 0.5

    consensus = max(bullish, bearish) / (bullish + bearish)
    if consensus > 0.8:
        return 0.95
    if consensus > 0.7:
        return 0.85
    if consensus > 0.6:
        return 0.75
    if consensus > 0.5:
        return 0.65
    return 0.4


def calculate_consecutive_momentum_factor(
    streak: ConsecutiveMomentumResultDTO | None,
) -> float:
    if streak is None:
        return 0.7

    confidence = 0.7
    if streak["consecutive_count"] >= 3:
        confidence = 0.9
    elif streak["consecutive_count"] >= 2:
        confidence = 0.8

    confidence += streak["score_boost"] / 100 * 0.1
    if streak["exhaustion_warning"]:
        confidence -= 0.15
    if streak["diminishing_returns"]:
        confidence -= 0.1

    return clamp(confidence, 0.0, 1.0)


def calculate_exhaustion_risk_factor(exhaustion_penalty: float | None) -> float:
    if exhaustion_penalty is None:
        return 0.8
    return clamp(1 - abs(exhaustion_penalty) / 50, 0.1, 1.0)


def aggregate_factors(factors: ConfidenceFactorsDTO) -> float:
    weighted = sum(factors[key] * weight for key, weight in CONFIDENCE_WEIGHTS.items())
    return clamp(max(weighted, 0.0) ** CONFIDENCE_EXPONENT * 100, MIN_CONFIDENCE, MAX_CONFIDENCE)


def weighted_reference_rating(scores: ScoreComponentsDTO) -> float:
    weighted = sum(scores.get(key, 0) * w for key, w in INTERVAL_RATING_WEIGHTS.items())
    return clamp(weighted / 10, 1.0, 10.0)


def z_score_for(probability: float) -> float:
    if probability >= 0.975:
        return 1.96
    if probability >= 0.95:
        return 1.645
    if probability >= 0.9:
        return 1.28
    return 1.0


def calculate_confidence_interval(
    rating: float, confidence: float, level: float = 95
) -> ConfidenceIntervalDTO:
    """Interval on the 1-10 scale; lower confidence widens it"""
    alpha = (100 - level) / 100
    margin = z_score_for(1 - alpha / 2) * (100 - confidence) / 100 * 1.5
    return {
        "lower": max(1.0, rating - margin),
        "upper": min(10.0, rating + margin),
        "level": level,
    }


def determine_reliability(confidence: float) -> str:
    if confidence >= 85:
        return ReliabilityLevel.VERY_HIGH.value
    if confidence >= 70:
        return ReliabilityLevel.HIGH.value
    if confidence >= 55:
        return ReliabilityLevel.MODERATE.value
    if confidence >= 40:
        return ReliabilityLevel.LOW.value
    return ReliabilityLevel.VERY_LOW.value


class ConfidenceCalculator:
    """Confidence estimator (Domain Service)

    Keeps a bounded per-token prediction log; it feeds the stability
    factor and the historical accuracy estimate.
    """

    @inject
    def __init__(self) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)
        self._predictions: dict[str, list[PredictionRecordDTO]] = {}

    def calculate(
        self,
        scores: ScoreComponentsDTO,
        context: AnalysisContextDTO,
        historical_accuracy: float = DEFAULT_HISTORICAL_ACCURACY,
        multi_timeframe_data: dict[str, TimeframeIndicatorsDTO] | None = None,
        consecutive_momentum: ConsecutiveMomentumResultDTO | None = None,
        exhaustion_penalty: float | None = None,
    ) -> float:
        """Overall confidence percentage

        Args:
            scores: Component subscores
            context: Analysis context (defaults already applied)
            historical_accuracy: Accuracy estimate for this token (0-1)
            multi_timeframe_data: Timeframe label -> indicators
            consecutive_momentum: Streak result, if computed
            exhaustion_penalty: Total exhaustion penalty, if computed

        Returns:
            float: 10-95, or 50 when the factors cannot be computed
        """
        token_address = (context.get("token_data") or {}).get("address", "unknown")
        try:
            factors = self.calculate_factors(
                scores,
                context,
                historical_accuracy,
                multi_timeframe_data,
                consecutive_momentum,
                exhaustion_penalty,
            )
            confidence = aggregate_factors(factors)
        except Exception as e:
            self._logger.error(f"Confidence calculation failed for {token_address}: {e}")
            return ERROR_CONFIDENCE

        self._store_prediction(
            token_address,
            {
                "rating": weighted_reference_rating(scores),
                "confidence": confidence,
                "timestamp": time.time() * 1000,
                "actual_performance": None,
            },
        )
        self._logger.debug(f"Confidence for {token_address}: {confidence:.1f}")
        return confidence

    def calculate_factors(
        self,
        scores: ScoreComponentsDTO,
        context: AnalysisContextDTO,
        historical_accuracy: float = DEFAULT_HISTORICAL_ACCURACY,
        multi_timeframe_data: dict[str, TimeframeIndicatorsDTO] | None = None,
        consecutive_momentum: ConsecutiveMomentumResultDTO | None = None,
        exhaustion_penalty: float | None = None,
    ) -> ConfidenceFactorsDTO:
        token_address = (context.get("token_data") or {}).get("address", "unknown")
        recent = [p["rating"] for p in self._predictions.get(token_address, [])]
        return {
            "data_quality": calculate_data_quality(context),
            "sample_size": calculate_sample_size(context),
            "model_stability": calculate_model_stability(scores, recent),
            "market_conditions": calculate_market_conditions(context),
            "factor_agreement": calculate_factor_agreement(scores),
            "historical_accuracy": clamp(historical_accuracy, 0.0, 1.0),
            "timeframe_alignment": calculate_timeframe_alignment(multi_timeframe_data),
            "consecutive_momentum": calculate_consecutive_momentum_factor(
                consecutive_momentum
            ),
            "exhaustion_risk": calculate_exhaustion_risk_factor(exhaustion_penalty),
        }

    def calculate_detailed(
        self,
        scores: ScoreComponentsDTO,
        context: AnalysisContextDTO,
        historical_accuracy: float = DEFAULT_HISTORICAL_ACCURACY,
    ) -> DetailedConfidenceDTO:
        factors = self.calculate_factors(scores, context, historical_accuracy)
        confidence = aggregate_factors(factors)
        token_address = (context.get("token_data") or {}).get("address", "unknown")

        return {
            "overall_confidence": confidence,
            "uncertainty": 100 - confidence,
            "confidence_interval": calculate_confidence_interval(
                weighted_reference_rating(scores), confidence
            ),
            "reliability": determine_reliability(confidence),
            "factors": factors,
            "quality_metrics": self._quality_metrics(token_address),
        }

    def update_prediction_performance(
        self, token_address: str, timestamp: float, actual_performance: float
    ) -> bool:
        """Attach the realised price move to the prediction made at timestamp

        Returns:
            bool: Whether a prediction within 5 minutes was found
        """
        for prediction in self._predictions.get(token_address, []):
            if prediction["actual_performance"] is not None:
                continue
            if abs(prediction["timestamp"] - timestamp) < PREDICTION_MATCH_TOLERANCE_MS:
                prediction["actual_performance"] = actual_performance
                return True
        return False

    def get_historical_accuracy(self, token_address: str) -> float | None:
        """Directional hit rate of evaluated predictions, None below 3 samples"""
        evaluated = [
            p
            for p in self._predictions.get(token_address, [])
            if p["actual_performance"] is not None
        ]
        if len(evaluated) < MIN_RATINGS_FOR_ACCURACY:
            return None
        correct = sum(1 for p in evaluated if self._is_correct(p))
        return correct / len(evaluated)

    def get_statistics(self) -> ConfidenceStatisticsDTO:
        predictions = [p for records in self._predictions.values() for p in records]
        evaluated = [p for p in predictions if p["actual_performance"] is not None]
        correct = sum(1 for p in evaluated if self._is_correct(p))

        return {
            "total_predictions": len(predictions),
            "average_confidence": (
                float(np.mean([p["confidence"] for p in predictions])) if predictions else 0.0
            ),
            "tokens_tracked": len(self._predictions),
            "evaluated_predictions": len(evaluated),
            "correct_predictions": correct,
            "accuracy": correct / len(evaluated) if evaluated else None,
        }

    def _is_correct(self, prediction: PredictionRecordDTO) -> bool:
        return (prediction["rating"] > BULLISH_RATING) == (
            prediction["actual_performance"] > 0
        )

    def _store_prediction(self, token_address: str, prediction: PredictionRecordDTO) -> None:
        predictions = self._predictions.setdefault(token_address, [])
        predictions.append(prediction)
        if len(predictions) > MAX_PREDICTIONS_PER_TOKEN:
            del predictions[: len(predictions) - MAX_PREDICTIONS_PER_TOKEN]

    def _quality_metrics(self, token_address: str) -> QualityMetricsDTO:
        history = self._predictions.get(token_address, [])
        if len(history) < 3:
            return {"consistency": 70.0, "volatility": 50.0, "predictiveness": 60.0}

        ratings = [p["rating"] for p in history[-10:]]
        consistency = clamp(100 - _std(ratings) * 10)
        recent = history[-5:]
        return {
            "consistency": consistency,
            "volatility": 100 - consistency,
            "predictiveness": sum(p["confidence"] for p in recent) / len(recent),
        }
