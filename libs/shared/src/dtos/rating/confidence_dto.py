"""Confidence DTOs"""

from typing import TypedDict


class ConfidenceFactorsDTO(TypedDict):
    """Nine independent confidence factors, each 0-1"""

    data_quality: float
    sample_size: float
    model_stability: float
    market_conditions: float
    factor_agreement: float
    historical_accuracy: float
    timeframe_alignment: float
    consecutive_momentum: float
    exhaustion_risk: float


class ConfidenceIntervalDTO(TypedDict):
    """Interval around the weighted component rating (1-10 scale)"""

    lower: float
    upper: float
    level: float  # e.g. 95


class QualityMetricsDTO(TypedDict):
    """Rating quality derived from the token's prediction history"""

    consistency: float  # 0-100
    volatility: float  # 0-100
    predictiveness: float  # 0-100


class DetailedConfidenceDTO(TypedDict):
    """Confidence with its interval, label and factor breakdown"""

    overall_confidence: float
    uncertainty: float
    confidence_interval: ConfidenceIntervalDTO
    reliability: str
    """very_high/high/moderate/low/very_low"""

    factors: ConfidenceFactorsDTO
    quality_metrics: QualityMetricsDTO


class PredictionRecordDTO(TypedDict):
    """Stored prediction used to track historical accuracy"""

    rating: float
    confidence: float
    timestamp: float  # epoch milliseconds
    actual_performance: float | None


class ConfidenceStatisticsDTO(TypedDict):
    """Summary of tracked predictions"""

    total_predictions: int
    average_confidence: float
    tokens_tracked: int
    evaluated_predictions: int
    correct_predictions: int
    accuracy: float | None
