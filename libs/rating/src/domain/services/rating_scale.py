"""Rating Scale

Composite score -> 1-10 rating: logistic scaling, bucketing, smoothing
against the previous rating and the final recommendation.
"""

import math

from libs.shared.src.constants.rating_weights import LOGISTIC_STEEPNESS
from libs.shared.src.enums.recommendation import Recommendation

# (minimum scaled score, rating), checked top-down
RATING_BUCKETS = (
    (95, 10),
    (85, 9),
    (75, 8),
    (65, 7),
    (55, 6),
    (45, 5),
    (35, 4),
    (25, 3),
    (15, 2),
)
MIN_RATING = 1
MIN_RECOMMENDATION_CONFIDENCE = 50


def apply_non_linear_scaling(score: float) -> float:
    """Logistic curve centred on 50, compresses the extremes"""
    normalized = score / 100
    return 100 / (1 + math.exp(-LOGISTIC_STEEPNESS * (normalized - 0.5)))


def convert_to_rating_scale(scaled_score: float) -> int:
    for minimum, rating in RATING_BUCKETS:
        if scaled_score >= minimum:
            return rating
    return MIN_RATING


def round_one_decimal(value: float) -> float:
    return math.floor(value * 10 + 0.5) / 10


def apply_smoothing(
    rating: float, previous_rating: float | None, smoothing_factor: float
) -> float:
    """Exponential smoothing toward the previous rating

    smoothing_factor is the weight of the previous rating. Without a
    previous rating the value passes through unchanged.
    """
    if previous_rating is None:
        return rating
    smoothed = rating * (1 - smoothing_factor) + previous_rating * smoothing_factor
    return round_one_decimal(smoothed)


def determine_recommendation(rating: float, confidence: float) -> str:
    if confidence < MIN_RECOMMENDATION_CONFIDENCE:
        return Recommendation.HOLD.value

    if rating >= 8:
        return Recommendation.STRONG_BUY.value
    if rating >= 7:
        return Recommendation.BUY.value
    if rating >= 5:
        return Recommendation.HOLD.value
    if rating >= 3:
        return Recommendation.SELL.value
    return Recommendation.STRONG_SELL.value
