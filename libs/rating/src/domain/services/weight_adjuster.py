"""Weight Adjuster

Adaptive re-weighting of the rating components for the current market
regime. Pure functions; the engine's configured weights are never mutated.
"""

from libs.shared.src.constants.rating_weights import (
    EXCEPTIONAL_VOLUME_SCORE,
    EXCEPTIONAL_VOLUME_SHIFT,
    HIGH_VOLATILITY_INDEX,
    HIGH_VOLATILITY_RISK_SHIFT,
    TRENDING_TECHNICAL_SHIFT,
    WEIGHT_SUM_TOLERANCE,
)
from libs.shared.src.dtos.rating.analysis_context_dto import MarketContextDTO
from libs.shared.src.dtos.rating.rating_engine_config_dto import RatingWeightsDTO
from libs.shared.src.dtos.rating.score_components_dto import ScoreComponentsDTO
from libs.shared.src.enums.market_trend import MarketTrend

REQUIRED_WEIGHT_KEYS = (
    "technical",
    "momentum",
    "volume",
    "risk",
    "multi_timeframe",
    "consecutive_momentum",
)


def normalize_weights(weights: RatingWeightsDTO) -> RatingWeightsDTO:
    total = sum(weights.values())
    if total <= 0:
        return dict(weights)
    return {name: value / total for name, value in weights.items()}


def adjust_weights(
    base: RatingWeightsDTO,
    market_context: MarketContextDTO,
    scores: ScoreComponentsDTO,
) -> RatingWeightsDTO:
    """Shift weight toward the components that matter in this regime

    - Trending market (bull or bear): technical +5%, momentum and volume -2.5% each
    - Volatility index above 70: risk +5%, technical -3%, momentum -2%
    - Volume score above 85: volume +5%, technical -3%, momentum -2%

    The result is renormalized over every weight so it sums to 1.0.
    """
    adjusted: RatingWeightsDTO = dict(base)

    if market_context["overall_trend"] != MarketTrend.SIDEWAYS.value:
        adjusted["technical"] += TRENDING_TECHNICAL_SHIFT
        adjusted["momentum"] -= TRENDING_TECHNICAL_SHIFT / 2
        adjusted["volume"] -= TRENDING_TECHNICAL_SHIFT / 2

    if market_context["volatility_index"] > HIGH_VOLATILITY_INDEX:
        adjusted["risk"] += HIGH_VOLATILITY_RISK_SHIFT
        adjusted["technical"] -= 0.03
        adjusted["momentum"] -= 0.02

    if scores["volume"] > EXCEPTIONAL_VOLUME_SCORE:
        adjusted["volume"] += EXCEPTIONAL_VOLUME_SHIFT
        adjusted["technical"] -= 0.03
        adjusted["momentum"] -= 0.02

    return normalize_weights(adjusted)


def validate_weights(weights: RatingWeightsDTO) -> list[str]:
    """Errors for missing, negative or unnormalized weights"""
    errors = []

    missing = [key for key in REQUIRED_WEIGHT_KEYS if key not in weights]
    if missing:
        errors.append(f"Missing weights: {', '.join(missing)}")

    for name, value in weights.items():
        if value < 0:
            errors.append(f"Weight '{name}' must be non-negative, got {value}")

    total = sum(weights.values())
    if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
        errors.append(f"Weights must sum to 1.0, got {total:.3f}")

    return errors
