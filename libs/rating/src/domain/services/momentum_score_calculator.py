"""Momentum Score Calculator

Trend direction and strength, rate of change, volatility (controlled
volatility is good), price action patterns and support/resistance
proximity mapped to a 0-100 sub-score.
"""

import logging

from injector import inject

from libs.rating.src.domain.services.context_defaults import get_market_context
from libs.shared.src.constants.rating_weights import NEUTRAL_SCORE
from libs.shared.src.domain.services.clamp import clamp
from libs.shared.src.dtos.rating.analysis_context_dto import AnalysisContextDTO
from libs.shared.src.dtos.rating.factor_analysis_dto import DetailedAnalysisDTO
from libs.shared.src.dtos.rating.momentum_analysis_dto import (
    MomentumAnalysisDTO,
    PriceActionDTO,
)
from libs.shared.src.enums.market_trend import MarketTrend
from libs.shared.src.enums.trend_direction import TrendDirection

MOMENTUM_WEIGHTS = {
    "trend": 0.30,
    "momentum": 0.25,
    "price_action": 0.20,
    "volatility": 0.15,
    "levels": 0.10,
}


def calculate_trend_score(trend: str, strength: float) -> float:
    """Bullish strength lifts toward 100, bearish strength cuts up to 60%"""
    multiplier = min(strength / 100, 1.0)

    if trend == TrendDirection.BULLISH.value:
        score = 75.0
        score += (100 - score) * multiplier
    elif trend == TrendDirection.BEARISH.value:
        score = 25.0
        score *= 1 - multiplier * 0.6
    else:
        # neutral trends prefer moderate (40%) strength
        score = 50.0 + (20 - abs(multiplier - 0.4) * 30)

    return clamp(score)


def calculate_rate_of_change_score(momentum: float) -> float:
    """Rate-of-change sub-score, sweet spot 0.5-2.0, penalty beyond 5.0"""
    magnitude = abs(momentum)

    if momentum > 0:
        score = 60 + min(40.0, magnitude * 2)
    elif momentum < 0:
        score = 40 - min(35.0, magnitude * 1.5)
    else:
        score = 45.0

    if 0.5 < magnitude < 2.0:
        score += 5
    elif magnitude > 5.0:
        score -= 10

    return clamp(score)


def calculate_volatility_score(volatility: float) -> float:
    """Optimal volatility band is 5-25%"""
    if volatility < 5:
        score = 30 + volatility * 4
    elif volatility <= 25:
        score = 70 + (25 - volatility) * 1.2
    elif volatility <= 50:
        score = 60 - (volatility - 25) * 0.8
    else:
        score = max(10.0, 40 - (volatility - 50) * 0.5)

    return clamp(score)


def infer_trend_from_context(context: AnalysisContextDTO) -> str:
    sentiment = get_market_context(context)["market_sentiment"]
    if sentiment > 60:
        return TrendDirection.BULLISH.value
    if sentiment < 40:
        return TrendDirection.BEARISH.value
    return TrendDirection.NEUTRAL.value


def calculate_price_action_score(
    price_action: PriceActionDTO, context: AnalysisContextDTO
) -> float:
    """Breakout potential, consolidation, reversal and market regime"""
    breakout = price_action["breakout_potential"]
    score = 50 + breakout * 30

    if price_action["consolidation"]:
        if breakout > 0.6:
            score += 15
        elif breakout > 0.3:
            score += 8
        else:
            score -= 5
    elif breakout > 0.7:
        score += 10
    else:
        score -= 3

    if price_action["reversal_signal"]:
        prevailing = infer_trend_from_context(context)
        if prevailing == TrendDirection.BEARISH.value:
            score += 20
        elif prevailing == TrendDirection.BULLISH.value:
            score -= 15
        else:
            score += 5

    overall_trend = get_market_context(context)["overall_trend"]
    if overall_trend == MarketTrend.BULL.value:
        score += 5
    elif overall_trend == MarketTrend.BEAR.value:
        score -= 8

    return clamp(score)


def _nearest_support(support: list[float], price: float) -> float:
    nearest = support[0]
    for level in support:
        if abs(price - level) < abs(price - nearest) and level < price:
            nearest = level
    return nearest


def _nearest_resistance(resistance: list[float], price: float) -> float:
    nearest = resistance[0]
    for level in resistance:
        if abs(price - level) < abs(price - nearest) and level > price:
            nearest = level
    return nearest


def calculate_levels_score(
    support: list[float], resistance: list[float], price: float
) -> float:
    """Support/resistance proximity sub-score"""
    score = 50.0

    if price <= 0:
        # no distances without a price
        return clamp(score - 5 if len(support) + len(resistance) < 2 else score)

    if support:
        distance = (price - _nearest_support(support, price)) / price
        if 0 < distance < 0.05:
            score += 20
        elif 0 < distance < 0.10:
            score += 10
        elif distance > 0.20:
            score -= 5

    if resistance:
        distance = (_nearest_resistance(resistance, price) - price) / price
        if 0 < distance < 0.03:
            score -= 15  # likely rejection
        elif 0 < distance < 0.08:
            score -= 5
        elif distance > 0.15:
            score += 8

    broken = [level for level in resistance if price > level]
    score += len(broken) * 8

    total_levels = len(support) + len(resistance)
    if total_levels > 3:
        score += 5
    elif total_levels < 2:
        score -= 5

    return clamp(score)


def _factor_scores(
    momentum: MomentumAnalysisDTO, context: AnalysisContextDTO
) -> dict[str, float]:
    price = context["token_data"].get("price", 0.0)
    return {
        "trend": calculate_trend_score(momentum["trend"], momentum["strength"]),
        "momentum": calculate_rate_of_change_score(momentum["momentum"]),
        "volatility": calculate_volatility_score(momentum["volatility"]),
        "price_action": calculate_price_action_score(momentum["price_action"], context),
        "levels": calculate_levels_score(
            momentum.get("support", []), momentum.get("resistance", []), price
        ),
    }


def calculate_momentum_score(
    momentum: MomentumAnalysisDTO, context: AnalysisContextDTO
) -> float:
    """Weighted momentum sub-score (0-100)"""
    scores = _factor_scores(momentum, context)
    return clamp(sum(scores[key] * weight for key, weight in MOMENTUM_WEIGHTS.items()))


def _volatility_signal(volatility: float) -> str:
    if volatility < 5:
        return "LOW"
    if volatility <= 25:
        return "OPTIMAL"
    if volatility <= 50:
        return "HIGH"
    return "EXTREME"


def _rate_signal(momentum: float) -> str:
    if momentum > 0.5:
        return "STRONG"
    if momentum > 0:
        return "POSITIVE"
    if momentum > -0.5:
        return "WEAK"
    return "NEGATIVE"


def _price_action_description(price_action: PriceActionDTO) -> str:
    breakout = price_action["breakout_potential"] * 100
    patterns = []
    if price_action["consolidation"]:
        patterns.append(f"consolidation ({breakout:.0f}% breakout potential)")
    if price_action["reversal_signal"]:
        patterns.append("reversal signal detected")
    if not patterns:
        patterns.append(f"{breakout:.0f}% breakout potential")
    return ", ".join(patterns)


def _levels_description(support: list[float], resistance: list[float], price: float) -> str:
    descriptions = []
    below = next((level for level in support if level < price), None)
    if below and price > 0:
        descriptions.append(f"{(price - below) / price * 100:.1f}% above nearest support")
    above = next((level for level in resistance if level > price), None)
    if above and price > 0:
        descriptions.append(f"{(above - price) / price * 100:.1f}% below nearest resistance")
    if descriptions:
        return ", ".join(descriptions)
    return f"{len(support)} support, {len(resistance)} resistance levels identified"


def analyze_momentum(
    momentum: MomentumAnalysisDTO, context: AnalysisContextDTO
) -> DetailedAnalysisDTO:
    """Factor-by-factor explanation of the momentum sub-score"""
    scores = _factor_scores(momentum, context)
    price = context["token_data"].get("price", 0.0)
    trend = momentum["trend"]
    strength = momentum["strength"]

    if strength > 70:
        strength_level = "STRONG"
    elif strength > 40:
        strength_level = "MODERATE"
    else:
        strength_level = "WEAK"

    if scores["price_action"] > 70:
        price_action_signal = "BULLISH"
    elif scores["price_action"] > 50:
        price_action_signal = "NEUTRAL"
    else:
        price_action_signal = "BEARISH"

    if scores["levels"] > 65:
        levels_signal = "FAVORABLE"
    elif scores["levels"] > 45:
        levels_signal = "NEUTRAL"
    else:
        levels_signal = "CHALLENGING"

    direction = "Upward" if momentum["momentum"] > 0 else "Downward"
    volatility = momentum["volatility"]

    return {
        "score": clamp(sum(scores[k] * w for k, w in MOMENTUM_WEIGHTS.items())),
        "factors": {
            "trend": {
                "score": scores["trend"],
                "signal": f"{strength_level} {trend.upper()}",
                "description": f"{trend.capitalize()} trend with {strength:.1f}% strength",
                "weight": MOMENTUM_WEIGHTS["trend"],
            },
            "momentum": {
                "score": scores["momentum"],
                "signal": _rate_signal(momentum["momentum"]),
                "description": f"{direction} momentum at {momentum['momentum'] * 100:.1f}% rate of change",
                "weight": MOMENTUM_WEIGHTS["momentum"],
            },
            "volatility": {
                "score": scores["volatility"],
                "signal": _volatility_signal(volatility),
                "description": f"{volatility:.1f}% volatility - {_volatility_signal(volatility).lower()} range for momentum trading",
                "weight": MOMENTUM_WEIGHTS["volatility"],
            },
            "price_action": {
                "score": scores["price_action"],
                "signal": price_action_signal,
                "description": _price_action_description(momentum["price_action"]),
                "weight": MOMENTUM_WEIGHTS["price_action"],
            },
            "levels": {
                "score": scores["levels"],
                "signal": levels_signal,
                "description": _levels_description(
                    momentum.get("support", []), momentum.get("resistance", []), price
                ),
                "weight": MOMENTUM_WEIGHTS["levels"],
            },
        },
    }


class MomentumScoreCalculator:
    """Momentum sub-score (Domain Service)"""

    @inject
    def __init__(self) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)

    def calculate(
        self, momentum: MomentumAnalysisDTO, context: AnalysisContextDTO
    ) -> float:
        try:
            return calculate_momentum_score(momentum, context)
        except Exception as e:
            self._logger.error(f"Momentum score calculation failed: {e}")
            return float(NEUTRAL_SCORE)

    def get_detailed_analysis(
        self, momentum: MomentumAnalysisDTO, context: AnalysisContextDTO
    ) -> DetailedAnalysisDTO:
        return analyze_momentum(momentum, context)
