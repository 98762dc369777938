"""Volume Score Calculator

Spike detection (3x average is the key momentum threshold), buy/sell
pressure, sustainability over a rolling window of real volume samples,
liquidity and relative volume mapped to a 0-100 sub-score.
"""

import logging
from datetime import datetime, timezone

import numpy as np
from injector import inject

from libs.rating.src.domain.services.context_defaults import get_market_context
from libs.shared.src.constants.rating_weights import NEUTRAL_SCORE
from libs.shared.src.domain.services.clamp import clamp
from libs.shared.src.domain.services.winsorization import coefficient_of_variation
from libs.shared.src.dtos.rating.analysis_context_dto import AnalysisContextDTO
from libs.shared.src.dtos.rating.factor_analysis_dto import DetailedAnalysisDTO
from libs.shared.src.dtos.rating.volume_analysis_dto import (
    VolumeAnalysisDTO,
    VolumeProfileDTO,
)
from libs.shared.src.enums.market_trend import MarketTrend

VOLUME_WEIGHTS = {
    "spike": 0.28,
    "pressure": 0.25,
    "sustainability": 0.20,
    "liquidity": 0.17,
    "relative": 0.10,
}

SUSTAINABILITY_WINDOW = 20  # most recent samples considered
SPIKE_SAMPLE_RATIO = 2.0  # sample >= 2x window median counts as a spike
ELEVATED_SAMPLE_RATIO = 1.5  # sample >= 1.5x window median counts as elevated
MIN_CONSISTENCY = 0.2


def calculate_spike_score(volume_spike: bool, spike_factor: float) -> float:
    """Spike sub-score

    Flagged: 10x -> 98, 5x -> 90, 3x -> 82, 2x -> 68, else 55, with a
    manipulation penalty above 20x. Unflagged volume is scored on the
    ratio alone.
    """
    if volume_spike:
        if spike_factor >= 10:
            score = 98.0
        elif spike_factor >= 5:
            score = 90.0
        elif spike_factor >= 3:
            score = 82.0
        elif spike_factor >= 2:
            score = 68.0
        else:
            score = 55.0

        if spike_factor > 20:
            score -= min(15.0, (spike_factor - 20) * 0.5)
    elif spike_factor >= 1.5:
        score = 60.0
    elif spike_factor >= 1.2:
        score = 55.0
    elif spike_factor >= 0.8:
        score = 50.0
    elif spike_factor >= 0.5:
        score = 40.0
    else:
        score = 25.0

    return clamp(score)


def calculate_liquidity_score(liquidity: float) -> float:
    """Non-linear liquidity curve rewarding deep markets"""
    if liquidity >= 80:
        score = 85 + (liquidity - 80) * 0.75
    elif liquidity >= 60:
        score = 70 + (liquidity - 60) * 0.75
    elif liquidity >= 40:
        score = 50 + (liquidity - 40) * 1.0
    elif liquidity >= 20:
        score = 25 + (liquidity - 20) * 1.25
    else:
        score = liquidity * 1.25

    return clamp(score)


def calculate_pressure_score(profile: VolumeProfileDTO) -> float:
    """Net flow first, then absolute buy/sell pressure and their ratio"""
    buy = profile["buy_pressure"]
    sell = profile["sell_pressure"]
    net_flow = profile["net_flow"]

    if net_flow > 0.6:
        score = 85 + min(15.0, net_flow * 15)
    elif net_flow > 0.3:
        score = 70 + (net_flow - 0.3) * 50
    elif net_flow > 0.1:
        score = 55 + (net_flow - 0.1) * 75
    elif net_flow > -0.1:
        score = 45 + net_flow * 100
    elif net_flow > -0.3:
        score = 30 + (net_flow + 0.3) * 75
    elif net_flow > -0.6:
        score = 15 + (net_flow + 0.6) * 50
    else:
        score = max(5.0, 15 + net_flow * 15)

    if buy > 0.7:
        score += 5
    elif buy < 0.3:
        score -= 5

    if sell > 0.8:
        score -= 8
    elif sell < 0.2:
        score += 3

    ratio = buy / max(sell, 0.01)
    if ratio > 3:
        score += 5
    elif ratio < 0.33:
        score -= 5

    return clamp(score)


def calculate_relative_volume_score(current: float, average: float) -> float:
    if average <= 0:
        return 30.0  # no baseline

    ratio = current / average
    if ratio >= 5:
        score = 90 + min(10.0, (ratio - 5) * 2)
    elif ratio >= 3:
        score = 80 + (ratio - 3) * 5
    elif ratio >= 2:
        score = 70 + (ratio - 2) * 10
    elif ratio >= 1.5:
        score = 60 + (ratio - 1.5) * 20
    elif ratio >= 1:
        score = 50 + (ratio - 1) * 20
    elif ratio >= 0.7:
        score = 40 + (ratio - 0.7) * 33
    elif ratio >= 0.4:
        score = 25 + (ratio - 0.4) * 50
    else:
        score = max(5.0, ratio * 62.5)

    return clamp(score)


def volume_samples(context: AnalysisContextDTO) -> list[float]:
    """Recent volume samples, oldest first

    The momentum history store fills volume_history; chart candles are
    the fallback.
    """
    history = context.get("volume_history") or []
    if history:
        return [float(v) for v in history if v is not None]
    return [
        float(point["volume"])
        for point in context.get("chart_data") or []
        if point.get("volume") is not None
    ]


def count_recent_spikes(samples: list[float]) -> int:
    """Samples in the window at or above 2x the window median"""
    window = np.asarray(samples[-SUSTAINABILITY_WINDOW:], dtype=float)
    if window.size < 3:
        return 0
    baseline = np.median(window)
    if baseline <= 0:
        return 0
    return int(np.sum(window >= baseline * SPIKE_SAMPLE_RATIO))


def count_persistent_periods(samples: list[float]) -> int:
    """Trailing run of elevated samples, newest backwards"""
    window = samples[-SUSTAINABILITY_WINDOW:]
    if len(window) < 3:
        return 0
    baseline = float(np.median(window))
    if baseline <= 0:
        return 0

    run = 0
    for sample in reversed(window):
        if sample < baseline * ELEVATED_SAMPLE_RATIO:
            break
        run += 1
    return run


def calculate_volume_consistency(samples: list[float]) -> float:
    """1 - coefficient of variation over the window, floored at 0.2"""
    window = samples[-SUSTAINABILITY_WINDOW:]
    if len(window) < 3:
        return MIN_CONSISTENCY
    return clamp(1 - coefficient_of_variation(window), MIN_CONSISTENCY, 1.0)


def _latest_hour(context: AnalysisContextDTO) -> int | None:
    chart = context.get("chart_data") or []
    if not chart:
        return None
    timestamp = chart[-1].get("timestamp")
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc).hour


def calculate_sustainability_score(
    volume: VolumeAnalysisDTO, context: AnalysisContextDTO
) -> float:
    """Whether a spike is backed by a real run of elevated volume"""
    score = 50.0
    spike = volume["volume_spike"]
    samples = volume_samples(context)

    if spike:
        recent_spikes = count_recent_spikes(samples)
        if recent_spikes > 3:
            score += 18
        elif recent_spikes > 1:
            score += 10
        else:
            score -= 3  # momentum can start with an isolated spike

        persistent = count_persistent_periods(samples)
        if persistent >= 3:
            score += 25
        elif persistent >= 2:
            score += 12

        score += calculate_volume_consistency(samples) * 22

    # hour of the latest candle, not the wall clock
    hour = _latest_hour(context)
    if hour is not None:
        if 9 <= hour <= 16:
            score += 5
        elif 0 <= hour <= 4:
            score -= 3

    overall_trend = get_market_context(context)["overall_trend"]
    if overall_trend == MarketTrend.BULL.value:
        score += 8
    elif overall_trend == MarketTrend.BEAR.value:
        score -= 5

    if spike and volume["liquidity_score"] > 70:
        score += 10
    elif spike and volume["liquidity_score"] < 30:
        score -= 8

    return clamp(score)


def _factor_scores(
    volume: VolumeAnalysisDTO, context: AnalysisContextDTO
) -> dict[str, float]:
    return {
        "spike": calculate_spike_score(
            volume["volume_spike"], volume["volume_spike_factor"]
        ),
        "pressure": calculate_pressure_score(volume["volume_profile"]),
        "sustainability": calculate_sustainability_score(volume, context),
        "liquidity": calculate_liquidity_score(volume["liquidity_score"]),
        "relative": calculate_relative_volume_score(
            volume["current_volume"], volume["average_volume"]
        ),
    }


def calculate_volume_score(
    volume: VolumeAnalysisDTO, context: AnalysisContextDTO
) -> float:
    """Weighted volume sub-score (0-100)"""
    scores = _factor_scores(volume, context)
    return clamp(sum(scores[key] * weight for key, weight in VOLUME_WEIGHTS.items()))


def _spike_signal(volume_spike: bool, factor: float) -> str:
    if not volume_spike:
        return "NORMAL"
    if factor >= 10:
        return "EXCEPTIONAL"
    if factor >= 5:
        return "VERY_HIGH"
    if factor >= 3:
        return "HIGH"
    if factor >= 2:
        return "MODERATE"
    return "MINOR"


def _liquidity_signal(liquidity: float) -> str:
    if liquidity >= 80:
        return "EXCELLENT"
    if liquidity >= 60:
        return "GOOD"
    if liquidity >= 40:
        return "MODERATE"
    if liquidity >= 20:
        return "LOW"
    return "VERY_LOW"


def _pressure_signal(net_flow: float) -> str:
    if net_flow > 0.6:
        return "STRONG_BUY"
    if net_flow > 0.3:
        return "MODERATE_BUY"
    if net_flow > 0.1:
        return "SLIGHT_BUY"
    if net_flow > -0.1:
        return "BALANCED"
    if net_flow > -0.3:
        return "SLIGHT_SELL"
    if net_flow > -0.6:
        return "MODERATE_SELL"
    return "STRONG_SELL"


def _relative_signal(ratio: float) -> str:
    if ratio >= 5:
        return "EXCEPTIONAL"
    if ratio >= 3:
        return "VERY_HIGH"
    if ratio >= 2:
        return "HIGH"
    if ratio >= 1.5:
        return "ABOVE_AVERAGE"
    if ratio >= 0.7:
        return "NORMAL"
    if ratio >= 0.4:
        return "BELOW_AVERAGE"
    return "LOW"


def format_volume(volume: float) -> str:
    if volume >= 1e9:
        return f"{volume / 1e9:.1f}B"
    if volume >= 1e6:
        return f"{volume / 1e6:.1f}M"
    if volume >= 1e3:
        return f"{volume / 1e3:.1f}K"
    return f"{volume:.0f}"


def _sustainability_description(score: float, volume_spike: bool) -> str:
    if not volume_spike:
        return f"Volume pattern sustainability: {score:.1f}/100"
    if score > 70:
        return "Volume spike appears sustainable with strong fundamentals"
    if score > 50:
        return "Volume spike has moderate sustainability indicators"
    return "Volume spike sustainability is questionable"


def analyze_volume(
    volume: VolumeAnalysisDTO, context: AnalysisContextDTO
) -> DetailedAnalysisDTO:
    """Factor-by-factor explanation of the volume sub-score"""
    scores = _factor_scores(volume, context)
    spike = volume["volume_spike"]
    factor = volume["volume_spike_factor"]
    liquidity = volume["liquidity_score"]
    profile = volume["volume_profile"]
    ratio = volume["current_volume"] / max(volume["average_volume"], 1)
    sustainability = scores["sustainability"]

    if sustainability > 70:
        sustainability_signal = "SUSTAINABLE"
    elif sustainability > 50:
        sustainability_signal = "MODERATE"
    else:
        sustainability_signal = "WEAK"

    spike_text = "Volume spike detected" if spike else "Normal volume activity"
    depth = _liquidity_signal(liquidity).lower().replace("_", " ")

    return {
        "score": clamp(sum(scores[k] * w for k, w in VOLUME_WEIGHTS.items())),
        "factors": {
            "spike": {
                "score": scores["spike"],
                "signal": _spike_signal(spike, factor),
                "description": f"{spike_text}: {factor:.1f}x average volume",
                "weight": VOLUME_WEIGHTS["spike"],
            },
            "liquidity": {
                "score": scores["liquidity"],
                "signal": _liquidity_signal(liquidity),
                "description": f"{liquidity:.1f}/100 liquidity score - {depth} market depth",
                "weight": VOLUME_WEIGHTS["liquidity"],
            },
            "pressure": {
                "score": scores["pressure"],
                "signal": _pressure_signal(profile["net_flow"]),
                "description": (
                    f"Buy: {profile['buy_pressure'] * 100:.1f}%, "
                    f"Sell: {profile['sell_pressure'] * 100:.1f}%, "
                    f"Net: {profile['net_flow'] * 100:.1f}%"
                ),
                "weight": VOLUME_WEIGHTS["pressure"],
            },
            "sustainability": {
                "score": sustainability,
                "signal": sustainability_signal,
                "description": _sustainability_description(sustainability, spike),
                "weight": VOLUME_WEIGHTS["sustainability"],
            },
            "relative": {
                "score": scores["relative"],
                "signal": _relative_signal(ratio),
                "description": (
                    f"{ratio:.1f}x average volume ({format_volume(volume['current_volume'])}"
                    f" vs {format_volume(volume['average_volume'])} avg)"
                ),
                "weight": VOLUME_WEIGHTS["relative"],
            },
        },
    }


class VolumeScoreCalculator:
    """Volume sub-score (Domain Service)"""

    @inject
    def __init__(self) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)

    def calculate(self, volume: VolumeAnalysisDTO, context: AnalysisContextDTO) -> float:
        try:
            return calculate_volume_score(volume, context)
        except Exception as e:
            self._logger.error(f"Volume score calculation failed: {e}")
            return float(NEUTRAL_SCORE)

    def get_detailed_analysis(
        self, volume: VolumeAnalysisDTO, context: AnalysisContextDTO
    ) -> DetailedAnalysisDTO:
        return analyze_volume(volume, context)
