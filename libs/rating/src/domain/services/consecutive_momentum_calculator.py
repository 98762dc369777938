"""Consecutive Momentum Calculator

Tracks runs of 15-minute periods with the same directional momentum and
turns the run length into a bounded bonus: 0% for one period, 15% for
two, 25% for three or more. The chain lives in the momentum history
store; with the null store the tracker is disabled.
"""

import logging

from injector import inject

from libs.rating.src.ports.momentum_history_store_port import (
    MomentumHistoryStorePort,
)
from libs.shared.src.constants.momentum_streak import (
    DIMINISHING_RETURNS_FACTOR,
    MAX_BOOST_PERCENTAGE,
    MAX_PERIOD_GAP_MINUTES,
    MIN_STRENGTH_THRESHOLD,
    RSI_EXHAUSTION_THRESHOLD,
    SECOND_PERIOD_BONUS,
    STREAK_HISTORY_LIMIT,
    STREAK_INTERVAL_MINUTES,
    STREAK_TIMEFRAME,
    STRENGTH_BREAK_DROP,
    VOLUME_CONFIRMATION_RATIO,
    VOLUME_CONFIRMATION_REQUIRED,
)
from libs.shared.src.dtos.rating.analysis_context_dto import AnalysisContextDTO
from libs.shared.src.dtos.rating.consecutive_momentum_dto import (
    ConsecutiveMomentumConfigDTO,
    ConsecutiveMomentumResultDTO,
    CurrentMomentumAnalysisDTO,
    MomentumPeriodDTO,
)
from libs.shared.src.enums.trend_direction import TrendDirection

MINUTE_MS = 60 * 1000
EXTREME_EXHAUSTION_RSI = 90  # exhausted periods above this never count
MACD_EXHAUSTION_HISTOGRAM = 0.005

DEFAULT_STREAK_CONFIG: ConsecutiveMomentumConfigDTO = {
    "interval_minutes": STREAK_INTERVAL_MINUTES,
    "max_boost_percentage": MAX_BOOST_PERCENTAGE,
    "exhaustion_threshold": RSI_EXHAUSTION_THRESHOLD,
    "volume_confirmation_required": VOLUME_CONFIRMATION_REQUIRED,
    "min_strength_threshold": MIN_STRENGTH_THRESHOLD,
}


def interval_start(timestamp: float, interval_minutes: int) -> float:
    interval_ms = interval_minutes * MINUTE_MS
    return float(int(timestamp // interval_ms) * interval_ms)


def is_volume_confirmed(analysis: CurrentMomentumAnalysisDTO) -> bool:
    if analysis["average_volume"] <= 0:
        return False
    return analysis["volume"] / analysis["average_volume"] >= VOLUME_CONFIRMATION_RATIO


def detect_exhaustion_risk(
    analysis: CurrentMomentumAnalysisDTO | MomentumPeriodDTO, threshold: float
) -> bool:
    direction = analysis["trend_direction"]
    if direction == TrendDirection.BULLISH.value and analysis["rsi"] > threshold:
        return True
    if direction == TrendDirection.BEARISH.value and analysis["rsi"] < 100 - threshold:
        return True
    return abs(analysis["macd_histogram"]) < MACD_EXHAUSTION_HISTOGRAM


def create_period(
    analysis: CurrentMomentumAnalysisDTO,
    period_index: int,
    config: ConsecutiveMomentumConfigDTO,
) -> MomentumPeriodDTO:
    return {
        "period_index": period_index,
        "timestamp": interval_start(analysis["timestamp"], config["interval_minutes"]),
        "rsi": analysis["rsi"],
        "macd_histogram": analysis["macd_histogram"],
        "volume": analysis["volume"],
        "volume_confirmed": is_volume_confirmed(analysis),
        "trend_direction": analysis["trend_direction"],
        "strength": analysis["strength"],
        "exhaustion_risk": detect_exhaustion_risk(
            analysis, config["exhaustion_threshold"]
        ),
    }


def is_period_valid(period: MomentumPeriodDTO, config: ConsecutiveMomentumConfigDTO) -> bool:
    if period["strength"] < config["min_strength_threshold"]:
        return False
    if period["trend_direction"] == TrendDirection.NEUTRAL.value:
        return False
    if config["volume_confirmation_required"] and not period["volume_confirmed"]:
        return False
    return not (period["exhaustion_risk"] and period["rsi"] > EXTREME_EXHAUSTION_RSI)


def should_reset_for_trend_break(
    current: CurrentMomentumAnalysisDTO, history: list[MomentumPeriodDTO]
) -> bool:
    """Direction flip, strength collapse, RSI swing or a stale chain"""
    if not history:
        return False

    last = history[-1]
    if (
        last["trend_direction"] != current["trend_direction"]
        and current["trend_direction"] != TrendDirection.NEUTRAL.value
    ):
        return True

    if last["strength"] - current["strength"] > STRENGTH_BREAK_DROP:
        return True

    if (last["rsi"] > 70 and current["rsi"] < 30) or (
        last["rsi"] < 30 and current["rsi"] > 70
    ):
        return True

    return current["timestamp"] - last["timestamp"] > MAX_PERIOD_GAP_MINUTES * MINUTE_MS


def count_streak(
    periods: list[MomentumPeriodDTO], config: ConsecutiveMomentumConfigDTO
) -> list[MomentumPeriodDTO]:
    """Trailing run of valid periods sharing the latest direction

    Walks backward from the newest period and stops at a direction flip,
    an invalid period or a strength drop beyond the break threshold.
    """
    if not periods:
        return []

    direction = periods[-1]["trend_direction"]
    streak: list[MomentumPeriodDTO] = []
    for period in reversed(periods):
        if period["trend_direction"] != direction or not is_period_valid(period, config):
            break
        if streak and period["strength"] - streak[-1]["strength"] > STRENGTH_BREAK_DROP:
            break
        streak.append(period)

    streak.reverse()
    return streak


def has_exhaustion_warning(periods: list[MomentumPeriodDTO]) -> bool:
    if len(periods) < 2:
        return False
    return sum(1 for p in periods[-3:] if p["exhaustion_risk"]) >= 2


def has_rsi_exhaustion(periods: list[MomentumPeriodDTO], threshold: float) -> bool:
    if len(periods) < 2:
        return False
    return all(
        (p["trend_direction"] == TrendDirection.BULLISH.value and p["rsi"] > threshold)
        or (p["trend_direction"] == TrendDirection.BEARISH.value and p["rsi"] < 100 - threshold)
        for p in periods[-2:]
    )


def calculate_streak_bonus(
    periods: list[MomentumPeriodDTO],
    config: ConsecutiveMomentumConfigDTO,
    trend_break_reset: bool = False,
) -> ConsecutiveMomentumResultDTO:
    count = len(periods)
    reasoning = []

    bonus = 0.0
    if count >= 2:
        bonus = float(SECOND_PERIOD_BONUS)
        reasoning.append(f"2nd consecutive momentum period detected (+{SECOND_PERIOD_BONUS}% bonus)")
    if count >= 3:
        bonus = float(config["max_boost_percentage"])
        reasoning.append(
            f"{count} consecutive periods - maximum momentum bonus (+{bonus:g}%)"
        )

    if has_rsi_exhaustion(periods, config["exhaustion_threshold"]) and bonus > SECOND_PERIOD_BONUS:
        bonus = float(SECOND_PERIOD_BONUS)
        reasoning.append(
            f"RSI exhaustion detected - momentum bonus capped at {SECOND_PERIOD_BONUS}%"
        )

    diminishing_returns = count > 3
    if diminishing_returns:
        bonus *= DIMINISHING_RETURNS_FACTOR
        reasoning.append("Diminishing returns applied to extended momentum sequence")

    if count == 0:
        reasoning.append("No consecutive momentum periods detected")
    elif count == 1:
        reasoning.append("Single momentum period - no bonus applied")

    if trend_break_reset:
        reasoning.append("Trend break detected - momentum streak reset")

    exhaustion_warning = has_exhaustion_warning(periods)
    if exhaustion_warning:
        reasoning.append("Exhaustion warning: momentum showing signs of fatigue")

    return {
        "consecutive_count": count,
        "bonus_percentage": bonus,
        "score_boost": bonus,
        "exhaustion_warning": exhaustion_warning,
        "trend_break_reset": trend_break_reset,
        "diminishing_returns": diminishing_returns,
        "reasoning": reasoning,
        "periods": periods,
    }


def empty_streak_result(reason: str) -> ConsecutiveMomentumResultDTO:
    return {
        "consecutive_count": 0,
        "bonus_percentage": 0.0,
        "score_boost": 0.0,
        "exhaustion_warning": False,
        "trend_break_reset": False,
        "diminishing_returns": False,
        "reasoning": [reason],
        "periods": [],
    }


class ConsecutiveMomentumCalculator:
    """Streak tracker (Domain Service)

    Reads and writes the momentum history store; callers serialize calls
    for the same token.
    """

    @inject
    def __init__(self, momentum_history_store: MomentumHistoryStorePort) -> None:
        self._store = momentum_history_store
        self._logger = logging.getLogger(self.__class__.__name__)
        self._config: ConsecutiveMomentumConfigDTO = {**DEFAULT_STREAK_CONFIG}

    def calculate_bonus(
        self,
        current: CurrentMomentumAnalysisDTO,
        context: AnalysisContextDTO,
    ) -> ConsecutiveMomentumResultDTO:
        token_address = (context.get("token_data") or {}).get("address", "unknown")

        if not self._store.is_enabled():
            return empty_streak_result(
                "Momentum history store disabled - no streak tracking"
            )

        try:
            history = self._store.get_periods(
                token_address, STREAK_TIMEFRAME, STREAK_HISTORY_LIMIT
            )

            trend_break = should_reset_for_trend_break(current, history)
            if trend_break:
                self._logger.debug(f"Trend break for {token_address}, resetting streak")
                self._store.reset_streak(token_address, STREAK_TIMEFRAME)
                history = []

            period = create_period(current, len(history), self._config)
            if is_period_valid(period, self._config):
                chain = self._store.append_and_get_streak(
                    token_address, STREAK_TIMEFRAME, period
                )
            else:
                self._store.reset_streak(token_address, STREAK_TIMEFRAME)
                chain = []

            result = calculate_streak_bonus(
                count_streak(chain, self._config), self._config, trend_break
            )
        except Exception as e:
            self._logger.error(
                f"Consecutive momentum calculation failed for {token_address}: {e}"
            )
            return empty_streak_result("Calculation failed - using default values")

        self._logger.debug(
            f"Momentum streak for {token_address}: "
            f"count={result['consecutive_count']} bonus={result['bonus_percentage']:.1f}%"
        )
        return result

    def update_config(self, config: ConsecutiveMomentumConfigDTO) -> None:
        self._config = {**self._config, **config}
        self._logger.info(f"Consecutive momentum configuration updated: {config}")

    def get_config(self) -> ConsecutiveMomentumConfigDTO:
        return {**self._config}
