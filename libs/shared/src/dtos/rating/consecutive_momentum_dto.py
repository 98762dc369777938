"""Consecutive Momentum DTOs"""

from typing import TypedDict


class CurrentMomentumAnalysisDTO(TypedDict):
    """Snapshot of the current cycle fed to the streak tracker"""

    rsi: float
    macd_histogram: float
    volume: float
    average_volume: float
    price: float
    trend_direction: str
    strength: float
    timestamp: float  # epoch milliseconds


class MomentumPeriodDTO(TypedDict):
    """One stored analysis period of a momentum streak"""

    period_index: int
    timestamp: float
    """Interval start (epoch milliseconds)"""

    rsi: float
    macd_histogram: float
    volume: float
    volume_confirmed: bool
    trend_direction: str
    strength: float
    exhaustion_risk: bool


class ConsecutiveMomentumResultDTO(TypedDict):
    """Streak bonus for the current cycle"""

    consecutive_count: int
    bonus_percentage: float
    """0-25"""

    score_boost: float
    exhaustion_warning: bool
    trend_break_reset: bool
    diminishing_returns: bool
    reasoning: list[str]
    periods: list[MomentumPeriodDTO]


class ConsecutiveMomentumConfigDTO(TypedDict, total=False):
    """Tunable streak thresholds"""

    interval_minutes: int
    max_boost_percentage: float
    exhaustion_threshold: float
    volume_confirmation_required: bool
    min_strength_threshold: float
