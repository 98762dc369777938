"""ConsecutiveMomentumCalculator Unit Tests"""

from unittest.mock import MagicMock

import pytest

from libs.rating.src.adapters.driven.memory.momentum_history_memory_adapter import (
    MomentumHistoryMemoryAdapter,
)
from libs.rating.src.adapters.driven.memory.momentum_history_null_adapter import (
    MomentumHistoryNullAdapter,
)
from libs.rating.src.domain.services.consecutive_momentum_calculator import (
    ConsecutiveMomentumCalculator,
    interval_start,
)

INTERVAL_MS = 15 * 60 * 1000
START = 1_888_888 * INTERVAL_MS  # aligned to a 15-minute boundary
CONTEXT = {"token_data": {"address": "token-1"}, "chart_data": [], "historical_analysis": []}


def analysis(period: int, trend: str = "bullish", **overrides):
    current = {
        "rsi": 62.0,
        "macd_histogram": 0.02,
        "volume": 1_500_000.0,
        "average_volume": 1_000_000.0,
        "price": 1.0,
        "trend_direction": trend,
        "strength": 70.0,
        "timestamp": float(START + period * INTERVAL_MS),
    }
    current.update(overrides)
    return current


class TestConsecutiveMomentumCalculator:
    """Momentum streak tracker"""

    @pytest.fixture
    def store(self):
        return MomentumHistoryMemoryAdapter()

    @pytest.fixture
    def calculator(self, store):
        return ConsecutiveMomentumCalculator(store)

    def test_single_period_has_no_bonus(self, calculator) -> None:
        """One period is not a streak"""
        result = calculator.calculate_bonus(analysis(0), CONTEXT)

        assert result["consecutive_count"] == 1
        assert result["bonus_percentage"] == 0.0
        assert "Single momentum period - no bonus applied" in result["reasoning"]

    def test_bonus_grows_with_streak(self, calculator) -> None:
        """Two periods earn 15%, three earn the 25% ceiling"""
        calculator.calculate_bonus(analysis(0), CONTEXT)
        second = calculator.calculate_bonus(analysis(1), CONTEXT)
        third = calculator.calculate_bonus(analysis(2), CONTEXT)

        assert second["bonus_percentage"] == 15.0
        assert third["consecutive_count"] == 3
        assert third["bonus_percentage"] == 25.0

    def test_diminishing_returns_after_three(self, calculator) -> None:
        """Runs beyond three periods are damped"""
        for period in range(3):
            calculator.calculate_bonus(analysis(period), CONTEXT)
        fourth = calculator.calculate_bonus(analysis(3), CONTEXT)

        assert fourth["consecutive_count"] == 4
        assert fourth["diminishing_returns"] is True
        assert fourth["bonus_percentage"] == pytest.approx(20.0)

    def test_same_interval_does_not_extend_streak(self, calculator) -> None:
        """Re-rating inside one interval replaces the period"""
        calculator.calculate_bonus(analysis(0), CONTEXT)
        result = calculator.calculate_bonus(
            analysis(0, timestamp=float(START + 60_000)), CONTEXT
        )

        assert result["consecutive_count"] == 1

    def test_trend_flip_resets_streak(self, calculator) -> None:
        """A direction change restarts the chain"""
        calculator.calculate_bonus(analysis(0), CONTEXT)
        calculator.calculate_bonus(analysis(1), CONTEXT)
        result = calculator.calculate_bonus(analysis(2, trend="bearish"), CONTEXT)

        assert result["trend_break_reset"] is True
        assert result["consecutive_count"] == 1
        assert "Trend break detected - momentum streak reset" in result["reasoning"]

    def test_weak_period_clears_chain(self, calculator, store) -> None:
        """A period below the strength threshold resets the stored chain"""
        calculator.calculate_bonus(analysis(0), CONTEXT)
        result = calculator.calculate_bonus(analysis(1, strength=20.0), CONTEXT)

        assert result["consecutive_count"] == 0
        assert store.get_periods("token-1", "15m", 10) == []

    def test_disabled_store(self) -> None:
        """Without a history store the tracker is off"""
        calculator = ConsecutiveMomentumCalculator(MomentumHistoryNullAdapter())

        for period in range(3):
            result = calculator.calculate_bonus(analysis(period), CONTEXT)

        assert result["consecutive_count"] == 0
        assert result["bonus_percentage"] == 0.0
        assert result["reasoning"] == ["Momentum history store disabled - no streak tracking"]

    def test_store_failure_returns_empty_result(self, store) -> None:
        """A failing store degrades to the empty streak"""
        calculator = ConsecutiveMomentumCalculator(store)
        store.get_periods = MagicMock(side_effect=RuntimeError("db down"))

        result = calculator.calculate_bonus(analysis(0), CONTEXT)

        assert result["consecutive_count"] == 0
        assert result["reasoning"] == ["Calculation failed - using default values"]

    def test_interval_start(self) -> None:
        """Timestamps round down to the interval boundary"""
        assert interval_start(START + 14 * 60 * 1000, 15) == START
        assert interval_start(START + INTERVAL_MS, 15) == START + INTERVAL_MS
