"""History Memory Adapter Unit Tests"""

import pytest

from libs.rating.src.adapters.driven.memory.momentum_history_memory_adapter import (
    MomentumHistoryMemoryAdapter,
)
from libs.rating.src.adapters.driven.memory.momentum_history_null_adapter import (
    MomentumHistoryNullAdapter,
)
from libs.rating.src.adapters.driven.memory.rating_history_fake_adapter import (
    RatingHistoryFakeAdapter,
)
from libs.rating.src.adapters.driven.memory.rating_history_memory_adapter import (
    RatingHistoryMemoryAdapter,
)
from libs.shared.src.errors.persistence_error import PersistenceError


def period(timestamp: float, strength: float = 70.0):
    return {
        "period_index": 0,
        "timestamp": timestamp,
        "rsi": 60.0,
        "macd_histogram": 0.01,
        "volume": 1000.0,
        "volume_confirmed": True,
        "trend_direction": "bullish",
        "strength": strength,
        "exhaustion_risk": False,
    }


class TestRatingHistoryMemoryAdapter:
    """In-process rating history"""

    def test_bounded_per_token(self) -> None:
        """Only the newest max_per_token ratings are kept"""
        store = RatingHistoryMemoryAdapter(max_per_token=3)
        for i in range(5):
            store.append_rating("token-1", {"rating": float(i + 1), "timestamp": float(i)}, {})

        assert [r["rating"] for r in store.get_ratings("token-1")] == [3.0, 4.0, 5.0]
        assert store.get_latest_rating("token-1")["rating"] == 5.0
        assert store.get_latest_rating("token-2") is None

    def test_records_carry_breakdown(self) -> None:
        """Records keep the enhancement breakdown next to the result"""
        store = RatingHistoryMemoryAdapter()
        store.append_rating("token-1", {"rating": 7.0, "timestamp": 5.0}, {"exhaustion_penalty": -5.0})

        record = store.get_records("token-1")[0]

        assert record["token_address"] == "token-1"
        assert record["timestamp"] == 5.0
        assert record["breakdown"] == {"exhaustion_penalty": -5.0}

    def test_cleanup_and_expiry_counts(self) -> None:
        """Both removals report how many records went"""
        store = RatingHistoryMemoryAdapter()
        for i in range(4):
            store.append_rating("token-1", {"rating": 5.0, "timestamp": float(i)}, {})
        store.append_rating("token-2", {"rating": 5.0, "timestamp": 1.0}, {})

        assert store.remove_older_than(2.0) == 3
        assert list(store.get_all_ratings()) == ["token-1"]
        assert store.cleanup(keep_last=1) == 1
        assert len(store.get_ratings("token-1")) == 1


class TestRatingHistoryFakeAdapter:
    """Failing store double"""

    def test_failing_writes(self) -> None:
        """Writes raise PersistenceError and are still counted"""
        store = RatingHistoryFakeAdapter()
        store.set_should_fail(True)

        with pytest.raises(PersistenceError) as exc_info:
            store.append_rating("token-1", {"rating": 5.0}, {})

        assert exc_info.value.code == "PERSISTENCE_FAILED"
        assert store.get_append_calls() == 1
        assert store.get_ratings("token-1") == []

    def test_seed_bypasses_counter(self) -> None:
        """Seeded ratings are readable but not counted as appends"""
        store = RatingHistoryFakeAdapter()
        store.seed("token-1", [{"rating": 4.0}, {"rating": 6.0}])

        assert store.get_latest_rating("token-1")["rating"] == 6.0
        assert store.get_append_calls() == 0


class TestMomentumHistoryMemoryAdapter:
    """In-process momentum history"""

    @pytest.fixture
    def store(self):
        return MomentumHistoryMemoryAdapter()

    def test_same_interval_replaces(self, store) -> None:
        """A period with the newest timestamp replaces it in place"""
        store.append_and_get_streak("token-1", "15m", period(0.0))
        store.append_and_get_streak("token-1", "15m", period(900_000.0))
        periods = store.append_and_get_streak("token-1", "15m", period(900_000.0, strength=90.0))

        assert len(periods) == 2
        assert periods[-1]["strength"] == 90.0
        assert periods[-1]["period_index"] == 1

    def test_periods_capped(self, store) -> None:
        """At most one day of periods is kept"""
        for i in range(100):
            store.append_and_get_streak("token-1", "15m", period(i * 900_000.0))

        periods = store.get_periods("token-1", "15m", 200)

        assert len(periods) == 96
        assert periods[0]["timestamp"] == 4 * 900_000.0

    def test_limits_and_reset(self, store) -> None:
        """Reads honour the limit and reset forgets the chain"""
        for i in range(3):
            store.append_and_get_streak("token-1", "15m", period(i * 900_000.0))

        assert len(store.get_periods("token-1", "15m", 2)) == 2
        assert store.get_periods("token-1", "15m", 0) == []
        context = store.get_historical_context("token-1", ["15m", "1h"], 10)
        assert len(context["15m"]) == 3
        assert context["1h"] == []

        store.reset_streak("token-1", "15m")
        assert store.get_periods("token-1", "15m", 10) == []

    def test_volume_window(self, store) -> None:
        """Volume samples roll over after 100 entries"""
        for i in range(105):
            store.record_volume("token-1", float(i))

        assert store.get_volume_history("token-1", 3) == [102.0, 103.0, 104.0]
        assert len(store.get_volume_history("token-1", 500)) == 100
        assert store.get_volume_history("token-2", 10) == []


class TestMomentumHistoryNullAdapter:
    """Disabled momentum history"""

    def test_remembers_nothing(self) -> None:
        """Every read is empty and the store reports itself disabled"""
        store = MomentumHistoryNullAdapter()
        store.append_and_get_streak("token-1", "15m", period(0.0))
        store.record_volume("token-1", 10.0)

        assert store.is_enabled() is False
        assert store.get_periods("token-1", "15m", 10) == []
        assert store.get_volume_history("token-1", 10) == []
        assert store.get_historical_context("token-1", ["15m"], 10) == {"15m": []}
