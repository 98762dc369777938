"""GetRatingStatisticsQuery Unit Tests"""

import pytest

from libs.rating.src.adapters.driven.memory.rating_history_memory_adapter import (
    RatingHistoryMemoryAdapter,
)
from libs.rating.src.application.queries.get_rating_statistics import (
    GetRatingStatisticsQuery,
)


def stored_rating(rating: float, confidence: float, pattern: float = 0.0, alerts=None):
    return {
        "rating": rating,
        "confidence": confidence,
        "components": {
            "technical": 70.0,
            "momentum": 70.0,
            "volume": 70.0,
            "risk": 70.0,
            "pattern": pattern,
            "fundamentals": 0.0,
        },
        "weights": {},
        "reasoning": [],
        "alerts": alerts or [],
        "recommendation": "hold",
    }


class TestGetRatingStatisticsQuery:
    """Rating statistics query"""

    @pytest.fixture
    def store(self):
        return RatingHistoryMemoryAdapter()

    def test_empty_history(self, store) -> None:
        """No ratings yields zeros"""
        statistics = GetRatingStatisticsQuery(store).execute()

        assert statistics["total_ratings"] == 0
        assert statistics["average_rating"] == 0.0
        assert statistics["average_confidence"] == 0.0
        assert sum(statistics["rating_distribution"].values()) == 0
        assert statistics["enhancement_usage"] == {
            "multi_timeframe": 0,
            "consecutive_momentum": 0,
            "exhaustion_penalty": 0,
        }

    def test_aggregates_across_tokens(self, store) -> None:
        """Averages, bands and enhancement usage cover every token"""
        store.append_rating(
            "token-a",
            stored_rating(8.2, 80.0, pattern=60.0, alerts=["🔥 SUSTAINED MOMENTUM: 3+ periods"]),
            {},
        )
        store.append_rating(
            "token-a",
            stored_rating(4.6, 60.0, alerts=["🚨 EXTREME EXHAUSTION: reversal risk"]),
            {},
        )
        store.append_rating("token-b", stored_rating(9.6, 90.0), {})

        statistics = GetRatingStatisticsQuery(store).execute()

        assert statistics["total_ratings"] == 3
        assert statistics["average_rating"] == pytest.approx((8.2 + 4.6 + 9.6) / 3)
        assert statistics["average_confidence"] == pytest.approx((80.0 + 60.0 + 90.0) / 3)
        assert statistics["rating_distribution"][8] == 1
        assert statistics["rating_distribution"][5] == 1
        assert statistics["rating_distribution"][10] == 1
        assert statistics["enhancement_usage"] == {
            "multi_timeframe": 1,
            "consecutive_momentum": 1,
            "exhaustion_penalty": 1,
        }
