"""CleanupRatingHistoryCommand Unit Tests"""

import time

from libs.rating.src.adapters.driven.memory.rating_history_memory_adapter import (
    RatingHistoryMemoryAdapter,
)
from libs.rating.src.application.commands.cleanup_rating_history import (
    DAY_MS,
    CleanupRatingHistoryCommand,
)


def rating_at(timestamp: float):
    return {"rating": 6.0, "confidence": 70.0, "timestamp": timestamp}


class TestCleanupRatingHistoryCommand:
    """Rating history cleanup"""

    def test_expires_then_trims(self) -> None:
        """Old records go first, then each token keeps its newest 20"""
        store = RatingHistoryMemoryAdapter()
        now = time.time() * 1000
        store.append_rating("token-a", rating_at(now - 10 * DAY_MS), {})
        for i in range(25):
            store.append_rating("token-a", rating_at(now - i * 1000), {})
        store.append_rating("token-b", rating_at(now - 30 * DAY_MS), {})

        removed = CleanupRatingHistoryCommand(store).execute(days_to_keep=7)

        assert removed == {"database_records": 2, "memory_ratings": 5}
        assert len(store.get_ratings("token-a")) == 20
        assert store.get_all_ratings() == {"token-a": store.get_ratings("token-a")}

    def test_nothing_to_remove(self) -> None:
        """A fresh, short history is untouched"""
        store = RatingHistoryMemoryAdapter()
        store.append_rating("token-a", rating_at(time.time() * 1000), {})

        removed = CleanupRatingHistoryCommand(store).execute()

        assert removed == {"database_records": 0, "memory_ratings": 0}
        assert len(store.get_ratings("token-a")) == 1
