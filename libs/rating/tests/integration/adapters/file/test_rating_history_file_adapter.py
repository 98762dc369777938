"""Integration tests for RatingHistoryFileAdapter

Runs against a temporary directory; no external services needed.
"""

import json

import pytest

from libs.rating.src.adapters.driven.file.rating_history_file_adapter import (
    RatingHistoryFileAdapter,
)


@pytest.mark.integration
class TestRatingHistoryFileAdapter:
    """JSON rating history"""

    @pytest.fixture
    def history_path(self, tmp_path):
        return tmp_path / "data" / "rating_history.json"

    def test_creates_file_with_empty_layout(self, history_path) -> None:
        """Missing parent directories and file are created"""
        RatingHistoryFileAdapter(str(history_path))

        assert json.loads(history_path.read_text(encoding="utf-8")) == {"ratings": {}}

    def test_survives_a_new_instance(self, history_path) -> None:
        """Ratings written by one adapter are read by the next"""
        writer = RatingHistoryFileAdapter(str(history_path))
        writer.append_rating(
            "token-1",
            {"rating": 7.4, "confidence": 71.0, "timestamp": 1000.0},
            {"exhaustion_penalty": -3.0},
        )

        reader = RatingHistoryFileAdapter(str(history_path))

        assert reader.get_latest_rating("token-1")["rating"] == 7.4
        assert reader.get_records("token-1")[0]["breakdown"] == {"exhaustion_penalty": -3.0}
        assert list(reader.get_all_ratings()) == ["token-1"]

    def test_bounded_per_token(self, history_path) -> None:
        """Only the newest max_per_token ratings are written"""
        adapter = RatingHistoryFileAdapter(str(history_path), max_per_token=2)
        for i in range(4):
            adapter.append_rating("token-1", {"rating": float(i + 1), "timestamp": float(i)}, {})

        assert [r["rating"] for r in adapter.get_ratings("token-1")] == [3.0, 4.0]

    def test_cleanup_and_expiry(self, history_path) -> None:
        """Removals are persisted and counted"""
        adapter = RatingHistoryFileAdapter(str(history_path))
        for i in range(5):
            adapter.append_rating("token-1", {"rating": 5.0, "timestamp": float(i)}, {})
        adapter.append_rating("token-2", {"rating": 5.0, "timestamp": 0.0}, {})

        assert adapter.remove_older_than(1.0) == 2
        assert adapter.cleanup(keep_last=2) == 2

        reloaded = RatingHistoryFileAdapter(str(history_path))
        assert [r["timestamp"] for r in reloaded.get_records("token-1")] == [3.0, 4.0]
        assert reloaded.get_ratings("token-2") == []

    def test_corrupt_file_reads_as_empty(self, history_path) -> None:
        """Unreadable JSON is treated as an empty history"""
        adapter = RatingHistoryFileAdapter(str(history_path))
        history_path.write_text("{not json", encoding="utf-8")

        assert adapter.get_ratings("token-1") == []
        assert adapter.get_latest_rating("token-1") is None

        adapter.append_rating("token-1", {"rating": 6.0, "timestamp": 1.0}, {})
        assert adapter.get_latest_rating("token-1")["rating"] == 6.0
