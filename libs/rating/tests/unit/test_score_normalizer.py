"""ScoreNormalizer Unit Tests"""

import pytest

from libs.rating.src.domain.services.score_normalizer import ScoreNormalizer


class TestScoreNormalizer:
    """Rolling-history normalizer"""

    @pytest.fixture
    def normalizer(self):
        return ScoreNormalizer()

    def test_short_history_clamps_value(self, normalizer) -> None:
        """Without history the value is clamped into the target range"""
        first = normalizer.normalize(150.0, "volume")
        second = normalizer.normalize(42.0, "volume")

        assert first["normalized_value"] == 100.0
        assert first["original_value"] == 150.0
        assert second["normalized_value"] == 42.0
        assert first["method"] == "z_score"

    def test_min_max(self, normalizer) -> None:
        """Min-max maps the value between the stored extremes"""
        for value in (10.0, 20.0, 40.0, 50.0):
            normalizer.normalize(value, "rsi", {"method": "min_max"})

        result = normalizer.normalize(30.0, "rsi", {"method": "min_max"})

        assert result["normalized_value"] == pytest.approx(50.0)

    def test_percentile_rank(self, normalizer) -> None:
        """Percentile is the share of history at or below the value"""
        for value in range(1, 11):
            normalizer.normalize(float(value), "momentum", {"method": "percentile"})

        result = normalizer.normalize(5.0, "momentum", {"method": "percentile"})

        assert result["normalized_value"] == pytest.approx(50.0)

    def test_constant_history_maps_to_midpoint(self, normalizer) -> None:
        """Zero spread maps onto the middle of the range"""
        for _ in range(5):
            normalizer.normalize(7.0, "flat")

        assert normalizer.normalize(7.0, "flat")["normalized_value"] == 50.0

    def test_outlier_flagged_and_bounded(self, normalizer) -> None:
        """Outliers are flagged, winsorized and lower the confidence"""
        for value in (48.0, 50.0, 52.0, 49.0, 51.0, 50.0, 47.0, 53.0, 50.0, 50.0):
            normalizer.normalize(value, "technical")

        result = normalizer.normalize(500.0, "technical")

        assert result["is_outlier"] is True
        assert 0 <= result["normalized_value"] <= 100
        assert result["confidence"] < 0.5
        assert result["original_value"] == 500.0

    def test_sigmoid_far_below_tight_history(self, normalizer) -> None:
        """Sigmoid handles extreme values and still records them"""
        for value in (50.0, 51.0, 49.0, 50.5, 49.5):
            normalizer.normalize(value, "tight", {"method": "sigmoid"})

        result = normalizer.normalize(-10000.0, "tight", {"method": "sigmoid"})

        assert result["method"] == "sigmoid"
        assert result["is_outlier"] is True
        assert 0.0 <= result["normalized_value"] < 50.0
        assert len(normalizer.get_history("tight")) == 6

    def test_sigmoid_far_above_tight_history(self, normalizer) -> None:
        """Large values saturate towards the top of the range"""
        for value in (50.0, 51.0, 49.0, 50.5, 49.5):
            normalizer.normalize(value, "tight", {"method": "sigmoid"})

        result = normalizer.normalize(10000.0, "tight", {"method": "sigmoid"})

        assert result["method"] == "sigmoid"
        assert 50.0 < result["normalized_value"] <= 100.0

    def test_custom_target_range(self, normalizer) -> None:
        """Results respect a custom target range"""
        for value in (1.0, 2.0, 3.0):
            normalizer.normalize(value, "rating", {"target_range": (1.0, 10.0)})

        result = normalizer.normalize(99.0, "rating", {"target_range": (1.0, 10.0)})

        assert 1.0 <= result["normalized_value"] <= 10.0

    def test_history_capped_at_1000(self, normalizer) -> None:
        """Each series keeps its newest 1000 values"""
        for value in range(1005):
            normalizer.normalize(float(value), "capped")

        history = normalizer.get_history("capped")

        assert len(history) == 1000
        assert history[0] == 5.0
        assert history[-1] == 1004.0

    def test_batch_and_statistics(self, normalizer) -> None:
        """Batch normalization records every item"""
        results = normalizer.normalize_batch(
            [
                {"value": 10.0, "series_key": "a"},
                {"value": 20.0, "series_key": "a"},
                {"value": 30.0, "series_key": "b"},
            ]
        )
        statistics = normalizer.get_statistics()

        assert len(results) == 3
        assert statistics["series_count"] == 2
        assert statistics["total_values"] == 3
        assert statistics["average_values_per_series"] == pytest.approx(1.5)

    def test_clear_historical_data(self, normalizer) -> None:
        """Clearing one series leaves the others"""
        normalizer.normalize(1.0, "a")
        normalizer.normalize(2.0, "b")

        normalizer.clear_historical_data("a")
        assert normalizer.get_history("a") == []
        assert normalizer.get_history("b") == [2.0]

        normalizer.clear_historical_data()
        assert normalizer.get_statistics()["series_count"] == 0
