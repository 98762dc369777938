"""Rating Scale Unit Tests"""

import pytest

from libs.rating.src.domain.services.rating_scale import (
    apply_non_linear_scaling,
    apply_smoothing,
    convert_to_rating_scale,
    determine_recommendation,
    round_one_decimal,
)


class TestRatingScale:
    """Logistic scaling and bucketing"""

    def test_logistic_curve_centred_on_50(self) -> None:
        """50 stays at 50, extremes are compressed"""
        assert apply_non_linear_scaling(50) == pytest.approx(50.0)
        assert apply_non_linear_scaling(100) == pytest.approx(95.26, abs=0.01)
        assert apply_non_linear_scaling(0) == pytest.approx(4.74, abs=0.01)

    def test_monotonic(self) -> None:
        """Higher composites never scale lower"""
        values = [apply_non_linear_scaling(score) for score in range(0, 101, 5)]
        assert values == sorted(values)

    def test_bucket_boundaries(self) -> None:
        """Bucket minimums are inclusive"""
        assert convert_to_rating_scale(95) == 10
        assert convert_to_rating_scale(94.99) == 9
        assert convert_to_rating_scale(75) == 8
        assert convert_to_rating_scale(45) == 5
        assert convert_to_rating_scale(15) == 2
        assert convert_to_rating_scale(14.99) == 1

    def test_composite_100_reaches_top_band(self) -> None:
        """A perfect composite lands in the top band"""
        assert convert_to_rating_scale(apply_non_linear_scaling(100)) == 10


class TestSmoothing:
    """Exponential smoothing against the previous rating"""

    def test_smoothing_pulls_toward_previous(self) -> None:
        """4.0 after 8.0 with factor 0.15 becomes 4.6"""
        assert apply_smoothing(4.0, 8.0, 0.15) == 4.6

    def test_first_rating_passes_through(self) -> None:
        """Without a previous rating nothing changes"""
        assert apply_smoothing(7.0, None, 0.15) == 7.0

    def test_zero_factor_ignores_previous(self) -> None:
        """Factor 0 keeps the fresh rating"""
        assert apply_smoothing(6.0, 2.0, 0.0) == 6.0

    def test_half_up_rounding(self) -> None:
        """One decimal, halves round up"""
        assert round_one_decimal(4.25) == 4.3
        assert round_one_decimal(4.649) == 4.6


class TestDetermineRecommendation:
    """Recommendation mapping"""

    @pytest.mark.parametrize(
        ("rating", "expected"),
        [
            (9.0, "strong_buy"),
            (8.0, "strong_buy"),
            (7.2, "buy"),
            (5.0, "hold"),
            (3.5, "sell"),
            (2.0, "strong_sell"),
        ],
    )
    def test_rating_bands(self, rating: float, expected: str) -> None:
        """Confident ratings map by band"""
        assert determine_recommendation(rating, 60.0) == expected

    def test_low_confidence_holds(self) -> None:
        """Below 50% confidence the answer is always hold"""
        assert determine_recommendation(9.5, 40.0) == "hold"
        assert determine_recommendation(1.5, 49.9) == "hold"
