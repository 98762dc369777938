"""Weight Adjuster Unit Tests"""

import pytest

from libs.rating.src.domain.services.weight_adjuster import (
    adjust_weights,
    normalize_weights,
    validate_weights,
)
from libs.shared.src.constants.rating_weights import DEFAULT_WEIGHTS

SCORES = {
    "technical": 60.0,
    "momentum": 60.0,
    "volume": 50.0,
    "risk": 70.0,
    "pattern": 0.0,
    "fundamentals": 0.0,
}


class TestAdjustWeights:
    """Adaptive weighting"""

    def test_trending_market_favours_technical(self) -> None:
        """Bull and bear markets shift weight to technical"""
        market = {"overall_trend": "bull", "volatility_index": 40.0, "market_sentiment": 60.0}

        weights = adjust_weights(DEFAULT_WEIGHTS, market, SCORES)

        assert weights["technical"] == pytest.approx(0.25)
        assert weights["momentum"] == pytest.approx(0.225)
        assert weights["volume"] == pytest.approx(0.325)
        assert sum(weights.values()) == pytest.approx(1.0)

    def test_sideways_market_unchanged(self) -> None:
        """A calm sideways market keeps the base weights"""
        market = {"overall_trend": "sideways", "volatility_index": 40.0, "market_sentiment": 50.0}

        weights = adjust_weights(DEFAULT_WEIGHTS, market, SCORES)

        for name, value in DEFAULT_WEIGHTS.items():
            assert weights[name] == pytest.approx(value)

    def test_high_volatility_and_exceptional_volume(self) -> None:
        """Volatility lifts risk, exceptional volume lifts volume"""
        market = {"overall_trend": "sideways", "volatility_index": 80.0, "market_sentiment": 50.0}
        scores = {**SCORES, "volume": 90.0}

        weights = adjust_weights(DEFAULT_WEIGHTS, market, scores)

        assert weights["risk"] == pytest.approx(0.10)
        assert weights["volume"] == pytest.approx(0.40)
        assert weights["technical"] == pytest.approx(0.14)
        assert weights["momentum"] == pytest.approx(0.21)
        assert sum(weights.values()) == pytest.approx(1.0)

    def test_base_weights_not_mutated(self) -> None:
        """The caller's weights are left untouched"""
        base = dict(DEFAULT_WEIGHTS)
        market = {"overall_trend": "bear", "volatility_index": 90.0, "market_sentiment": 20.0}

        adjust_weights(base, market, {**SCORES, "volume": 95.0})

        assert base == DEFAULT_WEIGHTS

    def test_normalize_weights(self) -> None:
        """Normalization rescales to a unit sum"""
        weights = normalize_weights({"technical": 2.0, "volume": 2.0})
        assert weights == {"technical": 0.5, "volume": 0.5}


class TestValidateWeights:
    """Weight validation"""

    def test_default_weights_valid(self) -> None:
        """Shipped defaults pass"""
        assert validate_weights(DEFAULT_WEIGHTS) == []

    def test_sum_must_be_one(self) -> None:
        """A sum outside 1 ± 0.01 is rejected"""
        weights = {**DEFAULT_WEIGHTS, "volume": 0.55}

        errors = validate_weights(weights)

        assert errors == ["Weights must sum to 1.0, got 1.200"]

    def test_missing_and_negative(self) -> None:
        """Missing keys and negative weights are both reported"""
        weights = {key: value for key, value in DEFAULT_WEIGHTS.items() if key != "risk"}
        weights["consecutive_momentum"] = -0.05
        weights["technical"] += 0.10

        errors = validate_weights(weights)

        assert "Missing weights: risk" in errors
        assert "Weight 'consecutive_momentum' must be non-negative, got -0.05" in errors
