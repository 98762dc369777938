"""Engine Config Unit Tests"""

from libs.rating.src.domain.services.context_defaults import (
    ensure_market_context,
    get_market_context,
    is_market_context_valid,
)
from libs.rating.src.domain.services.engine_config import (
    DEFAULT_ENGINE_CONFIG,
    merge_engine_config,
    validate_engine_config,
)


class TestEngineConfig:
    """Config merge and validation"""

    def test_defaults_are_valid(self) -> None:
        """Shipped defaults validate cleanly"""
        assert validate_engine_config(DEFAULT_ENGINE_CONFIG) == []
        assert DEFAULT_ENGINE_CONFIG["weights"]["consecutive_momentum"] == 0.0
        assert DEFAULT_ENGINE_CONFIG["ai_rating_threshold"] == 6.0

    def test_merge_is_key_by_key(self) -> None:
        """Nested weights and timeouts keep the keys the override omits"""
        merged = merge_engine_config(
            DEFAULT_ENGINE_CONFIG,
            {
                "weights": {"volume": 0.30, "risk": 0.10},
                "timeouts": {"overall": 10.0},
                "smoothing_factor": 0.3,
            },
        )

        assert merged["weights"]["volume"] == 0.30
        assert merged["weights"]["technical"] == 0.20
        assert merged["timeouts"]["overall"] == 10.0
        assert merged["timeouts"]["component"] == 5.0
        assert merged["smoothing_factor"] == 0.3
        assert DEFAULT_ENGINE_CONFIG["weights"]["volume"] == 0.35
        assert DEFAULT_ENGINE_CONFIG["timeouts"]["overall"] == 30.0

    def test_merge_without_overrides(self) -> None:
        """No overrides returns an equal, independent config"""
        merged = merge_engine_config(DEFAULT_ENGINE_CONFIG, None)

        assert merged == DEFAULT_ENGINE_CONFIG
        assert merged["weights"] is not DEFAULT_ENGINE_CONFIG["weights"]

    def test_every_range_checked(self) -> None:
        """Each out-of-range field is reported"""
        config = merge_engine_config(
            DEFAULT_ENGINE_CONFIG,
            {
                "smoothing_factor": 1.5,
                "confidence_threshold": 120,
                "ai_rating_threshold": 0.5,
                "timeouts": {"component": 0},
            },
        )

        assert validate_engine_config(config) == [
            "smoothing_factor must be within [0, 1], got 1.5",
            "confidence_threshold must be within [0, 100], got 120",
            "ai_rating_threshold must be within [1, 10], got 0.5",
            "Timeout 'component' must be positive, got 0",
        ]


class TestContextDefaults:
    """Market context defaulting"""

    def test_missing_market_context(self) -> None:
        """Absent context resolves to sideways/50/50"""
        assert get_market_context({"token_data": {}}) == {
            "overall_trend": "sideways",
            "volatility_index": 50.0,
            "market_sentiment": 50.0,
        }
        assert get_market_context(None)["overall_trend"] == "sideways"

    def test_partial_market_context(self) -> None:
        """Present fields survive, zero included"""
        market = get_market_context(
            {"market_context": {"overall_trend": "bear", "volatility_index": 0}}
        )

        assert market == {
            "overall_trend": "bear",
            "volatility_index": 0.0,
            "market_sentiment": 50.0,
        }

    def test_ensure_market_context(self) -> None:
        """The safe copy fills lists and leaves the input alone"""
        context = {"token_data": {"address": "token-1"}}

        safe = ensure_market_context(context)

        assert safe["chart_data"] == []
        assert safe["historical_analysis"] == []
        assert is_market_context_valid(safe)
        assert not is_market_context_valid(context)
        assert "market_context" not in context
