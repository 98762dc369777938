"""Rating unit test fixtures"""

import copy

import pytest

from libs.rating.src.adapters.driven.memory.ai_advisory_disabled_adapter import (
    AIAdvisoryDisabledAdapter,
)
from libs.rating.src.adapters.driven.memory.momentum_history_memory_adapter import (
    MomentumHistoryMemoryAdapter,
)
from libs.rating.src.adapters.driven.memory.rating_history_memory_adapter import (
    RatingHistoryMemoryAdapter,
)
from libs.rating.src.application.commands.calculate_rating import (
    CalculateRatingCommand,
)
from libs.rating.src.domain.services.confidence_calculator import ConfidenceCalculator
from libs.rating.src.domain.services.consecutive_momentum_calculator import (
    ConsecutiveMomentumCalculator,
)
from libs.rating.src.domain.services.exhaustion_penalty_calculator import (
    ExhaustionPenaltyCalculator,
)
from libs.rating.src.domain.services.momentum_score_calculator import (
    MomentumScoreCalculator,
)
from libs.rating.src.domain.services.multi_timeframe_score_calculator import (
    MultiTimeframeScoreCalculator,
)
from libs.rating.src.domain.services.risk_score_calculator import RiskScoreCalculator
from libs.rating.src.domain.services.technical_score_calculator import (
    TechnicalScoreCalculator,
)
from libs.rating.src.domain.services.volume_score_calculator import (
    VolumeScoreCalculator,
)

TOKEN_ADDRESS = "So11111111111111111111111111111111111111112"


@pytest.fixture
def bullish_indicators():
    """Bullish indicator snapshot"""
    return {
        "rsi": 60.0,
        "macd": {"macd": 0.06, "signal": 0.035, "histogram": 0.025},
        "bollinger": {"upper": 1.1, "middle": 1.0, "lower": 0.9, "position": 0.7},
        "ema": {"12": 1.05, "26": 1.03, "50": 1.0, "200": 0.9},
        "sma": {"26": 1.01},
    }


@pytest.fixture
def bullish_momentum():
    return {
        "trend": "bullish",
        "strength": 75.0,
        "momentum": 1.5,
        "volatility": 15.0,
        "support": [1.0],
        "resistance": [1.2],
        "price_action": {
            "breakout_potential": 0.75,
            "consolidation": False,
            "reversal_signal": False,
        },
    }


@pytest.fixture
def spike_volume():
    return {
        "average_volume": 1_000_000.0,
        "current_volume": 3_500_000.0,
        "volume_spike": True,
        "volume_spike_factor": 3.5,
        "volume_profile": {"buy_pressure": 0.7, "sell_pressure": 0.25, "net_flow": 0.5},
        "liquidity_score": 75.0,
    }


@pytest.fixture
def low_risk():
    return {
        "overall": 25.0,
        "factors": {
            "liquidity": 20.0,
            "volatility": 30.0,
            "holder_concentration": 25.0,
            "market_cap": 30.0,
            "age": 20.0,
            "rug_pull_risk": 10.0,
        },
        "warnings": [],
        "risk_level": "low",
    }


@pytest.fixture
def bull_context():
    return {
        "token_data": {
            "address": TOKEN_ADDRESS,
            "symbol": "MOON",
            "price": 1.06,
            "market_cap": 25_000_000.0,
            "volume_24h": 3_500_000.0,
            "holders": 4200,
        },
        "chart_data": [],
        "historical_analysis": [],
        "market_context": {
            "overall_trend": "bull",
            "volatility_index": 40.0,
            "market_sentiment": 65.0,
        },
    }


@pytest.fixture
def rating_inputs(bullish_indicators, bullish_momentum, spike_volume, low_risk, bull_context):
    """Fresh execute() arguments on every call"""

    def _inputs(**context_overrides):
        context = copy.deepcopy(bull_context)
        context.update(context_overrides)
        return (
            copy.deepcopy(bullish_indicators),
            copy.deepcopy(bullish_momentum),
            copy.deepcopy(spike_volume),
            copy.deepcopy(low_risk),
            context,
        )

    return _inputs


@pytest.fixture
def make_engine():
    """Engine wired with real calculators; any dependency can be overridden"""

    def _make(config=None, **overrides):
        momentum_history_store = overrides.pop(
            "momentum_history_store", MomentumHistoryMemoryAdapter()
        )
        dependencies = {
            "technical_calculator": TechnicalScoreCalculator(),
            "momentum_calculator": MomentumScoreCalculator(),
            "volume_calculator": VolumeScoreCalculator(),
            "risk_calculator": RiskScoreCalculator(),
            "multi_timeframe_calculator": MultiTimeframeScoreCalculator(),
            "consecutive_momentum_calculator": ConsecutiveMomentumCalculator(
                momentum_history_store
            ),
            "exhaustion_penalty_calculator": ExhaustionPenaltyCalculator(),
            "confidence_calculator": ConfidenceCalculator(),
            "rating_history_store": RatingHistoryMemoryAdapter(),
            "momentum_history_store": momentum_history_store,
            "ai_advisory": AIAdvisoryDisabledAdapter(),
        }
        dependencies.update(overrides)
        return CalculateRatingCommand(config=config, **dependencies)

    return _make
