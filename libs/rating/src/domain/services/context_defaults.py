"""Analysis context defaults

Undefined market context must never reach scoring; every reader goes
through these helpers.
"""

from libs.shared.src.dtos.rating.analysis_context_dto import (
    AnalysisContextDTO,
    MarketContextDTO,
)
from libs.shared.src.enums.market_trend import MarketTrend

DEFAULT_VOLATILITY_INDEX = 50.0
DEFAULT_MARKET_SENTIMENT = 50.0


def default_market_context() -> MarketContextDTO:
    return {
        "overall_trend": MarketTrend.SIDEWAYS.value,
        "volatility_index": DEFAULT_VOLATILITY_INDEX,
        "market_sentiment": DEFAULT_MARKET_SENTIMENT,
    }


def get_market_context(context: AnalysisContextDTO | None) -> MarketContextDTO:
    """Market context with every field resolved

    Args:
        context: Analysis context, possibly without market_context

    Returns:
        MarketContextDTO: sideways/50/50 for anything missing
    """
    market = (context or {}).get("market_context") or {}
    trend = market.get("overall_trend")
    volatility = market.get("volatility_index")
    sentiment = market.get("market_sentiment")

    return {
        "overall_trend": trend or MarketTrend.SIDEWAYS.value,
        "volatility_index": (
            DEFAULT_VOLATILITY_INDEX if volatility is None else float(volatility)
        ),
        "market_sentiment": (
            DEFAULT_MARKET_SENTIMENT if sentiment is None else float(sentiment)
        ),
    }


def ensure_market_context(context: AnalysisContextDTO) -> AnalysisContextDTO:
    """Copy of the context with market context, lists and token data defaulted"""
    safe: AnalysisContextDTO = {**context}  # type: ignore[typeddict-item]
    safe["market_context"] = get_market_context(context)
    safe["token_data"] = dict(context.get("token_data") or {})  # type: ignore[typeddict-item]
    safe["chart_data"] = list(context.get("chart_data") or [])
    safe["historical_analysis"] = list(context.get("historical_analysis") or [])
    return safe


def is_market_context_valid(context: AnalysisContextDTO) -> bool:
    market = context.get("market_context")
    return bool(
        market
        and isinstance(market.get("overall_trend"), str)
        and isinstance(market.get("volatility_index"), (int, float))
        and isinstance(market.get("market_sentiment"), (int, float))
    )
