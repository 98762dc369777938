"""Analysis Context DTO"""

from typing import TypedDict, NotRequired

from libs.shared.src.dtos.rating.rating_result_dto import RatingResultDTO
from libs.shared.src.dtos.rating.timeframe_indicators_dto import (
    TimeframeIndicatorsDTO,
)


class TokenDataDTO(TypedDict, total=False):
    """Token metadata supplied by the market-data client"""

    address: str
    symbol: str
    name: str
    price: float
    market_cap: float
    volume_24h: float
    price_change_24h: float
    holders: int
    liquidity_usd: float


class ChartDataPointDTO(TypedDict):
    """OHLCV candle"""

    timestamp: float  # epoch milliseconds
    open: float
    high: float
    low: float
    close: float
    volume: float


class MarketContextDTO(TypedDict):
    """Market-wide conditions"""

    overall_trend: str
    """bull/bear/sideways"""

    volatility_index: float
    """0-100"""

    market_sentiment: float
    """0-100"""


class HistoricalAnalysisDTO(TypedDict, total=False):
    """Prior analysis for the same token"""

    token_address: str
    timestamp: float
    price: float
    volume: float
    rating: RatingResultDTO


class AnalysisContextDTO(TypedDict):
    """Everything the engine knows about a token besides the four signals"""

    token_data: TokenDataDTO
    chart_data: list[ChartDataPointDTO]
    historical_analysis: list[HistoricalAnalysisDTO]
    market_context: NotRequired[MarketContextDTO]
    multi_timeframe_data: NotRequired[dict[str, TimeframeIndicatorsDTO]]
    volume_history: NotRequired[list[float]]
    """Recent volume samples, oldest first"""
