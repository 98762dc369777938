"""Momentum Analysis DTO"""

from typing import TypedDict


class PriceActionDTO(TypedDict):
    """Price action summary"""

    breakout_potential: float  # 0-1
    consolidation: bool
    reversal_signal: bool


class MomentumAnalysisDTO(TypedDict):
    """Trend and momentum snapshot"""

    trend: str
    """bullish/bearish/neutral"""

    strength: float
    """Trend strength (0-100)"""

    momentum: float
    """Signed rate of change"""

    volatility: float
    """Volatility (%)"""

    support: list[float]
    resistance: list[float]
    price_action: PriceActionDTO
