"""Trend Direction"""

from enum import Enum


class TrendDirection(Enum):
    """Directional bias of a token or timeframe"""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"
