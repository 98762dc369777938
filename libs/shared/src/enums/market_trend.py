"""Overall Market Trend"""

from enum import Enum


class MarketTrend(Enum):
    """Broad market regime"""

    BULL = "bull"
    BEAR = "bear"
    SIDEWAYS = "sideways"
