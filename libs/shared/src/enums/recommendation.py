"""Rating Recommendation"""

from enum import Enum


class Recommendation(Enum):
    """Action recommended for a rating"""

    STRONG_BUY = "strong_buy"
    BUY = "buy"
    HOLD = "hold"
    SELL = "sell"
    STRONG_SELL = "strong_sell"
