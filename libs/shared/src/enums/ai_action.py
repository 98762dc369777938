"""AI Advisory Action"""

from enum import Enum


class AIAction(Enum):
    """Categorical action returned by the AI advisory service"""

    STRONG_BUY = "STRONG_BUY"
    BUY = "BUY"
    NEUTRAL = "NEUTRAL"
    AVOID = "AVOID"
