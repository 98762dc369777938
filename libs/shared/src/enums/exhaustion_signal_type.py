"""Exhaustion Signal Type and Severity"""

from enum import Enum


class ExhaustionSignalType(Enum):
    """Exhaustion signal family"""

    RSI_OVERBOUGHT = "rsi_overbought"
    RSI_OVERSOLD = "rsi_oversold"
    VOLUME_EXHAUSTION = "volume_exhaustion"
    MOMENTUM_DIVERGENCE = "momentum_divergence"
    PRICE_EXTENSION = "price_extension"


class ExhaustionSeverity(Enum):
    """Severity of a single exhaustion signal"""

    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"
