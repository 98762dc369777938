"""Technical Indicators DTO"""

from typing import TypedDict


class MacdDTO(TypedDict):
    """MACD snapshot"""

    macd: float
    signal: float
    histogram: float


class BollingerDTO(TypedDict):
    """Bollinger band snapshot"""

    upper: float
    middle: float
    lower: float
    position: float  # price position within the bands (0-1)


class TechnicalIndicatorsDTO(TypedDict):
    """Immutable indicator snapshot for one timeframe"""

    rsi: float
    """RSI (0-100)"""

    macd: MacdDTO
    """MACD line, signal line and histogram"""

    bollinger: BollingerDTO
    """Bollinger bands and price position"""

    ema: dict[str, float]
    """Period -> EMA value"""

    sma: dict[str, float]
    """Period -> SMA value"""
