"""Timeframe Indicators DTO"""

from typing import TypedDict, NotRequired

from libs.shared.src.dtos.rating.technical_indicators_dto import (
    BollingerDTO,
    MacdDTO,
)


class PeriodSignalDTO(TypedDict):
    """Signal active for a number of consecutive periods"""

    active: bool
    periods: int


class VolumeSpikeSignalDTO(TypedDict):
    """Volume spike flag"""

    active: bool
    threshold: float


class DivergenceSignalDTO(TypedDict):
    """Price/indicator divergence flag"""

    detected: bool
    type: str | None  # bullish/bearish/None


class ExhaustionSignalsDTO(TypedDict):
    """Per-timeframe exhaustion summary"""

    rsi_overbought: PeriodSignalDTO
    rsi_oversold: PeriodSignalDTO
    volume_spike: VolumeSpikeSignalDTO
    divergence: DivergenceSignalDTO


class TimeframeIndicatorsDTO(TypedDict):
    """Indicator snapshot for one timeframe plus its weight and data coverage"""

    rsi: float
    macd: MacdDTO
    bollinger: BollingerDTO
    ema: dict[str, float]
    sma: dict[str, float]

    timeframe: NotRequired[str]
    """Timeframe label (1h, 4h, ...)"""

    weight: NotRequired[float]
    """Aggregation weight; falls back to the configured weight map"""

    data_points: NotRequired[int]
    """Number of candles the indicators were computed from"""

    exhaustion_signals: NotRequired[ExhaustionSignalsDTO]
