"""Exhaustion Penalty DTOs"""

from typing import TypedDict


class ExhaustionSignalDTO(TypedDict):
    """One detected overextension signal"""

    type: str
    """rsi_overbought/rsi_oversold/volume_exhaustion/momentum_divergence/price_extension"""

    severity: str
    """mild/moderate/severe"""

    timeframe: str
    """Timeframe label, "current" for the single-timeframe pass"""

    description: str
    penalty: float  # always <= 0
    confidence: float  # 0-100


class ExhaustionPenaltyResultDTO(TypedDict):
    """Bounded exhaustion penalty for one analysis cycle"""

    total_penalty: float
    """Clamped to [-50, 0]"""

    signals: list[ExhaustionSignalDTO]
    exhaustion_level: str
    """none/mild/moderate/severe/extreme"""

    timeframe_breakdown: dict[str, float]
    reasoning: list[str]
    recommendations: list[str]


class ExhaustionConfigDTO(TypedDict, total=False):
    """Tunable exhaustion thresholds"""

    rsi_overbought_threshold: float
    rsi_oversold_threshold: float
    rsi_extreme_threshold: float
    volume_decline_threshold: float
    momentum_divergence_threshold: float
    price_extension_threshold: float
    timeframe_weights: dict[str, float]


class RecoveryScoreDTO(TypedDict):
    """Change in exhaustion between two cycles"""

    recovery_score: float  # 0-100, 50 = unchanged
    improvement: float
    """Positive when the penalty shrank"""

    improving: bool
    reasoning: list[str]
