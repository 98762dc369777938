"""Multi-Timeframe Score DTOs"""

from typing import TypedDict


class TimeframeScoreDTO(TypedDict):
    """Score of a single valid timeframe"""

    timeframe: str
    score: float  # 0-100
    weight: float
    confidence: float  # 0-100
    exhaustion_risk: bool
    alignment: str
    """bullish/bearish/neutral"""


class AlignmentDetailsDTO(TypedDict):
    """Directional agreement across timeframes"""

    bullish_timeframes: int
    bearish_timeframes: int
    neutral_timeframes: int
    consensus_strength: float
    """Weighted share of timeframes agreeing with the dominant direction (0-100)"""

    dominant_direction: str


class MultiTimeframeScoreResultDTO(TypedDict):
    """Aggregated multi-timeframe score"""

    weighted_score: float
    timeframe_alignment: float
    """Alignment bonus (-5..25)"""

    exhaustion_penalty: float
    """Exhaustion penalty (-50..0)"""

    final_score: float
    confidence: float
    timeframe_scores: list[TimeframeScoreDTO]
    alignment_details: AlignmentDetailsDTO


class ScoreBreakdownDTO(TypedDict):
    """Human-readable breakdown of a multi-timeframe result"""

    breakdown: list[str]
    recommendations: list[str]
    warnings: list[str]
