"""Score Components DTO"""

from typing import TypedDict


class ScoreComponentsDTO(TypedDict):
    """Per-domain subscores, each 0-100"""

    technical: float
    momentum: float
    volume: float
    risk: float
    pattern: float
    """Multi-timeframe score (0 when not computed)"""

    fundamentals: float
    """Unused, always 0"""
