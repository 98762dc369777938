"""Factor Analysis DTO"""

from typing import TypedDict, NotRequired


class FactorAnalysisDTO(TypedDict):
    """Explanation of one sub-score"""

    score: float
    signal: str
    description: str
    weight: NotRequired[float]


class DetailedAnalysisDTO(TypedDict):
    """Calculator score plus its factor-by-factor explanation"""

    score: float
    factors: dict[str, FactorAnalysisDTO]
    warnings: NotRequired[list[str]]
