"""Rating Statistics DTO"""

from typing import TypedDict


class EnhancementUsageDTO(TypedDict):
    """How often the optional subsystems contributed"""

    multi_timeframe: int
    consecutive_momentum: int
    exhaustion_penalty: int


class RatingStatisticsDTO(TypedDict):
    """Aggregate over every stored rating"""

    total_ratings: int
    average_rating: float
    rating_distribution: dict[int, int]
    """Rounded rating (1-10) -> count"""

    average_confidence: float
    enhancement_usage: EnhancementUsageDTO
