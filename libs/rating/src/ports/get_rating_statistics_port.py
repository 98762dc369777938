"""
GetRatingStatisticsPort - Driving Port

Implemented by: GetRatingStatisticsQuery
"""

from typing import Protocol

from libs.shared.src.dtos.rating.rating_statistics_dto import RatingStatisticsDTO


class GetRatingStatisticsPort(Protocol):
    """Driving Port for GetRatingStatisticsQuery"""

    def execute(self) -> RatingStatisticsDTO:
        """Aggregate statistics over every stored rating"""
        ...
