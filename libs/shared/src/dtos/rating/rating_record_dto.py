"""Rating Record DTO"""

from typing import TypedDict

from libs.shared.src.dtos.rating.rating_result_dto import RatingResultDTO


class RatingRecordDTO(TypedDict):
    """Stored rating with the breakdown it was computed from"""

    token_address: str
    timestamp: float  # epoch milliseconds
    result: RatingResultDTO
    breakdown: dict
