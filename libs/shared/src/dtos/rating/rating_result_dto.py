"""Rating Result DTO"""

from typing import TypedDict, NotRequired

from libs.shared.src.dtos.rating.score_components_dto import ScoreComponentsDTO


class RatingResultDTO(TypedDict):
    """Final rating for one token and one analysis cycle"""

    rating: float
    """1-10"""

    confidence: float
    """0-100"""

    components: ScoreComponentsDTO
    weights: dict[str, float]
    reasoning: list[str]
    alerts: list[str]
    recommendation: str
    """strong_buy/buy/hold/sell/strong_sell"""

    token_address: NotRequired[str]
    timestamp: NotRequired[float]
    ai_enhanced: NotRequired[bool]
