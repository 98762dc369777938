"""AI Advisory DTOs"""

from typing import TypedDict

from libs.shared.src.dtos.rating.analysis_context_dto import TokenDataDTO
from libs.shared.src.dtos.rating.momentum_analysis_dto import MomentumAnalysisDTO
from libs.shared.src.dtos.rating.technical_indicators_dto import (
    TechnicalIndicatorsDTO,
)
from libs.shared.src.dtos.rating.volume_analysis_dto import VolumeAnalysisDTO


class AIAdvisoryInputDTO(TypedDict):
    """Summary handed to the advisory service"""

    token_data: TokenDataDTO
    technical_indicators: dict[str, TechnicalIndicatorsDTO]
    """Timeframe label -> indicators"""

    momentum: MomentumAnalysisDTO
    volume: VolumeAnalysisDTO
    risk_factors: list[str]
    initial_technical_rating: float


class AIRecommendationDTO(TypedDict):
    """Secondary rating"""

    rating: float  # 1-10
    action: str
    """STRONG_BUY/BUY/NEUTRAL/AVOID"""


class AIAdvisoryResultDTO(TypedDict):
    """Advisory answer"""

    momentum_quality: float  # 1-10
    entry_risk: float  # 1-10
    timeframe_analysis: float  # 1-10
    volume_analysis: float  # 1-10
    final_recommendation: AIRecommendationDTO
    reasoning: list[str]
    confidence: float  # 0-100
    warnings: list[str]
    timestamp: float
    token_address: str
