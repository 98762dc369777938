"""
CalculateRatingPort - Driving Port

Implemented by: CalculateRatingCommand
"""

from typing import Protocol

from libs.shared.src.dtos.rating.analysis_context_dto import AnalysisContextDTO
from libs.shared.src.dtos.rating.momentum_analysis_dto import MomentumAnalysisDTO
from libs.shared.src.dtos.rating.rating_result_dto import RatingResultDTO
from libs.shared.src.dtos.rating.risk_assessment_dto import RiskAssessmentDTO
from libs.shared.src.dtos.rating.technical_indicators_dto import (
    TechnicalIndicatorsDTO,
)
from libs.shared.src.dtos.rating.volume_analysis_dto import VolumeAnalysisDTO


class CalculateRatingPort(Protocol):
    """Driving Port for CalculateRatingCommand"""

    async def execute(
        self,
        technical_indicators: TechnicalIndicatorsDTO,
        momentum: MomentumAnalysisDTO,
        volume: VolumeAnalysisDTO,
        risk: RiskAssessmentDTO,
        context: AnalysisContextDTO,
    ) -> RatingResultDTO:
        """Rate one token for one analysis cycle

        Raises:
            RatingTimeoutError: The whole calculation exceeded its budget
        """
        ...
