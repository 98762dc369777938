"""AI Rating Blender

Merges an optional AI advisory answer into a technical rating. The
technical side keeps 70% of the weight.
"""

from libs.shared.src.constants.rating_weights import AI_BLEND_WEIGHT
from libs.shared.src.domain.services.clamp import clamp
from libs.shared.src.dtos.rating.ai_advisory_dto import (
    AIAdvisoryInputDTO,
    AIAdvisoryResultDTO,
)
from libs.shared.src.dtos.rating.analysis_context_dto import AnalysisContextDTO
from libs.shared.src.dtos.rating.momentum_analysis_dto import MomentumAnalysisDTO
from libs.shared.src.dtos.rating.rating_result_dto import RatingResultDTO
from libs.shared.src.dtos.rating.risk_assessment_dto import RiskAssessmentDTO
from libs.shared.src.dtos.rating.technical_indicators_dto import (
    TechnicalIndicatorsDTO,
)
from libs.shared.src.dtos.rating.volume_analysis_dto import VolumeAnalysisDTO
from libs.shared.src.enums.ai_action import AIAction
from libs.shared.src.enums.recommendation import Recommendation

AI_REASONS_KEPT = 3
ADVISORY_TIMEFRAMES = ("5m", "15m", "1h", "4h")

AI_ACTION_RECOMMENDATIONS = {
    AIAction.STRONG_BUY.value: Recommendation.STRONG_BUY.value,
    AIAction.BUY.value: Recommendation.BUY.value,
    AIAction.AVOID.value: Recommendation.SELL.value,
}


def should_request_advisory(rating: float, threshold: float) -> bool:
    return rating >= threshold


def build_advisory_input(
    technical_indicators: TechnicalIndicatorsDTO,
    momentum: MomentumAnalysisDTO,
    volume: VolumeAnalysisDTO,
    risk: RiskAssessmentDTO,
    context: AnalysisContextDTO,
    initial_rating: float,
) -> AIAdvisoryInputDTO:
    """Advisory request; per-timeframe indicators fall back to the primary set"""
    per_timeframe = dict(context.get("multi_timeframe_data") or {})
    indicators = {
        timeframe: per_timeframe.get(timeframe, technical_indicators)
        for timeframe in ADVISORY_TIMEFRAMES
    }
    return {
        "token_data": context.get("token_data") or {},
        "technical_indicators": indicators,
        "momentum": momentum,
        "volume": volume,
        "risk_factors": list(risk.get("warnings", [])),
        "initial_technical_rating": initial_rating,
    }


def combine_recommendation(
    technical_recommendation: str,
    ai_action: str,
    combined_rating: float,
    combined_confidence: float,
) -> str:
    if combined_confidence < 50:
        return Recommendation.HOLD.value

    ai_recommendation = AI_ACTION_RECOMMENDATIONS.get(ai_action, Recommendation.HOLD.value)

    if combined_rating >= 8:
        if Recommendation.STRONG_BUY.value in (technical_recommendation, ai_recommendation):
            return Recommendation.STRONG_BUY.value
        return Recommendation.BUY.value
    if combined_rating >= 7:
        return Recommendation.BUY.value
    if combined_rating >= 5:
        return Recommendation.HOLD.value
    if combined_rating >= 3:
        return Recommendation.SELL.value
    return Recommendation.STRONG_SELL.value


def blend_rating(
    result: RatingResultDTO, advisory: AIAdvisoryResultDTO
) -> RatingResultDTO:
    """New result with the advisory folded in; the input is left untouched"""
    technical_weight = 1 - AI_BLEND_WEIGHT
    ai_recommendation = advisory["final_recommendation"]

    rating = clamp(
        result["rating"] * technical_weight + ai_recommendation["rating"] * AI_BLEND_WEIGHT,
        1,
        10,
    )
    confidence = clamp(
        result["confidence"] * technical_weight + advisory["confidence"] * AI_BLEND_WEIGHT,
        0,
        100,
    )

    reasoning = [
        *result["reasoning"],
        f"AI Analysis ({advisory['confidence']:g}% confidence): {ai_recommendation['action']}",
        *advisory["reasoning"][:AI_REASONS_KEPT],
    ]
    alerts = [*result["alerts"], *(f"🤖 AI: {warning}" for warning in advisory["warnings"])]

    return {
        **result,
        "rating": rating,
        "confidence": confidence,
        "reasoning": reasoning,
        "alerts": alerts,
        "recommendation": combine_recommendation(
            result["recommendation"], ai_recommendation["action"], rating, confidence
        ),
        "ai_enhanced": True,
    }
