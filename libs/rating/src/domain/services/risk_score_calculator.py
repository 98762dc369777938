"""Risk Score Calculator

Every incoming factor is "higher = riskier"; each is inverted so the
sub-score reads "higher = safer". Rug-pull and holder concentration act
as kill switches: above 80% risk they collapse their sub-scores.
"""

import logging

from injector import inject

from libs.shared.src.constants.rating_weights import RISK_FALLBACK_SCORE
from libs.shared.src.domain.services.clamp import clamp
from libs.shared.src.dtos.rating.analysis_context_dto import AnalysisContextDTO
from libs.shared.src.dtos.rating.factor_analysis_dto import DetailedAnalysisDTO
from libs.shared.src.dtos.rating.risk_assessment_dto import RiskAssessmentDTO
from libs.shared.src.enums.risk_level import RiskLevel

RISK_WEIGHTS = {
    "liquidity": 0.20,
    "volatility": 0.18,
    "rug_pull": 0.17,
    "holder_concentration": 0.15,
    "market_cap": 0.15,
    "age": 0.10,
    "overall": 0.05,
}

RISK_LEVEL_ADJUSTMENTS = {
    RiskLevel.LOW.value: 5,
    RiskLevel.MEDIUM.value: 0,
    RiskLevel.HIGH.value: -10,
    RiskLevel.EXTREME.value: -20,
}
EXTREME_RISK_FLOOR = 5


def calculate_liquidity_risk_score(liquidity_risk: float) -> float:
    inverted = 100 - liquidity_risk
    if inverted >= 80:
        score = 85 + (inverted - 80) * 0.75
    elif inverted >= 60:
        score = 70 + (inverted - 60) * 0.75
    elif inverted >= 40:
        score = 50 + (inverted - 40) * 1.0
    elif inverted >= 20:
        score = 25 + (inverted - 20) * 1.25
    else:
        score = inverted * 1.25
    return clamp(score)


def calculate_volatility_risk_score(volatility_risk: float) -> float:
    """Moderate volatility (20-50) is acceptable, extremes are not"""
    if volatility_risk < 20:
        score = 40 + volatility_risk
    elif volatility_risk <= 50:
        score = 70 + (50 - volatility_risk) * 0.6
    elif volatility_risk <= 70:
        score = 60 - (volatility_risk - 50) * 0.5
    elif volatility_risk <= 85:
        score = 40 - (volatility_risk - 70) * 0.8
    else:
        score = max(5.0, 28 - (volatility_risk - 85) * 1.5)
    return clamp(score)


def calculate_holder_concentration_score(concentration_risk: float) -> float:
    """Above 80% concentration the sub-score collapses to 5-20"""
    if concentration_risk > 80:
        score = max(5.0, 20 - (concentration_risk - 80) * 0.75)
    elif concentration_risk > 60:
        score = 40 - (concentration_risk - 60)
    elif concentration_risk > 40:
        score = 60 - (concentration_risk - 40)
    elif concentration_risk > 20:
        score = 80 - (concentration_risk - 20)
    else:
        score = 80 + (20 - concentration_risk)
    return clamp(score)


def calculate_market_cap_score(market_cap_risk: float, market_cap: float) -> float:
    score = 100 - market_cap_risk

    millions = market_cap / 1e6
    if millions < 1:
        score *= 0.6
    elif millions < 5:
        score *= 0.8
    elif millions > 100:
        score = min(100.0, score * 1.1)

    if market_cap_risk < 20:
        score += 5
    elif market_cap_risk > 80:
        score -= 10

    return clamp(score)


def calculate_age_score(age_risk: float) -> float:
    if age_risk > 90:
        score = max(5.0, 10 - (age_risk - 90) * 0.5)
    elif age_risk > 75:
        score = 25 - (age_risk - 75)
    elif age_risk > 50:
        score = 50 - (age_risk - 50)
    elif age_risk > 25:
        score = 75 - (age_risk - 25)
    else:
        score = 75 + (25 - age_risk)
    return clamp(score)


def calculate_rug_pull_score(rug_pull_risk: float) -> float:
    """Above 80% rug-pull risk the sub-score collapses to 0-5"""
    if rug_pull_risk > 80:
        score = max(0.0, 5 - (rug_pull_risk - 80) * 0.25)
    elif rug_pull_risk > 60:
        score = 20 - (rug_pull_risk - 60) * 0.75
    elif rug_pull_risk > 40:
        score = 40 - (rug_pull_risk - 40)
    elif rug_pull_risk > 20:
        score = 70 - (rug_pull_risk - 20) * 1.5
    else:
        score = 70 + (20 - rug_pull_risk) * 1.5
    return clamp(score)


def apply_risk_level_adjustment(score: float, risk_level: str) -> float:
    adjusted = score + RISK_LEVEL_ADJUSTMENTS.get(risk_level, 0)
    if risk_level == RiskLevel.EXTREME.value:
        adjusted = max(float(EXTREME_RISK_FLOOR), adjusted)
    return clamp(adjusted)


def _factor_scores(
    risk: RiskAssessmentDTO, context: AnalysisContextDTO
) -> dict[str, float]:
    factors = risk["factors"]
    market_cap = context["token_data"].get("market_cap", 0.0)
    return {
        "liquidity": calculate_liquidity_risk_score(factors["liquidity"]),
        "volatility": calculate_volatility_risk_score(factors["volatility"]),
        "holder_concentration": calculate_holder_concentration_score(
            factors["holder_concentration"]
        ),
        "market_cap": calculate_market_cap_score(factors["market_cap"], market_cap),
        "age": calculate_age_score(factors["age"]),
        "rug_pull": calculate_rug_pull_score(factors["rug_pull_risk"]),
        "overall": clamp(100 - risk["overall"]),
    }


def calculate_risk_score(risk: RiskAssessmentDTO, context: AnalysisContextDTO) -> float:
    """Weighted, risk-level adjusted safety sub-score (0-100, 100 = safest)"""
    scores = _factor_scores(risk, context)
    weighted = sum(scores[key] * weight for key, weight in RISK_WEIGHTS.items())
    return apply_risk_level_adjustment(weighted, risk["risk_level"])


def _risk_signal(score: float) -> str:
    if score >= 80:
        return "LOW_RISK"
    if score >= 60:
        return "MODERATE_RISK"
    if score >= 40:
        return "HIGH_RISK"
    if score >= 20:
        return "VERY_HIGH_RISK"
    return "EXTREME_RISK"


def _rug_pull_signal(score: float) -> str:
    if score >= 70:
        return "VERY_LOW"
    if score >= 50:
        return "LOW"
    if score >= 30:
        return "MODERATE"
    if score >= 15:
        return "HIGH"
    if score >= 5:
        return "VERY_HIGH"
    return "EXTREME"


def _liquidity_description(risk: float, score: float) -> str:
    if score >= 80:
        return f"Excellent liquidity ({risk:g}/100 risk) - easy entry/exit"
    if score >= 60:
        return f"Good liquidity ({risk:g}/100 risk) - manageable slippage"
    if score >= 40:
        return f"Moderate liquidity ({risk:g}/100 risk) - some slippage expected"
    if score >= 20:
        return f"Poor liquidity ({risk:g}/100 risk) - high slippage risk"
    return f"Very poor liquidity ({risk:g}/100 risk) - significant exit difficulty"


def _volatility_description(risk: float, score: float) -> str:
    if score >= 70:
        return f"Optimal volatility ({risk:g}/100) for memecoin momentum"
    if score >= 50:
        return f"Acceptable volatility ({risk:g}/100) - manageable risk"
    if score >= 30:
        return f"High volatility ({risk:g}/100) - significant price swings"
    return f"Extreme volatility ({risk:g}/100) - very unpredictable price action"


def _concentration_description(risk: float, score: float) -> str:
    if score >= 70:
        return f"Well-distributed holders ({risk:g}/100 concentration)"
    if score >= 50:
        return f"Moderate holder concentration ({risk:g}/100)"
    if score >= 30:
        return f"High holder concentration ({risk:g}/100) - whale risk"
    return f"Extreme concentration ({risk:g}/100) - major whale manipulation risk"


def _market_cap_description(risk: float, market_cap: float) -> str:
    millions = f"{market_cap / 1e6:.1f}"
    if risk < 30:
        return f"Stable ${millions}M market cap with low volatility"
    if risk < 60:
        return f"${millions}M market cap with moderate stability"
    return f"${millions}M market cap with high instability ({risk:g}/100 risk)"


def _age_description(risk: float, score: float) -> str:
    if score >= 70:
        return f"Mature token ({risk:g}/100 age risk) - established presence"
    if score >= 50:
        return f"Moderately established ({risk:g}/100 age risk)"
    if score >= 30:
        return f"Relatively new token ({risk:g}/100 age risk) - limited history"
    return f"Very new token ({risk:g}/100 age risk) - high uncertainty"


def _rug_pull_description(risk: float, score: float) -> str:
    if score >= 70:
        return f"Very low rug pull risk ({risk:g}/100) - strong fundamentals"
    if score >= 50:
        return f"Low rug pull risk ({risk:g}/100) - good indicators"
    if score >= 30:
        return f"Moderate rug pull risk ({risk:g}/100) - some concerns"
    if score >= 15:
        return f"High rug pull risk ({risk:g}/100) - significant red flags"
    return f"Extreme rug pull risk ({risk:g}/100) - major warning signs"


def analyze_risk(risk: RiskAssessmentDTO, context: AnalysisContextDTO) -> DetailedAnalysisDTO:
    """Factor-by-factor explanation of the risk sub-score, with warnings"""
    scores = _factor_scores(risk, context)
    factors = risk["factors"]
    market_cap = context["token_data"].get("market_cap", 0.0)
    weighted = sum(scores[k] * w for k, w in RISK_WEIGHTS.items())

    def entry(key: str, signal: str, description: str) -> dict:
        return {
            "score": scores[key],
            "signal": signal,
            "description": description,
            "weight": RISK_WEIGHTS[key],
        }

    return {
        "score": apply_risk_level_adjustment(weighted, risk["risk_level"]),
        "factors": {
            "liquidity": entry(
                "liquidity",
                _risk_signal(scores["liquidity"]),
                _liquidity_description(factors["liquidity"], scores["liquidity"]),
            ),
            "volatility": entry(
                "volatility",
                _risk_signal(scores["volatility"]),
                _volatility_description(factors["volatility"], scores["volatility"]),
            ),
            "holder_concentration": entry(
                "holder_concentration",
                _risk_signal(scores["holder_concentration"]),
                _concentration_description(
                    factors["holder_concentration"], scores["holder_concentration"]
                ),
            ),
            "market_cap": entry(
                "market_cap",
                _risk_signal(scores["market_cap"]),
                _market_cap_description(factors["market_cap"], market_cap),
            ),
            "age": entry(
                "age",
                _risk_signal(scores["age"]),
                _age_description(factors["age"], scores["age"]),
            ),
            "rug_pull": entry(
                "rug_pull",
                _rug_pull_signal(scores["rug_pull"]),
                _rug_pull_description(factors["rug_pull_risk"], scores["rug_pull"]),
            ),
            "overall": entry(
                "overall",
                risk["risk_level"].upper(),
                f"Overall risk level: {risk['risk_level'].upper()} ({risk['overall']:g}/100 risk factors)",
            ),
        },
        "warnings": list(risk.get("warnings", [])),
    }


class RiskScoreCalculator:
    """Risk sub-score (Domain Service)

    Falls back to 30 rather than 50: an unreadable risk profile is
    treated as risky.
    """

    @inject
    def __init__(self) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)

    def calculate(self, risk: RiskAssessmentDTO, context: AnalysisContextDTO) -> float:
        try:
            return calculate_risk_score(risk, context)
        except Exception as e:
            self._logger.error(f"Risk score calculation failed: {e}")
            return float(RISK_FALLBACK_SCORE)

    def get_detailed_analysis(
        self, risk: RiskAssessmentDTO, context: AnalysisContextDTO
    ) -> DetailedAnalysisDTO:
        return analyze_risk(risk, context)
