"""Risk Assessment DTO"""

from typing import TypedDict


class RiskFactorsDTO(TypedDict):
    """Risk factors, each 0-100 where higher = riskier"""

    liquidity: float
    volatility: float
    holder_concentration: float
    market_cap: float
    age: float
    rug_pull_risk: float


class RiskAssessmentDTO(TypedDict):
    """Risk snapshot"""

    overall: float
    """Overall risk (0 = low, 100 = high)"""

    factors: RiskFactorsDTO
    warnings: list[str]
    risk_level: str
    """low/medium/high/extreme"""
