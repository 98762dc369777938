"""Risk Level"""

from enum import Enum


class RiskLevel(Enum):
    """Categorical risk level of a token"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"
