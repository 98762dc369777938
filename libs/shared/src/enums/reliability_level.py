"""Confidence Reliability Level"""

from enum import Enum


class ReliabilityLevel(Enum):
    """Reliability label attached to a detailed confidence result"""

    VERY_HIGH = "very_high"  # >= 85
    HIGH = "high"  # >= 70
    MODERATE = "moderate"  # >= 55
    LOW = "low"  # >= 40
    VERY_LOW = "very_low"
