"""Exhaustion Level"""

from enum import Enum


class ExhaustionLevel(Enum):
    """Overall exhaustion level, derived from the clamped total penalty"""

    NONE = "none"  # >= -5
    MILD = "mild"  # >= -15
    MODERATE = "moderate"  # >= -25
    SEVERE = "severe"  # >= -40
    EXTREME = "extreme"
