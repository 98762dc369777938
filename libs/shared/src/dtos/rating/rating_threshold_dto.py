"""Rating Threshold DTOs"""

from typing import TypedDict, NotRequired


class NotificationThresholdDTO(TypedDict):
    rating: float
    confidence: float
    min_volume: float  # USD
    max_risk: float
    required_factors: list[str]


class NotificationDecisionDTO(TypedDict):
    """Outcome of checking a rating against the notification thresholds"""

    should_notify: bool
    priority: str
    """critical/high/medium/low/none"""

    threshold: NotRequired[NotificationThresholdDTO]


class RiskAdjustedRatingDTO(TypedDict):
    adjusted_rating: float
    adjusted_confidence: float


class AlertConditionsResultDTO(TypedDict):
    """Special alert conditions that fired and the bonuses they carry"""

    alerts: list[str]
    rating_bonus: float
    confidence_bonus: float


class ThresholdValidationDTO(TypedDict):
    is_valid: bool
    errors: list[str]
    warnings: list[str]
