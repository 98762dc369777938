"""Rating Alert DTO"""

from typing import TypedDict


class RatingAlertDTO(TypedDict):
    """Notification decision for one rating"""

    token_address: str
    priority: str
    """critical/high/medium/low"""

    rating: float
    confidence: float
    label: str
    message: str
    alerts: list[str]
