"""
RatingNotificationPort - Driving Port

Implemented by: RatingNotificationPolicy
"""

from typing import Protocol

from libs.shared.src.dtos.rating.rating_alert_dto import RatingAlertDTO
from libs.shared.src.dtos.rating.rating_result_dto import RatingResultDTO


class RatingNotificationPort(Protocol):
    """Driving Port for RatingNotificationPolicy"""

    def evaluate(
        self,
        result: RatingResultDTO,
        token_address: str,
        volume_24h: float | None = None,
        risk_score: float | None = None,
    ) -> RatingAlertDTO | None:
        """Build an alert for a notifiable rating

        Returns:
            RatingAlertDTO | None: None when no notification threshold is met
        """
        ...
