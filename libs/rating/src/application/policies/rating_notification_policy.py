"""Rating Notification Policy

A rating becomes an alert when it clears one of the notification
thresholds (rating, confidence, volume, risk and the components that
must have contributed).
"""

import logging

from injector import inject

from libs.rating.src.domain.services.rating_thresholds import (
    get_rating_threshold,
    should_notify,
)
from libs.rating.src.ports.rating_notification_port import RatingNotificationPort
from libs.shared.src.dtos.rating.rating_alert_dto import RatingAlertDTO
from libs.shared.src.dtos.rating.rating_result_dto import RatingResultDTO

SCORED_COMPONENTS = ("technical", "momentum", "volume", "risk", "pattern")


class RatingNotificationPolicy(RatingNotificationPort):
    """Rating notification policy"""

    @inject
    def __init__(self) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)

    def evaluate(
        self,
        result: RatingResultDTO,
        token_address: str,
        volume_24h: float | None = None,
        risk_score: float | None = None,
    ) -> RatingAlertDTO | None:
        """Decide whether the rating should reach a human

        Args:
            result: Final rating
            token_address: Token address
            volume_24h: 24h volume in USD, skips the volume filter when None
            risk_score: Overall risk (higher is riskier), skips the risk filter when None

        Returns:
            RatingAlertDTO | None: None when no threshold is met
        """
        available = [
            name for name in SCORED_COMPONENTS if result["components"].get(name, 0) > 0
        ]
        decision = should_notify(
            result["rating"], result["confidence"], volume_24h, risk_score, available
        )
        if not decision["should_notify"]:
            return None

        band = get_rating_threshold(result["rating"])
        self._logger.info(
            f"Notification for {token_address}: {result['rating']:.1f}/10 "
            f"priority={decision['priority']}"
        )
        return {
            "token_address": token_address,
            "priority": decision["priority"],
            "rating": result["rating"],
            "confidence": result["confidence"],
            "label": band["label"],
            "message": (
                f"{band['icon']} {token_address}: {result['rating']:.1f}/10 ({band['label']}), "
                f"confidence {result['confidence']:.1f}%, {result['recommendation']}"
            ),
            "alerts": list(result["alerts"]),
        }
