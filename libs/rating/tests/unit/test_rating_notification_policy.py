"""RatingNotificationPolicy Unit Tests"""

import pytest

from libs.rating.src.application.policies.rating_notification_policy import (
    RatingNotificationPolicy,
)


def result(rating: float, confidence: float, **components):
    scores = {
        "technical": 85.0,
        "momentum": 80.0,
        "volume": 90.0,
        "risk": 75.0,
        "pattern": 0.0,
        "fundamentals": 0.0,
    }
    scores.update(components)
    return {
        "rating": rating,
        "confidence": confidence,
        "components": scores,
        "weights": {},
        "reasoning": [],
        "alerts": ["🚀 EXCEPTIONAL OPPORTUNITY: Rare high-confidence rating above 9"],
        "recommendation": "strong_buy",
    }


class TestRatingNotificationPolicy:
    """Rating notification policy"""

    @pytest.fixture
    def policy(self):
        return RatingNotificationPolicy()

    def test_top_rating_notifies(self, policy) -> None:
        """A 9+ rating with volume and low risk is critical"""
        alert = policy.evaluate(result(9.2, 90.0), "token-1", volume_24h=2_000_000, risk_score=30.0)

        assert alert is not None
        assert alert["priority"] == "critical"
        assert alert["label"] == "Excellent"
        assert alert["message"] == (
            "⭐ token-1: 9.2/10 (Excellent), confidence 90.0%, strong_buy"
        )
        assert alert["alerts"] == result(9.2, 90.0)["alerts"]

    def test_missing_component_drops_to_looser_threshold(self, policy) -> None:
        """A zero volume score rules out the strictest threshold"""
        alert = policy.evaluate(result(8.1, 82.0, volume=0.0), "token-1")

        assert alert is not None
        assert alert["priority"] == "high"

    def test_below_thresholds(self, policy) -> None:
        """Ordinary ratings produce no alert"""
        assert policy.evaluate(result(6.0, 90.0), "token-1") is None
        assert policy.evaluate(result(9.5, 60.0), "token-1") is None

    def test_risky_token_filtered(self, policy) -> None:
        """Risk above every threshold's limit blocks the alert"""
        assert policy.evaluate(result(9.5, 95.0), "token-1", risk_score=90.0) is None
