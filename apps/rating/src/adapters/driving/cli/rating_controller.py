"""Rating CLI Controller

Driving Adapter: turns CLI commands into use case calls
"""

import json
from pathlib import Path

from injector import Injector

from libs.rating.src.domain.services.rating_thresholds import (
    generate_explanation,
    validate_configuration,
)
from libs.rating.src.domain.services.score_normalizer import ScoreNormalizer
from libs.rating.src.ports.calculate_rating_port import CalculateRatingPort
from libs.rating.src.ports.cleanup_rating_history_port import CleanupRatingHistoryPort
from libs.rating.src.ports.get_rating_statistics_port import GetRatingStatisticsPort
from libs.rating.src.ports.rating_notification_port import RatingNotificationPort
from libs.shared.src.errors.domain_error import DomainError

REQUIRED_SECTIONS = ("technical_indicators", "momentum", "volume", "risk", "context")


class RatingController:
    """Token rating CLI controller"""

    def __init__(self, injector: Injector) -> None:
        self._injector = injector

    async def rate(self, input_path: str) -> None:
        """Rate one token from a JSON analysis snapshot

        Args:
            input_path: JSON file with technical_indicators, momentum,
                volume, risk and context sections
        """
        with open(Path(input_path), "r", encoding="utf-8") as f:
            snapshot = json.load(f)

        missing = [section for section in REQUIRED_SECTIONS if section not in snapshot]
        if missing:
            print(f"❌ Missing sections: {', '.join(missing)}")
            return

        use_case = self._injector.get(CalculateRatingPort)
        try:
            result = await use_case.execute(
                snapshot["technical_indicators"],
                snapshot["momentum"],
                snapshot["volume"],
                snapshot["risk"],
                snapshot["context"],
            )
        except DomainError as e:
            print(f"❌ {e.code}: {e.message}")
            return

        print(generate_explanation(result["rating"], result["confidence"], result["components"]))
        print(f"\nRecommendation: {result['recommendation']}")

        if result["reasoning"]:
            print("\nReasoning:")
            for line in result["reasoning"]:
                print(f"  - {line}")
        if result["alerts"]:
            print("\nAlerts:")
            for alert in result["alerts"]:
                print(f"  {alert}")

        token_data = snapshot["context"].get("token_data") or {}
        policy = self._injector.get(RatingNotificationPort)
        notification = policy.evaluate(
            result,
            token_data.get("address", "unknown"),
            token_data.get("volume_24h"),
            snapshot["risk"].get("overall"),
        )
        if notification:
            print(f"\n🔔 [{notification['priority']}] {notification['message']}")

    def statistics(self) -> None:
        """Print aggregate statistics over the stored ratings"""
        query = self._injector.get(GetRatingStatisticsPort)
        stats = query.execute()

        print(f"\n📊 Ratings stored: {stats['total_ratings']}")
        print("=" * 50)
        print(f"Average rating: {stats['average_rating']:.2f}")
        print(f"Average confidence: {stats['average_confidence']:.1f}%")
        for band, count in stats["rating_distribution"].items():
            print(f"  {band:>2}: {'█' * count} {count}")
        usage = stats["enhancement_usage"]
        print(
            f"Multi-timeframe: {usage['multi_timeframe']}, "
            f"sustained momentum: {usage['consecutive_momentum']}, "
            f"exhaustion: {usage['exhaustion_penalty']}"
        )
        print("=" * 50 + "\n")

    def cleanup(self, days_to_keep: int = 7) -> None:
        """Drop expired ratings and trim each token's history

        Args:
            days_to_keep: Age limit in days
        """
        command = self._injector.get(CleanupRatingHistoryPort)
        removed = command.execute(days_to_keep=int(days_to_keep))
        print(
            f"🧹 Removed {removed['database_records']} expired records, "
            f"{removed['memory_ratings']} trimmed ratings"
        )

    def explain(self, rating: float, confidence: float, **components: float) -> None:
        """Explain a rating, e.g. explain 7.5 80 --technical=72 --volume=88"""
        scores = {name: float(score) for name, score in components.items()}
        print(generate_explanation(float(rating), float(confidence), scores))

    def normalize(self, series: str, *values: float, method: str = "z_score") -> None:
        """Normalize values in order against the series' rolling history

        Args:
            series: History series key
            values: Raw values
            method: z_score/min_max/percentile/sigmoid/tanh
        """
        normalizer = self._injector.get(ScoreNormalizer)
        for value in values:
            result = normalizer.normalize(float(value), str(series), {"method": method})
            flag = " (outlier)" if result["is_outlier"] else ""
            print(
                f"{result['original_value']:>12.4f} -> {result['normalized_value']:7.2f} "
                f"confidence {result['confidence']:.2f}{flag}"
            )

    def validate(self) -> None:
        """Check the threshold tables for consistency"""
        report = validate_configuration()
        for error in report["errors"]:
            print(f"❌ {error}")
        for warning in report["warnings"]:
            print(f"⚠️ {warning}")
        if report["is_valid"]:
            print("✅ Rating thresholds are consistent")
