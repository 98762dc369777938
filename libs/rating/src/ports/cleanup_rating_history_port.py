"""
CleanupRatingHistoryPort - Driving Port

Implemented by: CleanupRatingHistoryCommand
"""

from typing import Protocol


class CleanupRatingHistoryPort(Protocol):
    """Driving Port for CleanupRatingHistoryCommand"""

    def execute(self, days_to_keep: int = 7) -> dict[str, int]:
        """Trim stored rating history

        Args:
            days_to_keep: Age limit for persisted records

        Returns:
            dict[str, int]: database_records and memory_ratings removed
        """
        ...
