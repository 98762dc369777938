"""Cleanup Rating History Command"""

import logging
import time

from injector import inject

from libs.rating.src.ports.cleanup_rating_history_port import CleanupRatingHistoryPort
from libs.rating.src.ports.rating_history_store_port import RatingHistoryStorePort
from libs.shared.src.constants.rating_history import CLEANUP_KEEP_LAST

DAY_MS = 24 * 60 * 60 * 1000


class CleanupRatingHistoryCommand(CleanupRatingHistoryPort):
    """Drops expired records, then trims each token to its newest ratings"""

    @inject
    def __init__(self, rating_history_store: RatingHistoryStorePort) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)
        self._rating_history_store = rating_history_store

    def execute(self, days_to_keep: int = 7) -> dict[str, int]:
        """Clean up rating history

        Args:
            days_to_keep: Records older than this many days are removed

        Returns:
            dict[str, int]: database_records (expired) and memory_ratings (trimmed)
        """
        cutoff = time.time() * 1000 - days_to_keep * DAY_MS

        expired = self._rating_history_store.remove_older_than(cutoff)
        trimmed = self._rating_history_store.cleanup(CLEANUP_KEEP_LAST)

        self._logger.info(
            f"Rating history cleanup: {expired} expired records, "
            f"{trimmed} ratings beyond the newest {CLEANUP_KEEP_LAST} per token"
        )
        return {"database_records": expired, "memory_ratings": trimmed}
