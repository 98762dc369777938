"""
RatingHistoryStorePort - Driven Port

Implemented by: RatingHistoryMemoryAdapter, RatingHistoryFileAdapter,
RatingHistoryFakeAdapter
"""

from typing import Protocol

from libs.shared.src.dtos.rating.rating_record_dto import RatingRecordDTO
from libs.shared.src.dtos.rating.rating_result_dto import RatingResultDTO


class RatingHistoryStorePort(Protocol):
    """Driven Port for the bounded per-token rating history"""

    def append_rating(
        self, token_address: str, result: RatingResultDTO, breakdown: dict
    ) -> None:
        """Store a rating; the oldest entries beyond the per-token cap are dropped

        Args:
            token_address: Token address
            result: Final rating result
            breakdown: Enhancement values the rating was computed with

        Raises:
            PersistenceError: The store could not be written
        """
        ...

    def get_latest_rating(self, token_address: str) -> RatingResultDTO | None:
        """Most recent stored rating, None for an unseen token"""
        ...

    def get_ratings(self, token_address: str) -> list[RatingResultDTO]:
        """Stored ratings for one token, oldest first"""
        ...

    def get_all_ratings(self) -> dict[str, list[RatingResultDTO]]:
        """Token address -> stored ratings, oldest first"""
        ...

    def get_records(self, token_address: str) -> list[RatingRecordDTO]:
        """Stored records (rating plus breakdown) for one token"""
        ...

    def cleanup(self, keep_last: int) -> int:
        """Keep only the newest keep_last ratings per token

        Returns:
            int: Number of ratings removed
        """
        ...

    def remove_older_than(self, cutoff_timestamp: float) -> int:
        """Drop records stamped before cutoff_timestamp (epoch milliseconds)

        Returns:
            int: Number of records removed
        """
        ...
