"""Rating History Fake Adapter"""

from libs.rating.src.adapters.driven.memory.rating_history_memory_adapter import (
    RatingHistoryMemoryAdapter,
)
from libs.shared.src.dtos.rating.rating_result_dto import RatingResultDTO
from libs.shared.src.errors.persistence_error import PersistenceError


class RatingHistoryFakeAdapter(RatingHistoryMemoryAdapter):
    """Memory store whose writes can be made to fail"""

    def __init__(self) -> None:
        super().__init__()
        self._should_fail = False
        self._append_calls = 0

    def set_should_fail(self, should_fail: bool) -> None:
        self._should_fail = should_fail

    def seed(self, token_address: str, ratings: list[RatingResultDTO]) -> None:
        for rating in ratings:
            super().append_rating(token_address, rating, {})

    def append_rating(
        self, token_address: str, result: RatingResultDTO, breakdown: dict
    ) -> None:
        self._append_calls += 1
        if self._should_fail:
            raise PersistenceError("append_rating", "simulated write failure")
        super().append_rating(token_address, result, breakdown)

    def get_append_calls(self) -> int:
        return self._append_calls
