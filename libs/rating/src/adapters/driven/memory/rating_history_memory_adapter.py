"""Rating History Memory Adapter"""

import time

from libs.rating.src.ports.rating_history_store_port import RatingHistoryStorePort
from libs.shared.src.constants.rating_history import MAX_RATINGS_PER_TOKEN
from libs.shared.src.dtos.rating.rating_record_dto import RatingRecordDTO
from libs.shared.src.dtos.rating.rating_result_dto import RatingResultDTO


class RatingHistoryMemoryAdapter(RatingHistoryStorePort):
    """In-process rating history, at most MAX_RATINGS_PER_TOKEN per token"""

    def __init__(self, max_per_token: int = MAX_RATINGS_PER_TOKEN) -> None:
        self._records: dict[str, list[RatingRecordDTO]] = {}
        self._max_per_token = max_per_token

    def append_rating(
        self, token_address: str, result: RatingResultDTO, breakdown: dict
    ) -> None:
        records = self._records.setdefault(token_address, [])
        records.append(
            {
                "token_address": token_address,
                "timestamp": result.get("timestamp", time.time() * 1000),
                "result": result,
                "breakdown": breakdown,
            }
        )
        if len(records) > self._max_per_token:
            del records[: len(records) - self._max_per_token]

    def get_latest_rating(self, token_address: str) -> RatingResultDTO | None:
        records = self._records.get(token_address)
        if not records:
            return None
        return records[-1]["result"]

    def get_ratings(self, token_address: str) -> list[RatingResultDTO]:
        return [record["result"] for record in self._records.get(token_address, [])]

    def get_all_ratings(self) -> dict[str, list[RatingResultDTO]]:
        return {token: self.get_ratings(token) for token in self._records}

    def get_records(self, token_address: str) -> list[RatingRecordDTO]:
        return list(self._records.get(token_address, []))

    def cleanup(self, keep_last: int) -> int:
        removed = 0
        for records in self._records.values():
            excess = len(records) - keep_last
            if excess > 0:
                del records[:excess]
                removed += excess
        return removed

    def remove_older_than(self, cutoff_timestamp: float) -> int:
        removed = 0
        for token in list(self._records):
            kept = [r for r in self._records[token] if r["timestamp"] >= cutoff_timestamp]
            removed += len(self._records[token]) - len(kept)
            if kept:
                self._records[token] = kept
            else:
                del self._records[token]
        return removed
