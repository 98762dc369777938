"""Rating History File Adapter"""

import json
import logging
import time
from pathlib import Path

from libs.rating.src.ports.rating_history_store_port import RatingHistoryStorePort
from libs.shared.src.constants.rating_history import MAX_RATINGS_PER_TOKEN
from libs.shared.src.dtos.rating.rating_record_dto import RatingRecordDTO
from libs.shared.src.dtos.rating.rating_result_dto import RatingResultDTO
from libs.shared.src.errors.persistence_error import PersistenceError


class RatingHistoryFileAdapter(RatingHistoryStorePort):
    """Rating history persisted as JSON

    Layout: {"ratings": {token_address: [RatingRecordDTO, ...]}}. The whole
    file is rewritten on every change.
    """

    def __init__(
        self,
        file_path: str = "data/rating_history.json",
        max_per_token: int = MAX_RATINGS_PER_TOKEN,
    ) -> None:
        self._path = Path(file_path)
        self._max_per_token = max_per_token
        self._logger = logging.getLogger(self.__class__.__name__)
        self._ensure_file_exists()

    def _ensure_file_exists(self) -> None:
        if not self._path.exists():
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._save_data({"ratings": {}})

    def _load_data(self) -> dict:
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (FileNotFoundError, json.JSONDecodeError) as e:
            self._logger.warning(f"Rating history unreadable, starting empty: {e}")
            return {"ratings": {}}

    def _save_data(self, data: dict) -> None:
        try:
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
        except OSError as e:
            raise PersistenceError("write", str(e)) from e

    def _records(self, data: dict, token_address: str) -> list[RatingRecordDTO]:
        return data.get("ratings", {}).get(token_address, [])

    def append_rating(
        self, token_address: str, result: RatingResultDTO, breakdown: dict
    ) -> None:
        data = self._load_data()
        records = data.setdefault("ratings", {}).setdefault(token_address, [])
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
        self._save_data(data)

    def get_latest_rating(self, token_address: str) -> RatingResultDTO | None:
        records = self._records(self._load_data(), token_address)
        if not records:
            return None
        return records[-1]["result"]

    def get_ratings(self, token_address: str) -> list[RatingResultDTO]:
        return [r["result"] for r in self._records(self._load_data(), token_address)]

    def get_all_ratings(self) -> dict[str, list[RatingResultDTO]]:
        data = self._load_data()
        return {
            token: [r["result"] for r in records]
            for token, records in data.get("ratings", {}).items()
        }

    def get_records(self, token_address: str) -> list[RatingRecordDTO]:
        return self._records(self._load_data(), token_address)

    def cleanup(self, keep_last: int) -> int:
        data = self._load_data()
        removed = 0
        for records in data.get("ratings", {}).values():
            excess = len(records) - keep_last
            if excess > 0:
                del records[:excess]
                removed += excess
        if removed:
            self._save_data(data)
        return removed

    def remove_older_than(self, cutoff_timestamp: float) -> int:
        data = self._load_data()
        ratings = data.get("ratings", {})
        removed = 0
        for token in list(ratings):
            kept = [r for r in ratings[token] if r["timestamp"] >= cutoff_timestamp]
            removed += len(ratings[token]) - len(kept)
            if kept:
                ratings[token] = kept
            else:
                del ratings[token]
        if removed:
            self._save_data(data)
        return removed
