"""Momentum History Null Adapter"""

from libs.rating.src.ports.momentum_history_store_port import (
    MomentumHistoryStorePort,
)
from libs.shared.src.dtos.rating.consecutive_momentum_dto import MomentumPeriodDTO


class MomentumHistoryNullAdapter(MomentumHistoryStorePort):
    """Store that remembers nothing; streak tracking reports itself disabled"""

    def is_enabled(self) -> bool:
        return False

    def get_periods(
        self, token_address: str, timeframe: str, limit: int
    ) -> list[MomentumPeriodDTO]:
        return []

    def append_and_get_streak(
        self, token_address: str, timeframe: str, period: MomentumPeriodDTO
    ) -> list[MomentumPeriodDTO]:
        return []

    def reset_streak(self, token_address: str, timeframe: str) -> None:
        return None

    def get_historical_context(
        self, token_address: str, timeframes: list[str], limit: int
    ) -> dict[str, list[MomentumPeriodDTO]]:
        return {timeframe: [] for timeframe in timeframes}

    def record_volume(self, token_address: str, volume: float) -> None:
        return None

    def get_volume_history(self, token_address: str, limit: int) -> list[float]:
        return []
