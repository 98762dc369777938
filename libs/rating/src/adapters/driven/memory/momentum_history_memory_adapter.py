"""Momentum History Memory Adapter"""

from libs.rating.src.ports.momentum_history_store_port import (
    MomentumHistoryStorePort,
)
from libs.shared.src.constants.momentum_streak import (
    MAX_STORED_PERIODS,
    VOLUME_HISTORY_SIZE,
)
from libs.shared.src.dtos.rating.consecutive_momentum_dto import MomentumPeriodDTO


class MomentumHistoryMemoryAdapter(MomentumHistoryStorePort):
    """In-process momentum history

    Periods are keyed by (token, timeframe). A period whose interval start
    matches the newest stored one replaces it, so re-rating a token inside
    the same interval never extends the chain.
    """

    def __init__(self) -> None:
        self._periods: dict[tuple[str, str], list[MomentumPeriodDTO]] = {}
        self._volumes: dict[str, list[float]] = {}

    def is_enabled(self) -> bool:
        return True

    def get_periods(
        self, token_address: str, timeframe: str, limit: int
    ) -> list[MomentumPeriodDTO]:
        periods = self._periods.get((token_address, timeframe), [])
        return list(periods[-limit:]) if limit > 0 else []

    def append_and_get_streak(
        self, token_address: str, timeframe: str, period: MomentumPeriodDTO
    ) -> list[MomentumPeriodDTO]:
        periods = self._periods.setdefault((token_address, timeframe), [])

        if periods and periods[-1]["timestamp"] == period["timestamp"]:
            periods[-1] = {**period, "period_index": periods[-1]["period_index"]}
        else:
            periods.append({**period, "period_index": len(periods)})

        if len(periods) > MAX_STORED_PERIODS:
            del periods[: len(periods) - MAX_STORED_PERIODS]

        return list(periods)

    def reset_streak(self, token_address: str, timeframe: str) -> None:
        self._periods.pop((token_address, timeframe), None)

    def get_historical_context(
        self, token_address: str, timeframes: list[str], limit: int
    ) -> dict[str, list[MomentumPeriodDTO]]:
        return {
            timeframe: self.get_periods(token_address, timeframe, limit)
            for timeframe in timeframes
        }

    def record_volume(self, token_address: str, volume: float) -> None:
        volumes = self._volumes.setdefault(token_address, [])
        volumes.append(volume)
        if len(volumes) > VOLUME_HISTORY_SIZE:
            del volumes[: len(volumes) - VOLUME_HISTORY_SIZE]

    def get_volume_history(self, token_address: str, limit: int) -> list[float]:
        volumes = self._volumes.get(token_address, [])
        return list(volumes[-limit:]) if limit > 0 else []
