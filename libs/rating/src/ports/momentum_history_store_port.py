"""
MomentumHistoryStorePort - Driven Port

Implemented by: MomentumHistoryMemoryAdapter, MomentumHistoryNullAdapter
"""

from typing import Protocol

from libs.shared.src.dtos.rating.consecutive_momentum_dto import MomentumPeriodDTO


class MomentumHistoryStorePort(Protocol):
    """Driven Port for per-token momentum streaks and volume samples"""

    def is_enabled(self) -> bool:
        """False for the null store; disables streak tracking"""
        ...

    def get_periods(
        self, token_address: str, timeframe: str, limit: int
    ) -> list[MomentumPeriodDTO]:
        """Stored periods, oldest first

        Args:
            token_address: Token address
            timeframe: Streak timeframe label (15m)
            limit: Maximum number of most recent periods

        Returns:
            list[MomentumPeriodDTO]: Ordered by timestamp
        """
        ...

    def append_and_get_streak(
        self, token_address: str, timeframe: str, period: MomentumPeriodDTO
    ) -> list[MomentumPeriodDTO]:
        """Append a period (replacing one from the same interval) and return the chain

        Args:
            token_address: Token address
            timeframe: Streak timeframe label
            period: Period snapshot for the current interval

        Returns:
            list[MomentumPeriodDTO]: Stored periods after the append, oldest first
        """
        ...

    def reset_streak(self, token_address: str, timeframe: str) -> None:
        """Drop the stored chain after a trend break or an invalid period"""
        ...

    def get_historical_context(
        self, token_address: str, timeframes: list[str], limit: int
    ) -> dict[str, list[MomentumPeriodDTO]]:
        """Recent periods for several timeframes

        Returns:
            dict[str, list[MomentumPeriodDTO]]: Timeframe label -> periods
        """
        ...

    def record_volume(self, token_address: str, volume: float) -> None:
        """Append one volume sample to the token's rolling window"""
        ...

    def get_volume_history(self, token_address: str, limit: int) -> list[float]:
        """Most recent volume samples, oldest first"""
        ...
