"""Volume Analysis DTO"""

from typing import TypedDict


class VolumeProfileDTO(TypedDict):
    """Buy/sell pressure split"""

    buy_pressure: float  # 0-1
    sell_pressure: float  # 0-1
    net_flow: float  # -1..1


class VolumeAnalysisDTO(TypedDict):
    """Volume snapshot"""

    average_volume: float
    current_volume: float
    volume_spike: bool
    volume_spike_factor: float
    """current / average volume ratio"""

    volume_profile: VolumeProfileDTO
    liquidity_score: float
    """Liquidity score (0-100)"""
