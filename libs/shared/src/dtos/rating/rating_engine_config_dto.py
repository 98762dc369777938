"""Rating Engine Config DTO"""

from typing import TypedDict


class RatingWeightsDTO(TypedDict):
    """Component weights, must sum to 1.0"""

    technical: float
    momentum: float
    volume: float
    risk: float
    multi_timeframe: float
    consecutive_momentum: float


class RatingTimeoutsDTO(TypedDict):
    """Timeouts in seconds"""

    overall: float
    components: float
    component: float
    multi_timeframe: float
    consecutive_momentum: float
    exhaustion_penalty: float
    storage: float
    ai_advisory: float


class RatingEngineConfigDTO(TypedDict, total=False):
    """Engine configuration; missing keys take the defaults"""

    weights: RatingWeightsDTO
    adaptive_weighting: bool
    risk_adjustment: bool
    confidence_threshold: float
    smoothing_factor: float
    enable_multi_timeframe: bool
    enable_consecutive_momentum: bool
    enable_exhaustion_penalty: bool
    enable_ai_advisory: bool
    ai_rating_threshold: float
    timeouts: RatingTimeoutsDTO
