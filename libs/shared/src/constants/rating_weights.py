"""Rating Engine Default Weights and Flags"""

# Base component weights (sum to 1.0)
DEFAULT_WEIGHTS = {
    "volume": 0.35,  # volume leads in momentum-driven tokens
    "momentum": 0.25,
    "technical": 0.20,
    "multi_timeframe": 0.15,
    "risk": 0.05,
    "consecutive_momentum": 0.0,  # bonus path, off by default
}
WEIGHT_SUM_TOLERANCE = 0.01

# Adaptive weighting shifts
TRENDING_TECHNICAL_SHIFT = 0.05  # non-sideways market
HIGH_VOLATILITY_INDEX = 70  # market volatility index threshold
HIGH_VOLATILITY_RISK_SHIFT = 0.05
EXCEPTIONAL_VOLUME_SCORE = 85  # volume sub-score threshold
EXCEPTIONAL_VOLUME_SHIFT = 0.05

# Engine flags
DEFAULT_CONFIDENCE_THRESHOLD = 70
DEFAULT_SMOOTHING_FACTOR = 0.15
DEFAULT_AI_RATING_THRESHOLD = 6.0
AI_BLEND_WEIGHT = 0.3  # AI share of the blended rating and confidence

# Scaling
LOGISTIC_STEEPNESS = 6
NEUTRAL_SCORE = 50
RISK_FALLBACK_SCORE = 30
