"""Consecutive Momentum Streak Parameters"""

STREAK_TIMEFRAME = "15m"
STREAK_INTERVAL_MINUTES = 15
STREAK_HISTORY_LIMIT = 10
MAX_BOOST_PERCENTAGE = 25  # hard ceiling of the streak bonus
SECOND_PERIOD_BONUS = 15
RSI_EXHAUSTION_THRESHOLD = 85
MIN_STRENGTH_THRESHOLD = 45
VOLUME_CONFIRMATION_REQUIRED = False  # default ON never triggers
VOLUME_CONFIRMATION_RATIO = 1.1
STRENGTH_BREAK_DROP = 50  # strength drop that breaks a streak
MAX_PERIOD_GAP_MINUTES = 30
DIMINISHING_RETURNS_FACTOR = 0.8
MAX_STORED_PERIODS = 96  # one day of 15-minute periods per token
VOLUME_HISTORY_SIZE = 100  # volume samples per token
