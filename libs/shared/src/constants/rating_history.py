"""Rating History Retention"""

MAX_RATINGS_PER_TOKEN = 50  # bounded history per token
CLEANUP_KEEP_LAST = 20  # ratings kept per token by cleanup
MIN_RATINGS_FOR_ACCURACY = 3  # below this the default accuracy applies
DEFAULT_HISTORICAL_ACCURACY = 0.7
ESTABLISHED_HISTORICAL_ACCURACY = 0.75
MAX_PREDICTIONS_PER_TOKEN = 100
NORMALIZER_HISTORY_SIZE = 1000  # points kept per normalizer series
