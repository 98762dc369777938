"""Rating Engine Timeouts (seconds)"""

OVERALL_TIMEOUT = 30.0  # whole rating call, hard cancellation
COMPONENTS_TIMEOUT = 15.0  # four base calculators together
COMPONENT_TIMEOUT = 5.0  # each base calculator
MULTI_TIMEFRAME_TIMEOUT = 10.0
CONSECUTIVE_MOMENTUM_TIMEOUT = 8.0
EXHAUSTION_PENALTY_TIMEOUT = 5.0
STORAGE_TIMEOUT = 5.0  # rating history read/write
AI_ADVISORY_TIMEOUT = 15.0
