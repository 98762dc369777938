"""Rating engine configuration: defaults, merge and validation"""

from libs.rating.src.domain.services.weight_adjuster import validate_weights
from libs.shared.src.constants.rating_timeouts import (
    AI_ADVISORY_TIMEOUT,
    COMPONENT_TIMEOUT,
    COMPONENTS_TIMEOUT,
    CONSECUTIVE_MOMENTUM_TIMEOUT,
    EXHAUSTION_PENALTY_TIMEOUT,
    MULTI_TIMEFRAME_TIMEOUT,
    OVERALL_TIMEOUT,
    STORAGE_TIMEOUT,
)
from libs.shared.src.constants.rating_weights import (
    DEFAULT_AI_RATING_THRESHOLD,
    DEFAULT_CONFIDENCE_THRESHOLD,
    DEFAULT_SMOOTHING_FACTOR,
    DEFAULT_WEIGHTS,
)
from libs.shared.src.dtos.rating.rating_engine_config_dto import (
    RatingEngineConfigDTO,
    RatingTimeoutsDTO,
)

DEFAULT_TIMEOUTS: RatingTimeoutsDTO = {
    "overall": OVERALL_TIMEOUT,
    "components": COMPONENTS_TIMEOUT,
    "component": COMPONENT_TIMEOUT,
    "multi_timeframe": MULTI_TIMEFRAME_TIMEOUT,
    "consecutive_momentum": CONSECUTIVE_MOMENTUM_TIMEOUT,
    "exhaustion_penalty": EXHAUSTION_PENALTY_TIMEOUT,
    "storage": STORAGE_TIMEOUT,
    "ai_advisory": AI_ADVISORY_TIMEOUT,
}

DEFAULT_ENGINE_CONFIG: RatingEngineConfigDTO = {
    "weights": dict(DEFAULT_WEIGHTS),
    "adaptive_weighting": True,
    "risk_adjustment": True,
    "confidence_threshold": DEFAULT_CONFIDENCE_THRESHOLD,
    "smoothing_factor": DEFAULT_SMOOTHING_FACTOR,
    "enable_multi_timeframe": True,
    "enable_consecutive_momentum": True,
    "enable_exhaustion_penalty": True,
    "enable_ai_advisory": True,
    "ai_rating_threshold": DEFAULT_AI_RATING_THRESHOLD,
    "timeouts": dict(DEFAULT_TIMEOUTS),
}

FEATURE_FLAGS = (
    "adaptive_weighting",
    "risk_adjustment",
    "enable_multi_timeframe",
    "enable_consecutive_momentum",
    "enable_exhaustion_penalty",
    "enable_ai_advisory",
)


def merge_engine_config(
    base: RatingEngineConfigDTO, overrides: RatingEngineConfigDTO | None
) -> RatingEngineConfigDTO:
    """Overrides over base; weights and timeouts merge key by key"""
    overrides = overrides or {}
    merged: RatingEngineConfigDTO = {**base, **overrides}
    merged["weights"] = {**base["weights"], **overrides.get("weights", {})}
    merged["timeouts"] = {**base["timeouts"], **overrides.get("timeouts", {})}
    return merged


def validate_engine_config(config: RatingEngineConfigDTO) -> list[str]:
    errors = validate_weights(config["weights"])

    smoothing = config["smoothing_factor"]
    if not 0 <= smoothing <= 1:
        errors.append(f"smoothing_factor must be within [0, 1], got {smoothing}")

    threshold = config["confidence_threshold"]
    if not 0 <= threshold <= 100:
        errors.append(f"confidence_threshold must be within [0, 100], got {threshold}")

    ai_threshold = config["ai_rating_threshold"]
    if not 1 <= ai_threshold <= 10:
        errors.append(f"ai_rating_threshold must be within [1, 10], got {ai_threshold}")

    for name, seconds in config["timeouts"].items():
        if seconds <= 0:
            errors.append(f"Timeout '{name}' must be positive, got {seconds}")

    return errors
