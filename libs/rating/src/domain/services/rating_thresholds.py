"""Rating Thresholds

Lookups over the rating scale, notification thresholds, risk adjustments,
weight presets and special alert conditions, plus the human-readable
explanation of a rating.
"""

import math

from libs.shared.src.constants.rating_thresholds import (
    ALERT_CONDITIONS,
    COMPONENT_EMOJIS,
    HIGH_VOLATILITY_PRESET_INDEX,
    MAX_CONFIDENCE,
    MIN_CONFIDENCE,
    NOTIFICATION_THRESHOLDS,
    RATING_SCALE,
    RISK_ADJUSTMENTS,
    WEIGHT_CONFIGS,
)
from libs.shared.src.constants.rating_weights import WEIGHT_SUM_TOLERANCE
from libs.shared.src.domain.services.clamp import clamp
from libs.shared.src.dtos.rating.rating_threshold_dto import (
    AlertConditionsResultDTO,
    NotificationDecisionDTO,
    RiskAdjustedRatingDTO,
    ThresholdValidationDTO,
)
from libs.shared.src.enums.market_trend import MarketTrend
from libs.shared.src.enums.notification_priority import NotificationPriority

DEFAULT_COMPONENT_EMOJI = "📋"
MARKET_PRESETS = {
    MarketTrend.BULL.value: "bull_market",
    MarketTrend.BEAR.value: "bear_market",
    MarketTrend.SIDEWAYS.value: "sideways_market",
}


def get_rating_threshold(rating: float) -> dict:
    """Scale entry for the band the rating rounds into"""
    band = math.floor(clamp(rating, 1, 10) + 0.5)
    return RATING_SCALE[band]


def should_notify(
    rating: float,
    confidence: float,
    volume: float | None = None,
    risk_score: float | None = None,
    available_factors: list[str] | None = None,
) -> NotificationDecisionDTO:
    """Check a rating against the notification thresholds

    Thresholds are ordered from strictest to loosest; the first one the
    rating satisfies decides. Volume and risk filters only apply when the
    caller supplies them.

    Args:
        rating: Final rating (1-10)
        confidence: Rating confidence (0-100)
        volume: 24h volume in USD
        risk_score: Overall risk (0-100, higher is riskier)
        available_factors: Component names with a usable score

    Returns:
        NotificationDecisionDTO: priority "none" when nothing matched
    """
    factors = available_factors or []

    for threshold in NOTIFICATION_THRESHOLDS:
        if rating < threshold["rating"] or confidence < threshold["confidence"]:
            continue
        if volume is not None and volume < threshold["min_volume"]:
            continue
        if risk_score is not None and risk_score > threshold["max_risk"]:
            continue
        if any(factor not in factors for factor in threshold["required_factors"]):
            continue

        return {
            "should_notify": True,
            "threshold": threshold,
            "priority": get_rating_threshold(rating)["priority"],
        }

    return {"should_notify": False, "priority": NotificationPriority.NONE.value}


def apply_risk_adjustment(
    rating: float, confidence: float, risk_level: str
) -> RiskAdjustedRatingDTO:
    adjustment = RISK_ADJUSTMENTS.get(risk_level, RISK_ADJUSTMENTS["medium"])
    return {
        "adjusted_rating": clamp(rating + adjustment["rating_modifier"], 1, 10),
        "adjusted_confidence": clamp(
            confidence * adjustment["confidence_modifier"],
            MIN_CONFIDENCE,
            MAX_CONFIDENCE,
        ),
    }


def get_weights(market_trend: str, volatility_index: float) -> dict[str, float]:
    """Weight preset for the market regime; high volatility wins"""
    if volatility_index > HIGH_VOLATILITY_PRESET_INDEX:
        return dict(WEIGHT_CONFIGS["high_volatility"])
    return dict(WEIGHT_CONFIGS[MARKET_PRESETS.get(market_trend, "default")])


def check_alert_conditions(
    volume_spike_factor: float,
    breakout_potential: float,
    momentum_surge: float,
    technical_confluence: float,
) -> AlertConditionsResultDTO:
    alerts = []
    rating_bonus = 0.0
    confidence_bonus = 0.0

    fired = []
    if volume_spike_factor >= ALERT_CONDITIONS["volume_spike"]["threshold"]:
        alerts.append(f"🚨 VOLUME SPIKE: {volume_spike_factor:.1f}x average volume")
        fired.append("volume_spike")
    if breakout_potential >= ALERT_CONDITIONS["breakout_pattern"]["threshold"]:
        alerts.append(f"📊 BREAKOUT PATTERN: {breakout_potential * 100:.0f}% probability")
        fired.append("breakout_pattern")
    if momentum_surge >= ALERT_CONDITIONS["momentum_surge"]["threshold"]:
        alerts.append(f"⚡ MOMENTUM SURGE: {momentum_surge * 100:.0f}% increase")
        fired.append("momentum_surge")
    if technical_confluence >= ALERT_CONDITIONS["technical_confluence"]["threshold"]:
        alerts.append(
            f"🎯 TECHNICAL CONFLUENCE: {technical_confluence * 100:.0f}% indicator agreement"
        )
        fired.append("technical_confluence")

    for condition in fired:
        rating_bonus += ALERT_CONDITIONS[condition]["rating_bonus"]
        confidence_bonus += ALERT_CONDITIONS[condition]["confidence_bonus"]

    return {
        "alerts": alerts,
        "rating_bonus": rating_bonus,
        "confidence_bonus": confidence_bonus,
    }


def get_component_emoji(component: str) -> str:
    return COMPONENT_EMOJIS.get(component, DEFAULT_COMPONENT_EMOJI)


def generate_explanation(
    rating: float, confidence: float, components: dict[str, float]
) -> str:
    """Multi-line explanation with the score breakdown, strongest first"""
    threshold = get_rating_threshold(rating)
    lines = [
        f"{threshold['icon']} Rating: {rating:.1f}/10 ({threshold['label']})",
        f"Confidence: {confidence:.1f}%",
        threshold["description"],
        "",
        "Score Breakdown:",
    ]

    scored = sorted(
        ((name, score) for name, score in components.items() if score > 0),
        key=lambda item: item[1],
        reverse=True,
    )
    for name, score in scored:
        lines.append(f"{get_component_emoji(name)} {name.capitalize()}: {score:.1f}/100")

    return "\n".join(lines)


def validate_configuration() -> ThresholdValidationDTO:
    """Sanity checks over the threshold tables"""
    errors = []
    warnings = []

    for band in range(1, 11):
        if band not in RATING_SCALE:
            errors.append(f"Missing rating scale entry for rating {band}")

    for name, preset in WEIGHT_CONFIGS.items():
        total = sum(preset.values())
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            errors.append(f"Weight config '{name}' sums to {total:.2f}, expected 1.0")

    for i in range(1, len(NOTIFICATION_THRESHOLDS)):
        previous = NOTIFICATION_THRESHOLDS[i - 1]
        current = NOTIFICATION_THRESHOLDS[i]
        if current["rating"] >= previous["rating"]:
            warnings.append(f"Notification thresholds may not be properly ordered at index {i}")

    return {"is_valid": not errors, "errors": errors, "warnings": warnings}
