"""Rating Scale, Notification and Risk Adjustment Thresholds"""

# Confidence never reports zero or full certainty
MIN_CONFIDENCE = 10.0
MAX_CONFIDENCE = 95.0

# Rating band -> scale definition
RATING_SCALE = {
    10: {
        "min": 9.5,
        "max": 10.0,
        "label": "Exceptional",
        "description": "Extraordinary opportunity with exceptional technical alignment and momentum. Extremely rare rating.",
        "recommendation": "strong_buy",
        "priority": "critical",
        "min_confidence": 85,
        "icon": "🚀",
    },
    9: {
        "min": 8.5,
        "max": 9.5,
        "label": "Excellent",
        "description": "Outstanding opportunity with strong technical indicators and high momentum. Top 5% of tokens.",
        "recommendation": "strong_buy",
        "priority": "critical",
        "min_confidence": 80,
        "icon": "⭐",
    },
    8: {
        "min": 7.5,
        "max": 8.5,
        "label": "Very Good",
        "description": "Very strong opportunity with good technical setup and momentum. High probability setup.",
        "recommendation": "strong_buy",
        "priority": "high",
        "min_confidence": 75,
        "icon": "🔥",
    },
    7: {
        "min": 6.5,
        "max": 7.5,
        "label": "Good",
        "description": "Good opportunity with favorable technical indicators. Solid entry point for momentum traders.",
        "recommendation": "buy",
        "priority": "high",
        "min_confidence": 70,
        "icon": "📈",
    },
    6: {
        "min": 5.5,
        "max": 6.5,
        "label": "Above Average",
        "description": "Above average opportunity with some positive signals. Moderate upside potential.",
        "recommendation": "buy",
        "priority": "medium",
        "min_confidence": 65,
        "icon": "👍",
    },
    5: {
        "min": 4.5,
        "max": 5.5,
        "label": "Average",
        "description": "Neutral rating with mixed signals. No clear directional bias.",
        "recommendation": "hold",
        "priority": "low",
        "min_confidence": 60,
        "icon": "➖",
    },
    4: {
        "min": 3.5,
        "max": 4.5,
        "label": "Below Average",
        "description": "Below average opportunity with limited upside. Some concerning indicators.",
        "recommendation": "hold",
        "priority": "none",
        "min_confidence": 55,
        "icon": "👎",
    },
    3: {
        "min": 2.5,
        "max": 3.5,
        "label": "Poor",
        "description": "Poor opportunity with negative technical indicators. High downside risk.",
        "recommendation": "sell",
        "priority": "none",
        "min_confidence": 50,
        "icon": "⚠️",
    },
    2: {
        "min": 1.5,
        "max": 2.5,
        "label": "Very Poor",
        "description": "Very poor opportunity with strong negative signals. Significant downside risk.",
        "recommendation": "strong_sell",
        "priority": "none",
        "min_confidence": 45,
        "icon": "🔻",
    },
    1: {
        "min": 0.0,
        "max": 1.5,
        "label": "Extremely Poor",
        "description": "Extremely poor opportunity with severe negative indicators. Avoid at all costs.",
        "recommendation": "strong_sell",
        "priority": "none",
        "min_confidence": 40,
        "icon": "💀",
    },
}

# Highest first; the first satisfied entry wins
NOTIFICATION_THRESHOLDS = [
    {
        "rating": 9.0,
        "confidence": 85,
        "min_volume": 1_000_000,  # USD
        "max_risk": 60,
        "required_factors": ["technical", "momentum", "volume"],
    },
    {
        "rating": 8.0,
        "confidence": 80,
        "min_volume": 500_000,
        "max_risk": 70,
        "required_factors": ["technical", "momentum"],
    },
    {
        "rating": 7.0,
        "confidence": 75,
        "min_volume": 250_000,
        "max_risk": 80,
        "required_factors": ["technical"],
    },
]

# Risk level -> rating modifier, confidence multiplier, notification threshold
RISK_ADJUSTMENTS = {
    "low": {
        "rating_modifier": 0.2,
        "confidence_modifier": 1.05,
        "notification_threshold": 6.8,
    },
    "medium": {
        "rating_modifier": 0.0,
        "confidence_modifier": 1.0,
        "notification_threshold": 7.0,
    },
    "high": {
        "rating_modifier": -0.3,
        "confidence_modifier": 0.9,
        "notification_threshold": 7.5,
    },
    "extreme": {
        "rating_modifier": -0.8,
        "confidence_modifier": 0.75,
        "notification_threshold": 8.5,
    },
}

# Market regime weight presets (each sums to 1.0)
WEIGHT_CONFIGS = {
    "bull_market": {
        "volume": 0.40,
        "momentum": 0.30,
        "technical": 0.15,
        "multi_timeframe": 0.10,
        "risk": 0.05,
    },
    "bear_market": {
        "volume": 0.25,
        "momentum": 0.20,
        "technical": 0.30,
        "multi_timeframe": 0.15,
        "risk": 0.10,
    },
    "sideways_market": {
        "volume": 0.35,
        "momentum": 0.25,
        "technical": 0.20,
        "multi_timeframe": 0.15,
        "risk": 0.05,
    },
    "high_volatility": {
        "volume": 0.30,
        "momentum": 0.20,
        "technical": 0.25,
        "multi_timeframe": 0.15,
        "risk": 0.10,
    },
    "default": {
        "volume": 0.35,
        "momentum": 0.25,
        "technical": 0.20,
        "multi_timeframe": 0.15,
        "risk": 0.05,
    },
}
HIGH_VOLATILITY_PRESET_INDEX = 70

# Special alert conditions
ALERT_CONDITIONS = {
    "volume_spike": {"threshold": 5.0, "rating_bonus": 0.3, "confidence_bonus": 5},
    "breakout_pattern": {"threshold": 0.8, "rating_bonus": 0.4, "confidence_bonus": 8},
    "momentum_surge": {"threshold": 2.0, "rating_bonus": 0.2, "confidence_bonus": 3},
    "technical_confluence": {
        "threshold": 0.85,
        "rating_bonus": 0.3,
        "confidence_bonus": 10,
    },
}

COMPONENT_EMOJIS = {
    "technical": "📊",
    "momentum": "📈",
    "volume": "📢",
    "risk": "⚠️",
    "pattern": "🔍",
    "fundamentals": "🏛️",
}
