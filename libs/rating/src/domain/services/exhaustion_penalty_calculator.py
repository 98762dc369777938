"""Exhaustion Penalty Calculator

Detects overextension (overbought/oversold RSI, fading volume, weakening
momentum, Bollinger extension) on the current snapshot and on every
supplied timeframe. The summed penalty is always clamped to [-50, 0].
"""

import logging

from injector import inject

from libs.shared.src.domain.services.clamp import clamp
from libs.shared.src.dtos.rating.analysis_context_dto import AnalysisContextDTO
from libs.shared.src.dtos.rating.exhaustion_penalty_dto import (
    ExhaustionConfigDTO,
    ExhaustionPenaltyResultDTO,
    ExhaustionSignalDTO,
    RecoveryScoreDTO,
)
from libs.shared.src.dtos.rating.momentum_analysis_dto import MomentumAnalysisDTO
from libs.shared.src.dtos.rating.technical_indicators_dto import (
    TechnicalIndicatorsDTO,
)
from libs.shared.src.dtos.rating.timeframe_indicators_dto import (
    TimeframeIndicatorsDTO,
)
from libs.shared.src.dtos.rating.volume_analysis_dto import VolumeAnalysisDTO
from libs.shared.src.enums.exhaustion_level import ExhaustionLevel
from libs.shared.src.enums.exhaustion_signal_type import (
    ExhaustionSeverity,
    ExhaustionSignalType,
)
from libs.shared.src.enums.trend_direction import TrendDirection

MAX_TOTAL_PENALTY = -50.0
CURRENT_TIMEFRAME = "current"
UNKNOWN_TIMEFRAME_WEIGHT = 0.1

DEFAULT_EXHAUSTION_CONFIG: ExhaustionConfigDTO = {
    "rsi_overbought_threshold": 70,
    "rsi_oversold_threshold": 30,
    "rsi_extreme_threshold": 80,
    "volume_decline_threshold": 0.5,  # current / average after a spike
    "momentum_divergence_threshold": 0.02,  # |MACD histogram|
    "price_extension_threshold": 0.85,  # Bollinger position
    "timeframe_weights": {"4h": 0.60, "1h": 0.40},
}

EXHAUSTION_LEVEL_DESCRIPTIONS = {
    ExhaustionLevel.NONE.value: "No exhaustion signals - healthy momentum conditions",
    ExhaustionLevel.MILD.value: "Minor exhaustion signals - monitor closely",
    ExhaustionLevel.MODERATE.value: "Moderate exhaustion - exercise caution",
    ExhaustionLevel.SEVERE.value: "Severe exhaustion - high risk of reversal",
    ExhaustionLevel.EXTREME.value: "Extreme exhaustion - avoid new positions",
}

SEVERE = ExhaustionSeverity.SEVERE.value
MODERATE = ExhaustionSeverity.MODERATE.value
MILD = ExhaustionSeverity.MILD.value


def _signal(
    type_: ExhaustionSignalType,
    severity: str,
    timeframe: str,
    description: str,
    penalty: float,
    confidence: float,
) -> ExhaustionSignalDTO:
    return {
        "type": type_.value,
        "severity": severity,
        "timeframe": timeframe,
        "description": description,
        "penalty": penalty,
        "confidence": confidence,
    }


def analyze_rsi_exhaustion(
    rsi: float, timeframe: str, config: ExhaustionConfigDTO
) -> list[ExhaustionSignalDTO]:
    signals = []
    overbought = ExhaustionSignalType.RSI_OVERBOUGHT
    oversold = ExhaustionSignalType.RSI_OVERSOLD

    if rsi > 85:
        signals.append(
            _signal(overbought, SEVERE, timeframe, f"RSI extremely overbought at {rsi:.1f}", -20, 90)
        )
    elif rsi > config["rsi_extreme_threshold"]:
        signals.append(
            _signal(overbought, MODERATE, timeframe, f"RSI overbought at {rsi:.1f}", -10, 75)
        )
    elif rsi > config["rsi_overbought_threshold"]:
        signals.append(
            _signal(overbought, MILD, timeframe, f"RSI approaching overbought at {rsi:.1f}", -5, 60)
        )

    if rsi < 15:
        signals.append(
            _signal(
                oversold, SEVERE, timeframe,
                f"RSI extremely oversold at {rsi:.1f} - high reversal risk", -15, 85,
            )
        )
    elif rsi < 20:
        signals.append(
            _signal(
                oversold, MODERATE, timeframe,
                f"RSI oversold at {rsi:.1f} - potential reversal", -8, 70,
            )
        )
    elif rsi < config["rsi_oversold_threshold"]:
        signals.append(
            _signal(oversold, MILD, timeframe, f"RSI approaching oversold at {rsi:.1f}", -3, 55)
        )

    return signals


def analyze_volume_exhaustion(
    volume: VolumeAnalysisDTO, timeframe: str, config: ExhaustionConfigDTO
) -> list[ExhaustionSignalDTO]:
    signals = []
    type_ = ExhaustionSignalType.VOLUME_EXHAUSTION

    average = volume.get("average_volume", 0)
    if average > 0:
        ratio = volume.get("current_volume", 0) / average

        if volume.get("volume_spike") and ratio < config["volume_decline_threshold"]:
            signals.append(
                _signal(
                    type_, MODERATE, timeframe,
                    f"Volume exhaustion after spike - ratio: {ratio:.2f}", -12, 80,
                )
            )

        if ratio < 0.3:
            signals.append(
                _signal(
                    type_, MILD, timeframe,
                    f"Abnormally low volume - ratio: {ratio:.2f}", -8, 65,
                )
            )

    net_flow = (volume.get("volume_profile") or {}).get("net_flow", 0)
    if volume.get("volume_spike_factor", 0) > 3 and net_flow < 0:
        signals.append(
            _signal(
                type_, SEVERE, timeframe,
                "High volume with negative net flow - distribution pattern", -18, 85,
            )
        )

    return signals


def analyze_momentum_divergence(
    indicators: TechnicalIndicatorsDTO,
    momentum: MomentumAnalysisDTO,
    timeframe: str,
    config: ExhaustionConfigDTO,
) -> list[ExhaustionSignalDTO]:
    signals = []
    type_ = ExhaustionSignalType.MOMENTUM_DIVERGENCE

    histogram = indicators["macd"]["histogram"]
    if abs(histogram) < config["momentum_divergence_threshold"]:
        severe = abs(histogram) < 0.005
        signals.append(
            _signal(
                type_,
                SEVERE if severe else MODERATE,
                timeframe,
                f"MACD momentum weakening - histogram: {histogram:.4f}",
                -15 if severe else -8,
                75,
            )
        )

    strength = momentum["strength"]
    if momentum["trend"] == TrendDirection.BULLISH.value and strength < 40:
        signals.append(
            _signal(
                type_, MODERATE, timeframe,
                f"Bullish trend with weak momentum strength: {strength:g}", -10, 70,
            )
        )
    elif momentum["trend"] == TrendDirection.BEARISH.value and strength < 40:
        signals.append(
            _signal(
                type_, MILD, timeframe,
                "Bearish trend with weak momentum - potential consolidation", -6, 60,
            )
        )

    return signals


def analyze_price_extension(
    indicators: TechnicalIndicatorsDTO,
    momentum: MomentumAnalysisDTO,
    timeframe: str,
    config: ExhaustionConfigDTO,
) -> list[ExhaustionSignalDTO]:
    signals = []
    type_ = ExhaustionSignalType.PRICE_EXTENSION

    position = indicators["bollinger"]["position"]
    if position > 0.95:
        signals.append(
            _signal(
                type_, SEVERE, timeframe,
                f"Price at extreme upper Bollinger Band - position: {position:.3f}", -18, 85,
            )
        )
    elif position > config["price_extension_threshold"]:
        signals.append(
            _signal(
                type_, MODERATE, timeframe,
                f"Price extended beyond upper Bollinger Band - position: {position:.3f}", -10, 75,
            )
        )

    if momentum["volatility"] > 80 and position > 0.8:
        signals.append(
            _signal(
                type_, SEVERE, timeframe,
                "High volatility with price extension - unsustainable momentum", -15, 80,
            )
        )

    return signals


def analyze_timeframe_exhaustion(
    timeframe: str, indicators: TimeframeIndicatorsDTO, config: ExhaustionConfigDTO
) -> list[ExhaustionSignalDTO]:
    """Signals from one timeframe, each penalty scaled by its weight"""
    signals = []
    weight = indicators.get("weight") or config["timeframe_weights"].get(
        timeframe, UNKNOWN_TIMEFRAME_WEIGHT
    )
    summary = indicators.get("exhaustion_signals")

    if summary:
        overbought = summary.get("rsi_overbought") or {}
        periods = overbought.get("periods", 0)
        if overbought.get("active") and periods >= 3:
            if periods >= 5:
                severity, base = SEVERE, 25
            elif periods >= 4:
                severity, base = MODERATE, 15
            else:
                severity, base = MILD, 8
            signals.append(
                _signal(
                    ExhaustionSignalType.RSI_OVERBOUGHT, severity, timeframe,
                    f"RSI overbought for {periods} periods", -weight * base, 80,
                )
            )

        if (summary.get("volume_spike") or {}).get("active"):
            signals.append(
                _signal(
                    ExhaustionSignalType.VOLUME_EXHAUSTION, MODERATE, timeframe,
                    f"Volume spike exhaustion in {timeframe} timeframe", -weight * 12, 75,
                )
            )

        divergence = summary.get("divergence") or {}
        if divergence.get("detected"):
            kind = divergence.get("type") or TrendDirection.BEARISH.value
            signals.append(
                _signal(
                    ExhaustionSignalType.MOMENTUM_DIVERGENCE, MODERATE, timeframe,
                    f"{kind} divergence detected in {timeframe}", -weight * 10, 70,
                )
            )

    rsi = indicators.get("rsi")
    if isinstance(rsi, (int, float)) and rsi > 85:
        signals.append(
            _signal(
                ExhaustionSignalType.RSI_OVERBOUGHT, SEVERE, timeframe,
                f"Extreme RSI in {timeframe}: {rsi:.1f}", -weight * 20, 90,
            )
        )

    return signals


def exhaustion_level_for(total_penalty: float) -> str:
    if total_penalty >= -5:
        return ExhaustionLevel.NONE.value
    if total_penalty >= -15:
        return ExhaustionLevel.MILD.value
    if total_penalty >= -25:
        return ExhaustionLevel.MODERATE.value
    if total_penalty >= -40:
        return ExhaustionLevel.SEVERE.value
    return ExhaustionLevel.EXTREME.value


def summarize_signals(signals: list[ExhaustionSignalDTO]) -> ExhaustionPenaltyResultDTO:
    """Sum, clamp and explain a list of signals"""
    breakdown: dict[str, float] = {}
    for s in signals:
        breakdown[s["timeframe"]] = breakdown.get(s["timeframe"], 0.0) + s["penalty"]

    total = clamp(sum(s["penalty"] for s in signals), MAX_TOTAL_PENALTY, 0.0)
    level = exhaustion_level_for(total)

    reasoning = []
    if not signals:
        reasoning.append("No exhaustion signals detected - healthy momentum conditions")
    else:
        reasoning.append(
            f"{len(signals)} exhaustion signal(s) detected with total penalty of {total:.1f} points"
        )
        by_type: dict[str, dict[str, int]] = {}
        for s in signals:
            counts = by_type.setdefault(s["type"], {})
            counts[s["severity"]] = counts.get(s["severity"], 0) + 1
        for type_, counts in by_type.items():
            severities = ", ".join(f"{n} {sev}" for sev, n in counts.items())
            reasoning.append(f"{type_.replace('_', ' ', 1)}: {severities}")

    recommendations = []
    if level in (ExhaustionLevel.EXTREME.value, ExhaustionLevel.SEVERE.value):
        recommendations.append("AVOID entry - extreme exhaustion conditions detected")
        recommendations.append(
            "Wait for momentum reset and consolidation before considering entry"
        )
    elif level == ExhaustionLevel.MODERATE.value:
        recommendations.append("CAUTION - moderate exhaustion signals present")
        recommendations.append("Consider reduced position size or tighter stop losses")
    elif level == ExhaustionLevel.MILD.value:
        recommendations.append("Monitor closely - mild exhaustion signals detected")
        recommendations.append("Watch for momentum divergence or volume confirmation")

    if breakdown:
        worst_timeframe, worst_penalty = min(breakdown.items(), key=lambda item: item[1])
        if worst_penalty < -10:
            recommendations.append(f"Primary concern in {worst_timeframe} timeframe")

    return {
        "total_penalty": total,
        "signals": signals,
        "exhaustion_level": level,
        "timeframe_breakdown": breakdown,
        "reasoning": reasoning,
        "recommendations": recommendations,
    }


def calculate_exhaustion_penalty(
    indicators: TechnicalIndicatorsDTO,
    momentum: MomentumAnalysisDTO,
    volume: VolumeAnalysisDTO,
    multi_timeframe_data: dict[str, TimeframeIndicatorsDTO] | None = None,
    config: ExhaustionConfigDTO | None = None,
) -> ExhaustionPenaltyResultDTO:
    config = {**DEFAULT_EXHAUSTION_CONFIG, **(config or {})}

    signals = [
        *analyze_rsi_exhaustion(indicators["rsi"], CURRENT_TIMEFRAME, config),
        *analyze_volume_exhaustion(volume, CURRENT_TIMEFRAME, config),
        *analyze_momentum_divergence(indicators, momentum, CURRENT_TIMEFRAME, config),
        *analyze_price_extension(indicators, momentum, CURRENT_TIMEFRAME, config),
    ]
    for timeframe, timeframe_indicators in (multi_timeframe_data or {}).items():
        if timeframe_indicators:
            signals.extend(
                analyze_timeframe_exhaustion(timeframe, timeframe_indicators, config)
            )

    return summarize_signals(signals)


def default_exhaustion_result(reason: str) -> ExhaustionPenaltyResultDTO:
    return {
        "total_penalty": 0.0,
        "signals": [],
        "exhaustion_level": ExhaustionLevel.NONE.value,
        "timeframe_breakdown": {},
        "reasoning": [reason],
        "recommendations": [],
    }


def calculate_recovery_score(
    current_signals: list[ExhaustionSignalDTO],
    previous_signals: list[ExhaustionSignalDTO],
) -> RecoveryScoreDTO:
    """Compare two cycles; a shrinking penalty reads as recovery"""
    current = sum(s["penalty"] for s in current_signals)
    previous = sum(s["penalty"] for s in previous_signals)
    improvement = current - previous

    if improvement > 0:
        reasoning = [f"Exhaustion improving by {improvement:.1f} points"]
    elif improvement < 0:
        reasoning = [f"Exhaustion worsening by {abs(improvement):.1f} points"]
    else:
        reasoning = ["Exhaustion conditions unchanged"]

    return {
        "recovery_score": clamp(50 + improvement * 2),
        "improvement": improvement,
        "improving": improvement > 0,
        "reasoning": reasoning,
    }


class ExhaustionPenaltyCalculator:
    """Exhaustion penalty (Domain Service)

    Never raises: an internal failure yields the zero-penalty result.
    """

    @inject
    def __init__(self) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)
        self._config: ExhaustionConfigDTO = {**DEFAULT_EXHAUSTION_CONFIG}

    def calculate_penalty(
        self,
        indicators: TechnicalIndicatorsDTO,
        momentum: MomentumAnalysisDTO,
        volume: VolumeAnalysisDTO,
        multi_timeframe_data: dict[str, TimeframeIndicatorsDTO] | None = None,
        context: AnalysisContextDTO | None = None,
    ) -> ExhaustionPenaltyResultDTO:
        token_address = ((context or {}).get("token_data") or {}).get(
            "address", "unknown"
        )
        try:
            result = calculate_exhaustion_penalty(
                indicators, momentum, volume, multi_timeframe_data, self._config
            )
        except Exception as e:
            self._logger.error(
                f"Exhaustion penalty calculation failed for {token_address}: {e}"
            )
            return default_exhaustion_result(
                "Error in exhaustion calculation - no penalty applied"
            )

        self._logger.debug(
            f"Exhaustion penalty for {token_address}: {result['total_penalty']:.1f} "
            f"({result['exhaustion_level']}, {len(result['signals'])} signals)"
        )
        return result

    def calculate_recovery_score(
        self,
        current_signals: list[ExhaustionSignalDTO],
        previous_signals: list[ExhaustionSignalDTO],
    ) -> RecoveryScoreDTO:
        return calculate_recovery_score(current_signals, previous_signals)

    def get_exhaustion_level_description(self, level: str) -> str:
        return EXHAUSTION_LEVEL_DESCRIPTIONS.get(level, "Unknown exhaustion level")

    def update_config(self, config: ExhaustionConfigDTO) -> None:
        self._config = {**self._config, **config}
        self._logger.info(f"Exhaustion penalty configuration updated: {config}")

    def get_config(self) -> ExhaustionConfigDTO:
        return {**self._config}
