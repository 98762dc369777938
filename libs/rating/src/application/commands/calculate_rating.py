"""Calculate Rating Command

Multi-factor rating engine. One call rates one token for one analysis
cycle: four component subscores computed concurrently, optional
multi-timeframe, consecutive momentum and exhaustion subsystems, adaptive
weighting, logistic scaling to a 1-10 band, smoothing against the previous
rating, confidence, narrative, an optional AI advisory blend and a
best-effort write to the rating history.
"""

import asyncio
import logging
import time
import weakref
from functools import partial

from injector import inject

from libs.rating.src.domain.services.ai_rating_blender import (
    blend_rating,
    build_advisory_input,
    should_request_advisory,
)
from libs.rating.src.domain.services.confidence_calculator import ConfidenceCalculator
from libs.rating.src.domain.services.consecutive_momentum_calculator import (
    ConsecutiveMomentumCalculator,
    empty_streak_result,
)
from libs.rating.src.domain.services.context_defaults import ensure_market_context
from libs.rating.src.domain.services.engine_config import (
    DEFAULT_ENGINE_CONFIG,
    FEATURE_FLAGS,
    merge_engine_config,
    validate_engine_config,
)
from libs.rating.src.domain.services.exhaustion_penalty_calculator import (
    ExhaustionPenaltyCalculator,
    default_exhaustion_result,
)
from libs.rating.src.domain.services.momentum_score_calculator import (
    MomentumScoreCalculator,
)
from libs.rating.src.domain.services.multi_timeframe_score_calculator import (
    MultiTimeframeScoreCalculator,
)
from libs.rating.src.domain.services.rating_narrative import (
    generate_enhanced_alerts,
    generate_enhanced_reasoning,
)
from libs.rating.src.domain.services.rating_scale import (
    apply_non_linear_scaling,
    apply_smoothing,
    convert_to_rating_scale,
    determine_recommendation,
)
from libs.rating.src.domain.services.rating_thresholds import apply_risk_adjustment
from libs.rating.src.domain.services.risk_score_calculator import RiskScoreCalculator
from libs.rating.src.domain.services.technical_score_calculator import (
    TechnicalScoreCalculator,
)
from libs.rating.src.domain.services.volume_score_calculator import (
    SUSTAINABILITY_WINDOW,
    VolumeScoreCalculator,
)
from libs.rating.src.domain.services.weight_adjuster import adjust_weights
from libs.rating.src.ports.ai_advisory_port import AIAdvisoryPort
from libs.rating.src.ports.calculate_rating_port import CalculateRatingPort
from libs.rating.src.ports.momentum_history_store_port import (
    MomentumHistoryStorePort,
)
from libs.rating.src.ports.rating_history_store_port import RatingHistoryStorePort
from libs.shared.src.constants.rating_history import (
    DEFAULT_HISTORICAL_ACCURACY,
    ESTABLISHED_HISTORICAL_ACCURACY,
    MIN_RATINGS_FOR_ACCURACY,
)
from libs.shared.src.constants.rating_weights import NEUTRAL_SCORE
from libs.shared.src.dtos.rating.analysis_context_dto import AnalysisContextDTO
from libs.shared.src.dtos.rating.consecutive_momentum_dto import (
    ConsecutiveMomentumResultDTO,
    CurrentMomentumAnalysisDTO,
)
from libs.shared.src.dtos.rating.exhaustion_penalty_dto import (
    ExhaustionPenaltyResultDTO,
)
from libs.shared.src.dtos.rating.momentum_analysis_dto import MomentumAnalysisDTO
from libs.shared.src.dtos.rating.multi_timeframe_score_dto import (
    MultiTimeframeScoreResultDTO,
)
from libs.shared.src.dtos.rating.rating_engine_config_dto import (
    RatingEngineConfigDTO,
    RatingWeightsDTO,
)
from libs.shared.src.dtos.rating.rating_result_dto import RatingResultDTO
from libs.shared.src.dtos.rating.risk_assessment_dto import RiskAssessmentDTO
from libs.shared.src.dtos.rating.score_components_dto import ScoreComponentsDTO
from libs.shared.src.dtos.rating.technical_indicators_dto import (
    TechnicalIndicatorsDTO,
)
from libs.shared.src.dtos.rating.volume_analysis_dto import VolumeAnalysisDTO
from libs.shared.src.enums.risk_level import RiskLevel
from libs.shared.src.errors.component_computation_error import (
    ComponentComputationError,
)
from libs.shared.src.errors.config_validation_error import ConfigValidationError
from libs.shared.src.errors.rating_timeout_error import RatingTimeoutError
from libs.shared.src.errors.subsystem_computation_error import (
    SubsystemComputationError,
)

UNKNOWN_TOKEN = "unknown"
COMPONENT_NAMES = ("technical", "momentum", "volume", "risk")


def calculate_composite_score(
    scores: ScoreComponentsDTO,
    weights: RatingWeightsDTO,
    consecutive_momentum: ConsecutiveMomentumResultDTO | None = None,
    exhaustion: ExhaustionPenaltyResultDTO | None = None,
) -> float:
    """Weighted subscores plus the optional bonus and penalty, floored at 0"""
    base = (
        scores["technical"] * weights["technical"]
        + scores["momentum"] * weights["momentum"]
        + scores["volume"] * weights["volume"]
        + scores["risk"] * weights["risk"]
    )

    if scores["pattern"] > 0 and weights.get("multi_timeframe"):
        base += scores["pattern"] * weights["multi_timeframe"]

    if consecutive_momentum and weights.get("consecutive_momentum"):
        bonus = consecutive_momentum["bonus_percentage"] / 100 * base
        base += bonus * weights["consecutive_momentum"]

    if exhaustion:
        base += exhaustion["total_penalty"]

    return max(0.0, base)


class CalculateRatingCommand(CalculateRatingPort):
    """Rating engine (Application Service)

    Component and subsystem failures are logged and replaced by neutral
    values; only the outer timeout and invalid configuration reach the
    caller. Calls for the same token are serialized by a per-token lock.
    """

    @inject
    def __init__(
        self,
        technical_calculator: TechnicalScoreCalculator,
        momentum_calculator: MomentumScoreCalculator,
        volume_calculator: VolumeScoreCalculator,
        risk_calculator: RiskScoreCalculator,
        multi_timeframe_calculator: MultiTimeframeScoreCalculator,
        consecutive_momentum_calculator: ConsecutiveMomentumCalculator,
        exhaustion_penalty_calculator: ExhaustionPenaltyCalculator,
        confidence_calculator: ConfidenceCalculator,
        rating_history_store: RatingHistoryStorePort,
        momentum_history_store: MomentumHistoryStorePort,
        ai_advisory: AIAdvisoryPort,
        config: RatingEngineConfigDTO | None = None,
    ) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)
        self._technical_calculator = technical_calculator
        self._momentum_calculator = momentum_calculator
        self._volume_calculator = volume_calculator
        self._risk_calculator = risk_calculator
        self._multi_timeframe_calculator = multi_timeframe_calculator
        self._consecutive_momentum_calculator = consecutive_momentum_calculator
        self._exhaustion_penalty_calculator = exhaustion_penalty_calculator
        self._confidence_calculator = confidence_calculator
        self._rating_history_store = rating_history_store
        self._momentum_history_store = momentum_history_store
        self._ai_advisory = ai_advisory
        # entries vanish once no caller holds or awaits the lock
        self._token_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

        merged = merge_engine_config(DEFAULT_ENGINE_CONFIG, config)
        errors = validate_engine_config(merged)
        if errors:
            raise ConfigValidationError(errors)
        self._config = merged

        self._logger.info(
            f"Rating engine initialized: weights={merged['weights']} "
            f"adaptive_weighting={merged['adaptive_weighting']} "
            f"multi_timeframe={merged['enable_multi_timeframe']} "
            f"consecutive_momentum={merged['enable_consecutive_momentum']} "
            f"streak_store_enabled={momentum_history_store.is_enabled()}"
        )

    async def execute(
        self,
        technical_indicators: TechnicalIndicatorsDTO,
        momentum: MomentumAnalysisDTO,
        volume: VolumeAnalysisDTO,
        risk: RiskAssessmentDTO,
        context: AnalysisContextDTO,
    ) -> RatingResultDTO:
        """Rate one token

        Args:
            technical_indicators: Primary-timeframe indicators
            momentum: Momentum analysis
            volume: Volume analysis
            risk: Risk assessment
            context: Token data, chart data, optional multi-timeframe data

        Returns:
            RatingResultDTO: Final rating, never partial

        Raises:
            RatingTimeoutError: The call exceeded the overall timeout
        """
        token_address = (context.get("token_data") or {}).get("address") or UNKNOWN_TOKEN
        timeout = self._config["timeouts"]["overall"]
        started = time.monotonic()

        try:
            result = await asyncio.wait_for(
                self._rate_serialized(
                    token_address, technical_indicators, momentum, volume, risk, context
                ),
                timeout,
            )
        except asyncio.TimeoutError as e:
            self._logger.error(
                f"Rating calculation timed out for {token_address} after {timeout:g}s"
            )
            raise RatingTimeoutError(token_address, timeout) from e

        self._logger.info(
            f"Rating for {token_address}: {result['rating']:.1f}/10 "
            f"confidence={result['confidence']:.1f}% "
            f"recommendation={result['recommendation']} "
            f"in {(time.monotonic() - started) * 1000:.0f}ms"
        )
        return result

    async def _rate_serialized(
        self,
        token_address: str,
        technical_indicators: TechnicalIndicatorsDTO,
        momentum: MomentumAnalysisDTO,
        volume: VolumeAnalysisDTO,
        risk: RiskAssessmentDTO,
        context: AnalysisContextDTO,
    ) -> RatingResultDTO:
        lock = self._token_locks.setdefault(token_address, asyncio.Lock())
        async with lock:
            return await self._rate(
                token_address, technical_indicators, momentum, volume, risk, context
            )

    async def _rate(
        self,
        token_address: str,
        technical_indicators: TechnicalIndicatorsDTO,
        momentum: MomentumAnalysisDTO,
        volume: VolumeAnalysisDTO,
        risk: RiskAssessmentDTO,
        context: AnalysisContextDTO,
    ) -> RatingResultDTO:
        config = self._config
        safe_context = ensure_market_context(context)
        safe_context["volume_history"] = await self._load_volume_history(
            token_address, volume, safe_context
        )

        scores = await self._calculate_component_scores(
            technical_indicators, momentum, volume, risk, safe_context
        )

        multi_timeframe_data = safe_context.get("multi_timeframe_data")
        multi_timeframe = None
        if config["enable_multi_timeframe"] and multi_timeframe_data:
            multi_timeframe = await self._calculate_multi_timeframe(
                multi_timeframe_data, safe_context
            )
            scores["pattern"] = (
                multi_timeframe["final_score"] if multi_timeframe else float(NEUTRAL_SCORE)
            )

        consecutive_momentum = None
        if config["enable_consecutive_momentum"]:
            consecutive_momentum = await self._calculate_consecutive_momentum(
                technical_indicators, momentum, volume, safe_context
            )

        exhaustion = None
        if config["enable_exhaustion_penalty"]:
            exhaustion = await self._calculate_exhaustion(
                technical_indicators, momentum, volume, safe_context
            )

        weights = dict(config["weights"])
        if config["adaptive_weighting"]:
            weights = adjust_weights(weights, safe_context["market_context"], scores)

        composite = calculate_composite_score(scores, weights, consecutive_momentum, exhaustion)
        scaled = apply_non_linear_scaling(composite)
        rating = float(convert_to_rating_scale(scaled))

        historical_accuracy = await self._historical_accuracy(token_address)
        confidence = self._confidence_calculator.calculate(
            scores,
            safe_context,
            historical_accuracy,
            multi_timeframe_data,
            consecutive_momentum,
            exhaustion["total_penalty"] if exhaustion else None,
        )
        if config["risk_adjustment"]:
            adjusted = apply_risk_adjustment(
                rating, confidence, risk.get("risk_level", RiskLevel.MEDIUM.value)
            )
            rating = adjusted["adjusted_rating"]
            confidence = adjusted["adjusted_confidence"]

        previous = await self._previous_rating(token_address)
        smoothed = apply_smoothing(rating, previous, config["smoothing_factor"])

        reasoning = generate_enhanced_reasoning(
            scores,
            safe_context["market_context"],
            multi_timeframe,
            consecutive_momentum,
            exhaustion,
        )
        # alerts read the unsmoothed band
        alerts = generate_enhanced_alerts(
            scores, rating, confidence, multi_timeframe, consecutive_momentum, exhaustion
        )

        result: RatingResultDTO = {
            "rating": smoothed,
            "confidence": confidence,
            "components": scores,
            "weights": {**weights, "fundamentals": 0.0},
            "reasoning": reasoning,
            "alerts": alerts,
            "recommendation": determine_recommendation(smoothed, confidence),
            "token_address": token_address,
            "timestamp": time.time() * 1000,
        }

        self._logger.debug(
            f"Rating steps for {token_address}: composite={composite:.1f} "
            f"scaled={scaled:.1f} band={rating:.1f} smoothed={smoothed:.1f}"
        )

        result = await self._apply_ai_advisory(
            result, technical_indicators, momentum, volume, risk, safe_context
        )

        await self._store_rating(
            token_address, result, multi_timeframe, consecutive_momentum, exhaustion
        )
        return result

    async def _run_blocking(self, timeout: float, func, *args):
        # a timed-out call keeps its default-executor worker until it returns
        loop = asyncio.get_running_loop()
        return await asyncio.wait_for(loop.run_in_executor(None, partial(func, *args)), timeout)

    async def _load_volume_history(
        self,
        token_address: str,
        volume: VolumeAnalysisDTO,
        context: AnalysisContextDTO,
    ) -> list[float]:
        """Caller-supplied samples win; otherwise the momentum store's window"""
        supplied = context.get("volume_history")
        if supplied:
            return list(supplied)

        store = self._momentum_history_store
        try:
            await self._run_blocking(
                self._config["timeouts"]["storage"],
                store.record_volume,
                token_address,
                volume["current_volume"],
            )
            return await self._run_blocking(
                self._config["timeouts"]["storage"],
                store.get_volume_history,
                token_address,
                SUSTAINABILITY_WINDOW,
            )
        except Exception as e:
            self._logger.warning(f"Volume history unavailable for {token_address}: {e}")
            return []

    async def _calculate_component(self, name: str, func, *args) -> float:
        timeout = self._config["timeouts"]["component"]
        try:
            return float(await self._run_blocking(timeout, func, *args))
        except asyncio.TimeoutError:
            error = ComponentComputationError(
                name, f"timed out after {timeout:g}s", is_timeout=True
            )
        except Exception as e:
            error = ComponentComputationError(name, str(e))
        self._logger.error(f"{error.message}, using neutral score {NEUTRAL_SCORE}")
        return float(NEUTRAL_SCORE)

    async def _calculate_component_scores(
        self,
        technical_indicators: TechnicalIndicatorsDTO,
        momentum: MomentumAnalysisDTO,
        volume: VolumeAnalysisDTO,
        risk: RiskAssessmentDTO,
        context: AnalysisContextDTO,
    ) -> ScoreComponentsDTO:
        jobs = {
            "technical": (self._technical_calculator.calculate, technical_indicators),
            "momentum": (self._momentum_calculator.calculate, momentum),
            "volume": (self._volume_calculator.calculate, volume),
            "risk": (self._risk_calculator.calculate, risk),
        }
        try:
            values = await asyncio.wait_for(
                asyncio.gather(
                    *(
                        self._calculate_component(name, func, signal, context)
                        for name, (func, signal) in jobs.items()
                    )
                ),
                self._config["timeouts"]["components"],
            )
        except asyncio.TimeoutError:
            self._logger.error("Component score group timed out, using neutral scores")
            values = [float(NEUTRAL_SCORE)] * len(COMPONENT_NAMES)

        scores = dict(zip(COMPONENT_NAMES, values))
        return {
            "technical": scores["technical"],
            "momentum": scores["momentum"],
            "volume": scores["volume"],
            "risk": scores["risk"],
            "pattern": 0.0,
            "fundamentals": 0.0,
        }

    def _log_subsystem_failure(self, error: SubsystemComputationError) -> None:
        self._logger.warning(f"{error.message}, continuing without it")

    async def _calculate_multi_timeframe(
        self, multi_timeframe_data: dict, context: AnalysisContextDTO
    ) -> MultiTimeframeScoreResultDTO | None:
        timeout = self._config["timeouts"]["multi_timeframe"]
        try:
            return await self._run_blocking(
                timeout, self._multi_timeframe_calculator.calculate, multi_timeframe_data, context
            )
        except asyncio.TimeoutError:
            self._log_subsystem_failure(
                SubsystemComputationError("Multi-timeframe", f"timed out after {timeout:g}s", True)
            )
        except Exception as e:
            self._log_subsystem_failure(SubsystemComputationError("Multi-timeframe", str(e)))
        return None

    async def _calculate_consecutive_momentum(
        self,
        technical_indicators: TechnicalIndicatorsDTO,
        momentum: MomentumAnalysisDTO,
        volume: VolumeAnalysisDTO,
        context: AnalysisContextDTO,
    ) -> ConsecutiveMomentumResultDTO:
        current: CurrentMomentumAnalysisDTO = {
            "rsi": technical_indicators["rsi"],
            "macd_histogram": technical_indicators["macd"]["histogram"],
            "volume": volume["current_volume"],
            "average_volume": volume["average_volume"],
            "price": context["token_data"].get("price", 0.0),
            "trend_direction": momentum["trend"],
            "strength": momentum["strength"],
            "timestamp": time.time() * 1000,
        }
        timeout = self._config["timeouts"]["consecutive_momentum"]
        try:
            return await self._run_blocking(
                timeout, self._consecutive_momentum_calculator.calculate_bonus, current, context
            )
        except asyncio.TimeoutError:
            self._log_subsystem_failure(
                SubsystemComputationError(
                    "Consecutive momentum", f"timed out after {timeout:g}s", is_timeout=True
                )
            )
        except Exception as e:
            self._log_subsystem_failure(SubsystemComputationError("Consecutive momentum", str(e)))
        return empty_streak_result("Calculation failed - using default values")

    async def _calculate_exhaustion(
        self,
        technical_indicators: TechnicalIndicatorsDTO,
        momentum: MomentumAnalysisDTO,
        volume: VolumeAnalysisDTO,
        context: AnalysisContextDTO,
    ) -> ExhaustionPenaltyResultDTO:
        timeout = self._config["timeouts"]["exhaustion_penalty"]
        try:
            return await self._run_blocking(
                timeout,
                self._exhaustion_penalty_calculator.calculate_penalty,
                technical_indicators,
                momentum,
                volume,
                context.get("multi_timeframe_data"),
                context,
            )
        except asyncio.TimeoutError:
            self._log_subsystem_failure(
                SubsystemComputationError(
                    "Exhaustion penalty", f"timed out after {timeout:g}s", is_timeout=True
                )
            )
        except Exception as e:
            self._log_subsystem_failure(SubsystemComputationError("Exhaustion penalty", str(e)))
        return default_exhaustion_result("Exhaustion calculation failed - no penalty applied")

    async def _historical_accuracy(self, token_address: str) -> float:
        tracked = self._confidence_calculator.get_historical_accuracy(token_address)
        if tracked is not None:
            return tracked

        try:
            ratings = await self._run_blocking(
                self._config["timeouts"]["storage"],
                self._rating_history_store.get_ratings,
                token_address,
            )
        except Exception as e:
            self._logger.warning(f"Rating history read failed for {token_address}: {e}")
            return DEFAULT_HISTORICAL_ACCURACY

        if len(ratings) < MIN_RATINGS_FOR_ACCURACY:
            return DEFAULT_HISTORICAL_ACCURACY
        return ESTABLISHED_HISTORICAL_ACCURACY

    async def _previous_rating(self, token_address: str) -> float | None:
        try:
            latest = await self._run_blocking(
                self._config["timeouts"]["storage"],
                self._rating_history_store.get_latest_rating,
                token_address,
            )
        except Exception as e:
            self._logger.warning(f"Previous rating unavailable for {token_address}: {e}")
            return None
        return latest["rating"] if latest else None

    async def _apply_ai_advisory(
        self,
        result: RatingResultDTO,
        technical_indicators: TechnicalIndicatorsDTO,
        momentum: MomentumAnalysisDTO,
        volume: VolumeAnalysisDTO,
        risk: RiskAssessmentDTO,
        context: AnalysisContextDTO,
    ) -> RatingResultDTO:
        if not self._config["enable_ai_advisory"] or not self._ai_advisory.is_enabled():
            return result
        if not should_request_advisory(result["rating"], self._config["ai_rating_threshold"]):
            return result

        token_address = result["token_address"]
        advisory_input = build_advisory_input(
            technical_indicators, momentum, volume, risk, context, result["rating"]
        )
        timeout = self._config["timeouts"]["ai_advisory"]
        try:
            advisory = await asyncio.wait_for(self._ai_advisory.analyze(advisory_input), timeout)
        except asyncio.TimeoutError:
            self._log_subsystem_failure(
                SubsystemComputationError(
                    "AI advisory", f"timed out after {timeout:g}s", is_timeout=True
                )
            )
            return result
        except Exception as e:
            self._log_subsystem_failure(SubsystemComputationError("AI advisory", str(e)))
            return result

        if advisory is None:
            self._logger.warning(f"AI advisory returned no answer for {token_address}")
            return result

        blended = blend_rating(result, advisory)
        self._logger.info(
            f"AI advisory for {token_address}: {advisory['final_recommendation']['action']} "
            f"rating {result['rating']:.1f} -> {blended['rating']:.1f}"
        )
        return blended

    async def _store_rating(
        self,
        token_address: str,
        result: RatingResultDTO,
        multi_timeframe: MultiTimeframeScoreResultDTO | None,
        consecutive_momentum: ConsecutiveMomentumResultDTO | None,
        exhaustion: ExhaustionPenaltyResultDTO | None,
    ) -> None:
        breakdown = {
            "consecutive_momentum_boost": (
                consecutive_momentum["bonus_percentage"] if consecutive_momentum else 0.0
            ),
            "timeframe_alignment_score": (
                multi_timeframe["timeframe_alignment"] if multi_timeframe else 0.0
            ),
            "exhaustion_penalty": exhaustion["total_penalty"] if exhaustion else 0.0,
        }
        try:
            await self._run_blocking(
                self._config["timeouts"]["storage"],
                self._rating_history_store.append_rating,
                token_address,
                result,
                breakdown,
            )
        except Exception as e:
            self._logger.error(f"Failed to store rating for {token_address}: {e}")

    def update_config(self, config: RatingEngineConfigDTO) -> RatingEngineConfigDTO:
        """Merge and validate new settings; the old config survives a failure

        Raises:
            ConfigValidationError: The merged configuration is invalid
        """
        merged = merge_engine_config(self._config, config)
        errors = validate_engine_config(merged)
        if errors:
            raise ConfigValidationError(errors)

        changed = [flag for flag in FEATURE_FLAGS if merged[flag] != self._config[flag]]
        self._config = merged
        if changed:
            self._logger.info(
                "Rating engine features changed: "
                + ", ".join(f"{flag}={merged[flag]}" for flag in changed)
            )
        return self.get_config()

    def get_config(self) -> RatingEngineConfigDTO:
        return merge_engine_config(self._config, None)
