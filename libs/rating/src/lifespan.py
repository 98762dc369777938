"""
Rating Context lifecycle

Ports & Adapters: Driving Port -> Application Service -> Driven Port
"""

import logging
import os

from injector import Injector, Module, provider, singleton

# Driving Ports
from libs.rating.src.ports.calculate_rating_port import CalculateRatingPort
from libs.rating.src.ports.cleanup_rating_history_port import CleanupRatingHistoryPort
from libs.rating.src.ports.get_rating_statistics_port import GetRatingStatisticsPort
from libs.rating.src.ports.rating_notification_port import RatingNotificationPort

# Driven Ports
from libs.rating.src.ports.ai_advisory_port import AIAdvisoryPort
from libs.rating.src.ports.momentum_history_store_port import (
    MomentumHistoryStorePort,
)
from libs.rating.src.ports.rating_history_store_port import RatingHistoryStorePort

# Application Services
from libs.rating.src.application.commands.calculate_rating import (
    CalculateRatingCommand,
)
from libs.rating.src.application.commands.cleanup_rating_history import (
    CleanupRatingHistoryCommand,
)
from libs.rating.src.application.policies.rating_notification_policy import (
    RatingNotificationPolicy,
)
from libs.rating.src.application.queries.get_rating_statistics import (
    GetRatingStatisticsQuery,
)

# Domain Services
from libs.rating.src.domain.services.confidence_calculator import ConfidenceCalculator
from libs.rating.src.domain.services.consecutive_momentum_calculator import (
    ConsecutiveMomentumCalculator,
)
from libs.rating.src.domain.services.exhaustion_penalty_calculator import (
    ExhaustionPenaltyCalculator,
)
from libs.rating.src.domain.services.momentum_score_calculator import (
    MomentumScoreCalculator,
)
from libs.rating.src.domain.services.multi_timeframe_score_calculator import (
    MultiTimeframeScoreCalculator,
)
from libs.rating.src.domain.services.risk_score_calculator import RiskScoreCalculator
from libs.rating.src.domain.services.score_normalizer import ScoreNormalizer
from libs.rating.src.domain.services.technical_score_calculator import (
    TechnicalScoreCalculator,
)
from libs.rating.src.domain.services.volume_score_calculator import (
    VolumeScoreCalculator,
)

# Adapters
from libs.rating.src.adapters.driven.file.rating_history_file_adapter import (
    RatingHistoryFileAdapter,
)
from libs.rating.src.adapters.driven.memory.ai_advisory_disabled_adapter import (
    AIAdvisoryDisabledAdapter,
)
from libs.rating.src.adapters.driven.memory.momentum_history_memory_adapter import (
    MomentumHistoryMemoryAdapter,
)
from libs.rating.src.adapters.driven.memory.rating_history_memory_adapter import (
    RatingHistoryMemoryAdapter,
)
from libs.shared.src.dtos.rating.rating_engine_config_dto import RatingEngineConfigDTO


def config_from_env() -> RatingEngineConfigDTO:
    """Engine overrides from RATING_SMOOTHING_FACTOR / RATING_TIMEOUT_SECONDS"""
    config: RatingEngineConfigDTO = {}

    smoothing = os.getenv("RATING_SMOOTHING_FACTOR")
    if smoothing:
        config["smoothing_factor"] = float(smoothing)

    timeout = os.getenv("RATING_TIMEOUT_SECONDS")
    if timeout:
        config["timeouts"] = {"overall": float(timeout)}

    return config


class RatingModule(Module):
    """Rating dependency injection module

    RATING_HISTORY_PATH selects the JSON file store; without it ratings
    live in memory for the process lifetime.
    """

    def __init__(self, config: RatingEngineConfigDTO | None = None) -> None:
        self._config = config

    @singleton
    @provider
    def provide_rating_history_store(self) -> RatingHistoryStorePort:
        history_path = os.getenv("RATING_HISTORY_PATH")
        if history_path:
            return RatingHistoryFileAdapter(history_path)
        return RatingHistoryMemoryAdapter()

    @singleton
    @provider
    def provide_momentum_history_store(self) -> MomentumHistoryStorePort:
        return MomentumHistoryMemoryAdapter()

    @singleton
    @provider
    def provide_ai_advisory(self) -> AIAdvisoryPort:
        return AIAdvisoryDisabledAdapter()

    @singleton
    @provider
    def provide_consecutive_momentum_calculator(
        self, momentum_history_store: MomentumHistoryStorePort
    ) -> ConsecutiveMomentumCalculator:
        return ConsecutiveMomentumCalculator(momentum_history_store)

    @singleton
    @provider
    def provide_confidence_calculator(self) -> ConfidenceCalculator:
        return ConfidenceCalculator()

    @singleton
    @provider
    def provide_score_normalizer(self) -> ScoreNormalizer:
        return ScoreNormalizer()

    @singleton
    @provider
    def provide_calculate_rating(
        self,
        consecutive_momentum_calculator: ConsecutiveMomentumCalculator,
        confidence_calculator: ConfidenceCalculator,
        rating_history_store: RatingHistoryStorePort,
        momentum_history_store: MomentumHistoryStorePort,
        ai_advisory: AIAdvisoryPort,
    ) -> CalculateRatingPort:
        return CalculateRatingCommand(
            technical_calculator=TechnicalScoreCalculator(),
            momentum_calculator=MomentumScoreCalculator(),
            volume_calculator=VolumeScoreCalculator(),
            risk_calculator=RiskScoreCalculator(),
            multi_timeframe_calculator=MultiTimeframeScoreCalculator(),
            consecutive_momentum_calculator=consecutive_momentum_calculator,
            exhaustion_penalty_calculator=ExhaustionPenaltyCalculator(),
            confidence_calculator=confidence_calculator,
            rating_history_store=rating_history_store,
            momentum_history_store=momentum_history_store,
            ai_advisory=ai_advisory,
            config={**config_from_env(), **(self._config or {})},
        )

    @singleton
    @provider
    def provide_get_rating_statistics(
        self, rating_history_store: RatingHistoryStorePort
    ) -> GetRatingStatisticsPort:
        return GetRatingStatisticsQuery(rating_history_store)

    @singleton
    @provider
    def provide_cleanup_rating_history(
        self, rating_history_store: RatingHistoryStorePort
    ) -> CleanupRatingHistoryPort:
        return CleanupRatingHistoryCommand(rating_history_store)

    @singleton
    @provider
    def provide_rating_notification(self) -> RatingNotificationPort:
        return RatingNotificationPolicy()


_injector: Injector | None = None


def startup() -> Injector:
    """Start the dependency injection container"""
    global _injector
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    _injector = Injector([RatingModule()])
    return _injector


def shutdown() -> None:
    """Release the container"""
    global _injector
    _injector = None


def get_injector() -> Injector:
    """Return the dependency injection container"""
    if _injector is None:
        raise RuntimeError("Injector not initialized. Call startup() first.")
    return _injector


# Alias for libs composition
configure = RatingModule()
