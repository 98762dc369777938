"""Get Rating Statistics Query"""

import logging
import math

import numpy as np
from injector import inject

from libs.rating.src.ports.get_rating_statistics_port import GetRatingStatisticsPort
from libs.rating.src.ports.rating_history_store_port import RatingHistoryStorePort
from libs.shared.src.domain.services.clamp import clamp
from libs.shared.src.dtos.rating.rating_statistics_dto import RatingStatisticsDTO


class GetRatingStatisticsQuery(GetRatingStatisticsPort):
    """Aggregate statistics over the stored rating history"""

    @inject
    def __init__(self, rating_history_store: RatingHistoryStorePort) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)
        self._rating_history_store = rating_history_store

    def execute(self) -> RatingStatisticsDTO:
        """Averages, band distribution and enhancement usage

        Returns:
            RatingStatisticsDTO: Zeros when nothing has been stored
        """
        ratings = [
            rating
            for token_ratings in self._rating_history_store.get_all_ratings().values()
            for rating in token_ratings
        ]
        distribution = {band: 0 for band in range(1, 11)}
        usage = {"multi_timeframe": 0, "consecutive_momentum": 0, "exhaustion_penalty": 0}

        if not ratings:
            return {
                "total_ratings": 0,
                "average_rating": 0.0,
                "rating_distribution": distribution,
                "average_confidence": 0.0,
                "enhancement_usage": usage,
            }

        for rating in ratings:
            band = int(math.floor(clamp(rating["rating"], 1, 10) + 0.5))
            distribution[band] += 1

            if rating["components"].get("pattern", 0) > 0:
                usage["multi_timeframe"] += 1
            if any("SUSTAINED MOMENTUM" in alert for alert in rating["alerts"]):
                usage["consecutive_momentum"] += 1
            if any("EXHAUSTION" in alert for alert in rating["alerts"]):
                usage["exhaustion_penalty"] += 1

        statistics: RatingStatisticsDTO = {
            "total_ratings": len(ratings),
            "average_rating": float(np.mean([r["rating"] for r in ratings])),
            "rating_distribution": distribution,
            "average_confidence": float(np.mean([r["confidence"] for r in ratings])),
            "enhancement_usage": usage,
        }
        self._logger.debug(
            f"Rating statistics: {statistics['total_ratings']} ratings, "
            f"average {statistics['average_rating']:.2f}"
        )
        return statistics
