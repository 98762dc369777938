"""Score Normalizer

Statistical normalization against a bounded rolling history per series
key. Outlier status and the confidence value are advisory metadata; a
value is never rejected.
"""

import logging
import math

import numpy as np
from injector import inject

from libs.shared.src.constants.rating_history import NORMALIZER_HISTORY_SIZE
from libs.shared.src.domain.services.clamp import clamp
from libs.shared.src.domain.services.winsorization import (
    clip_by_std,
    iqr_fences,
    robust_location_scale,
    winsorize_value,
)
from libs.shared.src.dtos.rating.normalization_dto import (
    BatchItemDTO,
    NormalizationConfigDTO,
    NormalizationResultDTO,
    NormalizerStatisticsDTO,
)
from libs.shared.src.enums.normalization_method import (
    NormalizationMethod,
    OutlierHandling,
)

DEFAULT_NORMALIZATION_CONFIG: NormalizationConfigDTO = {
    "method": NormalizationMethod.Z_SCORE.value,
    "outlier_handling": OutlierHandling.WINSORIZE.value,
    "outlier_threshold": 2.5,
    "target_range": (0.0, 100.0),
    "robust_scaling": False,
}
FALLBACK_METHOD = "fallback"
Z_SCORE_SPAN = 3.0  # ±3 sigma maps onto the full target range
DEFAULT_CENTER = 50.0
DEFAULT_SCALE = 20.0


def _scale_into(unit: float, target_range: tuple[float, float]) -> float:
    lower, upper = target_range
    return lower + clamp(unit, 0.0, 1.0) * (upper - lower)


def _midpoint(target_range: tuple[float, float]) -> float:
    return (target_range[0] + target_range[1]) / 2


def z_score_normalize(
    value: float, history: np.ndarray, target_range: tuple[float, float], robust: bool
) -> float:
    if history.size < 2:
        return clamp(value, *target_range)

    if robust:
        center, scale = robust_location_scale(history)
    else:
        center, scale = float(np.mean(history)), float(np.std(history))

    if scale == 0:
        return _midpoint(target_range)

    z = (value - center) / scale
    return _scale_into((z + Z_SCORE_SPAN) / (2 * Z_SCORE_SPAN), target_range)


def min_max_normalize(
    value: float, history: np.ndarray, target_range: tuple[float, float]
) -> float:
    if history.size == 0:
        return clamp(value, *target_range)

    low, high = float(np.min(history)), float(np.max(history))
    if low == high:
        return _midpoint(target_range)
    return _scale_into((value - low) / (high - low), target_range)


def percentile_normalize(
    value: float, history: np.ndarray, target_range: tuple[float, float]
) -> float:
    """Share of the history at or below the value"""
    if history.size == 0:
        return clamp(value, *target_range)
    rank = float(np.sum(history <= value)) / history.size
    return _scale_into(rank, target_range)


def _center_and_scale(history: np.ndarray) -> tuple[float, float]:
    if history.size == 0:
        return DEFAULT_CENTER, DEFAULT_SCALE
    return float(np.mean(history)), float(np.std(history))


def sigmoid_normalize(
    value: float, history: np.ndarray, target_range: tuple[float, float]
) -> float:
    center, scale = _center_and_scale(history)
    if scale == 0:
        return _midpoint(target_range)
    # logistic via tanh, no overflow for values far outside the history
    return _scale_into(0.5 * (1 + math.tanh((value - center) / scale / 2)), target_range)


def tanh_normalize(
    value: float, history: np.ndarray, target_range: tuple[float, float]
) -> float:
    center, scale = _center_and_scale(history)
    if scale == 0:
        return _midpoint(target_range)
    return _scale_into((math.tanh((value - center) / scale) + 1) / 2, target_range)


def detect_outlier(
    value: float, history: np.ndarray, threshold: float, robust: bool
) -> bool:
    """IQR fences in robust mode, |z| > threshold otherwise"""
    if history.size < 3:
        return False

    if robust:
        lower, upper = iqr_fences(history, k=threshold)
        return value < lower or value > upper

    std = float(np.std(history))
    if std == 0:
        return False
    return abs((value - float(np.mean(history))) / std) > threshold


def handle_outlier(
    value: float,
    history: np.ndarray,
    config: NormalizationConfigDTO,
    is_outlier: bool,
) -> float:
    handling = config["outlier_handling"]
    if not is_outlier or handling == OutlierHandling.NONE.value:
        return value

    threshold = config["outlier_threshold"]
    if handling == OutlierHandling.CLIP.value:
        return clip_by_std(value, history, n_std=threshold)

    # a single value cannot be removed, so REMOVE bounds it like WINSORIZE
    return winsorize_value(value, history, threshold, 100 - threshold)


def normalization_confidence(value: float, history: np.ndarray, is_outlier: bool) -> float:
    confidence = 1.0

    if history.size < 10:
        confidence *= 0.7
    elif history.size < 30:
        confidence *= 0.85

    if is_outlier:
        confidence *= 0.6

    if history.size > 0:
        std = float(np.std(history))
        if std > 0:
            z = abs((value - float(np.mean(history))) / std)
            if z > 3:
                confidence *= 0.4
            elif z > 2:
                confidence *= 0.7

    return clamp(confidence, 0.1, 1.0)


def apply_normalization(
    value: float, history: np.ndarray, config: NormalizationConfigDTO
) -> float:
    target_range = tuple(config["target_range"])
    method = config["method"]

    if method == NormalizationMethod.Z_SCORE.value:
        return z_score_normalize(value, history, target_range, config["robust_scaling"])
    if method == NormalizationMethod.PERCENTILE.value:
        return percentile_normalize(value, history, target_range)
    if method == NormalizationMethod.SIGMOID.value:
        return sigmoid_normalize(value, history, target_range)
    if method == NormalizationMethod.TANH.value:
        return tanh_normalize(value, history, target_range)
    return min_max_normalize(value, history, target_range)


class ScoreNormalizer:
    """Rolling-history normalizer (Domain Service)

    Each series keeps at most NORMALIZER_HISTORY_SIZE values; the value
    being normalized is compared against the history stored before it.
    """

    @inject
    def __init__(self) -> None:
        self._logger = logging.getLogger(self.__class__.__name__)
        self._history: dict[str, list[float]] = {}

    def normalize(
        self,
        value: float,
        series_key: str,
        config: NormalizationConfigDTO | None = None,
    ) -> NormalizationResultDTO:
        """Normalize one value and record it in the series

        Args:
            value: Raw value
            series_key: History series to compare against
            config: Overrides of DEFAULT_NORMALIZATION_CONFIG

        Returns:
            NormalizationResultDTO: method "fallback" with confidence 0.5 on error
        """
        full_config: NormalizationConfigDTO = {**DEFAULT_NORMALIZATION_CONFIG, **(config or {})}
        try:
            history = np.asarray(self._history.get(series_key, []), dtype=float)
            is_outlier = detect_outlier(
                value, history, full_config["outlier_threshold"], full_config["robust_scaling"]
            )
            adjusted = handle_outlier(value, history, full_config, is_outlier)
            normalized = apply_normalization(adjusted, history, full_config)
            confidence = normalization_confidence(value, history, is_outlier)
        except Exception as e:
            self._logger.error(f"Score normalization failed for {series_key}: {e}")
            lower, upper = full_config.get("target_range", (0.0, 100.0))
            return {
                "normalized_value": clamp(value, lower, upper),
                "original_value": value,
                "is_outlier": False,
                "confidence": 0.5,
                "method": FALLBACK_METHOD,
            }

        self._store(series_key, value)
        return {
            "normalized_value": normalized,
            "original_value": value,
            "is_outlier": is_outlier,
            "confidence": confidence,
            "method": full_config["method"],
        }

    def normalize_batch(
        self,
        items: list[BatchItemDTO],
        config: NormalizationConfigDTO | None = None,
    ) -> list[NormalizationResultDTO]:
        return [self.normalize(item["value"], item["series_key"], config) for item in items]

    def get_history(self, series_key: str) -> list[float]:
        return list(self._history.get(series_key, []))

    def clear_historical_data(self, series_key: str | None = None) -> None:
        if series_key is None:
            self._history.clear()
        else:
            self._history.pop(series_key, None)

    def get_statistics(self) -> NormalizerStatisticsDTO:
        keys = list(self._history.keys())
        total = sum(len(values) for values in self._history.values())
        return {
            "series_count": len(keys),
            "total_values": total,
            "average_values_per_series": total / len(keys) if keys else 0.0,
            "series_keys": keys,
        }

    def _store(self, series_key: str, value: float) -> None:
        values = self._history.setdefault(series_key, [])
        values.append(value)
        if len(values) > NORMALIZER_HISTORY_SIZE:
            del values[: len(values) - NORMALIZER_HISTORY_SIZE]
