"""Normalization Method and Outlier Handling"""

from enum import Enum


class NormalizationMethod(Enum):
    """Statistical normalization method"""

    Z_SCORE = "z_score"
    MIN_MAX = "min_max"
    PERCENTILE = "percentile"
    SIGMOID = "sigmoid"
    TANH = "tanh"


class OutlierHandling(Enum):
    """What to do with a detected outlier before normalizing"""

    CLIP = "clip"
    WINSORIZE = "winsorize"
    REMOVE = "remove"
    NONE = "none"
