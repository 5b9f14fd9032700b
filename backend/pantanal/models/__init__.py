"""資料模型模組

包含觀測資料、時間桶、聚合序列與變數列舉定義。
"""

from pantanal.models.variable import (
    CorrelationMethod,
    Granularity,
    Reducer,
    Scope,
    Variable,
)
from pantanal.models.observation import BucketKey, Observation, observations_to_frame
from pantanal.models.series import Series, SeriesPoint

__all__ = [
    "BucketKey",
    "CorrelationMethod",
    "Granularity",
    "Observation",
    "Reducer",
    "Scope",
    "Series",
    "SeriesPoint",
    "Variable",
    "observations_to_frame",
]
