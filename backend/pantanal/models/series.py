"""聚合時間序列模型

Series 由聚合器產生，依時間嚴格遞增排序，且不含未定義的聚合值。
序列為唯讀的衍生資料，參數改變時一律重新計算。
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from pantanal.models.observation import BucketKey
from pantanal.models.variable import Granularity, Variable


@dataclass(frozen=True)
class SeriesPoint:
    """序列中的單一時間點

    Attributes:
        key: 時間桶鍵值
        value: 聚合值（平均或總和）
        count: 參與聚合的有效值數量（合併序列為單位數量）
        min: 合併序列中各單位的最小值
        max: 合併序列中各單位的最大值
        sd: 合併序列中各單位的母體標準差
    """

    key: BucketKey
    value: float
    count: int
    min: Optional[float] = None
    max: Optional[float] = None
    sd: Optional[float] = None

    @property
    def time(self) -> float:
        return self.key.time


@dataclass(frozen=True)
class Series:
    """單一單位（或合併區域）單一變數的時間序列"""

    unit: str
    variable: Variable
    granularity: Granularity
    points: tuple[SeriesPoint, ...] = ()

    def __len__(self) -> int:
        return len(self.points)

    @property
    def is_empty(self) -> bool:
        return len(self.points) == 0

    @property
    def keys(self) -> list[BucketKey]:
        return [p.key for p in self.points]

    @property
    def times(self) -> np.ndarray:
        return np.array([p.time for p in self.points], dtype=float)

    @property
    def values(self) -> np.ndarray:
        return np.array([p.value for p in self.points], dtype=float)

    @property
    def has_dispersion(self) -> bool:
        return any(p.sd is not None for p in self.points)

    def value_map(self) -> dict[BucketKey, float]:
        """時間桶 -> 聚合值，供序列對齊使用"""
        return {p.key: p.value for p in self.points}
