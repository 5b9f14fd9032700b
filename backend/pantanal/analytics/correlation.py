"""相關分析

- Pearson 積差相關
- Spearman 等級相關（同值取平均等級）
- 兩條獨立聚合序列依時間桶對齊
- 固定變數集合的相關矩陣
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Callable, Iterable, Sequence, Union

import numpy as np
import pandas as pd

from pantanal.analytics.numeric import as_float_array
from pantanal.analytics.regression import finite_pairs
from pantanal.models import BucketKey, CorrelationMethod, Series, Variable


@dataclass(frozen=True)
class Correlation:
    """相關係數結果

    Attributes:
        r: 相關係數，樣本不足或任一變數變異為 0 時為 NaN
        n: 兩者皆為有限值的配對數
    """

    r: float
    n: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def pearson(x: Iterable[Any], y: Iterable[Any]) -> Correlation:
    """Pearson 積差相關係數"""
    xs, ys = finite_pairs(x, y)
    n = len(xs)
    if n < 2:
        return Correlation(r=float("nan"), n=n)

    a = xs - xs.sum() / n
    b = ys - ys.sum() / n
    num = float((a * b).sum())
    dx = float((a * a).sum())
    dy = float((b * b).sum())

    if dx == 0 or dy == 0:
        return Correlation(r=float("nan"), n=n)
    return Correlation(r=num / math.sqrt(dx * dy), n=n)


def rank(values: Iterable[Any]) -> np.ndarray:
    """平均等級（1 起算）

    同值的元素皆取其應占位置的平均等級；非有限值的等級為 NaN。
    """
    arr = as_float_array(values)
    arr = np.where(np.isfinite(arr), arr, np.nan)
    return pd.Series(arr).rank(method="average", na_option="keep").to_numpy(dtype=float)


def spearman(x: Iterable[Any], y: Iterable[Any]) -> Correlation:
    """Spearman 等級相關係數

    兩序列各自獨立排名後，對等級序列計算 Pearson 相關。
    """
    return pearson(rank(x), rank(y))


def correlate(
    x: Iterable[Any],
    y: Iterable[Any],
    method: Union[CorrelationMethod, str] = CorrelationMethod.PEARSON,
) -> Correlation:
    """依指定方法計算相關係數"""
    if CorrelationMethod(method) == CorrelationMethod.SPEARMAN:
        return spearman(x, y)
    return pearson(x, y)


def align_series(
    a: Series, b: Series
) -> tuple[list[BucketKey], np.ndarray, np.ndarray]:
    """將兩條序列依完全相同的時間桶對齊

    Args:
        a: 第一條序列（決定輸出順序）
        b: 第二條序列

    Returns:
        (共同時間桶, a 的值, b 的值)
    """
    other = b.value_map()
    keys = [p.key for p in a.points if p.key in other]
    xs = np.array([p.value for p in a.points if p.key in other], dtype=float)
    ys = np.array([other[k] for k in keys], dtype=float)
    return keys, xs, ys


def correlation_matrix(
    variables: Sequence[Variable],
    series_provider: Callable[[Variable], Series],
    method: Union[CorrelationMethod, str] = CorrelationMethod.PEARSON,
) -> pd.DataFrame:
    """計算變數間的相關矩陣

    每一組變數配對各自依時間桶對齊後計算相關係數，
    因此不同配對的樣本數可能不同。

    Args:
        variables: 變數列表
        series_provider: 變數 -> 聚合序列
        method: pearson 或 spearman

    Returns:
        以變數欄位名稱為索引與欄位的方陣
    """
    series = {v: series_provider(v) for v in variables}
    keys = [v.key for v in variables]
    matrix = pd.DataFrame(np.nan, index=keys, columns=keys, dtype=float)

    for vy in variables:
        for vx in variables:
            _, xs, ys = align_series(series[vx], series[vy])
            matrix.loc[vy.key, vx.key] = correlate(xs, ys, method).r

    return matrix
