"""數值工具

所有統計計算前的共用處理：
- 將任意輸入轉為浮點陣列（無法解析的值視為 NaN）
- 過濾非有限值
- 移動平均
- 最近秩 (nearest-rank) 分位數
"""

from typing import Any, Iterable

import numpy as np
import pandas as pd


def as_float_array(values: Iterable[Any]) -> np.ndarray:
    """將輸入轉為浮點 numpy 陣列

    無法解析為數值的元素（None、空字串、文字等）一律轉為 NaN，
    不會拋出例外。

    Args:
        values: 任意可迭代的數值序列

    Returns:
        新建立的 float64 陣列
    """
    if isinstance(values, (np.ndarray, pd.Series)) and values.dtype.kind in "biuf":
        return np.array(values, dtype=float)

    coerced = pd.to_numeric(pd.Series(list(values), dtype=object), errors="coerce")
    # to_numpy 可能回傳唯讀的檢視
    return np.array(coerced.to_numpy(dtype=float, na_value=np.nan), dtype=float)


def filter_finite(values: Iterable[Any]) -> np.ndarray:
    """移除非有限值（NaN、±inf、無法解析的值）"""
    arr = as_float_array(values)
    return arr[np.isfinite(arr)]


def moving_average(values: Iterable[Any], window: int) -> np.ndarray:
    """尾端移動平均

    位置 i 的結果為 [i-window+1, i] 範圍內有限值的平均；序列開頭的視窗
    自動縮短。視窗內的非有限值不計入平均（不視為 0），
    若視窗內完全沒有有限值則結果為 NaN。

    Args:
        values: 數值序列
        window: 視窗大小，<= 1 時原樣回傳

    Returns:
        與輸入等長的陣列
    """
    arr = as_float_array(values)
    if not window or window <= 1:
        return arr

    out = np.full(len(arr), np.nan)
    for i in range(len(arr)):
        start = max(0, i - window + 1)
        chunk = arr[start:i + 1]
        chunk = chunk[np.isfinite(chunk)]
        if len(chunk) > 0:
            out[i] = chunk.sum() / len(chunk)
    return out


def quantile(sorted_values: Iterable[Any], p: float) -> float:
    """最近秩分位數（不內插）

    回傳遞增排序陣列中索引 floor((n-1)*p) 的元素。

    Args:
        sorted_values: 已遞增排序的數值
        p: 分位 (0-1)

    Returns:
        分位數值；輸入為空時回傳 NaN
    """
    arr = as_float_array(sorted_values)
    n = len(arr)
    if n == 0:
        return float("nan")

    index = int(np.floor((n - 1) * p))
    index = min(max(index, 0), n - 1)
    return float(arr[index])
