"""趨勢檢定

提供單一序列的無母數趨勢分析：
- Mann-Kendall 單調趨勢檢定（含同值修正與連續性修正）
- Sen 斜率（所有成對斜率的中位數）

兩者皆以成對列舉實作，時間複雜度 O(n²)。月資料數十年（數百點）
沒有問題，序列長度過長時由上層記錄警告。

樣本數過小時常態近似不可靠，建議 n >= 8 才採用檢定結果；
本模組本身不拒絕小樣本，僅回傳退化或 NaN 的結果。
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Iterable

import numpy as np

from pantanal.analytics.numeric import as_float_array, filter_finite


# Abramowitz & Stegun 7.1.26 係數，最大絕對誤差約 1.5e-7
_ERF_P = 0.3275911
_ERF_A = (0.254829592, -0.284496736, 1.421413741, -1.453152027, 1.061405429)


@dataclass(frozen=True)
class MannKendallResult:
    """Mann-Kendall 檢定結果

    Attributes:
        s: S 統計量（後值較大的配對數減後值較小的配對數）
        var_s: S 的變異數（含同值修正），n < 2 時為 NaN
        z: 標準化統計量，變異數無效時為 NaN
        p: 雙尾 p 值
        tau: Kendall tau
        n: 有限值個數
    """

    s: int
    var_s: float
    z: float
    p: float
    tau: float
    n: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def erf(x: float) -> float:
    """誤差函數的 Abramowitz-Stegun 多項式近似"""
    sign = 1.0 if x >= 0 else -1.0
    x = abs(x)
    a1, a2, a3, a4, a5 = _ERF_A
    t = 1.0 / (1.0 + _ERF_P * x)
    y = 1.0 - ((((a5 * t + a4) * t + a3) * t + a2) * t + a1) * t * math.exp(-x * x)
    return sign * y


def normal_cdf(z: float) -> float:
    """標準常態累積分布函數"""
    return 0.5 * (1.0 + erf(z / math.sqrt(2.0)))


def _tie_correction(values: np.ndarray) -> float:
    """同值修正項 Σ t(t-1)(2t+5)"""
    _, counts = np.unique(values, return_counts=True)
    ties = counts[counts > 1].astype(float)
    return float((ties * (ties - 1) * (2 * ties + 5)).sum())


def mann_kendall(values: Iterable[Any]) -> MannKendallResult:
    """Mann-Kendall 單調趨勢檢定

    含非有限值的配對不計入 S；移除非有限值後保留原始順序，
    因此等同於只在有限值之間做成對比較。

    Args:
        values: 依時間排序的數值序列

    Returns:
        MannKendallResult
    """
    x = filter_finite(values)
    n = len(x)

    s = 0
    for i in range(n - 1):
        diff = x[i + 1:] - x[i]
        s += int((diff > 0).sum()) - int((diff < 0).sum())

    if n < 2:
        var_s = float("nan")
    else:
        var_s = (n * (n - 1) * (2 * n + 5) - _tie_correction(x)) / 18.0

    if not np.isfinite(var_s) or var_s <= 0:
        z = float("nan")
    elif s > 0:
        z = (s - 1) / math.sqrt(var_s)
    elif s < 0:
        z = (s + 1) / math.sqrt(var_s)
    else:
        z = 0.0

    # 近似誤差可能使 z = 0 時的 p 略大於 1
    p = min(1.0, 2.0 * (1.0 - normal_cdf(abs(z)))) if np.isfinite(z) else float("nan")
    tau = s / (0.5 * n * (n - 1)) if n > 1 else float("nan")

    return MannKendallResult(s=s, var_s=var_s, z=z, p=p, tau=tau, n=n)


def sen_slope(times: Iterable[Any], values: Iterable[Any]) -> float:
    """Sen 斜率估計

    對所有 i < j 且兩值皆為有限值、時間不同的配對計算
    (values[j] - values[i]) / (times[j] - times[i])，取中位數
    （偶數個時取中間兩值的平均）。

    Args:
        times: 連續時間刻度（十進位年份，斜率單位即為「每年」）
        values: 與 times 等長的數值序列

    Returns:
        斜率；沒有有效配對時為 NaN
    """
    t = as_float_array(times)
    x = as_float_array(values)
    n = min(len(t), len(x))

    slopes = []
    for i in range(n - 1):
        if not (np.isfinite(x[i]) and np.isfinite(t[i])):
            continue
        dt = t[i + 1:n] - t[i]
        dx = x[i + 1:n] - x[i]
        valid = np.isfinite(dx) & np.isfinite(dt) & (dt != 0)
        slopes.append(dx[valid] / dt[valid])

    if not slopes:
        return float("nan")
    all_slopes = np.concatenate(slopes)
    if len(all_slopes) == 0:
        return float("nan")
    return float(np.median(all_slopes))
