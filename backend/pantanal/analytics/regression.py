"""最小平方線性回歸"""

from dataclasses import asdict, dataclass
from typing import Any, Iterable

import numpy as np

from pantanal.analytics.numeric import as_float_array


@dataclass(frozen=True)
class LinearFit:
    """線性回歸結果 y = intercept + slope * x

    Attributes:
        slope: 斜率，x 變異為 0 時為 NaN
        intercept: 截距
        r2: 決定係數，y 為常數時為 NaN
        n: 兩者皆為有限值的配對數
    """

    slope: float
    intercept: float
    r2: float
    n: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def finite_pairs(x: Iterable[Any], y: Iterable[Any]) -> tuple[np.ndarray, np.ndarray]:
    """取出 x、y 皆為有限值的配對（依位置對應，長度取較短者）"""
    xs = as_float_array(x)
    ys = as_float_array(y)
    n = min(len(xs), len(ys))
    xs, ys = xs[:n], ys[:n]
    mask = np.isfinite(xs) & np.isfinite(ys)
    return xs[mask], ys[mask]


def linear_fit(x: Iterable[Any], y: Iterable[Any]) -> LinearFit:
    """普通最小平方法線性擬合

    Args:
        x: 自變數序列
        y: 應變數序列

    Returns:
        LinearFit；有效配對少於 2 時所有係數為 NaN，n 仍回報實際配對數
    """
    xs, ys = finite_pairs(x, y)
    n = len(xs)
    nan = float("nan")
    if n < 2:
        return LinearFit(slope=nan, intercept=nan, r2=nan, n=n)

    mx = xs.sum() / n
    my = ys.sum() / n
    dx = xs - mx
    dy = ys - my

    den = float((dx * dx).sum())
    slope = float((dx * dy).sum()) / den if den != 0 else nan
    intercept = float(my - slope * mx)

    residuals = ys - (intercept + slope * xs)
    ss_tot = float((dy * dy).sum())
    ss_res = float((residuals * residuals).sum())
    r2 = 1.0 - ss_res / ss_tot if ss_tot != 0 else nan

    return LinearFit(slope=slope, intercept=intercept, r2=r2, n=n)
