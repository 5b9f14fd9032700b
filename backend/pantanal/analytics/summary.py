"""描述統計

對一組數值計算 n、平均、中位數、標準差、極值與百分位數。
百分位數使用最近秩法（見 numeric.quantile），不內插。
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Iterable

import numpy as np

from pantanal.analytics.numeric import filter_finite, quantile


@dataclass(frozen=True)
class SummaryStats:
    """描述統計結果

    n == 0 時為「無資料」結果，所有數值欄位皆為 NaN，
    呼叫端應以 is_empty 判斷，不可與數值為 0 的摘要混淆。
    """

    n: int
    mean: float
    median: float
    sd: float
    min: float
    max: float
    p05: float
    p25: float
    p75: float
    p95: float

    @property
    def is_empty(self) -> bool:
        return self.n == 0

    @classmethod
    def empty(cls) -> "SummaryStats":
        nan = float("nan")
        return cls(
            n=0, mean=nan, median=nan, sd=nan, min=nan, max=nan,
            p05=nan, p25=nan, p75=nan, p95=nan,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def summarize(values: Iterable[Any]) -> SummaryStats:
    """計算描述統計

    Args:
        values: 數值序列（非有限值會被排除）

    Returns:
        SummaryStats；沒有有效值時回傳 SummaryStats.empty()
    """
    vals = np.sort(filter_finite(values))
    n = len(vals)
    if n == 0:
        return SummaryStats.empty()

    mean = float(vals.sum() / n)
    # 樣本標準差，分母至少為 1
    sd = math.sqrt(float(((vals - mean) ** 2).sum()) / max(1, n - 1))

    return SummaryStats(
        n=n,
        mean=mean,
        median=float(vals[n // 2]),
        sd=sd,
        min=float(vals[0]),
        max=float(vals[-1]),
        p05=quantile(vals, 0.05),
        p25=quantile(vals, 0.25),
        p75=quantile(vals, 0.75),
        p95=quantile(vals, 0.95),
    )
