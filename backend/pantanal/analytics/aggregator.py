"""時間序列聚合

將原始月級觀測依單位、時間桶分組，產生可比較的時間序列：
- 先依單位分組，再依時間桶（年或年月）分組
- 每個時間桶只取有限值，依變數的聚合方式取平均或加總
  （加總只用於年度聚合，月度聚合一律取平均）
- 沒有任何有效值的時間桶不輸出
- 可將多個單位合併為單一區域序列，附帶各單位間的最小、最大值與母體標準差
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
import pandas as pd

from pantanal.models import BucketKey, Granularity, Scope, Series, SeriesPoint, Variable
from pantanal.schemas.params import AnalysisParams

logger = logging.getLogger(__name__)

# 合併區域序列的單位名稱
MERGED_UNIT = "merged"


@dataclass(frozen=True)
class AggregationResult:
    """聚合結果

    Attributes:
        per_unit: 單位名稱 -> 該單位的序列（只含有資料的單位）
        merged: 合併區域序列（未要求合併時為 None）
    """

    per_unit: dict[str, Series] = field(default_factory=dict)
    merged: Optional[Series] = None


def filter_observations(frame: pd.DataFrame, params: AnalysisParams) -> pd.DataFrame:
    """依年份範圍（含端點）與單位選取過濾觀測資料

    未選取任何單位時保留全部單位。
    """
    mask = pd.Series(True, index=frame.index)
    if params.start_year is not None:
        mask &= frame["year"] >= params.start_year
    if params.end_year is not None:
        mask &= frame["year"] <= params.end_year
    if params.units:
        mask &= frame[params.scope.column].isin(params.units)
    return frame.loc[mask]


def _bucket_columns(granularity: Granularity) -> list[str]:
    if granularity == Granularity.ANNUAL:
        return ["year"]
    return ["year", "month"]


def _bucket_key(row, granularity: Granularity) -> BucketKey:
    if granularity == Granularity.ANNUAL:
        return BucketKey(int(row.year))
    return BucketKey(int(row.year), int(row.month))


def _finite_values(
    observations: pd.DataFrame,
    variable: Variable,
    granularity: Granularity,
    scope: Scope,
) -> pd.DataFrame:
    """取出 (unit, year[, month], value) 且 value 為有限值的列"""
    columns = _bucket_columns(granularity)
    work = pd.DataFrame({"unit": observations[scope.column]})
    for col in columns:
        work[col] = pd.to_numeric(observations[col], errors="coerce")
    work["value"] = pd.to_numeric(observations[variable.key], errors="coerce").astype(float)

    valid = work["unit"].notna() & np.isfinite(work["value"])
    for col in columns:
        valid &= work[col].notna()
    return work.loc[valid]


def aggregate(
    observations: pd.DataFrame,
    variable: Variable,
    granularity: Granularity = Granularity.MONTHLY,
    scope: Scope = Scope.MUNICIPALITY,
    merge: bool = False,
) -> AggregationResult:
    """將觀測資料聚合為各單位的時間序列

    Args:
        observations: 觀測資料（需含單位欄位、year、month 與變數欄位）
        variable: 要聚合的變數
        granularity: 月度或年度
        scope: 以市鎮或地點作為比較單位
        merge: 是否另外產生合併區域序列

    Returns:
        AggregationResult
    """
    columns = _bucket_columns(granularity)
    reducer = variable.reducer_for(granularity)
    work = _finite_values(observations, variable, granularity, scope)

    grouped = (
        work.groupby(["unit"] + columns, sort=True)
        .agg(value=("value", reducer.value), n=("value", "count"))
        .reset_index()
    )

    per_unit: dict[str, Series] = {}
    for unit, rows in grouped.groupby("unit", sort=True):
        points = tuple(
            SeriesPoint(
                key=_bucket_key(row, granularity),
                value=float(row.value),
                count=int(row.n),
            )
            for row in rows.itertuples(index=False)
        )
        per_unit[str(unit)] = Series(
            unit=str(unit), variable=variable, granularity=granularity, points=points
        )

    logger.debug(
        "Aggregated %s (%s, %s): %d units, %d buckets",
        variable.key, granularity.value, reducer.value, len(per_unit), len(grouped),
    )

    merged = None
    if merge:
        merged = merge_series(grouped, variable, granularity)

    return AggregationResult(per_unit=per_unit, merged=merged)


def merge_series(
    grouped: pd.DataFrame, variable: Variable, granularity: Granularity
) -> Series:
    """將各單位在同一時間桶的聚合值合併為區域序列

    只在至少一個單位有值的時間點輸出，不會補出新的時間點。
    標準差為母體標準差（分母為參與的單位數）。

    Args:
        grouped: 各單位聚合後的 (unit, year[, month], value) 表
        variable: 變數
        granularity: 聚合粒度

    Returns:
        合併序列，count 為參與的單位數
    """
    if grouped.empty:
        return Series(unit=MERGED_UNIT, variable=variable, granularity=granularity)

    columns = _bucket_columns(granularity)
    stats = (
        grouped.groupby(columns, sort=True)
        .agg(
            value=("value", "mean"),
            min=("value", "min"),
            max=("value", "max"),
            sd=("value", lambda s: float(np.std(s.to_numpy(dtype=float)))),
            n=("value", "count"),
        )
        .reset_index()
    )

    points = tuple(
        SeriesPoint(
            key=_bucket_key(row, granularity),
            value=float(row.value),
            count=int(row.n),
            min=float(row.min),
            max=float(row.max),
            sd=float(row.sd),
        )
        for row in stats.itertuples(index=False)
    )
    return Series(unit=MERGED_UNIT, variable=variable, granularity=granularity, points=points)


def selection_series(
    observations: pd.DataFrame,
    variable: Variable,
    granularity: Granularity = Granularity.MONTHLY,
    scope: Scope = Scope.MUNICIPALITY,
) -> Series:
    """取得選取範圍的區域序列（摘要、趨勢與比較都以此序列為準）"""
    result = aggregate(observations, variable, granularity, scope, merge=True)
    return result.merged
