"""統計分析引擎

將聚合器與各統計模組串接為完整的分析流程：
- 依參數過濾觀測資料並產生區域序列（含移動平均）
- 描述統計
- 趨勢分析（Mann-Kendall、Sen 斜率、對十進位年份的線性回歸）
- 兩變數比較（相關係數與回歸）與相關矩陣

分析器本身不快取任何結果，每次呼叫都依觀測資料與參數重新計算。
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np
import pandas as pd

from pantanal.analytics.aggregator import aggregate, filter_observations, selection_series
from pantanal.analytics.correlation import (
    Correlation,
    align_series,
    correlate,
    correlation_matrix,
)
from pantanal.analytics.numeric import moving_average
from pantanal.analytics.regression import LinearFit, linear_fit
from pantanal.analytics.summary import SummaryStats, summarize
from pantanal.analytics.trend import MannKendallResult, mann_kendall, sen_slope
from pantanal.config import settings
from pantanal.models import BucketKey, CorrelationMethod, Scope, Series, Variable
from pantanal.schemas.params import AnalysisParams

logger = logging.getLogger(__name__)


# ============================================================================
# 分析結果
# ============================================================================


@dataclass(frozen=True)
class SmoothedSeries:
    """區域序列與其移動平均"""

    series: Series
    smoothed: np.ndarray
    window: int


@dataclass(frozen=True)
class TrendReport:
    """趨勢分析結果

    Attributes:
        mann_kendall: Mann-Kendall 檢定結果
        sen_slope: Sen 斜率（每年）
        linear_fit: 數值對十進位年份的線性回歸（斜率為每年）
        sufficient: 序列長度是否達到可信的最少點數
    """

    mann_kendall: MannKendallResult
    sen_slope: float
    linear_fit: LinearFit
    sufficient: bool


@dataclass(frozen=True)
class ComparisonReport:
    """兩變數比較結果（依時間桶對齊）"""

    x: Variable
    y: Variable
    method: CorrelationMethod
    keys: list[BucketKey]
    xs: np.ndarray
    ys: np.ndarray
    correlation: Correlation
    fit: LinearFit

    @property
    def n(self) -> int:
        return len(self.keys)


@dataclass(frozen=True)
class AnalysisReport:
    """單一變數的完整分析"""

    params: AnalysisParams
    series: SmoothedSeries
    summary: SummaryStats
    trend: Optional[TrendReport]


# ============================================================================
# 分析器類別
# ============================================================================


class ClimateSeriesAnalyzer:
    """氣候序列分析器

    Attributes:
        data: 觀測資料 DataFrame（含單位欄位、year、month 與變數欄位）
    """

    def __init__(
        self,
        data: pd.DataFrame,
        min_trend_samples: Optional[int] = None,
        pairwise_warning_length: Optional[int] = None,
    ):
        """初始化分析器

        Args:
            data: 觀測資料 DataFrame
            min_trend_samples: 趨勢檢定最少點數（預設取自設定）
            pairwise_warning_length: 成對演算法警告長度（預設取自設定）
        """
        self.data = data.copy()
        self.data["year"] = pd.to_numeric(self.data["year"], errors="coerce")
        self.data["month"] = pd.to_numeric(self.data["month"], errors="coerce")

        self.min_trend_samples = (
            settings.min_trend_samples if min_trend_samples is None else min_trend_samples
        )
        self.pairwise_warning_length = (
            settings.pairwise_warning_length
            if pairwise_warning_length is None
            else pairwise_warning_length
        )

    def filtered(self, params: AnalysisParams) -> pd.DataFrame:
        """依年份範圍與單位選取過濾後的觀測資料"""
        return filter_observations(self.data, params)

    def export_frame(self, params: AnalysisParams) -> pd.DataFrame:
        """過濾後的原始觀測資料（不聚合），供匯出 CSV"""
        frame = self.filtered(params).copy()
        frame["month"] = frame["month"].astype("Int64")
        return frame

    def export_filename(self, params: AnalysisParams) -> str:
        """匯出檔名，未指定年份時取資料的年份範圍"""
        years = self.data["year"].dropna()
        start, end = params.start_year, params.end_year
        if start is None:
            start = int(years.min()) if len(years) else ""
        if end is None:
            end = int(years.max()) if len(years) else ""
        return f"pantanal_clima_filtrado_{start}-{end}.csv"

    def _selection(self, params: AnalysisParams, variable: Variable) -> Series:
        return selection_series(
            self.filtered(params), variable, params.granularity, params.scope
        )

    def series(self, params: AnalysisParams) -> SmoothedSeries:
        """取得選取範圍的區域序列與移動平均"""
        series = self._selection(params, params.variable)
        smoothed = moving_average(series.values, params.window)
        return SmoothedSeries(series=series, smoothed=smoothed, window=params.window)

    def unit_series(self, params: AnalysisParams) -> dict[str, Series]:
        """取得選取範圍內各單位的序列"""
        result = aggregate(
            self.filtered(params), params.variable, params.granularity, params.scope
        )
        return result.per_unit

    def summary(self, params: AnalysisParams) -> SummaryStats:
        """區域序列數值的描述統計"""
        return summarize(self._selection(params, params.variable).values)

    def trend(self, params: AnalysisParams) -> TrendReport:
        """區域序列的趨勢分析

        時間以十進位年份表示，因此 Sen 斜率與回歸斜率的單位皆為「每年」。
        """
        series = self._selection(params, params.variable)
        return self._trend_of(series)

    def _trend_of(self, series: Series) -> TrendReport:
        if len(series) > self.pairwise_warning_length:
            logger.warning(
                "Series of %d points exceeds %d; pairwise trend statistics are O(n^2)",
                len(series), self.pairwise_warning_length,
            )

        times = series.times
        values = series.values
        mk = mann_kendall(values)
        return TrendReport(
            mann_kendall=mk,
            sen_slope=sen_slope(times, values),
            linear_fit=linear_fit(times, values),
            sufficient=mk.n >= self.min_trend_samples,
        )

    def compare(self, params: AnalysisParams) -> ComparisonReport:
        """比較兩個變數（各自獨立聚合後依時間桶對齊）"""
        filtered = self.filtered(params)
        sx = selection_series(filtered, params.x_variable, params.granularity, params.scope)
        sy = selection_series(filtered, params.y_variable, params.granularity, params.scope)
        keys, xs, ys = align_series(sx, sy)

        return ComparisonReport(
            x=params.x_variable,
            y=params.y_variable,
            method=params.method,
            keys=keys,
            xs=xs,
            ys=ys,
            correlation=correlate(xs, ys, params.method),
            fit=linear_fit(xs, ys),
        )

    def correlation_matrix(self, params: AnalysisParams) -> pd.DataFrame:
        """所有變數間的相關矩陣"""
        filtered = self.filtered(params)
        return correlation_matrix(
            list(Variable),
            lambda v: selection_series(filtered, v, params.granularity, params.scope),
            params.method,
        )

    def report(self, params: AnalysisParams) -> AnalysisReport:
        """單一變數的完整分析（序列、摘要、趨勢）

        沒有任何資料時 trend 為 None，摘要為「無資料」結果。
        """
        smoothed = self.series(params)
        summary = summarize(smoothed.series.values)
        trend = None if summary.is_empty else self._trend_of(smoothed.series)

        logger.info(
            "Report %s %s %s-%s: n=%d",
            params.variable.key,
            params.granularity.value,
            params.start_year,
            params.end_year,
            summary.n,
        )
        return AnalysisReport(params=params, series=smoothed, summary=summary, trend=trend)

    def units(self, scope: Scope) -> list[str]:
        """取得指定比較單位的所有名稱（排序後）"""
        return sorted(self.data[scope.column].dropna().astype(str).unique().tolist())

    def metadata(self) -> dict[str, Any]:
        """資料集概要：年份、市鎮、地點與變數"""
        years = sorted(int(y) for y in self.data["year"].dropna().unique())
        return {
            "years": years,
            "municipalities": self.units(Scope.MUNICIPALITY),
            "locations": self.units(Scope.LOCATION),
            "variables": [{"key": v.key, "label": v.label} for v in Variable],
            "rows": len(self.data),
        }
