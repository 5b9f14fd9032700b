"""統計分析模組

提供氣候觀測資料的序列聚合與統計分析功能。
"""

from pantanal.analytics.aggregator import (
    AggregationResult,
    aggregate,
    filter_observations,
    selection_series,
)
from pantanal.analytics.correlation import (
    Correlation,
    align_series,
    correlation_matrix,
    pearson,
    rank,
    spearman,
)
from pantanal.analytics.engine import ClimateSeriesAnalyzer
from pantanal.analytics.numeric import filter_finite, moving_average, quantile
from pantanal.analytics.regression import LinearFit, linear_fit
from pantanal.analytics.summary import SummaryStats, summarize
from pantanal.analytics.trend import MannKendallResult, mann_kendall, sen_slope

__all__ = [
    "AggregationResult",
    "ClimateSeriesAnalyzer",
    "Correlation",
    "LinearFit",
    "MannKendallResult",
    "SummaryStats",
    "aggregate",
    "align_series",
    "correlation_matrix",
    "filter_finite",
    "filter_observations",
    "linear_fit",
    "mann_kendall",
    "moving_average",
    "pearson",
    "quantile",
    "rank",
    "selection_series",
    "sen_slope",
    "spearman",
    "summarize",
]
