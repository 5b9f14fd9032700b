# backend/pantanal/api/v1/series.py
"""時間序列分析 API 路由"""

import io
from typing import List, Optional

import numpy as np
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from pantanal.analytics.engine import ClimateSeriesAnalyzer, TrendReport
from pantanal.dependencies import get_analyzer, get_params
from pantanal.models import Series
from pantanal.schemas.analysis import (
    ApiResponse,
    LinearFitResponse,
    MannKendallResponse,
    SeriesPointOut,
    SeriesResponse,
    SummaryResponse,
    TrendResponse,
    UnitSeriesResponse,
)
from pantanal.schemas.params import AnalysisParams

router = APIRouter()


def _points_to_response(
    series: Series, smoothed: Optional[np.ndarray] = None
) -> list[SeriesPointOut]:
    """將序列時間點轉換為 API 回應

    Args:
        series: 聚合序列
        smoothed: 與序列等長的移動平均值（可選）

    Returns:
        時間點回應列表
    """
    points = []
    for i, p in enumerate(series.points):
        points.append(
            SeriesPointOut(
                bucket=p.key.label,
                time=p.time,
                value=p.value,
                smoothed=float(smoothed[i]) if smoothed is not None else None,
                count=p.count,
                min=p.min,
                max=p.max,
                sd=p.sd,
            )
        )
    return points


def _trend_to_response(trend: TrendReport) -> TrendResponse:
    return TrendResponse(
        mann_kendall=MannKendallResponse(**trend.mann_kendall.to_dict()),
        sen_slope=trend.sen_slope,
        linear_fit=LinearFitResponse(**trend.linear_fit.to_dict()),
        sufficient=trend.sufficient,
    )


@router.get(
    "/",
    response_model=ApiResponse[SeriesResponse],
    summary="取得區域時間序列",
    description="依選取的單位、變數與期間聚合為區域序列，附帶移動平均與單位間離散程度",
)
async def get_series(
    params: AnalysisParams = Depends(get_params),
    analyzer: ClimateSeriesAnalyzer = Depends(get_analyzer),
) -> ApiResponse[SeriesResponse]:
    """取得區域時間序列

    Args:
        params: 分析參數
        analyzer: 分析器

    Returns:
        區域序列（無資料時 points 為空列表）
    """
    result = analyzer.series(params)

    return ApiResponse(
        success=True,
        data=SeriesResponse(
            variable=params.variable.key,
            label=params.variable.label,
            granularity=params.granularity.value,
            window=result.window,
            points=_points_to_response(result.series, result.smoothed),
        ),
    )


@router.get(
    "/units",
    response_model=ApiResponse[List[UnitSeriesResponse]],
    summary="取得各單位時間序列",
)
async def get_unit_series(
    params: AnalysisParams = Depends(get_params),
    analyzer: ClimateSeriesAnalyzer = Depends(get_analyzer),
) -> ApiResponse[List[UnitSeriesResponse]]:
    """取得選取範圍內各單位的時間序列（沒有資料的單位不會出現）"""
    per_unit = analyzer.unit_series(params)

    return ApiResponse(
        success=True,
        data=[
            UnitSeriesResponse(unit=unit, points=_points_to_response(series))
            for unit, series in per_unit.items()
        ],
    )


@router.get(
    "/summary",
    response_model=ApiResponse[SummaryResponse],
    summary="描述統計",
    description="區域序列數值的平均、中位數、標準差與百分位數；n = 0 代表無資料",
)
async def get_summary(
    params: AnalysisParams = Depends(get_params),
    analyzer: ClimateSeriesAnalyzer = Depends(get_analyzer),
) -> ApiResponse[SummaryResponse]:
    """取得描述統計"""
    stats = analyzer.summary(params)

    return ApiResponse(
        success=True,
        data=SummaryResponse(**stats.to_dict()),
    )


@router.get(
    "/trend",
    response_model=ApiResponse[TrendResponse],
    summary="趨勢分析",
    description="Mann-Kendall 檢定、Sen 斜率與對時間的線性回歸（斜率單位：每年）",
)
async def get_trend(
    params: AnalysisParams = Depends(get_params),
    analyzer: ClimateSeriesAnalyzer = Depends(get_analyzer),
) -> ApiResponse[TrendResponse]:
    """取得趨勢分析

    樣本不足時各統計值為 null，sufficient 為 false，不會回傳錯誤。
    """
    trend = analyzer.trend(params)

    return ApiResponse(
        success=True,
        data=_trend_to_response(trend),
    )


@router.get(
    "/export",
    response_class=StreamingResponse,
    summary="匯出過濾後的觀測資料",
    description="依年份範圍與單位過濾的原始觀測資料（不聚合），CSV 格式",
)
async def export_filtered(
    params: AnalysisParams = Depends(get_params),
    analyzer: ClimateSeriesAnalyzer = Depends(get_analyzer),
) -> StreamingResponse:
    """匯出過濾後的觀測資料 CSV"""
    buffer = io.StringIO()
    analyzer.export_frame(params).to_csv(buffer, index=False)
    buffer.seek(0)

    filename = analyzer.export_filename(params)
    return StreamingResponse(
        buffer,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
