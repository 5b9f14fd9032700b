# backend/pantanal/api/v1/compare.py
"""變數比較 API 路由"""

import math

from fastapi import APIRouter, Depends

from pantanal.analytics.engine import ClimateSeriesAnalyzer
from pantanal.dependencies import get_analyzer, get_params
from pantanal.models import Variable
from pantanal.schemas.analysis import (
    ApiResponse,
    ComparePoint,
    CompareResponse,
    CorrelationMatrixResponse,
    CorrelationResponse,
    LinearFitResponse,
)
from pantanal.schemas.params import AnalysisParams

router = APIRouter()


@router.get(
    "/",
    response_model=ApiResponse[CompareResponse],
    summary="兩變數比較",
    description="兩個變數各自聚合後依時間桶對齊，計算相關係數與線性回歸",
)
async def compare_variables(
    params: AnalysisParams = Depends(get_params),
    analyzer: ClimateSeriesAnalyzer = Depends(get_analyzer),
) -> ApiResponse[CompareResponse]:
    """比較 x、y 兩個變數

    Args:
        params: 分析參數（x_variable、y_variable、method）
        analyzer: 分析器

    Returns:
        相關係數、回歸結果與散佈點
    """
    report = analyzer.compare(params)

    return ApiResponse(
        success=True,
        data=CompareResponse(
            x=report.x.key,
            y=report.y.key,
            method=report.method.value,
            n=report.n,
            correlation=CorrelationResponse(**report.correlation.to_dict()),
            regression=LinearFitResponse(**report.fit.to_dict()),
            points=[
                ComparePoint(bucket=key.label, x=float(xv), y=float(yv))
                for key, xv, yv in zip(report.keys, report.xs, report.ys)
            ],
        ),
    )


@router.get(
    "/matrix",
    response_model=ApiResponse[CorrelationMatrixResponse],
    summary="相關矩陣",
    description="所有變數兩兩之間的相關係數（每組配對各自對齊時間桶）",
)
async def get_correlation_matrix(
    params: AnalysisParams = Depends(get_params),
    analyzer: ClimateSeriesAnalyzer = Depends(get_analyzer),
) -> ApiResponse[CorrelationMatrixResponse]:
    """取得相關矩陣（無法計算的格子為 null）"""
    matrix = analyzer.correlation_matrix(params)

    rows = [
        [None if not math.isfinite(value) else float(value) for value in row]
        for row in matrix.to_numpy(dtype=float)
    ]

    return ApiResponse(
        success=True,
        data=CorrelationMatrixResponse(
            method=params.method.value,
            variables=list(matrix.index),
            labels=[Variable.from_key(key).label for key in matrix.index],
            matrix=rows,
        ),
    )
