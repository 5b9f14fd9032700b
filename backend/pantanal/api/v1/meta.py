# backend/pantanal/api/v1/meta.py
"""資料集概要 API 路由"""

from fastapi import APIRouter, Depends

from pantanal.analytics.engine import ClimateSeriesAnalyzer
from pantanal.dependencies import get_analyzer
from pantanal.schemas.analysis import ApiResponse, MetadataResponse

router = APIRouter()


@router.get(
    "/",
    response_model=ApiResponse[MetadataResponse],
    summary="資料集概要",
    description="可選的年份、市鎮、地點與變數",
)
async def get_metadata(
    analyzer: ClimateSeriesAnalyzer = Depends(get_analyzer),
) -> ApiResponse[MetadataResponse]:
    """取得資料集概要"""
    return ApiResponse(
        success=True,
        data=MetadataResponse(**analyzer.metadata()),
    )
