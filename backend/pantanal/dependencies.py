# backend/pantanal/dependencies.py
"""API 依賴注入

- 觀測資料分析器（CSV 只載入一次）
- 由查詢參數建立的分析參數
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from fastapi import HTTPException, Query
from pydantic import ValidationError

from pantanal.analytics.engine import ClimateSeriesAnalyzer
from pantanal.config import settings
from pantanal.models import CorrelationMethod, Granularity, Scope
from pantanal.schemas.params import AnalysisParams
from pantanal.services.loader import load_observations

logger = logging.getLogger(__name__)

# 查詢參數中的範圍代碼
SCOPES = {"mun": Scope.MUNICIPALITY, "loc": Scope.LOCATION}


@lru_cache(maxsize=4)
def _load_analyzer(data_path: Path) -> ClimateSeriesAnalyzer:
    return ClimateSeriesAnalyzer(load_observations(data_path))


def get_analyzer() -> ClimateSeriesAnalyzer:
    """取得分析器（FastAPI 依賴注入用）"""
    try:
        return _load_analyzer(Path(settings.data_path))
    except FileNotFoundError as e:
        logger.error("Observation data unavailable: %s", e)
        raise HTTPException(status_code=503, detail="觀測資料尚未載入")


def get_params(
    scope: str = Query("mun", pattern="^(mun|loc)$", description="比較單位：mun 市鎮、loc 地點"),
    unit: List[str] = Query([], description="選取的單位（可重複）"),
    var: str = Query(settings.default_variable, description="分析變數"),
    agg: Granularity = Query(Granularity(settings.default_granularity), description="聚合粒度"),
    start: Optional[int] = Query(None, description="起始年份（含）"),
    end: Optional[int] = Query(None, description="結束年份（含）"),
    smooth: int = Query(1, ge=1, le=120, description="移動平均視窗"),
    corr: CorrelationMethod = Query(CorrelationMethod.PEARSON, description="相關係數方法"),
    x: str = Query("precip_sum_mm", description="比較 X 變數"),
    y: str = Query("tmean_c", description="比較 Y 變數"),
) -> AnalysisParams:
    """由查詢參數建立分析參數

    Raises:
        422: 未知變數或年份範圍錯誤
    """
    try:
        return AnalysisParams(
            scope=SCOPES[scope],
            units=unit,
            variable=var,
            granularity=agg,
            start_year=start,
            end_year=end,
            window=smooth,
            method=corr,
            x_variable=x,
            y_variable=y,
        )
    except (ValidationError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))
