# backend/pantanal/schemas/analysis.py
"""分析 API Pydantic Schema 定義

未定義的統計值（NaN）一律以 null 回傳，由前端顯示為佔位符號。
"""

import math
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field, field_validator

T = TypeVar("T")


class _NanAsNone(BaseModel):
    """將 NaN / ±inf 轉為 None 的基底類別"""

    @field_validator("*", mode="before")
    @classmethod
    def _nan_to_none(cls, value: Any) -> Any:
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return value


class SeriesPointOut(_NanAsNone):
    """序列時間點"""

    bucket: str = Field(..., description="時間桶 (YYYY 或 YYYY-MM)")
    time: float = Field(..., description="十進位年份")
    value: float = Field(..., description="聚合值")
    smoothed: Optional[float] = Field(None, description="移動平均值")
    count: int = Field(..., description="參與聚合的單位數")
    min: Optional[float] = Field(None, description="單位間最小值")
    max: Optional[float] = Field(None, description="單位間最大值")
    sd: Optional[float] = Field(None, description="單位間母體標準差")


class SeriesResponse(BaseModel):
    """區域序列回應"""

    variable: str = Field(..., description="變數欄位名稱")
    label: str = Field(..., description="變數顯示名稱")
    granularity: str = Field(..., description="聚合粒度")
    window: int = Field(..., ge=1, description="移動平均視窗")
    points: list[SeriesPointOut] = Field(..., description="時間點列表")

    class Config:
        json_schema_extra = {
            "example": {
                "variable": "tmean_c",
                "label": "平均溫度 (°C)",
                "granularity": "monthly",
                "window": 3,
                "points": [
                    {
                        "bucket": "2020-01",
                        "time": 2020.0,
                        "value": 27.4,
                        "smoothed": 27.4,
                        "count": 3,
                        "min": 26.9,
                        "max": 28.1,
                        "sd": 0.49
                    }
                ]
            }
        }


class UnitSeriesResponse(BaseModel):
    """單一單位序列"""

    unit: str = Field(..., description="單位名稱")
    points: list[SeriesPointOut] = Field(..., description="時間點列表")


class SummaryResponse(_NanAsNone):
    """描述統計回應（n = 0 代表無資料）"""

    n: int = Field(..., ge=0, description="有效值數量")
    mean: Optional[float] = Field(None, description="平均值")
    median: Optional[float] = Field(None, description="中位數")
    sd: Optional[float] = Field(None, description="樣本標準差")
    min: Optional[float] = Field(None, description="最小值")
    max: Optional[float] = Field(None, description="最大值")
    p05: Optional[float] = Field(None, description="第 5 百分位數")
    p25: Optional[float] = Field(None, description="第 25 百分位數")
    p75: Optional[float] = Field(None, description="第 75 百分位數")
    p95: Optional[float] = Field(None, description="第 95 百分位數")


class MannKendallResponse(_NanAsNone):
    """Mann-Kendall 檢定"""

    s: int = Field(..., description="S 統計量")
    var_s: Optional[float] = Field(None, description="S 的變異數")
    z: Optional[float] = Field(None, description="標準化統計量")
    p: Optional[float] = Field(None, ge=0, le=1, description="雙尾 p 值")
    tau: Optional[float] = Field(None, description="Kendall tau")
    n: int = Field(..., ge=0, description="有效值數量")


class LinearFitResponse(_NanAsNone):
    """線性回歸"""

    slope: Optional[float] = Field(None, description="斜率")
    intercept: Optional[float] = Field(None, description="截距")
    r2: Optional[float] = Field(None, description="決定係數")
    n: int = Field(..., ge=0, description="有效配對數")


class TrendResponse(_NanAsNone):
    """趨勢分析回應"""

    mann_kendall: MannKendallResponse = Field(..., description="Mann-Kendall 檢定")
    sen_slope: Optional[float] = Field(None, description="Sen 斜率（每年）")
    linear_fit: LinearFitResponse = Field(..., description="對時間的線性回歸（每年）")
    sufficient: bool = Field(..., description="序列長度是否足以採用檢定結果")


class CorrelationResponse(_NanAsNone):
    """相關係數"""

    r: Optional[float] = Field(None, description="相關係數")
    n: int = Field(..., ge=0, description="有效配對數")


class ComparePoint(BaseModel):
    """比較散佈點"""

    bucket: str = Field(..., description="時間桶")
    x: float = Field(..., description="X 變數值")
    y: float = Field(..., description="Y 變數值")


class CompareResponse(BaseModel):
    """兩變數比較回應"""

    x: str = Field(..., description="X 變數")
    y: str = Field(..., description="Y 變數")
    method: str = Field(..., description="相關係數方法")
    n: int = Field(..., ge=0, description="對齊後的時間點數")
    correlation: CorrelationResponse = Field(..., description="相關係數")
    regression: LinearFitResponse = Field(..., description="y 對 x 的線性回歸")
    points: list[ComparePoint] = Field(..., description="對齊後的散佈點")


class CorrelationMatrixResponse(BaseModel):
    """相關矩陣回應"""

    method: str = Field(..., description="相關係數方法")
    variables: list[str] = Field(..., description="變數欄位名稱（列與欄順序）")
    labels: list[str] = Field(..., description="變數顯示名稱")
    matrix: list[list[Optional[float]]] = Field(..., description="相關係數方陣")


class VariableInfo(BaseModel):
    """變數資訊"""

    key: str = Field(..., description="欄位名稱")
    label: str = Field(..., description="顯示名稱")


class MetadataResponse(BaseModel):
    """資料集概要"""

    years: list[int] = Field(..., description="資料年份")
    municipalities: list[str] = Field(..., description="市鎮列表")
    locations: list[str] = Field(..., description="地點列表")
    variables: list[VariableInfo] = Field(..., description="變數列表")
    rows: int = Field(..., ge=0, description="觀測資料筆數")


class ApiResponse(BaseModel, Generic[T]):
    """API 回應包裝"""

    success: bool = Field(True, description="請求是否成功")
    data: Optional[T] = Field(None, description="回應資料")
    error: Optional[str] = Field(None, description="錯誤訊息")

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "data": {},
                "error": None
            }
        }
