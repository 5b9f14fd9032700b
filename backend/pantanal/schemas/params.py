"""分析參數

取代介面層的全域「目前選取」狀態：每次聚合或統計呼叫都傳入一個
不可變的參數物件。變數名稱在建立參數時即解析為 Variable 列舉。
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from pantanal.models import CorrelationMethod, Granularity, Scope, Variable


class AnalysisParams(BaseModel):
    """分析參數（不可變）"""

    model_config = ConfigDict(frozen=True)

    scope: Scope = Field(Scope.MUNICIPALITY, description="比較單位（市鎮或地點）")
    units: tuple[str, ...] = Field((), description="選取的單位，空值代表全部")
    variable: Variable = Field(Variable.PRECIPITATION, description="分析變數")
    granularity: Granularity = Field(Granularity.MONTHLY, description="聚合粒度")
    start_year: Optional[int] = Field(None, description="起始年份（含）")
    end_year: Optional[int] = Field(None, description="結束年份（含）")
    window: int = Field(1, ge=1, description="移動平均視窗大小")
    method: CorrelationMethod = Field(CorrelationMethod.PEARSON, description="相關係數方法")
    x_variable: Variable = Field(Variable.PRECIPITATION, description="比較 X 軸變數")
    y_variable: Variable = Field(Variable.TEMPERATURE_MEAN, description="比較 Y 軸變數")

    @field_validator("variable", "x_variable", "y_variable", mode="before")
    @classmethod
    def _resolve_variable(cls, value: Any) -> Any:
        if isinstance(value, str):
            return Variable.from_key(value)
        return value

    @field_validator("units", mode="before")
    @classmethod
    def _normalize_units(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, str):
            return tuple(u for u in value.split("|") if u)
        return tuple(value)

    @model_validator(mode="after")
    def _check_year_range(self) -> "AnalysisParams":
        if (
            self.start_year is not None
            and self.end_year is not None
            and self.start_year > self.end_year
        ):
            raise ValueError(
                f"起始年份 {self.start_year} 晚於結束年份 {self.end_year}"
            )
        return self

    @field_serializer("variable", "x_variable", "y_variable")
    def _serialize_variable(self, value: Variable) -> str:
        return value.key
