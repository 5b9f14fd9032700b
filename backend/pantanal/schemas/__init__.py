"""Pydantic Schema 模組"""

from pantanal.schemas.params import AnalysisParams
from pantanal.schemas.analysis import (
    ApiResponse,
    CompareResponse,
    CorrelationMatrixResponse,
    MetadataResponse,
    SeriesResponse,
    SummaryResponse,
    TrendResponse,
    UnitSeriesResponse,
)

__all__ = [
    "AnalysisParams",
    "ApiResponse",
    "CompareResponse",
    "CorrelationMatrixResponse",
    "MetadataResponse",
    "SeriesResponse",
    "SummaryResponse",
    "TrendResponse",
    "UnitSeriesResponse",
]
