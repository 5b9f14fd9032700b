"""服務模組

包含觀測資料載入等外部協作功能。
"""

from pantanal.services.loader import coerce_rows, get_data_quality_report, load_observations

__all__ = ["coerce_rows", "get_data_quality_report", "load_observations"]
