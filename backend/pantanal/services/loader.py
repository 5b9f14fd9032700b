"""觀測資料載入模組

讀取 Pantanal 月級氣候 CSV 並轉換為分析用的 DataFrame：
- 識別欄位保留為字串
- 年、月轉為整數
- 變數欄位轉為數值，無法解析的值一律視為 NaN
- 移除沒有年份或年月標記的資料列
"""

import logging
from pathlib import Path
from typing import Any, Union

import numpy as np
import pandas as pd

from pantanal.models import Variable
from pantanal.models.observation import ID_COLUMNS

logger = logging.getLogger(__name__)

# 至少需要的欄位
REQUIRED_COLUMNS = ["NM_MUN", "LOCATION", "year", "ym"]

# 字串型識別欄位
TEXT_COLUMNS = ["CD_MUN", "NM_MUN", "SIGLA_UF", "LOCATION", "ym"]


def parse_number(value: Any) -> float:
    """將任意值解析為浮點數

    None、空字串或無法解析的文字回傳 NaN；非有限值也回傳 NaN。
    """
    if value is None:
        return float("nan")
    try:
        number = float(str(value).strip())
    except ValueError:
        return float("nan")
    return number if np.isfinite(number) else float("nan")


def _month_from_ym(ym: Any) -> float:
    parts = str(ym).split("-") if ym else []
    return parse_number(parts[1]) if len(parts) > 1 else float("nan")


def coerce_rows(df: pd.DataFrame) -> pd.DataFrame:
    """將原始 CSV 欄位轉型為分析用格式

    Args:
        df: 直接讀入（全部為字串）的 DataFrame

    Returns:
        轉型後的 DataFrame（副本）

    Raises:
        ValueError: 缺少必要欄位
    """
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"CSV 缺少必要欄位: {', '.join(missing)}")

    result = df.copy()

    for col in TEXT_COLUMNS:
        if col not in result.columns:
            result[col] = None
        else:
            result[col] = result[col].where(result[col].notna(), None)

    result["year"] = pd.to_numeric(result["year"], errors="coerce")
    if "month" in result.columns:
        result["month"] = pd.to_numeric(result["month"], errors="coerce")
    else:
        result["month"] = np.nan

    # 缺少 month 時由 ym (YYYY-MM) 補上
    ym_month = result["ym"].map(_month_from_ym).astype(float)
    result["month"] = result["month"].astype(float).fillna(ym_month)

    for key in Variable.keys():
        if key in result.columns:
            result[key] = result[key].map(parse_number).astype(float)
        else:
            result[key] = np.nan

    valid = np.isfinite(result["year"]) & result["ym"].notna() & (result["ym"] != "")
    dropped = int((~valid).sum())
    if dropped:
        logger.info("Dropped %d rows without year or ym", dropped)

    result = result.loc[valid].copy()
    result["year"] = result["year"].astype(int)

    return result[ID_COLUMNS + Variable.keys()].reset_index(drop=True)


def load_observations(csv_path: Union[str, Path]) -> pd.DataFrame:
    """讀取觀測資料 CSV

    Args:
        csv_path: CSV 檔案路徑

    Returns:
        轉型後的觀測資料 DataFrame

    Raises:
        FileNotFoundError: 找不到 CSV 檔案
    """
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"找不到 CSV 檔案: {path}")

    logger.info("Loading observations from %s", path)
    raw = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8")
    frame = coerce_rows(raw)
    logger.info("Loaded %d observation rows", len(frame))
    return frame


def get_data_quality_report(df: pd.DataFrame) -> dict:
    """產生資料品質報告

    Args:
        df: 轉型後的觀測資料

    Returns:
        包含各變數缺失率的字典
    """
    report = {
        "total_rows": len(df),
        "columns": {},
    }

    for key in Variable.keys():
        if key not in df.columns:
            continue
        missing_count = int((~np.isfinite(df[key].astype(float))).sum())
        missing_pct = (missing_count / len(df)) * 100 if len(df) > 0 else 0
        report["columns"][key] = {
            "missing_count": missing_count,
            "missing_percentage": round(missing_pct, 2),
        }

    return report
