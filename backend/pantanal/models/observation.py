"""月級氣候觀測資料模型

一筆觀測對應一個 (時間桶, 單位)，包含固定變數集合的數值。
觀測資料由呼叫端持有，分析核心只讀取不修改。
"""

from dataclasses import dataclass, field
from functools import total_ordering
from typing import Mapping, Optional, Sequence

import pandas as pd

from pantanal.models.variable import Variable


# 觀測資料表的識別欄位
ID_COLUMNS = ["CD_MUN", "NM_MUN", "SIGLA_UF", "LOCATION", "year", "month", "ym"]


@total_ordering
@dataclass(frozen=True)
class BucketKey:
    """時間桶鍵值（年或年月）

    Attributes:
        year: 西元年
        month: 月份 (1-12)，年度桶為 None
    """

    year: int
    month: Optional[int] = None

    @property
    def time(self) -> float:
        """十進位年份，供趨勢與回歸計算使用（1 月為整數年）"""
        if self.month is None:
            return float(self.year)
        return self.year + (self.month - 1) / 12

    @property
    def label(self) -> str:
        if self.month is None:
            return f"{self.year:04d}"
        return f"{self.year:04d}-{self.month:02d}"

    def sort_key(self) -> tuple[int, int]:
        return (self.year, self.month or 0)

    def __lt__(self, other: "BucketKey") -> bool:
        return self.sort_key() < other.sort_key()


@dataclass(frozen=True)
class Observation:
    """單筆月級觀測

    Attributes:
        municipality: 市鎮名稱 (NM_MUN)
        location: 觀測地點名稱 (LOCATION)
        year: 西元年
        month: 月份 (1-12)
        values: 變數欄位名稱 -> 數值（可為 NaN 或缺值）
    """

    municipality: str
    location: str
    year: int
    month: int
    values: Mapping[str, float] = field(default_factory=dict)
    municipality_code: Optional[str] = None
    state: Optional[str] = None

    @property
    def bucket(self) -> BucketKey:
        return BucketKey(self.year, self.month)

    @property
    def ym(self) -> str:
        return self.bucket.label


def observations_to_frame(observations: Sequence[Observation]) -> pd.DataFrame:
    """將觀測紀錄轉換為分析用的 DataFrame

    Args:
        observations: 觀測紀錄序列

    Returns:
        含識別欄位與所有變數欄位的 DataFrame；缺少的變數以 NaN 表示
    """
    records = []
    for obs in observations:
        record = {
            "CD_MUN": obs.municipality_code,
            "NM_MUN": obs.municipality,
            "SIGLA_UF": obs.state,
            "LOCATION": obs.location,
            "year": obs.year,
            "month": obs.month,
            "ym": obs.ym,
        }
        for key in Variable.keys():
            record[key] = obs.values.get(key, float("nan"))
        records.append(record)

    frame = pd.DataFrame(records, columns=ID_COLUMNS + Variable.keys())
    # 數值欄位統一轉為浮點數，無法解析的值視為 NaN
    for key in Variable.keys():
        frame[key] = pd.to_numeric(frame[key], errors="coerce")
    return frame
