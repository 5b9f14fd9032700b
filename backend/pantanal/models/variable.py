"""氣候變數與分析參數列舉

定義資料集中固定的變數集合，以及聚合粒度、比較單位與相關係數方法。
變數的聚合方式（平均或總和）在設定階段解析一次，不在每筆資料上重新判斷。
"""

from enum import Enum


class Reducer(str, Enum):
    """同一時間桶內多筆觀測的合併方式"""

    MEAN = "mean"
    SUM = "sum"


class Granularity(str, Enum):
    """時間聚合粒度"""

    MONTHLY = "monthly"
    ANNUAL = "annual"


class Scope(str, Enum):
    """比較單位：市鎮或觀測地點

    值為觀測資料中對應的欄位名稱。
    """

    MUNICIPALITY = "NM_MUN"
    LOCATION = "LOCATION"

    @property
    def column(self) -> str:
        return self.value


class CorrelationMethod(str, Enum):
    """相關係數計算方法"""

    PEARSON = "pearson"
    SPEARMAN = "spearman"


class Variable(Enum):
    """資料集中的氣候變數

    每個成員的值為 (欄位名稱, 顯示標籤, 聚合方式)。
    """

    PRECIPITATION = ("precip_sum_mm", "降水量（總和，mm）", Reducer.SUM)
    TEMPERATURE_MEAN = ("tmean_c", "平均溫度 (°C)", Reducer.MEAN)
    TEMPERATURE_MIN = ("tmin_c", "最低溫度 (°C)", Reducer.MEAN)
    TEMPERATURE_MAX = ("tmax_c", "最高溫度 (°C)", Reducer.MEAN)
    HUMIDITY_MEAN = ("rh_mean_pct", "平均相對濕度 (%)", Reducer.MEAN)
    HEAT_INDEX_MEAN = ("hi_mean_c", "平均熱指數 (°C)", Reducer.MEAN)
    HEAT_INDEX_MAX = ("hi_max_c", "最高熱指數 (°C)", Reducer.MEAN)

    def __init__(self, key: str, label: str, reducer: Reducer):
        self.key = key
        self.label = label
        self.reducer = reducer

    def reducer_for(self, granularity: Granularity) -> Reducer:
        """取得指定粒度下實際使用的聚合方式

        總和型變數只在年度聚合時加總，月度聚合一律取平均。
        """
        if granularity == Granularity.ANNUAL and self.reducer == Reducer.SUM:
            return Reducer.SUM
        return Reducer.MEAN

    @classmethod
    def from_key(cls, key: str) -> "Variable":
        """以欄位名稱取得變數

        Raises:
            ValueError: 未知的變數名稱
        """
        for member in cls:
            if member.key == key:
                return member
        raise ValueError(f"未知的變數: {key}")

    @classmethod
    def keys(cls) -> list[str]:
        return [member.key for member in cls]
