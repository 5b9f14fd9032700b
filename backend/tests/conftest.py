"""共用測試資料"""

import pandas as pd
import pytest

from pantanal.models import Observation, observations_to_frame


MUNICIPALITIES = ["Corumbá", "Poconé"]
YEARS = [2019, 2020, 2021]


def build_observations() -> list[Observation]:
    """兩個市鎮、三年、每月一筆的觀測資料

    平均溫度每月上升 0.05°C（第二個市鎮固定高 1°C），
    最高溫度與平均溫度完全線性相關，降水量隨月份循環。
    """
    observations = []
    for unit_index, municipality in enumerate(MUNICIPALITIES):
        for year in YEARS:
            for month in range(1, 13):
                index = (year - YEARS[0]) * 12 + month - 1
                observations.append(
                    Observation(
                        municipality=municipality,
                        location=f"{municipality} - Centro",
                        year=year,
                        month=month,
                        values={
                            "tmean_c": 24.0 + 0.05 * index + unit_index,
                            "tmax_c": 30.0 + 0.05 * index + unit_index,
                            "precip_sum_mm": 100.0 + 10 * ((month * 7) % 12) + unit_index * 5,
                        },
                        state="MT" if unit_index == 1 else "MS",
                    )
                )
    return observations


@pytest.fixture
def sample_df() -> pd.DataFrame:
    """標準格式的觀測資料 DataFrame（72 筆）"""
    return observations_to_frame(build_observations())


@pytest.fixture
def sample_csv(tmp_path, sample_df):
    """寫出為 CSV 的觀測資料"""
    path = tmp_path / "pantanal_clima_utf8.csv"
    sample_df.to_csv(path, index=False)
    return path
