"""應用程式設定模組

使用 pydantic-settings 管理應用程式配置，
支援從環境變數和 .env 檔案載入設定。
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


# 專案根目錄（backend 的上一層）
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "data"


class Settings(BaseSettings):
    """應用程式設定類別

    Attributes:
        app_name: 應用程式名稱
        data_path: 觀測資料 CSV 路徑
        min_trend_samples: 採用 Mann-Kendall 檢定結果所需的最少點數
        pairwise_warning_length: 成對演算法 (O(n²)) 記錄警告的序列長度
        default_variable: 預設分析變數
        default_granularity: 預設聚合粒度 (monthly / annual)
        log_level: 日誌等級
    """

    app_name: str = "Pantanal 氣候 API"
    data_path: Path = DATA_DIR / "pantanal_clima_utf8.csv"
    min_trend_samples: int = 8
    pairwise_warning_length: int = 2000
    default_variable: str = "precip_sum_mm"
    default_granularity: str = "monthly"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# 全域設定實例
settings = Settings()
