"""アプリケーション設定（Pydantic Settings）"""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """アプリケーション設定"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Project
    project_name: str = Field(
        default="amap-regeo",
        description="プロジェクト名",
    )
    environment: str = Field(
        default="development",
        description="環境 (development, staging, production)",
    )

    # GCP
    gcp_project_id: Optional[str] = Field(
        default=None,
        description="GCPプロジェクトID（Cloud Logging有効時に使用）",
    )

    # Amap (高德地図)
    amap_api_key: Optional[str] = Field(
        default=None,
        description="高德Web服务 APIキー",
    )
    amap_base_url: str = Field(
        default="https://restapi.amap.com/v3/geocode/regeo",
        description="逆ジオコーディングAPIのURL",
    )
    amap_min_interval: float = Field(
        default=1.0,
        ge=0.0,
        description="APIリクエスト間の最小間隔（秒）",
    )

    # Geocoding
    geocoding_cache_enabled: bool = Field(
        default=True,
        description="逆ジオコーディング結果のキャッシュを有効にするか",
    )
    geocoding_cache_max_size: int = Field(
        default=10000,
        ge=1,
        description="キャッシュする最大件数（超えた分は古いものから削除）",
    )

    # HTTP
    request_timeout: int = Field(
        default=10,
        description="HTTPリクエストのタイムアウト（秒）",
    )
    request_retry: int = Field(
        default=3,
        description="HTTPリクエストのリトライ回数",
    )
    request_user_agent: str = Field(
        default="Mozilla/5.0 (compatible; AmapRegeo/1.0)",
        description="HTTPリクエストのUser-Agent",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    gcp_logging_enabled: bool = Field(
        default=False,
        description="Cloud Loggingを有効にするか",
    )

    # Server
    port: int = Field(
        default=8080,
        description="HTTPサーバーのポート番号",
    )
