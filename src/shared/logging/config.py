"""ロギング設定"""
import logging
import re
import sys
from typing import Optional

# ロガー設定済みフラグ
_logger_configured = False

# WARNING以上のみ出力するサードパーティロガー
_NOISY_LOGGERS = ("urllib3", "requests", "google", "httpx")

# 高德APIキーの出現箇所（クエリ文字列の key=... と、パラメータdictの 'key': '...'）
_API_KEY_PATTERNS = (
    re.compile(r"(?<=[?&]key=)[^&\s]+"),
    re.compile(r"(?<='key': ')[^']+"),
)
REDACTED = "***"


class ApiKeyRedactingFilter(logging.Filter):
    """
    ログメッセージ中のAPIキーを伏せ字にするフィルター

    ハンドラーに付けるため、urllib3 などサードパーティのロガーから
    伝播したレコードにも適用される
    """

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = message
        for pattern in _API_KEY_PATTERNS:
            redacted = pattern.sub(REDACTED, redacted)

        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(
    level: str = "INFO",
    enable_cloud_logging: bool = False,
    project_id: Optional[str] = None,
) -> None:
    """
    ロギングを設定

    プロセス内で最初の呼び出しのみ有効（2回目以降は何もしない）

    Args:
        level: ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_cloud_logging: Cloud Loggingを有効にするか
        project_id: GCPプロジェクトID (Cloud Logging有効時に必要)
    """
    global _logger_configured

    if _logger_configured:
        return

    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # 標準出力は結果のJSON用
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(ApiKeyRedactingFilter())
    root_logger.addHandler(console_handler)

    # Cloud Logging（google-cloud-logging が必要: extra "gcp"）
    if enable_cloud_logging:
        try:
            from google.cloud import logging as cloud_logging

            client = cloud_logging.Client(project=project_id)
            cloud_handler = cloud_logging.handlers.CloudLoggingHandler(client)
            cloud_handler.setLevel(log_level)
            cloud_handler.addFilter(ApiKeyRedactingFilter())
            root_logger.addHandler(cloud_handler)

            logging.info("Cloud Logging enabled")
        except Exception as e:
            logging.warning(f"Failed to enable Cloud Logging: {e}")

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _logger_configured = True
    logging.info(f"Logging configured with level: {level}")


def get_logger(name: str) -> logging.Logger:
    """
    指定名のロガーを取得

    Args:
        name: ロガー名（通常は__name__を指定）

    Returns:
        ロガーインスタンス
    """
    return logging.getLogger(name)
