"""レート制限ユーティリティ"""

import threading
import time
from typing import Optional

from ..logging.config import get_logger

logger = get_logger(__name__)


class RateLimiter:
    """
    リクエスト間隔を制御するクラス

    前回のリクエスト時刻を1つだけ保持し、最小間隔が経過するまで
    呼び出し元スレッドをスリープさせる。時刻の読み書きはロックで
    直列化されるため、複数スレッドから共有してよい。
    """

    def __init__(self, min_interval: float = 1.0):
        """
        Args:
            min_interval: リクエスト間の最小間隔（秒、負の値は0として扱う）
        """
        self.min_interval = max(0.0, min_interval)

        self.last_request_time: Optional[float] = None
        self._lock = threading.Lock()

        logger.debug(f"RateLimiter initialized: min_interval={self.min_interval:.2f}s")

    def wait(self) -> None:
        """
        最小間隔が経過するまでスリープし、今回のリクエスト時刻を記録

        スリープはロックを保持したまま行う（後続の呼び出しは順番待ちになる）
        """
        with self._lock:
            if self.last_request_time is not None:
                elapsed = time.monotonic() - self.last_request_time

                if elapsed < self.min_interval:
                    sleep_duration = self.min_interval - elapsed
                    logger.debug(f"Rate limiting: sleeping for {sleep_duration:.2f}s")
                    time.sleep(sleep_duration)

            self.last_request_time = time.monotonic()

    def reset(self) -> None:
        """レート制限をリセット"""
        with self._lock:
            self.last_request_time = None
        logger.debug("RateLimiter reset")
