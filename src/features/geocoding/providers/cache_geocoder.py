"""キャッシュ付きジオコーダー"""

import threading
from collections import OrderedDict
from typing import Any

from ....shared.logging.config import get_logger
from ..domain.models import NormalizedLocation
from .amap_geocoder import AmapGeocoder

logger = get_logger(__name__)

DEFAULT_MAX_SIZE = 10000


class CacheGeocoder:
    """
    キャッシュ付きジオコーダー

    同じ座標に対するAPI呼び出しを削減するため、
    メモリ内キャッシュを使用（失敗した結果はキャッシュしない）

    常駐プロセスで使うため件数に上限を設け、超えた分は最も長く
    参照されていないエントリから削除する（LRU）
    """

    def __init__(self, geocoder: AmapGeocoder, max_size: int = DEFAULT_MAX_SIZE) -> None:
        """
        Args:
            geocoder: ベースとなるジオコーダー
            max_size: キャッシュする最大件数

        Raises:
            ValueError: max_sizeが1未満の場合
        """
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")

        self.geocoder = geocoder
        self.max_size = max_size
        self.cache: OrderedDict[str, NormalizedLocation] = OrderedDict()
        self.eviction_count = 0
        self.hit_count = 0
        self.miss_count = 0
        self._lock = threading.Lock()

        logger.info(f"CacheGeocoder initialized: max_size={max_size}")

    def reverse_geocode(self, latitude: float, longitude: float) -> NormalizedLocation:
        """
        座標から住所を取得（逆ジオコーディング、キャッシュあり）

        Args:
            latitude: WGS-84 緯度
            longitude: WGS-84 経度

        Returns:
            NormalizedLocation: 正規化済みの位置情報
        """
        cache_key = self._make_key(latitude, longitude)

        with self._lock:
            cached = self.cache.get(cache_key)
            if cached is not None:
                self.cache.move_to_end(cache_key)
                self.hit_count += 1
                logger.debug(f"Cache hit for coordinates: ({latitude}, {longitude})")
                return cached
            self.miss_count += 1

        logger.debug(f"Cache miss for coordinates: ({latitude}, {longitude})")

        location = self.geocoder.reverse_geocode(latitude, longitude)

        with self._lock:
            self.cache[cache_key] = location
            self.cache.move_to_end(cache_key)
            while len(self.cache) > self.max_size:
                evicted_key, _ = self.cache.popitem(last=False)
                self.eviction_count += 1
                logger.debug(f"Cache evicted: {evicted_key}")

        return location

    def clear_cache(self) -> None:
        """キャッシュをクリア"""
        with self._lock:
            cache_size = len(self.cache)
            self.cache.clear()
            self.hit_count = 0
            self.miss_count = 0
            self.eviction_count = 0
        logger.info(f"Cache cleared: {cache_size} entries removed")

    def get_cache_stats(self) -> dict[str, Any]:
        """
        キャッシュ統計を取得

        Returns:
            dict[str, Any]: キャッシュ統計（サイズ、ヒット数、ミス数、ヒット率）
        """
        with self._lock:
            total_requests = self.hit_count + self.miss_count
            hit_rate = (self.hit_count / total_requests * 100) if total_requests > 0 else 0.0

            stats = {
                "cache_size": len(self.cache),
                "max_size": self.max_size,
                "hit_count": self.hit_count,
                "miss_count": self.miss_count,
                "total_requests": total_requests,
                "hit_rate_percent": round(hit_rate, 2),
                "eviction_count": self.eviction_count,
            }

        logger.info(f"Cache stats: {stats}")

        return stats

    def close(self) -> None:
        self.geocoder.close()

    def _make_key(self, latitude: float, longitude: float) -> str:
        """座標をキャッシュキーに変換（小数点以下6桁で丸める）"""
        return f"{latitude:.6f},{longitude:.6f}"
