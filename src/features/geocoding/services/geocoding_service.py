"""逆ジオコーディングサービス"""

from typing import Any, Iterable, Optional

from tqdm import tqdm

from ....infrastructure.config.settings import Settings
from ....shared.exceptions.errors import ConfigurationError, RegeoError
from ....shared.http.client import HTTPClient
from ....shared.http.rate_limiter import RateLimiter
from ....shared.logging.config import get_logger
from ..domain.models import NormalizedLocation, ReverseGeocodeResult
from ..providers.amap_geocoder import AMAP_REGEO_URL, AmapGeocoder
from ..providers.cache_geocoder import DEFAULT_MAX_SIZE, CacheGeocoder

logger = get_logger(__name__)


class GeocodingService:
    """逆ジオコーディングサービス"""

    def __init__(
        self,
        api_key: str,
        use_cache: bool = True,
        cache_max_size: int = DEFAULT_MAX_SIZE,
        min_interval: float = 1.0,
        http_client: Optional[HTTPClient] = None,
        base_url: str = AMAP_REGEO_URL,
    ) -> None:
        """
        Args:
            api_key: 高德Web服务 APIキー
            use_cache: キャッシュを使用するか
            cache_max_size: キャッシュする最大件数
            min_interval: APIリクエスト間の最小間隔（秒）
            http_client: HTTPクライアント（Noneの場合は新規作成）
            base_url: 逆ジオコーディングAPIのURL
        """
        # すべてのリクエストで1つのレート制限を共有
        self.rate_limiter = RateLimiter(min_interval=min_interval)
        self.base_geocoder = AmapGeocoder(
            api_key,
            http_client=http_client,
            rate_limiter=self.rate_limiter,
            base_url=base_url,
        )

        if use_cache:
            self.geocoder: CacheGeocoder | AmapGeocoder = CacheGeocoder(
                self.base_geocoder, max_size=cache_max_size
            )
        else:
            self.geocoder = self.base_geocoder

        logger.info(f"GeocodingService initialized: cache={use_cache}, min_interval={min_interval}s")

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeocodingService":
        """
        設定からサービスを作成

        Raises:
            ConfigurationError: APIキーが設定されていない場合
        """
        if not settings.amap_api_key:
            raise ConfigurationError("AMAP_API_KEY is not set")

        http_client = HTTPClient(
            timeout=settings.request_timeout,
            max_retries=settings.request_retry,
            user_agent=settings.request_user_agent,
        )

        return cls(
            api_key=settings.amap_api_key,
            use_cache=settings.geocoding_cache_enabled,
            cache_max_size=settings.geocoding_cache_max_size,
            min_interval=settings.amap_min_interval,
            http_client=http_client,
            base_url=settings.amap_base_url,
        )

    def reverse_geocode(self, latitude: float, longitude: float) -> NormalizedLocation:
        """
        座標を逆ジオコーディング

        Raises:
            RegeoError: 逆ジオコーディングに失敗した場合
        """
        return self.geocoder.reverse_geocode(latitude, longitude)

    def reverse_geocode_batch(
        self, points: Iterable[tuple[float, float]], show_progress: bool = True
    ) -> list[ReverseGeocodeResult]:
        """
        複数の座標をバッチ逆ジオコーディング

        1件の失敗でバッチ全体を止めず、エラー内容を結果に残す

        Args:
            points: (緯度, 経度)のリスト
            show_progress: プログレスバーを表示するか

        Returns:
            list[ReverseGeocodeResult]: 入力と同じ順序の結果
        """
        points = list(points)
        results: list[ReverseGeocodeResult] = []

        logger.info(f"Starting batch reverse geocoding: {len(points)} points")

        iterator = tqdm(points, desc="逆ジオコーディング") if show_progress else points

        for latitude, longitude in iterator:
            try:
                location = self.reverse_geocode(latitude, longitude)
                results.append(ReverseGeocodeResult(point=(latitude, longitude), location=location))
            except RegeoError as e:
                logger.error(f"Reverse geocoding failed for ({latitude}, {longitude}): {e}")
                results.append(ReverseGeocodeResult(point=(latitude, longitude), error=str(e)))

        success_count = sum(1 for result in results if result.is_success)
        logger.info(
            f"Batch reverse geocoding completed: {success_count} success, "
            f"{len(results) - success_count} failure"
        )

        return results

    def get_cache_stats(self) -> Optional[dict[str, Any]]:
        """
        キャッシュ統計を取得（CacheGeocoderを使用している場合のみ）

        Returns:
            Optional[dict[str, Any]]: キャッシュ統計
        """
        if isinstance(self.geocoder, CacheGeocoder):
            return self.geocoder.get_cache_stats()
        else:
            logger.warning("Cache stats are only available when using CacheGeocoder")
            return None

    def clear_cache(self) -> None:
        """キャッシュをクリア（CacheGeocoderを使用している場合のみ）"""
        if isinstance(self.geocoder, CacheGeocoder):
            self.geocoder.clear_cache()
        else:
            logger.warning("Cache clearing is only supported when using CacheGeocoder")

    def close(self) -> None:
        """HTTPセッションをクローズ"""
        self.base_geocoder.close()
