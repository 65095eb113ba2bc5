"""高德地図（Amap）逆ジオコーディングAPI実装"""
from typing import Any, Optional

from ....shared.exceptions.errors import ConfigurationError
from ....shared.http.client import HTTPClient
from ....shared.http.rate_limiter import RateLimiter
from ....shared.logging.config import get_logger
from ....shared.utils.coordinates import format_location, wgs84_to_gcj02
from ..domain.models import GeoPoint, NormalizedLocation
from ..services.normalizer import ResponseNormalizer

logger = get_logger(__name__)

AMAP_REGEO_URL = "https://restapi.amap.com/v3/geocode/regeo"


class AmapGeocoder:
    """高德地図 逆ジオコーディングAPI実装"""

    def __init__(
        self,
        api_key: str,
        http_client: Optional[HTTPClient] = None,
        rate_limiter: Optional[RateLimiter] = None,
        base_url: str = AMAP_REGEO_URL,
        normalizer: Optional[ResponseNormalizer] = None,
    ) -> None:
        """
        Args:
            api_key: 高德Web服务 APIキー
            http_client: HTTPクライアント（Noneの場合は新規作成）
            rate_limiter: レート制限（Noneの場合は新規作成）
            base_url: 逆ジオコーディングAPIのURL
            normalizer: レスポンス正規化（Noneの場合は新規作成）

        Raises:
            ConfigurationError: APIキーが空の場合
        """
        if not api_key:
            raise ConfigurationError("Amap API key is required for reverse geocoding")

        self.api_key = api_key
        self.http_client = http_client or HTTPClient()
        self.rate_limiter = rate_limiter or RateLimiter(min_interval=1.0)
        self.base_url = base_url
        self.normalizer = normalizer or ResponseNormalizer()

        logger.info("AmapGeocoder initialized")

    def reverse_geocode(self, latitude: float, longitude: float) -> NormalizedLocation:
        """
        座標から住所を取得（逆ジオコーディング）

        Args:
            latitude: WGS-84 緯度
            longitude: WGS-84 経度

        Returns:
            NormalizedLocation: 正規化済みの位置情報

        Raises:
            ValidationError: 座標が不正な場合
            HTTPError: リクエストに失敗した場合
            ProviderError: APIがエラーステータスを返した場合
            DecodeError: レスポンスの形式が想定と異なる場合
        """
        point = GeoPoint(latitude, longitude)

        gcj_lat, gcj_lng = wgs84_to_gcj02(point.latitude, point.longitude)
        logger.debug(
            f"Reverse geocoding: ({latitude}, {longitude}) -> GCJ-02 ({gcj_lat:.6f}, {gcj_lng:.6f})"
        )

        params = self.build_params(gcj_lat, gcj_lng)

        self.rate_limiter.wait()
        payload = self.http_client.get_json(self.base_url, params=params)

        location = self.normalizer.normalize_payload(payload)

        logger.debug(f"Reverse geocoded: ({latitude}, {longitude}) -> {location.display_name}")

        return location

    def build_params(self, gcj_lat: float, gcj_lng: float) -> dict[str, Any]:
        """
        リクエストのクエリパラメータを作成

        Args:
            gcj_lat: GCJ-02 緯度
            gcj_lng: GCJ-02 経度
        """
        return {
            "key": self.api_key,
            "location": format_location(gcj_lat, gcj_lng),
            "extensions": "all",
            "batch": "false",
            "roadlevel": 0,
            "output": "JSON",
        }

    def close(self) -> None:
        """リソースをクリーンアップ"""
        self.http_client.close()

    def __enter__(self) -> "AmapGeocoder":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
