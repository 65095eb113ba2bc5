"""逆ジオコーディングHTTPサーバー（FastAPI）"""
import threading
from typing import Any, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from .features.geocoding.domain.models import GeoPoint
from .features.geocoding.services.geocoding_service import GeocodingService
from .infrastructure.config.settings import Settings
from .shared.exceptions.errors import (
    ConfigurationError,
    DecodeError,
    HTTPError,
    ProviderError,
    ValidationError,
)
from .shared.logging.config import get_logger, setup_logging
from .shared.utils.coordinates import wgs84_to_gcj02

settings = Settings()

setup_logging(
    level=settings.log_level,
    enable_cloud_logging=settings.gcp_logging_enabled,
    project_id=settings.gcp_project_id,
)
logger = get_logger(__name__)

app = FastAPI(
    title="高德地図 逆ジオコーディングサービス",
    description="WGS-84 座標を GCJ-02 に変換して高德地図で逆ジオコーディングし、正規化した住所を返す",
    version="1.0.0",
)

_service: Optional[GeocodingService] = None
_service_lock = threading.Lock()


def get_geocoding_service() -> GeocodingService:
    """
    サービスを取得（初回呼び出し時に作成）

    Raises:
        HTTPException: APIキーが設定されていない場合（503）
    """
    global _service
    with _service_lock:
        if _service is None:
            try:
                _service = GeocodingService.from_settings(settings)
            except ConfigurationError as e:
                logger.error(f"Geocoding service is not configured: {e}")
                raise HTTPException(status_code=503, detail=str(e))
        return _service


@app.on_event("startup")
async def startup_event() -> None:
    """起動時の処理"""
    logger.info("Application starting up")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Project: {settings.project_name}")


@app.on_event("shutdown")
async def shutdown_event() -> None:
    """シャットダウン時の処理"""
    global _service
    with _service_lock:
        if _service is not None:
            _service.close()
            _service = None
    logger.info("Application shutting down")


@app.get("/")
async def root() -> dict[str, Any]:
    """ルートエンドポイント"""
    return {
        "service": "高德地図 逆ジオコーディングサービス",
        "version": "1.0.0",
        "status": "running",
        "environment": settings.environment,
    }


@app.get("/health")
async def health() -> dict[str, str]:
    """ヘルスチェックエンドポイント"""
    return {"status": "healthy"}


@app.get("/reverse")
def reverse_geocode(
    lat: float = Query(..., description="WGS-84 緯度"),
    lon: float = Query(..., description="WGS-84 経度"),
    service: GeocodingService = Depends(get_geocoding_service),
) -> dict[str, Any]:
    """
    座標を逆ジオコーディング

    レート制限でスリープするため同期関数として定義（スレッドプールで実行される）

    Args:
        lat: WGS-84 緯度
        lon: WGS-84 経度

    Returns:
        dict[str, Any]: 正規化済みの位置情報
    """
    try:
        location = service.reverse_geocode(lat, lon)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ProviderError as e:
        logger.warning(f"Provider error for ({lat}, {lon}): {e.info}")
        raise HTTPException(status_code=502, detail=e.info)
    except (DecodeError, HTTPError) as e:
        logger.error(f"Reverse geocoding failed for ({lat}, {lon}): {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return location.to_dict()


@app.get("/transform")
async def transform(
    lat: float = Query(..., description="WGS-84 緯度"),
    lon: float = Query(..., description="WGS-84 経度"),
) -> dict[str, float]:
    """WGS-84 座標を GCJ-02 座標に変換"""
    try:
        point = GeoPoint(lat, lon)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    gcj_lat, gcj_lng = wgs84_to_gcj02(point.latitude, point.longitude)
    return {"latitude": gcj_lat, "longitude": gcj_lng}


@app.get("/cache/stats")
def cache_stats(
    service: GeocodingService = Depends(get_geocoding_service),
) -> dict[str, Any]:
    """キャッシュ統計"""
    stats = service.get_cache_stats()
    return {"enabled": stats is not None, "stats": stats}


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """グローバル例外ハンドラー"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error", "detail": str(exc)},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
