"""CLIエントリーポイント"""
import argparse
import json
import sys
from typing import Optional

from .features.geocoding.domain.models import GeoPoint
from .features.geocoding.services.geocoding_service import GeocodingService
from .infrastructure.config.settings import Settings
from .shared.exceptions.errors import ConfigurationError, RegeoError
from .shared.logging.config import get_logger, setup_logging
from .shared.utils.coordinates import wgs84_to_gcj02

logger = get_logger(__name__)


def parse_point(value: str) -> tuple[float, float]:
    """
    "緯度,経度" 形式の引数をパース

    Raises:
        argparse.ArgumentTypeError: 形式が不正な場合
    """
    try:
        lat_str, lng_str = value.split(",")
        return float(lat_str), float(lng_str)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected LAT,LNG but got '{value}'")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="高德地図 逆ジオコーディングツール（WGS-84座標 -> 住所）"
    )

    parser.add_argument(
        "points",
        nargs="+",
        type=parse_point,
        metavar="LAT,LNG",
        help="WGS-84 座標（例: 39.90923,116.397428）",
    )

    parser.add_argument(
        "--gcj02-only",
        action="store_true",
        help="APIを呼び出さず、GCJ-02 に変換した座標のみを出力",
    )

    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="環境変数ファイルのパス（デフォルト: .env）",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="ログレベル",
    )

    return parser


def print_transformed(points: list[tuple[float, float]]) -> int:
    """
    GCJ-02 変換結果を出力

    不正な座標はエラー行を出力して次の座標に進む

    Returns:
        int: 終了コード（0: すべて成功, 1: 不正な座標あり）
    """
    failure_count = 0

    for latitude, longitude in points:
        try:
            point = GeoPoint(latitude, longitude)
        except RegeoError as e:
            logger.error(f"Invalid coordinates ({latitude}, {longitude}): {e}")
            print(json.dumps({"latitude": latitude, "longitude": longitude, "error": str(e)}))
            failure_count += 1
            continue

        gcj_lat, gcj_lng = wgs84_to_gcj02(*point.to_tuple())
        print(json.dumps({"latitude": gcj_lat, "longitude": gcj_lng}))

    return 1 if failure_count else 0


def main(argv: Optional[list[str]] = None) -> int:
    """
    メインエントリーポイント

    Returns:
        int: 終了コード（0: 成功, 1: 失敗）
    """
    args = build_parser().parse_args(argv)

    try:
        settings = Settings(_env_file=args.env_file)

        if args.log_level:
            settings.log_level = args.log_level

        setup_logging(
            level=settings.log_level,
            enable_cloud_logging=settings.gcp_logging_enabled,
            project_id=settings.gcp_project_id,
        )

        if args.gcj02_only:
            return print_transformed(args.points)

        logger.info(f"Environment: {settings.environment}")

        service = GeocodingService.from_settings(settings)
        try:
            results = service.reverse_geocode_batch(args.points, show_progress=len(args.points) > 1)
        finally:
            service.close()

        for result in results:
            print(json.dumps(result.to_dict(), ensure_ascii=False))

        return 0 if all(result.is_success for result in results) else 1

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130  # SIGINT
    except Exception as e:
        logger.error(f"Application failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
