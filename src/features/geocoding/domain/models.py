"""ジオコーディング機能のドメインモデル"""
import math
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from ....shared.exceptions.errors import ValidationError


@dataclass(frozen=True)
class GeoPoint:
    """WGS-84 の地理座標"""

    latitude: float  # 緯度 [-90, 90]
    longitude: float  # 経度 [-180, 180]

    def __post_init__(self) -> None:
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValidationError(
                f"Coordinates must be finite: ({self.latitude}, {self.longitude})"
            )
        if not -90.0 <= self.latitude <= 90.0:
            raise ValidationError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValidationError(f"Longitude out of range: {self.longitude}")

    def __repr__(self) -> str:
        return f"GeoPoint(lat={self.latitude}, lng={self.longitude})"

    def to_tuple(self) -> tuple[float, float]:
        """(緯度, 経度)のタプルとして返す"""
        return (self.latitude, self.longitude)


# ---------------------------------------------------------------------------
# city フィールド
#
# 高德APIの addressComponent.city は「欠落」「文字列」「文字列の配列」の
# いずれかで返る。暗黙の型変換はせず、3種類のいずれかとして保持する。
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AbsentCity:
    """city が欠落（またはnull）"""


@dataclass(frozen=True)
class SingleCity:
    """city が文字列"""

    value: str


@dataclass(frozen=True)
class MultipleCity:
    """city が文字列の配列（直轄市などでは空配列になる）"""

    values: tuple[str, ...] = ()


CityField = Union[AbsentCity, SingleCity, MultipleCity]


@dataclass(frozen=True)
class RawAddressComponent:
    """高德APIの addressComponent（デコード済み、未加工）"""

    city: CityField = field(default_factory=AbsentCity)
    province: Optional[str] = None  # 省
    district: Optional[str] = None  # 区・県
    township: Optional[str] = None  # 郷鎮・街道
    country: Optional[str] = None  # 国
    country_code: Optional[str] = None  # 国コード


@dataclass(frozen=True)
class RawRegeocode:
    """高德API逆ジオコーディングのレスポンス（デコード済み、未加工）"""

    status: str
    info: str = ""
    infocode: Optional[str] = None
    formatted_address: Optional[str] = None
    address_component: RawAddressComponent = field(default_factory=RawAddressComponent)


@dataclass(frozen=True)
class NormalizedAddress:
    """正規化済みの住所"""

    city: str = ""
    province: str = ""
    neighbourhood: str = ""
    country: str = ""
    country_code: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "city": self.city,
            "province": self.province,
            "neighbourhood": self.neighbourhood,
            "country": self.country,
            "country_code": self.country_code,
        }


@dataclass(frozen=True)
class NormalizedLocation:
    """プロバイダー非依存の位置情報レコード"""

    display_name: str
    address: NormalizedAddress

    def to_dict(self) -> dict[str, Any]:
        """辞書に変換（JSONシリアライズ用）"""
        return {
            "display_name": self.display_name,
            "address": self.address.to_dict(),
        }


@dataclass
class ReverseGeocodeResult:
    """バッチ逆ジオコーディングの1件分の結果"""

    point: tuple[float, float]  # 入力の(緯度, 経度)
    location: Optional[NormalizedLocation] = None
    error: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.location is not None

    def to_dict(self) -> dict[str, Any]:
        latitude, longitude = self.point
        data: dict[str, Any] = {"latitude": latitude, "longitude": longitude}
        if self.location is not None:
            data.update(self.location.to_dict())
        else:
            data["error"] = self.error
        return data
