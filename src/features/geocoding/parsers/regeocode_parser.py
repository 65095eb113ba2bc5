"""高德API逆ジオコーディングレスポンスのパーサー"""

from typing import Any, Optional

from ....shared.exceptions.errors import DecodeError
from ....shared.logging.config import get_logger
from ..domain.enums import AmapStatus
from ..domain.models import (
    AbsentCity,
    CityField,
    MultipleCity,
    RawAddressComponent,
    RawRegeocode,
    SingleCity,
)

logger = get_logger(__name__)


class RegeocodeParser:
    """
    デコード済みJSON（dict）を RawRegeocode に変換するパーサー

    高德APIは値が無いフィールドを "" ではなく [] で返すことがあるため、
    文字列フィールドでは空配列を欠落として扱う。
    """

    def parse(self, payload: Any) -> RawRegeocode:
        """
        レスポンス全体をパース

        ステータスが成功以外の場合、regeocode 部分は読まない

        Args:
            payload: デコード済みJSON

        Returns:
            RawRegeocode: 未加工のレスポンス

        Raises:
            DecodeError: 形式が想定と異なる場合
        """
        status, info, infocode = self.parse_status(payload)

        if status != AmapStatus.SUCCESS.value:
            logger.debug(f"Skipping regeocode body for status={status} info={info}")
            return RawRegeocode(status=status, info=info, infocode=infocode)

        regeocode = payload.get("regeocode")
        if not isinstance(regeocode, dict):
            raise DecodeError(f"'regeocode' must be an object, got {type(regeocode).__name__}")

        formatted_address = self._optional_str(
            regeocode.get("formatted_address"), "formatted_address"
        )
        component = self.parse_address_component(regeocode.get("addressComponent"))

        return RawRegeocode(
            status=status,
            info=info,
            infocode=infocode,
            formatted_address=formatted_address,
            address_component=component,
        )

    def parse_status(self, payload: Any) -> tuple[str, str, Optional[str]]:
        """
        status / info / infocode を取得

        Returns:
            tuple[str, str, Optional[str]]: (status, info, infocode)

        Raises:
            DecodeError: payloadがオブジェクトでない、またはstatusが無い場合
        """
        if not isinstance(payload, dict):
            raise DecodeError(f"Response must be a JSON object, got {type(payload).__name__}")

        status = self._scalar_str(payload.get("status"), "status")
        if status is None:
            raise DecodeError("Response has no 'status'")

        info = self._scalar_str(payload.get("info"), "info") or ""
        infocode = self._scalar_str(payload.get("infocode"), "infocode")

        return status, info, infocode

    def parse_address_component(self, raw: Any) -> RawAddressComponent:
        """
        addressComponent をパース

        Args:
            raw: addressComponent の値（欠落時はNone）

        Raises:
            DecodeError: 形式が想定と異なる場合
        """
        if raw is None or raw == []:
            return RawAddressComponent()
        if not isinstance(raw, dict):
            raise DecodeError(
                f"'addressComponent' must be an object, got {type(raw).__name__}"
            )

        return RawAddressComponent(
            city=self.decode_city(raw.get("city")),
            province=self._optional_str(raw.get("province"), "province"),
            district=self._optional_str(raw.get("district"), "district"),
            township=self._optional_str(raw.get("township"), "township"),
            country=self._optional_str(raw.get("country"), "country"),
            country_code=self._optional_str(raw.get("country_code"), "country_code"),
        )

    def decode_city(self, raw: Any) -> CityField:
        """
        city を3種類のいずれかにデコード

        - 欠落 / null -> AbsentCity
        - 文字列 -> SingleCity
        - 文字列の配列 -> MultipleCity

        Raises:
            DecodeError: 上記以外の型、または配列に文字列以外が含まれる場合
        """
        if raw is None:
            return AbsentCity()
        if isinstance(raw, str):
            return SingleCity(raw)
        if isinstance(raw, list):
            if not all(isinstance(item, str) for item in raw):
                raise DecodeError(f"'city' list must contain only strings: {raw!r}")
            return MultipleCity(tuple(raw))

        raise DecodeError(f"Unexpected type for 'city': {type(raw).__name__}")

    def _optional_str(self, value: Any, name: str) -> Optional[str]:
        """文字列フィールドを取得（欠落・null・空配列はNone）"""
        if value is None or value == []:
            return None
        if isinstance(value, str):
            return value

        raise DecodeError(f"Unexpected type for '{name}': {type(value).__name__}")

    def _scalar_str(self, value: Any, name: str) -> Optional[str]:
        """ステータス系フィールドを文字列として取得（数値も許容）"""
        if value is None:
            return None
        if isinstance(value, bool):
            raise DecodeError(f"Unexpected type for '{name}': bool")
        if isinstance(value, (str, int)):
            return str(value)

        raise DecodeError(f"Unexpected type for '{name}': {type(value).__name__}")
