"""逆ジオコーディングレスポンスの正規化"""

from typing import Any, Optional

from ....shared.exceptions.errors import DecodeError, ProviderError
from ....shared.logging.config import get_logger
from ..domain.enums import MUNICIPALITY_SHORT_NAMES, AmapStatus, is_municipality
from ..domain.models import (
    MultipleCity,
    NormalizedAddress,
    NormalizedLocation,
    RawAddressComponent,
    SingleCity,
)
from ..parsers.regeocode_parser import RegeocodeParser

logger = get_logger(__name__)

DISPLAY_NAME_SEPARATOR = ", "


class ResponseNormalizer:
    """
    高德APIのレスポンスをプロバイダー非依存の NormalizedLocation に変換

    状態を持たないため、複数スレッドから同じインスタンスを使ってよい。
    """

    def __init__(self, parser: Optional[RegeocodeParser] = None) -> None:
        """
        Args:
            parser: レスポンスパーサー（Noneの場合は新規作成）
        """
        self.parser = parser or RegeocodeParser()

    def normalize(
        self,
        status: str,
        info: str,
        formatted_address: Optional[str],
        component: RawAddressComponent,
        infocode: Optional[str] = None,
    ) -> NormalizedLocation:
        """
        デコード済みのフィールドを正規化

        Args:
            status: レスポンスステータス（"1" が成功）
            info: ステータスの説明文
            formatted_address: 整形済み住所（無い場合はNoneまたは空文字）
            component: addressComponent
            infocode: エラーコード

        Returns:
            NormalizedLocation: 正規化済みの位置情報

        Raises:
            ProviderError: ステータスが成功以外の場合
            DecodeError: 表示名を組み立てる材料が1つも無い場合
        """
        if status != AmapStatus.SUCCESS.value:
            raise ProviderError(info, infocode)

        address = NormalizedAddress(
            city=self.resolve_city(component),
            province=component.province or "",
            neighbourhood=component.township or "",
            country=component.country or "",
            country_code=component.country_code or "",
        )

        if formatted_address:
            display_name = formatted_address
        else:
            display_name = self.build_display_name(address, component.district)
            logger.debug(f"Synthesized display name: {display_name}")

        if not display_name:
            raise DecodeError("Response contains no address information")

        return NormalizedLocation(display_name=display_name, address=address)

    def normalize_payload(self, payload: Any) -> NormalizedLocation:
        """
        デコード済みJSONをそのまま正規化

        ステータスは本体より先に確認するため、失敗ステータスのレスポンスは
        本体の形式に関わらず ProviderError になる。

        Raises:
            ProviderError: ステータスが成功以外の場合
            DecodeError: 形式が想定と異なる場合
        """
        status, info, infocode = self.parser.parse_status(payload)
        if status != AmapStatus.SUCCESS.value:
            logger.warning(f"Provider returned failure: status={status} info={info} infocode={infocode}")
            raise ProviderError(info, infocode)

        raw = self.parser.parse(payload)

        return self.normalize(
            raw.status,
            raw.info,
            raw.formatted_address,
            raw.address_component,
            infocode=raw.infocode,
        )

    def resolve_city(self, component: RawAddressComponent) -> str:
        """
        city を決定

        優先順位:
        1. プロバイダーの city（文字列、または配列の先頭要素）
        2. 直轄市の短縮名（province が直轄市の場合）
        3. district
        4. province
        """
        city = ""
        if isinstance(component.city, SingleCity):
            city = component.city.value
        elif isinstance(component.city, MultipleCity) and component.city.values:
            city = component.city.values[0]

        if not city and component.province:
            city = MUNICIPALITY_SHORT_NAMES.get(component.province, "")
        if not city:
            city = component.district or ""
        if not city:
            city = component.province or ""

        return city

    def build_display_name(self, address: NormalizedAddress, district: Optional[str]) -> str:
        """
        表示名を組み立てる

        neighbourhood, district, city, province, country の順に空でないものを
        ", " で連結する。直轄市の場合は city と重複するため district と
        province を含めない。
        """
        municipality = is_municipality(address.province)

        candidates = [
            address.neighbourhood,
            None if municipality else district,
            address.city,
            None if municipality else address.province,
            address.country,
        ]

        return DISPLAY_NAME_SEPARATOR.join(part for part in candidates if part)
