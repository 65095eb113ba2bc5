"""共通フィクスチャ（高德APIのレスポンス例とテスト用HTTPクライアント）"""

import copy
from typing import Any, Optional

import pytest

from src.features.geocoding.services.geocoding_service import GeocodingService


class FakeHTTPClient:
    """get_json の呼び出しを記録し、用意したレスポンスを順に返すHTTPクライアント"""

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.calls: list[tuple[str, Optional[dict[str, Any]]]] = []
        self.closed = False

    def get_json(self, url: str, params: Optional[dict[str, Any]] = None, headers: Any = None) -> Any:
        self.calls.append((url, params))
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return copy.deepcopy(response)

    def close(self) -> None:
        self.closed = True


def make_payload(
    formatted_address: Any = "",
    city: Any = None,
    province: Any = None,
    district: Any = None,
    township: Any = None,
    country: Any = "中国",
    country_code: Any = None,
) -> dict[str, Any]:
    """成功レスポンスを作成（Noneのフィールドは含めない）"""
    component: dict[str, Any] = {}
    for key, value in (
        ("city", city),
        ("province", province),
        ("district", district),
        ("township", township),
        ("country", country),
        ("country_code", country_code),
    ):
        if value is not None:
            component[key] = value

    return {
        "status": "1",
        "info": "OK",
        "infocode": "10000",
        "regeocode": {
            "formatted_address": formatted_address,
            "addressComponent": component,
        },
    }


@pytest.fixture()
def beijing_payload() -> dict[str, Any]:
    """北京市朝阳区（直轄市、city は空配列）"""
    return make_payload(
        formatted_address="北京市朝阳区望京街道望京SOHO",
        city=[],
        province="北京市",
        district="朝阳区",
        township="望京街道",
        country="中国",
    )


@pytest.fixture()
def shenzhen_payload() -> dict[str, Any]:
    """深圳市南山区（formatted_address なし）"""
    return make_payload(
        formatted_address=[],
        city="深圳市",
        province="广东省",
        district="南山区",
        township="粤海街道",
        country="中国",
    )


@pytest.fixture()
def failure_payload() -> dict[str, Any]:
    """APIキー不正のエラーレスポンス"""
    return {"status": "0", "info": "INVALID_USER_KEY", "infocode": "10001"}


@pytest.fixture()
def fake_http(beijing_payload: dict[str, Any]) -> FakeHTTPClient:
    return FakeHTTPClient(beijing_payload)


@pytest.fixture()
def service(fake_http: FakeHTTPClient):
    """テスト用HTTPクライアントを使うサービス（レート制限なし）"""
    svc = GeocodingService(api_key="test-key", min_interval=0.0, http_client=fake_http)
    yield svc
    svc.close()
