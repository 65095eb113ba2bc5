"""高德ジオコーダーのテスト"""

from typing import Any

import pytest

from conftest import FakeHTTPClient
from src.features.geocoding.domain.models import NormalizedLocation
from src.features.geocoding.providers.amap_geocoder import AMAP_REGEO_URL, AmapGeocoder
from src.shared.exceptions.errors import (
    ConfigurationError,
    HTTPError,
    ProviderError,
    ValidationError,
)
from src.shared.http.rate_limiter import RateLimiter
from src.shared.utils.coordinates import format_location, wgs84_to_gcj02


class CountingRateLimiter(RateLimiter):
    def __init__(self) -> None:
        super().__init__(min_interval=0.0)
        self.wait_count = 0

    def wait(self) -> None:
        self.wait_count += 1
        super().wait()


def make_geocoder(http: FakeHTTPClient, limiter: RateLimiter | None = None) -> AmapGeocoder:
    return AmapGeocoder(
        "test-key",
        http_client=http,
        rate_limiter=limiter or RateLimiter(min_interval=0.0),
    )


def test_reverse_geocode_returns_normalized_location(fake_http: FakeHTTPClient) -> None:
    geocoder = make_geocoder(fake_http)

    location = geocoder.reverse_geocode(39.90923, 116.397428)

    assert isinstance(location, NormalizedLocation)
    assert location.display_name == "北京市朝阳区望京街道望京SOHO"
    assert location.address.city == "北京"


def test_request_uses_gcj02_location(fake_http: FakeHTTPClient) -> None:
    """APIには GCJ-02 に変換した座標を「経度,緯度」で渡す"""
    geocoder = make_geocoder(fake_http)

    geocoder.reverse_geocode(39.90923, 116.397428)

    url, params = fake_http.calls[0]
    assert url == AMAP_REGEO_URL
    assert params is not None
    assert params["location"] == format_location(*wgs84_to_gcj02(39.90923, 116.397428))
    assert params["location"] != "116.397428,39.909230"
    assert params["key"] == "test-key"
    assert params["extensions"] == "all"
    assert params["output"] == "JSON"


def test_request_outside_china_is_not_shifted(fake_http: FakeHTTPClient) -> None:
    geocoder = make_geocoder(fake_http)

    geocoder.reverse_geocode(51.5074, -0.1278)

    _, params = fake_http.calls[0]
    assert params is not None
    assert params["location"] == "-0.127800,51.507400"


def test_each_request_is_rate_limited(fake_http: FakeHTTPClient) -> None:
    limiter = CountingRateLimiter()
    geocoder = make_geocoder(fake_http, limiter)

    geocoder.reverse_geocode(39.9, 116.4)
    geocoder.reverse_geocode(31.2, 121.5)

    assert limiter.wait_count == 2


def test_provider_error_propagates(failure_payload: dict[str, Any]) -> None:
    geocoder = make_geocoder(FakeHTTPClient(failure_payload))

    with pytest.raises(ProviderError) as exc_info:
        geocoder.reverse_geocode(39.9, 116.4)

    assert exc_info.value.info == "INVALID_USER_KEY"


def test_http_error_propagates() -> None:
    geocoder = make_geocoder(FakeHTTPClient(HTTPError("timeout")))

    with pytest.raises(HTTPError):
        geocoder.reverse_geocode(39.9, 116.4)


@pytest.mark.parametrize(
    "lat,lng",
    [(91.0, 116.4), (39.9, 181.0), (float("nan"), 116.4), (39.9, float("inf"))],
)
def test_invalid_coordinates_are_rejected(fake_http: FakeHTTPClient, lat: float, lng: float) -> None:
    """不正な座標ではAPIを呼び出さない"""
    geocoder = make_geocoder(fake_http)

    with pytest.raises(ValidationError):
        geocoder.reverse_geocode(lat, lng)

    assert fake_http.calls == []


def test_empty_api_key_is_rejected(fake_http: FakeHTTPClient) -> None:
    with pytest.raises(ConfigurationError):
        AmapGeocoder("", http_client=fake_http)


def test_context_manager_closes_http_client(fake_http: FakeHTTPClient) -> None:
    with make_geocoder(fake_http):
        pass

    assert fake_http.closed is True
