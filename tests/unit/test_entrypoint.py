"""CLIのテスト"""

import json
from typing import Any

import pytest

from conftest import FakeHTTPClient
from src import entrypoint
from src.features.geocoding.services.geocoding_service import GeocodingService
from src.shared.utils.coordinates import wgs84_to_gcj02


@pytest.fixture()
def no_env(tmp_path, monkeypatch: pytest.MonkeyPatch) -> str:
    """空の .env と、APIキー未設定の環境"""
    monkeypatch.delenv("AMAP_API_KEY", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("", encoding="utf-8")
    return str(env_file)


def test_gcj02_only(no_env: str, capsys: pytest.CaptureFixture[str]) -> None:
    """APIを呼ばずに変換結果を出力"""
    code = entrypoint.main(["--env-file", no_env, "--gcj02-only", "39.90923,116.397428", "51.5,-0.12"])

    lines = capsys.readouterr().out.strip().splitlines()
    gcj_lat, gcj_lng = wgs84_to_gcj02(39.90923, 116.397428)
    assert code == 0
    assert json.loads(lines[0]) == {"latitude": gcj_lat, "longitude": gcj_lng}
    assert json.loads(lines[1]) == {"latitude": 51.5, "longitude": -0.12}


def test_gcj02_only_continues_after_invalid_point(no_env: str, capsys: pytest.CaptureFixture[str]) -> None:
    """不正な座標はエラー行を出力し、残りの座標も変換する"""
    code = entrypoint.main(["--env-file", no_env, "--gcj02-only", "100,100", "51.5,-0.12", "95,0"])

    lines = [json.loads(line) for line in capsys.readouterr().out.strip().splitlines()]
    assert code == 1
    assert len(lines) == 3
    assert lines[0]["latitude"] == 100.0
    assert "error" in lines[0]
    assert lines[1] == {"latitude": 51.5, "longitude": -0.12}
    assert "error" in lines[2]


def test_reverse_geocode(
    no_env: str,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    fake_http: FakeHTTPClient,
) -> None:
    service = GeocodingService(api_key="test-key", min_interval=0.0, http_client=fake_http)
    monkeypatch.setattr(entrypoint.GeocodingService, "from_settings", staticmethod(lambda settings: service))

    code = entrypoint.main(["--env-file", no_env, "39.90923,116.397428"])

    output: dict[str, Any] = json.loads(capsys.readouterr().out.strip())
    assert code == 0
    assert output["latitude"] == 39.90923
    assert output["display_name"] == "北京市朝阳区望京街道望京SOHO"
    assert fake_http.closed is True


def test_failure_sets_exit_code(
    no_env: str,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    failure_payload: dict[str, Any],
) -> None:
    service = GeocodingService(api_key="test-key", min_interval=0.0, http_client=FakeHTTPClient(failure_payload))
    monkeypatch.setattr(entrypoint.GeocodingService, "from_settings", staticmethod(lambda settings: service))

    code = entrypoint.main(["--env-file", no_env, "39.9,116.4"])

    output = json.loads(capsys.readouterr().out.strip())
    assert code == 1
    assert "INVALID_USER_KEY" in output["error"]


def test_missing_api_key(no_env: str) -> None:
    assert entrypoint.main(["--env-file", no_env, "39.9,116.4"]) == 1


def test_malformed_point_exits_with_usage_error() -> None:
    with pytest.raises(SystemExit) as exc_info:
        entrypoint.main(["not-a-point"])

    assert exc_info.value.code == 2
