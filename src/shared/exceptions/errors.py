"""カスタム例外定義"""

from typing import Optional


class RegeoError(Exception):
    """逆ジオコーダー基底例外"""

    pass


class HTTPError(RegeoError):
    """HTTP関連のエラー"""

    pass


class GeocodingError(RegeoError):
    """ジオコーディングエラー"""

    pass


class ProviderError(GeocodingError):
    """プロバイダー（高德地図）がエラーステータスを返した"""

    def __init__(self, info: str, infocode: Optional[str] = None):
        self.info = info
        self.infocode = infocode
        detail = f"{info} (infocode={infocode})" if infocode else info
        super().__init__(f"Provider returned failure status: {detail}")


class DecodeError(GeocodingError):
    """レスポンスの形式が想定と異なる"""

    pass


class ConfigurationError(RegeoError):
    """設定エラー"""

    pass


class ValidationError(RegeoError):
    """バリデーションエラー"""

    pass
