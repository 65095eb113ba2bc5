"""HTTPクライアント（リトライ機能付き）"""

from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..exceptions.errors import DecodeError, HTTPError
from ..logging.config import get_logger

logger = get_logger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; AmapRegeo/1.0)"


class HTTPClient:
    """
    リトライ機能付きHTTPクライアント

    Features:
    - 自動リトライ（指数バックオフ）
    - タイムアウト設定
    - セッション管理
    - JSONレスポンスのデコード
    """

    def __init__(
        self,
        timeout: int = 10,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
        status_forcelist: tuple[int, ...] = (500, 502, 503, 504),
        user_agent: Optional[str] = None,
    ):
        """
        Args:
            timeout: リクエストタイムアウト（秒）
            max_retries: 最大リトライ回数
            backoff_factor: バックオフ係数
            status_forcelist: リトライ対象のステータスコード
            user_agent: User-Agentヘッダー
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.status_forcelist = status_forcelist
        self.user_agent = user_agent or DEFAULT_USER_AGENT

        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """セッションを作成"""
        session = requests.Session()

        # 逆ジオコーディングはGETのみ
        retry_strategy = Retry(
            total=self.max_retries,
            backoff_factor=self.backoff_factor,
            status_forcelist=self.status_forcelist,
            allowed_methods=["HEAD", "GET", "OPTIONS"],
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({"User-Agent": self.user_agent})

        return session

    def get(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> requests.Response:
        """
        GETリクエスト

        クエリパラメータにはAPIキーが含まれるため、ログにはURLのみを出力する
        （urllib3 が出力するリクエスト行のキーは ApiKeyRedactingFilter が伏せ字にする）

        Args:
            url: リクエストURL
            params: クエリパラメータ
            headers: 追加ヘッダー

        Returns:
            レスポンスオブジェクト

        Raises:
            HTTPError: リクエスト失敗時
        """
        try:
            logger.debug(f"GET request to {url}")
            response = self.session.get(
                url,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            logger.debug(f"GET request successful: {url} (status={response.status_code})")
            return response

        except requests.Timeout as e:
            logger.error(f"GET request timed out after {self.timeout}s: {url}")
            raise HTTPError(f"Timed out after {self.timeout}s: {url}") from e
        except requests.RequestException as e:
            logger.error(f"GET request failed: {url} - {e}")
            raise HTTPError(f"Failed to GET {url}: {e}") from e

    def get_json(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """
        GETリクエストを行い、レスポンスボディをJSONとしてデコード

        Args:
            url: リクエストURL
            params: クエリパラメータ
            headers: 追加ヘッダー

        Returns:
            デコード済みのJSON値

        Raises:
            HTTPError: リクエスト失敗時
            DecodeError: ボディがJSONでない場合
        """
        response = self.get(url, params=params, headers=headers)
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON response from {url}: {e}")
            raise DecodeError(f"Invalid JSON response from {url}: {e}") from e

    def close(self) -> None:
        """セッションをクローズ"""
        if self.session:
            self.session.close()
            logger.debug("HTTP session closed")

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
