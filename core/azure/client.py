"""
core/azure/client.py - Azure Resource Manager HTTP 클라이언트

requests.Session 하나에 Bearer 토큰을 붙여 ARM REST API를 호출합니다.
재시도는 하지 않습니다 (항목당 정확히 1회 시도).

Example:
    client = ArmClient(token)
    payload = client.get_json(
        "/subscriptions/<id>/providers/Microsoft.Compute/virtualMachines",
        params={"api-version": COMPUTE_API_VERSION},
    )
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter

from core.config import DEFAULT_RESOURCE_MANAGER
from core.exceptions import ProviderError, ResponseSchemaError

from .schemas import parse_error_body

logger = logging.getLogger(__name__)

COMPUTE_API_VERSION = "2023-09-01"
RECOVERY_SERVICES_API_VERSION = "2023-04-01"

DEFAULT_TIMEOUT = 30.0
DEFAULT_POOL_SIZE = 10


class ArmClient:
    """ARM REST API 클라이언트

    워커 스레드들이 하나의 인스턴스를 공유합니다.
    토큰과 세션 헤더는 생성 후 변경하지 않습니다.

    Attributes:
        base_url: ARM 엔드포인트
        timeout: 기본 요청 타임아웃 (초)
    """

    def __init__(
        self,
        token: str,
        session: requests.Session | None = None,
        base_url: str = DEFAULT_RESOURCE_MANAGER,
        timeout: float = DEFAULT_TIMEOUT,
        pool_size: int = DEFAULT_POOL_SIZE,
    ):
        """초기화

        Args:
            pool_size: 커넥션 풀 크기 (동시 워커 수 이상이어야 풀 부족 경고가 없음)
        """
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.mount("https://", HTTPAdapter(pool_connections=1, pool_maxsize=max(1, pool_size)))
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
            }
        )

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> ArmClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _url(self, path_or_url: str) -> str:
        # nextLink는 절대 URL로 내려온다
        if path_or_url.startswith(("http://", "https://")):
            return path_or_url
        return urljoin(self.base_url, path_or_url.lstrip("/"))

    def get_json(self, path_or_url: str, params: dict[str, str] | None = None) -> Any:
        """GET 요청 후 JSON 본문 반환

        Raises:
            ProviderError: 2xx가 아닌 응답
            ResponseSchemaError: JSON이 아닌 본문
            requests.RequestException: 전송 실패
        """
        response = self._session.get(self._url(path_or_url), params=params, timeout=self.timeout)
        return self._decode(response)

    def post_json(
        self,
        path_or_url: str,
        body: dict[str, Any],
        params: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """POST 요청 후 JSON 본문 반환

        Args:
            timeout: 이 요청에만 적용할 타임아웃 (None이면 기본값)
        """
        response = self._session.post(
            self._url(path_or_url),
            json=body,
            params=params,
            timeout=timeout if timeout is not None else self.timeout,
        )
        return self._decode(response)

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.ok:
            code, message = parse_error_body(payload, response.status_code, response.reason or "")
            logger.debug("ARM 호출 실패 %s %s: %s", response.status_code, response.url, code)
            raise ProviderError(code, message, status_code=response.status_code)

        if payload is None:
            raise ResponseSchemaError("응답 본문이 JSON이 아닙니다", status_code=response.status_code)
        return payload
