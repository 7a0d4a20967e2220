"""
core/auth/token.py - 서비스 주체 토큰 발급

client credentials grant로 Microsoft Entra ID에서 ARM용 Bearer 토큰을 받습니다.
토큰은 만료 60초 전까지 메모리에 캐시합니다 (1회 실행 안에서만 유효).

Example:
    credential = ClientSecretCredential.from_credentials(config.credentials)
    token = credential.get_token(ARM_SCOPE)
    client = ArmClient(token.token)
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import requests

from core.config import DEFAULT_AUTHORITY_HOST, Credentials
from core.exceptions import AuthError

logger = logging.getLogger(__name__)

ARM_SCOPE = "https://management.azure.com/.default"
TOKEN_PATH = "/{tenant_id}/oauth2/v2.0/token"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class AccessToken:
    """발급된 액세스 토큰

    Attributes:
        token: Bearer 토큰 문자열
        expires_at: 만료 시간 (UTC)
    """

    token: str = field(repr=False)
    expires_at: datetime

    def is_expired(self, buffer_seconds: int = 60) -> bool:
        """만료 여부 (버퍼 포함)"""
        return datetime.now(timezone.utc) >= self.expires_at - timedelta(seconds=buffer_seconds)


class ClientSecretCredential:
    """client_id / client_secret 기반 토큰 발급기"""

    def __init__(
        self,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        authority_host: str = DEFAULT_AUTHORITY_HOST,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.tenant_id = tenant_id
        self.client_id = client_id
        self._client_secret = client_secret
        self.authority_host = authority_host.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._cache: dict[str, AccessToken] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_credentials(cls, credentials: Credentials, session: requests.Session | None = None) -> ClientSecretCredential:
        """CheckConfig.credentials에서 생성

        Raises:
            AuthError: 자격 증명 값이 비어 있는 경우
        """
        if not credentials.is_complete:
            raise AuthError(
                "MissingCredentials",
                "AZURE_TENANT_ID, AZURE_CLIENT_ID, AZURE_CLIENT_SECRET must all be set",
            )
        return cls(
            tenant_id=credentials.tenant_id,
            client_id=credentials.client_id,
            client_secret=credentials.client_secret,
            authority_host=credentials.authority_host,
            session=session,
        )

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> ClientSecretCredential:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def get_token(self, scope: str = ARM_SCOPE) -> AccessToken:
        """scope용 토큰 반환 (캐시 우선)

        Raises:
            AuthError: 발급 실패
        """
        with self._lock:
            cached = self._cache.get(scope)
            if cached is not None and not cached.is_expired():
                return cached

            token = self._request_token(scope)
            self._cache[scope] = token
            return token

    def _request_token(self, scope: str) -> AccessToken:
        url = self.authority_host + TOKEN_PATH.format(tenant_id=self.tenant_id)
        data = {
            "grant_type": "client_credentials",
            "client_id": self.client_id,
            "client_secret": self._client_secret,
            "scope": scope,
        }

        try:
            response = self._session.post(url, data=data, timeout=self.timeout)
        except requests.RequestException as e:
            raise AuthError(e.__class__.__name__, f"token request failed: {e}", cause=e) from e

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        if not response.ok:
            code = payload.get("error") or f"HTTP{response.status_code}"
            message = payload.get("error_description") or response.reason or "token request rejected"
            raise AuthError(str(code), str(message))

        access_token = payload.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise AuthError("InvalidResponse", "token response has no access_token")

        try:
            expires_in = int(payload.get("expires_in", 3600))
        except (TypeError, ValueError):
            expires_in = 3600

        logger.info(f"토큰 발급 완료: tenant={self.tenant_id}, expires_in={expires_in}s")
        return AccessToken(
            token=access_token,
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=expires_in),
        )
