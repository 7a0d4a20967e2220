"""
core/config.py - 중앙 설정 관리

점검 1회 실행에 필요한 설정을 프로세스 환경 변수에서 한 번만 읽어
CheckConfig 값으로 만들고, 엔진에는 이 값만 전달합니다.
디스패치/집계 로직 내부에서는 환경 변수를 직접 읽지 않습니다.

Usage:
    from core.config import CheckConfig, CheckRequest

    config = CheckConfig.from_env()
    request = CheckRequest.from_params(subscription="...", exclude="vm-a,rg-test")
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

__version__ = "1.2.0"

# 구독 ID가 주어지지 않았을 때 사용하는 식별 가능한 sentinel
DEFAULT_SUBSCRIPTION_ID = "00000000-0000-0000-0000-000000000000"

DEFAULT_SIGNATURE = "-- vm-backup-check"
DEFAULT_MAX_CONCURRENCY = 10
MAX_CONCURRENCY_LIMIT = 100
DEFAULT_ITEM_TIMEOUT = 30.0
DEFAULT_PROGRESS_INTERVAL = 5.0

DEFAULT_AUTHORITY_HOST = "https://login.microsoftonline.com"
DEFAULT_RESOURCE_MANAGER = "https://management.azure.com"

# 환경 변수 이름
ENV_SIGNATURE = "BACKUP_CHECK_SIGNATURE"
ENV_MAX_CONCURRENCY = "BACKUP_CHECK_MAX_CONCURRENCY"
ENV_GLOBAL_EXCLUDE = "BACKUP_CHECK_GLOBAL_EXCLUDE"
ENV_ITEM_TIMEOUT = "BACKUP_CHECK_ITEM_TIMEOUT"
ENV_PROGRESS_INTERVAL = "BACKUP_CHECK_PROGRESS_INTERVAL"
ENV_TENANT_ID = "AZURE_TENANT_ID"
ENV_CLIENT_ID = "AZURE_CLIENT_ID"
ENV_CLIENT_SECRET = "AZURE_CLIENT_SECRET"
ENV_AUTHORITY_HOST = "AZURE_AUTHORITY_HOST"
ENV_RESOURCE_MANAGER = "AZURE_RESOURCE_MANAGER"


def get_version() -> str:
    """패키지 버전 문자열 반환"""
    return __version__


def split_names(text: str | None) -> tuple[str, ...]:
    """콤마 구분 문자열을 이름 목록으로 분리

    앞뒤 공백은 제거하고 빈 항목은 버립니다. 대소문자는 그대로 유지합니다.

    Args:
        text: "vm-a, rg-test,,vm-b" 형식 문자열 (None 허용)

    Returns:
        ("vm-a", "rg-test", "vm-b")
    """
    if not text:
        return ()
    return tuple(name.strip() for name in text.split(",") if name.strip())


def _read_int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(key, f"정수가 아닙니다: '{raw}'", cause=e) from e


def _read_float(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = environ.get(key, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(key, f"숫자가 아닙니다: '{raw}'", cause=e) from e


@dataclass(frozen=True)
class Credentials:
    """Identity Provider에 넘길 서비스 주체 자격 증명"""

    tenant_id: str = ""
    client_id: str = ""
    client_secret: str = field(default="", repr=False)
    authority_host: str = DEFAULT_AUTHORITY_HOST

    @property
    def is_complete(self) -> bool:
        return bool(self.tenant_id and self.client_id and self.client_secret)


@dataclass
class CheckConfig:
    """점검 실행 설정

    Attributes:
        signature: 모든 리포트 끝에 붙는 서명 문자열
        max_concurrency: 최대 동시 점검 수 (1~100)
        global_exclude: 항상 적용되는 제외 이름 목록 (VM 이름 또는 리소스 그룹)
        item_timeout: 항목별 보호 상태 조회 HTTP 타임아웃 (초)
        progress_interval: "N개 실행 중" 진행 이벤트 간격 (초)
        credentials: 서비스 주체 자격 증명
        resource_manager: ARM 엔드포인트
    """

    signature: str = DEFAULT_SIGNATURE
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    global_exclude: tuple[str, ...] = ()
    item_timeout: float = DEFAULT_ITEM_TIMEOUT
    progress_interval: float = DEFAULT_PROGRESS_INTERVAL
    credentials: Credentials = field(default_factory=Credentials)
    resource_manager: str = DEFAULT_RESOURCE_MANAGER

    def __post_init__(self) -> None:
        if self.max_concurrency < 1:
            raise ConfigError(ENV_MAX_CONCURRENCY, f"1 이상이어야 합니다: {self.max_concurrency}")
        if self.max_concurrency > MAX_CONCURRENCY_LIMIT:
            logger.warning(
                "max_concurrency %d 가 상한을 넘어 %d 로 조정합니다", self.max_concurrency, MAX_CONCURRENCY_LIMIT
            )
            self.max_concurrency = MAX_CONCURRENCY_LIMIT
        if self.item_timeout <= 0:
            raise ConfigError(ENV_ITEM_TIMEOUT, f"0보다 커야 합니다: {self.item_timeout}")
        if self.progress_interval <= 0:
            raise ConfigError(ENV_PROGRESS_INTERVAL, f"0보다 커야 합니다: {self.progress_interval}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> CheckConfig:
        """환경 변수에서 설정 생성

        Args:
            environ: 환경 변수 매핑 (None이면 os.environ)

        Raises:
            ConfigError: 숫자 값 형식이 잘못된 경우
        """
        env = os.environ if environ is None else environ

        credentials = Credentials(
            tenant_id=env.get(ENV_TENANT_ID, ""),
            client_id=env.get(ENV_CLIENT_ID, ""),
            client_secret=env.get(ENV_CLIENT_SECRET, ""),
            authority_host=env.get(ENV_AUTHORITY_HOST) or DEFAULT_AUTHORITY_HOST,
        )

        return cls(
            signature=env.get(ENV_SIGNATURE) or DEFAULT_SIGNATURE,
            max_concurrency=_read_int(env, ENV_MAX_CONCURRENCY, DEFAULT_MAX_CONCURRENCY),
            global_exclude=split_names(env.get(ENV_GLOBAL_EXCLUDE)),
            item_timeout=_read_float(env, ENV_ITEM_TIMEOUT, DEFAULT_ITEM_TIMEOUT),
            progress_interval=_read_float(env, ENV_PROGRESS_INTERVAL, DEFAULT_PROGRESS_INTERVAL),
            credentials=credentials,
            resource_manager=env.get(ENV_RESOURCE_MANAGER) or DEFAULT_RESOURCE_MANAGER,
        )


@dataclass(frozen=True)
class CheckRequest:
    """점검 요청 파라미터 (트리거가 전달)

    Attributes:
        subscription_id: 대상 구독 ID
        exclude: 호출자가 지정한 제외 이름 목록
    """

    subscription_id: str = DEFAULT_SUBSCRIPTION_ID
    exclude: tuple[str, ...] = ()

    @classmethod
    def from_params(cls, subscription: str | None = None, exclude: str | None = None) -> CheckRequest:
        """트리거 파라미터에서 요청 생성

        Args:
            subscription: 구독 ID (비어 있으면 sentinel)
            exclude: 콤마 구분 제외 목록 (비어 있으면 없음)
        """
        subscription_id = (subscription or "").strip() or DEFAULT_SUBSCRIPTION_ID
        return cls(subscription_id=subscription_id, exclude=split_names(exclude))
