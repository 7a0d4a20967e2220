"""
core/engine.py - 백업 커버리지 점검 엔진

한 번의 점검 실행을 조립합니다.

    토큰 발급 -> 인벤토리 조회 -> (항목별) 제외 필터 + 보호 상태 점검 -> 집계

설정(CheckConfig)과 요청(CheckRequest)은 호출 시작 시 한 번 만들어 전달받으며,
이 모듈 안에서는 환경 변수를 읽지 않습니다. 인증/조회 실패는 여기서 한 번만
잡아서 실패 리포트로 바꿉니다. 어떤 경우에도 Report를 반환합니다.

Example:
    config = CheckConfig.from_env()
    request = CheckRequest.from_params(subscription_id, "rg-sandbox")
    print(run_and_format(config, request), end="")
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

import requests

from core.auth import ARM_SCOPE, ClientSecretCredential
from core.azure.client import ArmClient
from core.config import CheckConfig, CheckRequest
from core.exceptions import AuthError, FetchError
from core.inventory.client import InventoryClient
from core.parallel import dispatch_checks
from core.protection import ItemChecker, build_exclusion_set
from core.report import Report, aggregate, aggregate_fetch_failure, format_report

if TYPE_CHECKING:
    from cli.ui.progress import ParallelTracker

logger = logging.getLogger(__name__)


def _open_client(
    config: CheckConfig,
    credential: ClientSecretCredential | None,
    session: requests.Session | None,
) -> ArmClient:
    if credential is None:
        # 직접 만든 발급기는 토큰 한 번만 받고 세션을 닫는다
        with ClientSecretCredential.from_credentials(config.credentials) as owned:
            token = owned.get_token(ARM_SCOPE)
    else:
        token = credential.get_token(ARM_SCOPE)

    return ArmClient(
        token.token,
        session=session,
        base_url=config.resource_manager,
        timeout=config.item_timeout,
        pool_size=config.max_concurrency,
    )


def run_protection_check(
    config: CheckConfig,
    request: CheckRequest,
    *,
    client: ArmClient | None = None,
    credential: ClientSecretCredential | None = None,
    session: requests.Session | None = None,
    cancel_event: threading.Event | None = None,
    progress_tracker: ParallelTracker | None = None,
) -> Report:
    """점검 1회 실행

    Args:
        config: 실행 설정
        request: 구독 ID와 호출자 제외 목록
        client: 이미 인증된 ARM 클라이언트 (None이면 credential로 생성)
        credential: 토큰 발급기 (None이면 config.credentials로 생성)
        session: ARM 호출에 쓸 requests.Session (테스트/재사용)
        cancel_event: 취소 신호 (설정되면 남은 항목은 cancelled로 종료)
        progress_tracker: 진행 상황 추적기

    Returns:
        Report (예외 없음, 인증/조회 실패도 리포트로 반환)
    """
    owns_client = client is None

    try:
        if client is None:
            client = _open_client(config, credential, session)
    except AuthError as e:
        logger.error(f"토큰 발급 실패: {e}")
        return aggregate_fetch_failure(e, signature=config.signature)

    try:
        try:
            items = InventoryClient(client).fetch_all(request.subscription_id)
        except FetchError as e:
            return aggregate_fetch_failure(e, signature=config.signature)

        exclusion_set = build_exclusion_set(request.exclude, config.global_exclude)
        checker = ItemChecker(client, request.subscription_id, timeout=config.item_timeout)

        result = dispatch_checks(
            items,
            exclusion_set,
            checker.check,
            max_concurrency=config.max_concurrency,
            progress_interval=config.progress_interval,
            cancel_event=cancel_event,
            progress_tracker=progress_tracker,
        )

        return aggregate(result.outcomes, total_count=len(items), signature=config.signature)
    finally:
        if owns_client:
            client.close()


def run_and_format(config: CheckConfig, request: CheckRequest, **kwargs) -> str:
    """점검 실행 후 텍스트 리포트 반환"""
    return format_report(run_protection_check(config, request, **kwargs))
