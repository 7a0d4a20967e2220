"""
core/protection/checker.py - VM 백업 보호 상태 점검

Recovery Services backupStatus API를 항목당 한 번 호출하고 결과를 분류합니다.

    "Protected"        -> OK("<name>: item is protected")
    그 외 상태 값       -> CRITICAL("<name>: item is NOT protected")
    Provider/전송 에러  -> CRITICAL("<code>: <message>")

check()는 예외를 밖으로 내보내지 않습니다. 한 항목의 실패가
다른 워커의 작업을 중단시키면 안 되기 때문입니다.
"""

from __future__ import annotations

import logging

import requests

from core.azure.client import RECOVERY_SERVICES_API_VERSION, ArmClient
from core.azure.schemas import PROTECTED_STATUS, parse_protection_status
from core.exceptions import ProviderError, format_error_line
from core.inventory.types import InventoryItem

from .outcome import MSG_NOT_PROTECTED, MSG_PROTECTED, CheckOutcome

logger = logging.getLogger(__name__)

BACKUP_STATUS_PATH = (
    "/subscriptions/{subscription_id}/providers/Microsoft.RecoveryServices/locations/{location}/backupStatus"
)
VM_RESOURCE_TYPE = "VM"


class ItemChecker:
    """항목별 보호 상태 점검기

    Attributes:
        subscription_id: 대상 구독 ID
        timeout: 항목별 HTTP 타임아웃 (초, None이면 클라이언트 기본값)
    """

    def __init__(
        self,
        arm_client: ArmClient,
        subscription_id: str,
        timeout: float | None = None,
    ):
        self._arm = arm_client
        self.subscription_id = subscription_id
        self.timeout = timeout

    def query_status(self, item: InventoryItem) -> str:
        """backupStatus API 호출 후 protectionStatus 반환

        Raises:
            ProviderError: 에러 응답 또는 스키마 불일치
            requests.RequestException: 전송 실패 / 타임아웃
        """
        path = BACKUP_STATUS_PATH.format(subscription_id=self.subscription_id, location=item.location)
        payload = self._arm.post_json(
            path,
            body={"resourceType": VM_RESOURCE_TYPE, "resourceId": item.id},
            params={"api-version": RECOVERY_SERVICES_API_VERSION},
            timeout=self.timeout,
        )
        return parse_protection_status(payload)

    def check(self, item: InventoryItem) -> CheckOutcome:
        """단일 VM 점검

        Returns:
            CheckOutcome (예외 없음)
        """
        try:
            status = self.query_status(item)
        except (ProviderError, requests.RequestException) as e:
            logger.warning(f"보호 상태 조회 실패 [{item.name}]: {e}")
            return CheckOutcome.critical(format_error_line(e))

        if status == PROTECTED_STATUS:
            return CheckOutcome.ok(MSG_PROTECTED.format(name=item.name))

        logger.debug(f"[{item.name}] protectionStatus={status}")
        return CheckOutcome.critical(MSG_NOT_PROTECTED.format(name=item.name))
