"""
core/protection/outcome.py - 항목별 점검 결과

CheckOutcome은 OK / CRITICAL 두 가지 중 하나이며 사람이 읽을 메시지를 가집니다.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# 메시지 템플릿 (모니터링 쪽에서 grep 하므로 문구 변경 금지)
MSG_PROTECTED = "{name}: item is protected"
MSG_NOT_PROTECTED = "{name}: item is NOT protected"
MSG_EXCLUDED = "{name}: item excluded from protection check"
MSG_CANCELLED = "{name}: protection check cancelled"


class OutcomeStatus(Enum):
    """점검 결과 상태"""

    OK = "OK"
    CRITICAL = "CRITICAL"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class CheckOutcome:
    """단일 항목 점검 결과

    Attributes:
        status: OK 또는 CRITICAL
        message: 리포트에 출력될 메시지
    """

    status: OutcomeStatus
    message: str

    @classmethod
    def ok(cls, message: str) -> CheckOutcome:
        return cls(OutcomeStatus.OK, message)

    @classmethod
    def critical(cls, message: str) -> CheckOutcome:
        return cls(OutcomeStatus.CRITICAL, message)

    @property
    def is_ok(self) -> bool:
        return self.status is OutcomeStatus.OK

    def render(self) -> str:
        """리포트 한 줄: "<STATUS> - <message>" """
        return f"{self.status.value} - {self.message}"
