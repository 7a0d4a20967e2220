"""
core/report/aggregator.py - 점검 결과 집계

CheckOutcome 목록을 OK / CRITICAL로 나누고 각각 사전순 정렬합니다.
정렬 순서는 모니터링 쪽 파싱 규약이므로 바꾸지 않습니다.

집계 규칙:
- alert_count = CRITICAL 줄 수
- 인벤토리 0개 (조회는 성공) -> CRITICAL 줄 하나 추가 (권한 누락 가능성)
- 인벤토리 조회 실패 -> 에러 한 줄만 담은 리포트 (alert 1, total 0)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from core.exceptions import format_error_line
from core.protection.outcome import CheckOutcome, OutcomeStatus

EMPTY_INVENTORY_MESSAGE = "No items found in subscription (missing read permission?)"


@dataclass(frozen=True)
class Report:
    """최종 리포트 (불변)

    Attributes:
        total_count: 인벤토리 항목 수
        alert_count: 경보 수 (= len(critical_lines))
        critical_lines: 정렬된 CRITICAL 줄
        ok_lines: 정렬된 OK 줄
        signature: 리포트 마지막 서명
    """

    total_count: int
    alert_count: int
    critical_lines: tuple[str, ...] = field(default_factory=tuple)
    ok_lines: tuple[str, ...] = field(default_factory=tuple)
    signature: str = ""

    @property
    def is_critical(self) -> bool:
        return self.alert_count > 0

    @property
    def status(self) -> OutcomeStatus:
        return OutcomeStatus.CRITICAL if self.is_critical else OutcomeStatus.OK

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리로 변환 (JSON 출력용)"""
        return {
            "status": self.status.value,
            "total_count": self.total_count,
            "alert_count": self.alert_count,
            "critical_lines": list(self.critical_lines),
            "ok_lines": list(self.ok_lines),
            "signature": self.signature,
        }


def aggregate(outcomes: Iterable[CheckOutcome], total_count: int, signature: str = "") -> Report:
    """점검 결과를 리포트로 집계

    Args:
        outcomes: 항목별 결과 (순서 무관)
        total_count: 조회된 인벤토리 항목 수
        signature: 리포트 서명

    Returns:
        Report
    """
    critical_lines: list[str] = []
    ok_lines: list[str] = []

    for outcome in outcomes:
        if outcome.status is OutcomeStatus.CRITICAL:
            critical_lines.append(outcome.render())
        else:
            ok_lines.append(outcome.render())

    if total_count == 0:
        critical_lines.append(CheckOutcome.critical(EMPTY_INVENTORY_MESSAGE).render())

    critical_lines.sort()
    ok_lines.sort()

    return Report(
        total_count=total_count,
        alert_count=len(critical_lines),
        critical_lines=tuple(critical_lines),
        ok_lines=tuple(ok_lines),
        signature=signature,
    )


def aggregate_fetch_failure(error: Exception, signature: str = "") -> Report:
    """인벤토리 조회 실패 리포트

    Args:
        error: FetchError 또는 AuthError (code, message 보유)
    """
    return Report(
        total_count=0,
        alert_count=1,
        critical_lines=(format_error_line(error),),
        ok_lines=(),
        signature=signature,
    )
