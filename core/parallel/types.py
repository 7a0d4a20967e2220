"""
core/parallel/types.py - 병렬 점검 결과 타입

- ItemResult: 항목 하나의 결과 (인덱스, 항목, CheckOutcome)
- DispatchResult: 전체 디스패치 결과 (항목 인덱스 순서)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from core.inventory.types import InventoryItem
from core.protection.outcome import CheckOutcome, OutcomeStatus


@dataclass(frozen=True)
class ItemResult:
    """단일 항목 점검 결과

    Attributes:
        index: 인벤토리 내 항목 위치
        item: 점검 대상
        outcome: 점검 결과
        duration_ms: 작업 소요 시간 (밀리초)
    """

    index: int
    item: InventoryItem
    outcome: CheckOutcome
    duration_ms: float = 0.0

    @property
    def success(self) -> bool:
        return self.outcome.is_ok


@dataclass(frozen=True)
class DispatchResult:
    """디스패치 전체 결과

    results는 완료 순서가 아니라 항목 인덱스 순서입니다.
    """

    results: tuple[ItemResult, ...] = field(default_factory=tuple)

    @property
    def total_count(self) -> int:
        return len(self.results)

    @property
    def ok_count(self) -> int:
        return sum(1 for r in self.results if r.outcome.status is OutcomeStatus.OK)

    @property
    def critical_count(self) -> int:
        return sum(1 for r in self.results if r.outcome.status is OutcomeStatus.CRITICAL)

    @property
    def outcomes(self) -> list[CheckOutcome]:
        return [r.outcome for r in self.results]

    def pairs(self) -> list[tuple[InventoryItem, CheckOutcome]]:
        """(항목, 결과) 쌍 목록"""
        return [(r.item, r.outcome) for r in self.results]
