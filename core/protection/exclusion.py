"""
core/protection/exclusion.py - 점검 제외 필터

제외 목록은 호출자 지정 목록과 전역 설정 목록을 우선순위 없이 합친 것입니다.
VM 이름 또는 리소스 그룹 이름이 목록에 있으면 제외됩니다 (대소문자 구분).
"""

from __future__ import annotations

from collections.abc import Iterable

from core.inventory.types import InventoryItem

ExclusionSet = frozenset[str]


def build_exclusion_set(*sources: Iterable[str]) -> ExclusionSet:
    """여러 제외 목록을 하나의 읽기 전용 집합으로 병합

    Example:
        build_exclusion_set(request.exclude, config.global_exclude)
    """
    merged: set[str] = set()
    for source in sources:
        merged.update(name for name in source if name)
    return frozenset(merged)


def is_excluded(item: InventoryItem, exclusion_set: ExclusionSet) -> bool:
    """VM 이름 또는 리소스 그룹이 제외 목록에 있는지 확인"""
    return item.name in exclusion_set or item.resource_group in exclusion_set
