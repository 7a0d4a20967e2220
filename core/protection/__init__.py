"""
core/protection - 백업 보호 점검

주요 구성 요소:
- CheckOutcome / OutcomeStatus: 항목별 OK/CRITICAL 결과
- build_exclusion_set / is_excluded: 제외 필터
- ItemChecker: backupStatus API 기반 항목 점검기
"""

from .checker import ItemChecker
from .exclusion import ExclusionSet, build_exclusion_set, is_excluded
from .outcome import (
    MSG_CANCELLED,
    MSG_EXCLUDED,
    MSG_NOT_PROTECTED,
    MSG_PROTECTED,
    CheckOutcome,
    OutcomeStatus,
)

__all__: list[str] = [
    "CheckOutcome",
    "OutcomeStatus",
    "ItemChecker",
    "ExclusionSet",
    "build_exclusion_set",
    "is_excluded",
    "MSG_PROTECTED",
    "MSG_NOT_PROTECTED",
    "MSG_EXCLUDED",
    "MSG_CANCELLED",
]
