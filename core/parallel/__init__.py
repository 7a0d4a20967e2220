"""
core/parallel - 병렬 처리 모듈

인벤토리 항목별 백업 점검을 제한된 워커 풀에서 안전하게 처리합니다.

주요 구성 요소:
- ProtectionCheckExecutor: Scatter/Gather 패턴 병렬 실행기
- dispatch_checks: 간편한 병렬 점검 함수
- quiet_mode: 병렬 실행 중 콘솔 로그 억제

Example:
    from core.parallel import dispatch_checks

    result = dispatch_checks(items, exclusion_set, checker.check, max_concurrency=10)
    print(f"OK: {result.ok_count}, CRITICAL: {result.critical_count}")

Example (Progress tracking 사용):
    from cli.ui.progress import parallel_progress
    from core.parallel import dispatch_checks, quiet_mode

    with parallel_progress("백업 점검") as tracker:
        with quiet_mode():
            result = dispatch_checks(items, exclusion_set, checker.check, progress_tracker=tracker)
"""

from .executor import ParallelConfig, ProtectionCheckExecutor, dispatch_checks
from .quiet import is_quiet, quiet_mode, set_quiet
from .types import DispatchResult, ItemResult

__all__: list[str] = [
    # Executor
    "ProtectionCheckExecutor",
    "ParallelConfig",
    "dispatch_checks",
    # Quiet mode
    "quiet_mode",
    "is_quiet",
    "set_quiet",
    # Types
    "ItemResult",
    "DispatchResult",
]
