# cli/ui - 콘솔 UI 컴포넌트 (rich)
"""
CLI 전용 UI 컴포넌트 모듈 (stderr 콘솔, 로그 설정, 진행 바)
"""

from .console import (
    console,
    configure_logging,
    get_console,
    print_error,
    print_success,
    print_warning,
    verbosity_to_level,
)
from .progress import ParallelTracker, parallel_progress

__all__ = [
    "console",
    "configure_logging",
    "get_console",
    "print_error",
    "print_success",
    "print_warning",
    "verbosity_to_level",
    "ParallelTracker",
    "parallel_progress",
]
