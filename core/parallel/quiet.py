"""
core/parallel/quiet.py - 병렬 점검 시 콘솔 로그 억제

여러 워커 스레드가 동시에 로그를 남기면 진행 바와 섞입니다.
quiet 모드인 스레드에서는 ERROR 미만 로그를 필터로 막습니다.
워커 스레드는 executor가 부모 스레드의 상태를 set_quiet()로 넘겨받습니다.

Example:
    from core.parallel.quiet import quiet_mode

    with parallel_progress("백업 점검") as tracker, quiet_mode():
        result = executor.run(items, exclusion_set, progress_tracker=tracker)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

_local = threading.local()


def is_quiet() -> bool:
    """현재 스레드가 quiet 모드인지 확인"""
    return getattr(_local, "quiet", False)


def set_quiet(value: bool) -> None:
    """현재 스레드의 quiet 모드 설정"""
    _local.quiet = value


class _QuietFilter(logging.Filter):
    """quiet 스레드의 ERROR 미만 레코드 차단

    루트 logger와 그 핸들러에 함께 붙입니다. 핸들러 쪽 필터가 있어야
    자식 logger에서 전파된 레코드도 걸러집니다.
    """

    def __init__(self) -> None:
        super().__init__()
        self._users = 0
        self._lock = threading.Lock()

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR or not is_quiet()

    def acquire(self) -> None:
        with self._lock:
            self._users += 1
            if self._users > 1:
                return
            root = logging.getLogger()
            for target in (root, *root.handlers):
                target.addFilter(self)

    def release(self) -> None:
        with self._lock:
            self._users -= 1
            if self._users > 0:
                return
            root = logging.getLogger()
            for target in (root, *root.handlers):
                target.removeFilter(self)


_filter = _QuietFilter()


@contextmanager
def quiet_mode() -> Iterator[None]:
    """현재 스레드를 quiet 모드로 전환

    종료 시 이전 상태로 복원합니다. 중첩되거나 여러 스레드가 동시에
    진입해도 마지막 사용자가 나갈 때만 필터를 뗍니다.
    """
    previous = is_quiet()
    set_quiet(True)
    _filter.acquire()
    try:
        yield
    finally:
        set_quiet(previous)
        _filter.release()
