"""
cli/ui/progress.py - 병렬 백업 점검 진행 바

워커 스레드가 항목을 끝낼 때마다 OK / CRITICAL 수를 세고,
stderr 콘솔의 Rich 진행 바에 반영합니다. 진행 표시는 부수 채널일 뿐
점검 결과에는 영향을 주지 않습니다.

Example:
    with parallel_progress("백업 점검") as tracker, quiet_mode():
        report = run_protection_check(config, request, progress_tracker=tracker)

    ok, critical, total = tracker.stats
"""

from __future__ import annotations

import threading
from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    ProgressColumn,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text

from .console import console as default_console

if TYPE_CHECKING:
    from rich.console import Console
    from rich.progress import Task, TaskID


class ParallelTracker:
    """OK / CRITICAL 카운터 (스레드 안전)

    Progress에 붙이기 전에도 동작합니다. attach() 이후에는
    카운트가 바뀔 때마다 진행 바를 갱신합니다.
    """

    def __init__(self, description: str = "") -> None:
        self.description = description
        self._lock = threading.Lock()
        self._ok = 0
        self._critical = 0
        self._total = 0
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None

    def attach(self, progress: Progress, task_id: TaskID) -> None:
        self._progress = progress
        self._task_id = task_id

    def _refresh(self, **fields: Any) -> None:
        if self._progress is not None and self._task_id is not None:
            self._progress.update(self._task_id, **fields)

    def set_total(self, total: int) -> None:
        """점검 대상 수 설정 (executor가 호출)"""
        with self._lock:
            self._total = total
            self._refresh(total=total)

    def on_complete(self, success: bool) -> None:
        """항목 하나 완료 (success: OK면 True)"""
        with self._lock:
            if success:
                self._ok += 1
            else:
                self._critical += 1
            self._refresh(completed=self._ok + self._critical)

    @property
    def stats(self) -> tuple[int, int, int]:
        """(ok, critical, total)"""
        with self._lock:
            return self._ok, self._critical, self._total

    def summary(self) -> str:
        """완료 후 진행 바에 남길 설명 (Rich markup)"""
        _, critical, _ = self.stats
        if critical:
            return f"[yellow]{self.description} 완료 ({critical}개 CRITICAL)"
        return f"[green]{self.description} 완료"


class OkCriticalColumn(ProgressColumn):
    """'40✓ 2✗' 형식의 OK/CRITICAL 카운트 컬럼"""

    def __init__(self, tracker: ParallelTracker) -> None:
        super().__init__()
        self.tracker = tracker

    def render(self, task: Task) -> Text:
        ok, critical, _ = self.tracker.stats
        return Text.assemble((f"{ok}✓", "green"), " ", (f"{critical}✗", "red"))


@contextmanager
def parallel_progress(description: str, console: Console | None = None) -> Generator[ParallelTracker, None, None]:
    """병렬 점검 진행 바 컨텍스트 매니저

    Args:
        description: 진행 바 설명
        console: 출력 콘솔 (기본: stderr 전역 콘솔)

    Yields:
        executor에 progress_tracker로 넘길 ParallelTracker
    """
    tracker = ParallelTracker(description)
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        OkCriticalColumn(tracker),
        MofNCompleteColumn(),
        BarColumn(bar_width=40),
        TimeElapsedColumn(),
        console=console or default_console,
    )

    with progress:
        task_id = progress.add_task(f"[cyan]{description}", total=None)
        tracker.attach(progress, task_id)
        try:
            yield tracker
        finally:
            if tracker.stats[2]:
                progress.update(task_id, description=tracker.summary())
