"""
core/parallel/executor.py - 병렬 백업 점검 실행기

Scatter/Gather 패턴으로 인벤토리 항목별 점검을 제한된 워커 풀에서 실행합니다.
ThreadPoolExecutor 기반이며 재시도는 하지 않습니다 (항목당 정확히 1회).

보장 사항:
- 워커 수 = max(1, min(max_workers, 항목 수)), 설정 상한을 넘지 않음
- 항목마다 정확히 하나의 CheckOutcome
- 작업 단위 안의 예외는 그 항목의 CRITICAL 결과로 변환 (다른 작업에 영향 없음)
- 모든 작업이 끝날 때까지 대기 후 반환 (부분 결과 없음)
- 결과는 항목 인덱스별로 미리 할당된 슬롯에 기록

Example:
    from core.parallel import ParallelConfig, ProtectionCheckExecutor

    executor = ProtectionCheckExecutor(checker.check, ParallelConfig(max_workers=10))
    result = executor.run(items, exclusion_set)
    print(f"OK: {result.ok_count}, CRITICAL: {result.critical_count}")
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import TYPE_CHECKING

from core.exceptions import get_error_code, get_error_message
from core.inventory.types import InventoryItem
from core.protection.exclusion import ExclusionSet, is_excluded
from core.protection.outcome import MSG_CANCELLED, MSG_EXCLUDED, CheckOutcome

from .quiet import is_quiet, set_quiet
from .types import DispatchResult, ItemResult

if TYPE_CHECKING:
    from cli.ui.progress import ParallelTracker

logger = logging.getLogger(__name__)

CheckFunc = Callable[[InventoryItem], CheckOutcome]

MAX_WORKERS_LIMIT = 100


def _clear_exception_chain(e: BaseException) -> None:
    """traceback + chained exception 메모리 누수 방지"""
    e.__traceback__ = None
    if e.__context__ is not None:
        e.__context__.__traceback__ = None
    if e.__cause__ is not None:
        e.__cause__.__traceback__ = None


def _fault_outcome(item: InventoryItem, error: Exception) -> CheckOutcome:
    return CheckOutcome.critical(f"{item.name}: check failed - {get_error_code(error)}: {get_error_message(error)}")


@dataclass
class ParallelConfig:
    """병렬 실행 설정

    Attributes:
        max_workers: 최대 동시 점검 수 (1~100)
        progress_interval: "N개 실행 중" 진행 로그 간격 (초)
    """

    max_workers: int = 10
    progress_interval: float = 5.0

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.max_workers > MAX_WORKERS_LIMIT:
            self.max_workers = MAX_WORKERS_LIMIT
        if self.progress_interval <= 0:
            raise ValueError(f"progress_interval must be > 0, got {self.progress_interval}")


@dataclass(frozen=True)
class _CheckTask:
    """내부 작업 명세 (항목 인덱스로 결과 슬롯을 가리킴)"""

    index: int
    item: InventoryItem


class ProtectionCheckExecutor:
    """병렬 백업 점검 실행기

    특징:
    - 호출마다 새 ThreadPoolExecutor 생성, barrier 이후 정리
    - 제외 항목은 점검 함수를 호출하지 않고 OK 처리
    - cancel_event가 설정되면 아직 시작하지 않은 작업은 CRITICAL(cancelled)로 즉시 종료
    - 진행 상황(로그, progress_tracker)은 결과 순서/내용에 영향 없음

    Example:
        cancel = threading.Event()
        executor = ProtectionCheckExecutor(checker.check, cancel_event=cancel)
        result = executor.run(items, frozenset({"rg-sandbox"}))
    """

    def __init__(
        self,
        check: CheckFunc,
        config: ParallelConfig | None = None,
        cancel_event: threading.Event | None = None,
    ):
        """초기화

        Args:
            check: 항목 점검 함수 (InventoryItem -> CheckOutcome)
            config: 병렬 실행 설정 (None이면 기본값)
            cancel_event: 호출자 취소 신호 (선택사항)
        """
        self._check = check
        self.config = config or ParallelConfig()
        self._cancel_event = cancel_event or threading.Event()

    def pool_size(self, item_count: int) -> int:
        """실제로 띄울 워커 수"""
        return max(1, min(self.config.max_workers, item_count))

    def run(
        self,
        items: Sequence[InventoryItem],
        exclusion_set: ExclusionSet = frozenset(),
        progress_tracker: ParallelTracker | None = None,
    ) -> DispatchResult:
        """모든 항목을 병렬 점검하고 전체 완료까지 대기

        취소 신호는 아직 시작하지 않은 작업에만 적용됩니다. 이미 점검 함수에
        들어간 작업은 중단하지 않으며 HTTP 타임아웃(item_timeout) 안에 끝납니다.

        Args:
            items: 점검할 인벤토리
            exclusion_set: 병합된 제외 목록 (읽기 전용)
            progress_tracker: 진행 상황 추적기 (선택사항).
                전달 시 set_total(항목 수), 항목 완료마다 on_complete(OK 여부) 호출

        Returns:
            DispatchResult: 항목 인덱스 순서의 결과 (예외 없음)
        """
        tasks = [_CheckTask(index=i, item=item) for i, item in enumerate(items)]

        if not tasks:
            logger.warning("점검할 항목이 없습니다")
            return DispatchResult()

        workers = self.pool_size(len(tasks))
        logger.info(f"병렬 점검 시작: {len(tasks)}개 항목, workers={workers}")

        if progress_tracker:
            progress_tracker.set_total(len(tasks))

        slots: list[ItemResult | None] = [None] * len(tasks)
        start_time = time.monotonic()

        # 부모 스레드의 quiet 상태를 워커 스레드에 전파
        parent_quiet = is_quiet()

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="backup-check") as executor:
            futures: dict[Future[ItemResult], _CheckTask] = {
                executor.submit(self._execute_single, task, exclusion_set, parent_quiet): task for task in tasks
            }

            pending: set[Future[ItemResult]] = set(futures)
            last_report = time.monotonic()

            while pending:
                done, pending = wait(pending, timeout=self.config.progress_interval, return_when=FIRST_COMPLETED)

                for future in done:
                    task = futures[future]
                    result = self._collect(future, task)
                    slots[task.index] = result
                    if progress_tracker:
                        progress_tracker.on_complete(result.success)

                now = time.monotonic()
                if pending and now - last_report >= self.config.progress_interval:
                    logger.info(f"{len(pending)}개 점검 실행 중...")
                    last_report = now

        results = tuple(r for r in slots if r is not None)
        exec_result = DispatchResult(results=results)

        total_time = (time.monotonic() - start_time) * 1000
        logger.info(
            f"병렬 점검 완료: OK {exec_result.ok_count}, CRITICAL {exec_result.critical_count}, 총 {total_time:.0f}ms"
        )

        return exec_result

    @staticmethod
    def _collect(future: Future[ItemResult], task: _CheckTask) -> ItemResult:
        """완료된 future에서 결과 회수

        _execute_single이 모든 예외를 처리하므로 여기서의 예외는 executor 자체 오류입니다.
        """
        try:
            return future.result()
        except Exception as e:
            logger.error(f"작업 실행 중 예외 [{task.item.name}]: {e}")
            _clear_exception_chain(e)
            return ItemResult(index=task.index, item=task.item, outcome=_fault_outcome(task.item, e))

    def _execute_single(
        self,
        task: _CheckTask,
        exclusion_set: ExclusionSet,
        quiet: bool = False,
    ) -> ItemResult:
        """단일 작업 실행 (워커 스레드 내에서 호출)

        제외 여부를 한 번 판정하고, 제외가 아니면 점검 함수를 호출합니다.
        어떤 예외도 밖으로 내보내지 않습니다.
        """
        set_quiet(quiet)
        start_time = time.monotonic()
        item = task.item

        try:
            if is_excluded(item, exclusion_set):
                outcome = CheckOutcome.ok(MSG_EXCLUDED.format(name=item.name))
            elif self._cancel_event.is_set():
                outcome = CheckOutcome.critical(MSG_CANCELLED.format(name=item.name))
            else:
                outcome = self._check(item)
        except Exception as e:
            logger.warning(f"점검 작업 예외 [{item.name}]: {e}")
            _clear_exception_chain(e)
            outcome = _fault_outcome(item, e)

        return ItemResult(
            index=task.index,
            item=item,
            outcome=outcome,
            duration_ms=(time.monotonic() - start_time) * 1000,
        )


def dispatch_checks(
    items: Sequence[InventoryItem],
    exclusion_set: ExclusionSet,
    check: CheckFunc,
    max_concurrency: int = 10,
    progress_interval: float = 5.0,
    cancel_event: threading.Event | None = None,
    progress_tracker: ParallelTracker | None = None,
) -> DispatchResult:
    """병렬 점검 편의 함수

    ProtectionCheckExecutor를 간단하게 사용할 수 있는 래퍼입니다.

    Example:
        result = dispatch_checks(items, exclusion_set, checker.check, max_concurrency=5)
        for item, outcome in result.pairs():
            print(item.name, outcome.status)
    """
    config = ParallelConfig(max_workers=max_concurrency, progress_interval=progress_interval)
    executor = ProtectionCheckExecutor(check, config, cancel_event=cancel_event)
    return executor.run(items, exclusion_set, progress_tracker=progress_tracker)
