"""
cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다.
모니터링 시스템(cron, Nagios 계열 체크 등)이 호출하는 트리거 표면입니다.

명령어 구조:
    vmbc                                  # 도움말
    vmbc --version                        # 버전 표시
    vmbc check -s <subscription>          # 백업 커버리지 점검
    vmbc check -s <id> -e vm-a,rg-test    # 제외 목록 지정
    vmbc check -f json                    # JSON 리포트

리포트 본문은 stdout으로 출력하며 종료 코드는 경보 여부와 무관하게 0입니다.
OK / CRITICAL 판정은 본문 텍스트가 전달합니다. 설정 오류만 1로 종료합니다.

Usage:
    $ vmbc check --subscription 11111111-2222-3333-4444-555555555555
    $ python -m cli.app check
"""

from __future__ import annotations

import dataclasses
import json
import logging
import signal
import sys
import threading
from collections.abc import Generator
from contextlib import contextmanager, nullcontext
from pathlib import Path

# 프로젝트 루트를 sys.path에 추가 (python -m cli.app 실행 시 core 임포트를 위함)
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import click  # noqa: E402

from cli.ui.console import configure_logging, print_error, print_success, print_warning  # noqa: E402
from core.config import CheckConfig, CheckRequest, get_version  # noqa: E402
from core.exceptions import ConfigError  # noqa: E402

logger = logging.getLogger(__name__)

VERSION = get_version()


@contextmanager
def _cancel_on_interrupt(cancel_event: threading.Event) -> Generator[None, None, None]:
    """Ctrl-C를 취소 신호로 변환

    실행 중인 점검은 끝까지 기다리고, 아직 시작하지 않은 항목은 cancelled로 끝냅니다.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def _handler(signum, frame):
        if not cancel_event.is_set():
            print_warning("취소 요청됨 - 실행 중인 점검이 끝나면 종료합니다")
        cancel_event.set()

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def _load_config(max_concurrency: int | None, timeout: float | None) -> CheckConfig:
    """환경 변수 설정 + 명령줄 override"""
    config = CheckConfig.from_env()
    overrides: dict[str, object] = {}
    if max_concurrency is not None:
        overrides["max_concurrency"] = max_concurrency
    if timeout is not None:
        overrides["item_timeout"] = timeout
    if overrides:
        config = dataclasses.replace(config, **overrides)
    return config


@click.group(invoke_without_command=True)
@click.version_option(VERSION, prog_name="vmbc")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """VMBC - VM Backup Coverage Check

    구독의 모든 가상 머신이 백업으로 보호되는지 점검하고
    모니터링 시스템용 OK/CRITICAL 요약을 출력합니다.
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command("check")
@click.option("-s", "--subscription", "subscription", default=None, help="대상 구독 ID (기본: 00000000-... sentinel)")
@click.option("-e", "--exclude", "exclude", default=None, help="제외할 VM/리소스 그룹 이름 (콤마 구분)")
@click.option("-c", "--max-concurrency", "max_concurrency", type=int, default=None, help="최대 동시 점검 수")
@click.option("-t", "--timeout", "timeout", type=float, default=None, help="항목별 조회 타임아웃 (초)")
@click.option("-f", "--format", "output_format", type=click.Choice(["text", "json"]), default="text")
@click.option("-q", "--quiet", is_flag=True, help="진행 바 없이 리포트만 출력")
@click.option("-v", "--verbose", count=True, help="로그 상세도 (-v: INFO, -vv: DEBUG)")
def check_cmd(
    subscription: str | None,
    exclude: str | None,
    max_concurrency: int | None,
    timeout: float | None,
    output_format: str,
    quiet: bool,
    verbose: int,
) -> None:
    """백업 커버리지 점검 실행"""
    from cli.ui.progress import parallel_progress
    from core.engine import run_protection_check
    from core.parallel import quiet_mode
    from core.report import format_report

    configure_logging(verbose)

    try:
        config = _load_config(max_concurrency, timeout)
    except ConfigError as e:
        print_error(str(e))
        raise SystemExit(1) from e

    request = CheckRequest.from_params(subscription, exclude)
    cancel_event = threading.Event()

    progress_cm = nullcontext(None) if quiet else parallel_progress("백업 점검")

    with _cancel_on_interrupt(cancel_event), progress_cm as tracker:
        # 진행 바가 있으면 워커 로그는 ERROR만 남긴다
        with quiet_mode() if tracker is not None else nullcontext():
            report = run_protection_check(config, request, cancel_event=cancel_event, progress_tracker=tracker)

    # 요약은 stderr 콘솔로만 (stdout 본문은 그대로)
    if not quiet:
        if report.is_critical:
            print_warning(f"경보 {report.alert_count}건 / 전체 {report.total_count}개")
        else:
            print_success(f"전체 {report.total_count}개 VM 보호 확인")

    if output_format == "json":
        click.echo(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    else:
        click.echo(format_report(report), nl=False)


if __name__ == "__main__":
    cli()
