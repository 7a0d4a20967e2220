"""
cli/ui/console.py - Rich 콘솔 유틸리티

리포트 본문은 stdout으로, 진행 바/로그/안내 메시지는 stderr 콘솔로 출력합니다.
모니터링 연동이 stdout 본문을 그대로 파싱할 수 있게 하기 위함입니다.
"""

import logging
import platform

from rich.console import Console
from rich.logging import RichHandler

# urllib3 연결 로그 노이즈 제한
logging.getLogger("urllib3.connectionpool").setLevel(logging.WARNING)


def get_console() -> Console:
    """stderr용 Rich Console 인스턴스를 생성하고 반환합니다."""
    is_windows = platform.system().lower() == "windows"

    return Console(
        stderr=True,
        color_system="auto",
        highlight=True,
        soft_wrap=True,
        markup=True,
        emoji=not is_windows,
    )


# 전역 콘솔 인스턴스
console = get_console()


def verbosity_to_level(verbose: int) -> int:
    """-v 횟수를 로그 레벨로 변환 (0: WARNING, 1: INFO, 2+: DEBUG)"""
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(verbose: int = 0) -> logging.Logger:
    """루트 logger에 Rich 핸들러를 설정합니다.

    여러 번 호출해도 핸들러는 하나만 유지하고 레벨만 갱신합니다.

    Args:
        verbose: -v 옵션 횟수

    Returns:
        logging.Logger: 루트 logger
    """
    root = logging.getLogger()
    root.setLevel(verbosity_to_level(verbose))

    if not any(isinstance(h, RichHandler) for h in root.handlers):
        handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        root.addHandler(handler)

    return root


# =============================================================================
# 표준 출력 스타일 (이모지 없이 Rich 스타일만 사용)
# =============================================================================

SYMBOL_SUCCESS = "✓"
SYMBOL_ERROR = "✗"
SYMBOL_WARNING = "!"


def print_success(message: str) -> None:
    """성공 메시지 출력 (초록색 체크마크)"""
    console.print(f"[green]{SYMBOL_SUCCESS} {message}[/green]")


def print_error(message: str) -> None:
    """에러 메시지 출력 (빨간색 X)"""
    console.print(f"[red]{SYMBOL_ERROR} {message}[/red]")


def print_warning(message: str) -> None:
    """경고 메시지 출력 (노란색 경고)"""
    console.print(f"[yellow]{SYMBOL_WARNING} {message}[/yellow]")
