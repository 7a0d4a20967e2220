"""
core/report - 결과 집계와 리포트 렌더링

Usage:
    from core.report import aggregate, format_report

    report = aggregate(dispatch_result.outcomes, total_count=len(items), signature=config.signature)
    print(format_report(report), end="")
"""

from .aggregator import EMPTY_INVENTORY_MESSAGE, Report, aggregate, aggregate_fetch_failure
from .formatter import format_header, format_report

__all__: list[str] = [
    "Report",
    "aggregate",
    "aggregate_fetch_failure",
    "format_header",
    "format_report",
    "EMPTY_INVENTORY_MESSAGE",
]
