"""
core/report/formatter.py - 리포트 텍스트 렌더링

    Status CRITICAL - No protection on {alert}/{total} item(s)!
    <critical lines>
    <ok lines>

    <signature>
"""

from __future__ import annotations

from .aggregator import Report

HEADER_CRITICAL = "Status CRITICAL - No protection on {alert_count}/{total_count} item(s)!"
HEADER_OK = "Status OK - No alert on any {total_count} item(s)"


def format_header(report: Report) -> str:
    if report.alert_count > 0:
        return HEADER_CRITICAL.format(alert_count=report.alert_count, total_count=report.total_count)
    return HEADER_OK.format(total_count=report.total_count)


def format_report(report: Report) -> str:
    """리포트를 최종 텍스트 본문으로 렌더링 (줄마다 개행)"""
    lines = [format_header(report), *report.critical_lines, *report.ok_lines, "", report.signature]
    return "\n".join(lines) + "\n"
