"""
core/azure/schemas.py - ARM 응답 스키마 검증

외부 호출별 응답 형식을 경계에서 명시적으로 검증합니다.

    Inventory API          {"value": [...], "nextLink"?: str}
    Protection-Status API  {"protectionStatus": str}
    Provider error         {"error": {"code": str, "message": str}}

필수 필드가 없으면 기본값으로 넘어가지 않고 ResponseSchemaError를 발생시킵니다.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from core.exceptions import ResponseSchemaError
from core.inventory.types import InventoryItem

PROTECTED_STATUS = "Protected"


@dataclass(frozen=True)
class InventoryPage:
    """Inventory API 한 페이지

    Attributes:
        items: 이 페이지의 VM 목록
        next_link: 다음 페이지 URL (마지막 페이지면 None)
    """

    items: tuple[InventoryItem, ...]
    next_link: str | None = None


def _require_str(obj: dict[str, Any], key: str, where: str) -> str:
    value = obj.get(key)
    if not isinstance(value, str) or not value:
        raise ResponseSchemaError(f"{where}: '{key}' 필드가 없거나 문자열이 아닙니다")
    return value


def parse_inventory_page(payload: Any) -> InventoryPage:
    """Inventory API 응답 한 페이지 파싱

    Raises:
        ResponseSchemaError: value 배열이 없거나 항목에 id/name/location이 없는 경우
    """
    if not isinstance(payload, dict):
        raise ResponseSchemaError("inventory: 응답이 JSON 객체가 아닙니다")

    values = payload.get("value")
    if not isinstance(values, list):
        raise ResponseSchemaError("inventory: 'value' 배열이 없습니다")

    items = []
    for raw in values:
        if not isinstance(raw, dict):
            raise ResponseSchemaError("inventory: 항목이 JSON 객체가 아닙니다")
        items.append(
            InventoryItem.from_resource(
                resource_id=_require_str(raw, "id", "inventory item"),
                name=_require_str(raw, "name", "inventory item"),
                location=_require_str(raw, "location", "inventory item"),
            )
        )

    next_link = payload.get("nextLink")
    if next_link is not None and not isinstance(next_link, str):
        raise ResponseSchemaError("inventory: 'nextLink'가 문자열이 아닙니다")

    return InventoryPage(items=tuple(items), next_link=next_link or None)


def parse_protection_status(payload: Any) -> str:
    """Protection-Status API 응답에서 protectionStatus 추출

    Raises:
        ResponseSchemaError: protectionStatus 필드가 없는 경우
    """
    if not isinstance(payload, dict):
        raise ResponseSchemaError("backupStatus: 응답이 JSON 객체가 아닙니다")
    return _require_str(payload, "protectionStatus", "backupStatus")


def parse_error_body(payload: Any, status_code: int, reason: str = "") -> tuple[str, str]:
    """Provider 에러 본문에서 (code, message) 추출

    본문이 에러 형식이 아니면 HTTP 상태로 대체합니다.
    message가 비어 있으면 HTTP reason으로 채웁니다.
    """
    fallback_message = reason or f"HTTP status {status_code}"
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict):
            code = error.get("code")
            message = error.get("message")
            if isinstance(code, str) and code:
                return code, message if isinstance(message, str) and message else fallback_message
    return f"HTTP{status_code}", fallback_message
