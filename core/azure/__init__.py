"""
core/azure - Azure Resource Manager 연동

주요 구성 요소:
- ArmClient: Bearer 토큰 기반 ARM REST 클라이언트 (requests)
- schemas: 호출별 응답 스키마 검증
"""

from .client import COMPUTE_API_VERSION, RECOVERY_SERVICES_API_VERSION, ArmClient
from .schemas import (
    PROTECTED_STATUS,
    InventoryPage,
    parse_error_body,
    parse_inventory_page,
    parse_protection_status,
)

__all__: list[str] = [
    "ArmClient",
    "COMPUTE_API_VERSION",
    "RECOVERY_SERVICES_API_VERSION",
    "PROTECTED_STATUS",
    "InventoryPage",
    "parse_error_body",
    "parse_inventory_page",
    "parse_protection_status",
]
