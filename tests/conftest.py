"""
tests/conftest.py - pytest 공통 픽스처

ARM HTTP 응답 모킹과 테스트 헬퍼를 제공합니다.

Usage:
    def test_something(make_item, make_response):
        item = make_item("vm-web-01", resource_group="rg-web")
        response = make_response(200, {"protectionStatus": "Protected"})
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from core.config import CheckConfig, Credentials  # noqa: E402
from core.inventory.types import InventoryItem  # noqa: E402

SUBSCRIPTION_ID = "11111111-2222-3333-4444-555555555555"


# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """테스트가 실제 환경 변수에 영향받지 않도록 정리"""
    for key in (
        "BACKUP_CHECK_SIGNATURE",
        "BACKUP_CHECK_MAX_CONCURRENCY",
        "BACKUP_CHECK_GLOBAL_EXCLUDE",
        "BACKUP_CHECK_ITEM_TIMEOUT",
        "BACKUP_CHECK_PROGRESS_INTERVAL",
        "AZURE_TENANT_ID",
        "AZURE_CLIENT_ID",
        "AZURE_CLIENT_SECRET",
        "AZURE_AUTHORITY_HOST",
        "AZURE_RESOURCE_MANAGER",
    ):
        monkeypatch.delenv(key, raising=False)
    yield


# =============================================================================
# 도메인 헬퍼
# =============================================================================


def build_item(name: str, resource_group: str = "rg-app", location: str = "koreacentral") -> InventoryItem:
    """테스트용 InventoryItem 생성"""
    resource_id = (
        f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/{resource_group}"
        f"/providers/Microsoft.Compute/virtualMachines/{name}"
    )
    return InventoryItem(id=resource_id, name=name, resource_group=resource_group, location=location)


def vm_resource(name: str, resource_group: str = "rg-app", location: str = "koreacentral") -> dict:
    """Compute list API의 VM 항목 JSON"""
    item = build_item(name, resource_group, location)
    return {"id": item.id, "name": item.name, "location": item.location, "type": "Microsoft.Compute/virtualMachines"}


@pytest.fixture
def make_item():
    """InventoryItem 팩토리"""
    return build_item


@pytest.fixture
def make_vm_resource():
    """VM JSON 팩토리"""
    return vm_resource


@pytest.fixture
def make_response():
    """requests.Response 모킹 팩토리

    body가 None이면 json()이 ValueError를 발생시킵니다.
    """

    def _make(status_code: int = 200, body=None, reason: str = "") -> MagicMock:
        response = MagicMock()
        response.status_code = status_code
        response.ok = 200 <= status_code < 400
        response.reason = reason or ("OK" if response.ok else "Error")
        response.url = "https://management.azure.com/mock"
        if body is None:
            response.json.side_effect = ValueError("No JSON")
        else:
            response.json.return_value = body
        return response

    return _make


@pytest.fixture
def mock_session():
    """requests.Session 모킹 (headers는 실제 dict)"""
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def check_config():
    """테스트용 CheckConfig (진행 로그 간격 짧게)"""
    return CheckConfig(
        signature="-- monitoring team",
        max_concurrency=3,
        item_timeout=5.0,
        progress_interval=0.05,
        credentials=Credentials(tenant_id="tenant", client_id="client", client_secret="secret"),
    )
