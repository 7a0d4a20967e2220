"""
tests/core/test_core_engine.py - 점검 엔진 통합 테스트

ARM 클라이언트를 MagicMock으로 대체하여 조회 -> 디스패치 -> 집계 흐름을 검증합니다.
"""

import threading
import time
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest

from core.auth import AccessToken
from core.config import CheckConfig, CheckRequest
from core.engine import run_and_format, run_protection_check
from core.exceptions import AuthError, ProviderError

SUBSCRIPTION_ID = "11111111-2222-3333-4444-555555555555"


def fake_arm(resources, statuses):
    """인벤토리와 VM 이름별 보호 상태를 돌려주는 ARM 클라이언트 모킹"""
    arm = MagicMock()
    arm.get_json.return_value = {"value": resources}

    def post_json(path, body, params=None, timeout=None):
        name = body["resourceId"].rsplit("/", 1)[-1]
        return {"protectionStatus": statuses[name]}

    arm.post_json.side_effect = post_json
    return arm


@pytest.fixture
def request_():
    return CheckRequest(subscription_id=SUBSCRIPTION_ID)


class TestRunProtectionCheck:
    """run_protection_check 시나리오"""

    def test_mixed_protection(self, check_config, request_, make_vm_resource):
        """3개 중 1개 미보호 -> 1/3"""
        arm = fake_arm(
            [make_vm_resource("vm-a"), make_vm_resource("vm-b"), make_vm_resource("vm-c")],
            {"vm-a": "Protected", "vm-b": "Protected", "vm-c": "NotProtected"},
        )

        report = run_protection_check(check_config, request_, client=arm)

        assert report.alert_count == 1
        assert report.total_count == 3
        assert report.critical_lines == ("CRITICAL - vm-c: item is NOT protected",)
        assert report.ok_lines == ("OK - vm-a: item is protected", "OK - vm-b: item is protected")
        assert report.signature == "-- monitoring team"

    def test_exclusion_by_resource_group(self, check_config, make_vm_resource):
        """제외된 리소스 그룹의 VM은 점검 호출 없이 OK"""
        arm = fake_arm(
            [
                make_vm_resource("vm-a", "rg-prod"),
                make_vm_resource("vm-b", "rg-sandbox"),
                make_vm_resource("vm-c", "rg-prod"),
            ],
            {"vm-a": "Protected", "vm-c": "NotProtected"},
        )
        request = CheckRequest.from_params(SUBSCRIPTION_ID, "rg-sandbox")

        report = run_protection_check(check_config, request, client=arm)

        assert arm.post_json.call_count == 2
        assert "OK - vm-b: item excluded from protection check" in report.ok_lines
        assert report.alert_count == 1

    def test_global_exclude_merged(self, request_, make_vm_resource):
        config = CheckConfig(signature="s", max_concurrency=2, global_exclude=("vm-legacy",))
        arm = fake_arm([make_vm_resource("vm-legacy")], {})

        report = run_protection_check(config, request_, client=arm)

        arm.post_json.assert_not_called()
        assert report.ok_lines == ("OK - vm-legacy: item excluded from protection check",)

    def test_fetch_failure(self, check_config, request_):
        """인벤토리 조회 실패 -> 정확한 본문"""
        arm = MagicMock()
        arm.get_json.side_effect = ProviderError(
            "AuthorizationFailed", "The client does not have authorization", status_code=403
        )

        body = run_and_format(check_config, request_, client=arm)

        assert body == (
            "Status CRITICAL - No protection on 1/0 item(s)!\n"
            "AuthorizationFailed: The client does not have authorization\n"
            "\n"
            "-- monitoring team\n"
        )
        arm.post_json.assert_not_called()

    def test_empty_inventory(self, check_config, request_):
        arm = fake_arm([], {})

        report = run_protection_check(check_config, request_, client=arm)

        assert report.alert_count == 1
        assert report.total_count == 0
        assert "No items found" in report.critical_lines[0]

    def test_concurrency_bound(self, check_config, request_, make_vm_resource):
        """10개 항목, max 3 -> 동시 호출 3개 이하, 결과 10개"""
        lock = threading.Lock()
        state = {"running": 0, "max": 0}
        arm = MagicMock()
        arm.get_json.return_value = {"value": [make_vm_resource(f"vm-{i}") for i in range(10)]}

        def post_json(path, body, params=None, timeout=None):
            with lock:
                state["running"] += 1
                state["max"] = max(state["max"], state["running"])
            time.sleep(0.02)
            with lock:
                state["running"] -= 1
            return {"protectionStatus": "Protected"}

        arm.post_json.side_effect = post_json

        report = run_protection_check(check_config, request_, client=arm)

        assert state["max"] <= 3
        assert len(report.ok_lines) == 10
        assert report.alert_count == 0

    def test_item_failure_isolated(self, check_config, request_, make_vm_resource):
        arm = fake_arm([make_vm_resource("vm-a"), make_vm_resource("vm-b")], {"vm-a": "Protected"})
        # vm-b는 statuses에 없으므로 KeyError -> 해당 항목만 CRITICAL

        report = run_protection_check(check_config, request_, client=arm)

        assert report.total_count == 2
        assert report.alert_count == 1
        assert report.critical_lines[0].startswith("CRITICAL - vm-b: check failed - KeyError")

    def test_cancelled(self, check_config, request_, make_vm_resource):
        arm = fake_arm([make_vm_resource("vm-a")], {"vm-a": "Protected"})
        cancel = threading.Event()
        cancel.set()

        report = run_protection_check(check_config, request_, client=arm, cancel_event=cancel)

        assert report.critical_lines == ("CRITICAL - vm-a: protection check cancelled",)

    def test_injected_client_not_closed(self, check_config, request_):
        arm = fake_arm([], {})

        run_protection_check(check_config, request_, client=arm)

        arm.close.assert_not_called()


class TestCredentialPath:
    """토큰 발급부터 시작하는 경로"""

    def test_auth_failure_reported(self, check_config, request_):
        credential = MagicMock()
        credential.get_token.side_effect = AuthError("invalid_client", "Invalid client secret")

        body = run_and_format(check_config, request_, credential=credential)

        assert body.splitlines()[:2] == [
            "Status CRITICAL - No protection on 1/0 item(s)!",
            "invalid_client: Invalid client secret",
        ]

    def test_missing_credentials_reported(self, request_):
        report = run_protection_check(CheckConfig(), request_)

        assert report.alert_count == 1
        assert report.critical_lines[0].startswith("MissingCredentials: ")

    def test_owned_client_uses_session(self, check_config, request_, mock_session, make_response, make_vm_resource):
        credential = MagicMock()
        credential.get_token.return_value = AccessToken("arm-token", datetime.now(timezone.utc) + timedelta(hours=1))
        mock_session.get.return_value = make_response(200, {"value": [make_vm_resource("vm-a")]})
        mock_session.post.return_value = make_response(200, {"protectionStatus": "Protected"})

        report = run_protection_check(check_config, request_, credential=credential, session=mock_session)

        assert report.ok_lines == ("OK - vm-a: item is protected",)
        assert mock_session.headers["Authorization"] == "Bearer arm-token"
        mock_session.close.assert_called_once()

    def test_owned_credential_closed(self, check_config, request_, mock_session, make_response):
        """엔진이 만든 토큰 발급기는 토큰을 받은 뒤 닫힘"""
        owned = MagicMock()
        owned.__enter__.return_value = owned
        owned.get_token.return_value = AccessToken("arm-token", datetime.now(timezone.utc) + timedelta(hours=1))
        mock_session.get.return_value = make_response(200, {"value": []})

        with patch("core.engine.ClientSecretCredential") as credential_cls:
            credential_cls.from_credentials.return_value = owned
            run_protection_check(check_config, request_, session=mock_session)

        credential_cls.from_credentials.assert_called_once_with(check_config.credentials)
        owned.__exit__.assert_called_once()

    def test_connection_pool_matches_concurrency(self, check_config, request_, mock_session, make_response):
        """max_concurrency 만큼 커넥션 풀 확보"""
        credential = MagicMock()
        credential.get_token.return_value = AccessToken("arm-token", datetime.now(timezone.utc) + timedelta(hours=1))
        mock_session.get.return_value = make_response(200, {"value": []})

        run_protection_check(check_config, request_, credential=credential, session=mock_session)

        adapter = mock_session.mount.call_args.args[1]
        assert adapter._pool_maxsize == check_config.max_concurrency

    def test_fetch_error_without_message(self, check_config, request_, mock_session, make_response):
        """code만 있는 403 본문 -> 코드가 한 번만 찍힌 조회 실패 줄"""
        credential = MagicMock()
        credential.get_token.return_value = AccessToken("arm-token", datetime.now(timezone.utc) + timedelta(hours=1))
        mock_session.get.return_value = make_response(403, {"error": {"code": "AuthorizationFailed"}}, "Forbidden")

        report = run_protection_check(check_config, request_, credential=credential, session=mock_session)

        assert report.critical_lines == ("AuthorizationFailed: Forbidden",)
