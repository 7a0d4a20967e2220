"""
tests/core/azure/test_azure_client.py - ArmClient 테스트
"""

import pytest
import requests

from core.azure.client import ArmClient
from core.exceptions import ProviderError, ResponseSchemaError, format_error_line


class TestArmClient:
    """ArmClient 테스트"""

    def test_bearer_header(self, mock_session):
        ArmClient("tok-123", session=mock_session)

        assert mock_session.headers["Authorization"] == "Bearer tok-123"

    def test_get_relative_path(self, mock_session, make_response):
        mock_session.get.return_value = make_response(200, {"value": []})
        client = ArmClient("tok", session=mock_session, timeout=7)

        payload = client.get_json("/subscriptions/s/vms", params={"api-version": "v"})

        assert payload == {"value": []}
        mock_session.get.assert_called_once_with(
            "https://management.azure.com/subscriptions/s/vms", params={"api-version": "v"}, timeout=7
        )

    def test_get_absolute_next_link(self, mock_session, make_response):
        mock_session.get.return_value = make_response(200, {"value": []})
        client = ArmClient("tok", session=mock_session)

        client.get_json("https://management.azure.com/next?$skiptoken=abc")

        assert mock_session.get.call_args.args[0] == "https://management.azure.com/next?$skiptoken=abc"

    def test_post_with_timeout_override(self, mock_session, make_response):
        mock_session.post.return_value = make_response(200, {"protectionStatus": "Protected"})
        client = ArmClient("tok", session=mock_session, timeout=30)

        client.post_json("/backupStatus", body={"resourceType": "VM"}, timeout=2.5)

        assert mock_session.post.call_args.kwargs["timeout"] == 2.5
        assert mock_session.post.call_args.kwargs["json"] == {"resourceType": "VM"}

    def test_error_body(self, mock_session, make_response):
        mock_session.get.return_value = make_response(
            403, {"error": {"code": "AuthorizationFailed", "message": "denied"}}
        )
        client = ArmClient("tok", session=mock_session)

        with pytest.raises(ProviderError) as exc_info:
            client.get_json("/x")

        assert exc_info.value.code == "AuthorizationFailed"
        assert exc_info.value.status_code == 403

    def test_non_json_success(self, mock_session, make_response):
        mock_session.get.return_value = make_response(200, None)
        client = ArmClient("tok", session=mock_session)

        with pytest.raises(ResponseSchemaError):
            client.get_json("/x")

    def test_transport_error_propagates(self, mock_session):
        mock_session.get.side_effect = requests.ConnectionError("refused")
        client = ArmClient("tok", session=mock_session)

        with pytest.raises(requests.ConnectionError):
            client.get_json("/x")

    def test_context_manager_closes_session(self, mock_session):
        with ArmClient("tok", session=mock_session):
            pass

        mock_session.close.assert_called_once()

    def test_error_body_without_message(self, mock_session, make_response):
        """code만 있는 에러 본문 -> "code: reason" 한 줄"""
        mock_session.get.return_value = make_response(403, {"error": {"code": "AuthorizationFailed"}}, "Forbidden")
        client = ArmClient("tok", session=mock_session)

        with pytest.raises(ProviderError) as exc_info:
            client.get_json("/x")

        assert format_error_line(exc_info.value) == "AuthorizationFailed: Forbidden"

    def test_pool_sized_for_workers(self, mock_session):
        """워커 수만큼 커넥션 풀 확보"""
        ArmClient("tok", session=mock_session, pool_size=40)

        adapter = mock_session.mount.call_args_list[-1].args[1]
        assert mock_session.mount.call_args_list[-1].args[0] == "https://"
        assert adapter._pool_maxsize == 40
