"""
tests/core/auth/test_auth_token.py - ClientSecretCredential 테스트
"""

from datetime import datetime, timedelta, timezone

import pytest
import requests

from core.auth.token import ARM_SCOPE, AccessToken, ClientSecretCredential
from core.config import Credentials
from core.exceptions import AuthError


@pytest.fixture
def credential(mock_session):
    return ClientSecretCredential("tenant-1", "client-1", "secret-1", session=mock_session)


class TestAccessToken:
    """AccessToken 테스트"""

    def test_not_expired(self):
        token = AccessToken("t", datetime.now(timezone.utc) + timedelta(hours=1))
        assert token.is_expired() is False

    def test_expired_within_buffer(self):
        token = AccessToken("t", datetime.now(timezone.utc) + timedelta(seconds=30))
        assert token.is_expired(buffer_seconds=60) is True

    def test_token_not_in_repr(self):
        token = AccessToken("very-secret-token", datetime.now(timezone.utc))
        assert "very-secret-token" not in repr(token)


class TestClientSecretCredential:
    """ClientSecretCredential 테스트"""

    def test_from_incomplete_credentials(self):
        with pytest.raises(AuthError) as exc_info:
            ClientSecretCredential.from_credentials(Credentials(tenant_id="t"))
        assert exc_info.value.code == "MissingCredentials"

    def test_get_token(self, credential, mock_session, make_response):
        mock_session.post.return_value = make_response(200, {"access_token": "abc", "expires_in": 3599})

        token = credential.get_token(ARM_SCOPE)

        assert token.token == "abc"
        assert token.is_expired() is False
        url = mock_session.post.call_args.args[0]
        data = mock_session.post.call_args.kwargs["data"]
        assert url == "https://login.microsoftonline.com/tenant-1/oauth2/v2.0/token"
        assert data["grant_type"] == "client_credentials"
        assert data["scope"] == ARM_SCOPE

    def test_token_cached(self, credential, mock_session, make_response):
        mock_session.post.return_value = make_response(200, {"access_token": "abc", "expires_in": 3600})

        credential.get_token()
        credential.get_token()

        assert mock_session.post.call_count == 1

    def test_expired_token_refreshed(self, credential, mock_session, make_response):
        mock_session.post.return_value = make_response(200, {"access_token": "abc", "expires_in": 10})

        credential.get_token()
        credential.get_token()

        assert mock_session.post.call_count == 2

    def test_rejected(self, credential, mock_session, make_response):
        mock_session.post.return_value = make_response(
            401, {"error": "invalid_client", "error_description": "AADSTS7000215: Invalid client secret"}
        )

        with pytest.raises(AuthError) as exc_info:
            credential.get_token()

        assert exc_info.value.code == "invalid_client"
        assert str(exc_info.value).startswith("invalid_client: AADSTS7000215")

    def test_missing_access_token(self, credential, mock_session, make_response):
        mock_session.post.return_value = make_response(200, {"token_type": "Bearer"})

        with pytest.raises(AuthError) as exc_info:
            credential.get_token()
        assert exc_info.value.code == "InvalidResponse"

    def test_transport_failure(self, credential, mock_session):
        mock_session.post.side_effect = requests.ConnectionError("dns failure")

        with pytest.raises(AuthError) as exc_info:
            credential.get_token()
        assert exc_info.value.code == "ConnectionError"

    def test_context_manager_closes_session(self, mock_session, make_response):
        mock_session.post.return_value = make_response(200, {"access_token": "abc"})

        with ClientSecretCredential("tenant-1", "client-1", "secret-1", session=mock_session) as credential:
            credential.get_token()

        mock_session.close.assert_called_once()

    def test_close_on_failure(self, mock_session):
        """발급 실패로 빠져나가도 세션은 닫힘"""
        mock_session.post.side_effect = requests.ConnectionError("dns failure")

        with pytest.raises(AuthError):
            with ClientSecretCredential("tenant-1", "client-1", "secret-1", session=mock_session) as credential:
                credential.get_token()

        mock_session.close.assert_called_once()
