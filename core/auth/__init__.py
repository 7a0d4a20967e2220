# core/auth/__init__.py
"""
Azure 인증 모듈 (core/auth)

서비스 주체(client credentials)로 ARM Bearer 토큰을 발급합니다.
엔진은 완성된 토큰 문자열만 받습니다.

사용 예시:
    from core.auth import ARM_SCOPE, ClientSecretCredential

    credential = ClientSecretCredential.from_credentials(config.credentials)
    token = credential.get_token(ARM_SCOPE)
"""

from .token import ARM_SCOPE, AccessToken, ClientSecretCredential

__all__: list[str] = ["ARM_SCOPE", "AccessToken", "ClientSecretCredential"]
