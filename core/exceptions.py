"""
core/exceptions.py - 통합 예외 계층 구조

백업 점검 전체에서 사용되는 예외 클래스들을 정의합니다.
일관된 예외 처리와 리포트용 에러 문자열(code: message)을 제공합니다.

예외 계층 구조:
    BackupCheckError (베이스)
    ├── ConfigError (환경 설정)
    ├── AuthError (토큰 발급)
    ├── ProviderError (ARM 에러 응답 / HTTP 실패)
    │   └── ResponseSchemaError (응답 스키마 불일치)
    └── FetchError (인벤토리 조회 실패)

Usage:
    from core.exceptions import FetchError, ProviderError

    try:
        items = inventory.fetch_all(subscription_id)
    except FetchError as e:
        report = aggregate_fetch_failure(e)
"""

from __future__ import annotations

from typing import Any

import requests

# =============================================================================
# 베이스 예외
# =============================================================================


class BackupCheckError(Exception):
    """백업 점검 기본 예외 클래스

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """예외 정보를 딕셔너리로 반환"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# 설정 관련 예외
# =============================================================================


class ConfigError(BackupCheckError):
    """설정 관련 예외"""

    def __init__(
        self,
        key: str,
        message: str,
        cause: Exception | None = None,
    ):
        full_message = f"설정 오류 [{key}]: {message}"
        super().__init__(full_message, cause)
        self.config_key = key
        self.details["config_key"] = key


# =============================================================================
# 인증 / Provider 관련 예외
# =============================================================================


class AuthError(BackupCheckError):
    """토큰 발급 실패

    Attributes:
        code: Identity Provider 에러 코드 (예: "invalid_client")
    """

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause)
        self.code = code
        self.details["code"] = code

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class ProviderError(BackupCheckError):
    """ARM API 호출 실패

    ARM 에러 본문 `{"error": {"code", "message"}}` 또는
    HTTP 상태 코드로부터 생성됩니다.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause)
        self.code = code
        self.status_code = status_code
        self.details.update({"code": code, "status_code": status_code})

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class ResponseSchemaError(ProviderError):
    """응답 본문에 필요한 필드가 없거나 형식이 다른 경우"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__("InvalidResponse", message, status_code=status_code)


class FetchError(BackupCheckError):
    """인벤토리 전체 조회 실패

    어느 한 페이지라도 실패하면 부분 결과 없이 이 예외 하나로 중단됩니다.
    """

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause)
        self.code = code
        self.details["code"] = code

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    @classmethod
    def from_exception(cls, error: Exception) -> FetchError:
        """임의의 예외로부터 생성"""
        return cls(get_error_code(error), get_error_message(error), cause=error)


# =============================================================================
# 예외 유틸리티 함수
# =============================================================================


def get_error_code(error: Exception) -> str:
    """예외 객체에서 에러 코드 문자열 추출

    Provider/Auth/Fetch 에러는 code를, requests 타임아웃은 "Timeout"을,
    그 외에는 예외 클래스명을 반환합니다.
    """
    code = getattr(error, "code", None)
    if isinstance(code, str) and code:
        return code
    if isinstance(error, requests.Timeout):
        return "Timeout"
    return error.__class__.__name__


def get_error_message(error: Exception) -> str:
    """예외 객체에서 사람이 읽을 메시지 추출

    message 속성이 문자열이면 비어 있어도 그대로 사용합니다.
    BackupCheckError의 str()은 "code: message" 형식이라 코드가 두 번 찍힙니다.
    """
    message = getattr(error, "message", None)
    if isinstance(message, str):
        return message
    return str(error) or error.__class__.__name__


def format_error_line(error: Exception) -> str:
    """리포트에 들어갈 "<code>: <message>" 문자열"""
    return f"{get_error_code(error)}: {get_error_message(error)}"
