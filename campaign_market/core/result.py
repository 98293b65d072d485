"""
서비스 계층의 성공/실패 결과 타입.

서비스 함수는 도메인 실패를 예외로 던지지 않고 ``Ok`` 또는 ``Err`` 를 돌려준다.
HTTP 계층은 ``ErrorKind`` 를 상태 코드로 변환한다.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    NO_OP = "NO_OP"
    INTERNAL = "INTERNAL"

    @property
    def http_status(self) -> int:
        return _KIND_STATUS[self]


_KIND_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.CONFLICT: 409,
    ErrorKind.NO_OP: 409,
    ErrorKind.INTERNAL: 500,
}


class ErrorCode(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_VISIT_DATE = "INVALID_VISIT_DATE"
    NOT_FOUND = "NOT_FOUND"
    APPLICANTS_NOT_FOUND = "APPLICANTS_NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    OWNER_PROFILE_REQUIRED = "OWNER_PROFILE_REQUIRED"
    PROFILE_REQUIRED = "PROFILE_REQUIRED"
    LOCKED = "LOCKED"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    NOT_STARTED = "NOT_STARTED"
    CREATION_LIMIT_EXCEEDED = "CREATION_LIMIT_EXCEEDED"
    NOT_RECRUITING = "NOT_RECRUITING"
    DUPLICATE_APPLICATION = "DUPLICATE_APPLICATION"
    CAMPAIGN_NOT_CLOSED = "CAMPAIGN_NOT_CLOSED"
    ALREADY_PROCESSED = "ALREADY_PROCESSED"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    NO_OP = "NO_OP"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    @property
    def kind(self) -> ErrorKind:
        return _CODE_KIND[self]


_CODE_KIND: dict[ErrorCode, ErrorKind] = {
    ErrorCode.INVALID_INPUT: ErrorKind.VALIDATION,
    ErrorCode.INVALID_VISIT_DATE: ErrorKind.VALIDATION,
    ErrorCode.NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.APPLICANTS_NOT_FOUND: ErrorKind.NOT_FOUND,
    ErrorCode.FORBIDDEN: ErrorKind.FORBIDDEN,
    ErrorCode.OWNER_PROFILE_REQUIRED: ErrorKind.FORBIDDEN,
    ErrorCode.PROFILE_REQUIRED: ErrorKind.FORBIDDEN,
    ErrorCode.LOCKED: ErrorKind.CONFLICT,
    ErrorCode.INVALID_TRANSITION: ErrorKind.CONFLICT,
    ErrorCode.NOT_STARTED: ErrorKind.CONFLICT,
    ErrorCode.CREATION_LIMIT_EXCEEDED: ErrorKind.CONFLICT,
    ErrorCode.NOT_RECRUITING: ErrorKind.CONFLICT,
    ErrorCode.DUPLICATE_APPLICATION: ErrorKind.CONFLICT,
    ErrorCode.CAMPAIGN_NOT_CLOSED: ErrorKind.CONFLICT,
    ErrorCode.ALREADY_PROCESSED: ErrorKind.CONFLICT,
    ErrorCode.CAPACITY_EXCEEDED: ErrorKind.CONFLICT,
    ErrorCode.NO_OP: ErrorKind.NO_OP,
    ErrorCode.INTERNAL_ERROR: ErrorKind.INTERNAL,
}


@dataclass(frozen=True)
class ServiceError:
    code: ErrorCode
    message: str
    details: dict[str, Any] | None = field(default=None)

    @property
    def kind(self) -> ErrorKind:
        return self.code.kind


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: ServiceError


Result = Union[Ok[T], Err]


def fail(code: ErrorCode, message: str, details: dict[str, Any] | None = None) -> Err:
    return Err(ServiceError(code=code, message=message, details=details))


INTERNAL_MESSAGE = "서버 내부 오류가 발생했습니다."


def internal_error() -> Err:
    return fail(ErrorCode.INTERNAL_ERROR, INTERNAL_MESSAGE)
