"""
오류 응답 공통 포맷: {"code": ..., "message": ..., "details": ...}
"""
from __future__ import annotations

import logging
from typing import Any, TypeVar

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from campaign_market.core.result import INTERNAL_MESSAGE, Err, ErrorCode, Ok, Result, ServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

HTTP_STATUS_CODES: dict[int, str] = {
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


class ApiError(Exception):
    def __init__(self, error: ServiceError) -> None:
        super().__init__(error.message)
        self.error = error

    @property
    def status_code(self) -> int:
        return self.error.kind.http_status


def unwrap(result: Result[T]) -> T:
    """서비스 결과를 응답 값으로 풀고, 실패면 ApiError 로 올린다."""
    if isinstance(result, Ok):
        return result.value
    if isinstance(result, Err):
        raise ApiError(result.error)
    raise TypeError(f"Unexpected service result: {result!r}")


def error_body(code: str, message: str, details: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        body["details"] = jsonable_encoder(details)
    return body


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    error = exc.error
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(error.code.value, error.message, error.details),
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            ErrorCode.INVALID_INPUT.value,
            "입력값이 올바르지 않습니다.",
            {"errors": exc.errors()},
        ),
    )


async def _http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    code = HTTP_STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("처리되지 않은 오류 (%s %s)", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(ErrorCode.INTERNAL_ERROR.value, INTERNAL_MESSAGE),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(HTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
