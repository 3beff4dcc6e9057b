"""HTTP error responses for the chat REST routes.

Every failure renders the same body shape:

    {"success": false, "error": {"code": "SESSION_NOT_FOUND", "message": "..."}}
"""

from __future__ import annotations

import math
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse

from ..errors import ChatError, ErrorCode, RateLimitError
from ..telemetry.instruments import get_metrics

logger = logging.getLogger(__name__)

_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.INVALID_MESSAGE: 400,
    ErrorCode.UNKNOWN_MESSAGE_TYPE: 400,
    ErrorCode.SESSION_CLOSED: 400,
    ErrorCode.NOT_IN_SESSION: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.SESSION_NOT_FOUND: 404,
    ErrorCode.RATE_LIMITED: 429,
    ErrorCode.INTERNAL_ERROR: 500,
}


def error_body(code: str, message: str) -> dict:
    return {"success": False, "error": {"code": str(code), "message": message}}


def status_for(code: ErrorCode) -> int:
    return _STATUS_BY_CODE.get(code, 500)


async def _chat_error_handler(request: Request, exc: Exception) -> ORJSONResponse:
    assert isinstance(exc, ChatError)
    get_metrics().errors_total.add(1, {"code": str(exc.code)})
    headers: dict[str, str] = {}
    if isinstance(exc, RateLimitError):
        headers["Retry-After"] = str(max(1, math.ceil(exc.retry_in)))
    status = status_for(exc.code)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return ORJSONResponse(error_body(exc.code, exc.message), status_code=status, headers=headers)


async def _validation_error_handler(request: Request, exc: Exception) -> ORJSONResponse:
    assert isinstance(exc, RequestValidationError)
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    return ORJSONResponse(error_body(ErrorCode.VALIDATION_ERROR, message), status_code=400)


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ChatError, _chat_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)


__all__ = ["error_body", "install_exception_handlers", "status_for"]
