import logging
from typing import Any

from fastapi import Request, HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from dental_intake.middleware.tracing import TRACE_ID_CTX_VAR

logger = logging.getLogger("dental_intake")

DEFAULT_RETRY_AFTER_S = 60


def status_to_code(status_code: int) -> str:
    mapping = {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        409: "CONFLICT",
        413: "PAYLOAD_TOO_LARGE",
        415: "UNSUPPORTED_MEDIA_TYPE",
        422: "UNPROCESSABLE_ENTITY",
        429: "TOO_MANY_REQUESTS",
        500: "INTERNAL_SERVER_ERROR",
    }
    return mapping.get(status_code, f"HTTP_{status_code}")


def current_trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", None) or TRACE_ID_CTX_VAR.get()


def error_body(request: Request, status_code: int, message: str, details: Any = None) -> dict:
    body = {"code": status_to_code(status_code), "message": message, "trace_id": current_trace_id(request)}
    if details is not None:
        body["details"] = details
    return body


async def handle_http_exception(request: Request, exc: HTTPException):
    detail: Any = exc.detail
    message = detail if isinstance(detail, str) else "HTTP error"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, exc.status_code, message, detail),
        headers=getattr(exc, "headers", None),
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body(request, 422, "Request validation failed", jsonable_encoder(exc.errors())),
    )


def retry_after_seconds(exc: RateLimitExceeded) -> int:
    """Length of the exceeded limit's window, e.g. 60 for "10/minute"."""
    item = getattr(getattr(exc, "limit", None), "limit", None)
    if item is None:
        return DEFAULT_RETRY_AFTER_S
    return max(1, int(item.get_expiry()))


async def handle_rate_limit(request: Request, exc: RateLimitExceeded):
    retry_after = retry_after_seconds(exc)
    logger.info({
        "function": "rate_limit",
        "path": str(request.url.path),
        "client": request.client.host if request.client else "unknown",
    })
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        headers={"Retry-After": str(retry_after)},
        content=error_body(request, 429, "Too many requests. Please wait a bit and try again."),
    )


async def handle_unhandled_exception(request: Request, exc: Exception):
    logger.error({"function": "unhandled_exception", "path": str(request.url.path), "error": str(exc)}, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(request, 500, "An unexpected error occurred", str(exc)),
    )
