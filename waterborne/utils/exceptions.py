import logging
from typing import Any

from fastapi import Request, HTTPException, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from waterborne.middleware.tracing import TRACE_ID_CTX_VAR

logger = logging.getLogger("waterborne")


def status_to_code(status_code: int) -> str:
    mapping = {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        413: "PAYLOAD_TOO_LARGE",
        415: "UNSUPPORTED_MEDIA_TYPE",
        422: "UNPROCESSABLE_ENTITY",
        429: "TOO_MANY_REQUESTS",
        500: "INTERNAL_SERVER_ERROR",
        503: "SERVICE_UNAVAILABLE",
    }
    return mapping.get(status_code, f"HTTP_{status_code}")


def _trace_id(request: Request) -> str:
    return TRACE_ID_CTX_VAR.get() or getattr(request.state, "trace_id", "")


async def handle_http_exception(request: Request, exc: HTTPException):
    detail: Any = exc.detail
    message = detail if isinstance(detail, str) else "HTTP error"
    body = {"code": status_to_code(exc.status_code), "message": message, "trace_id": _trace_id(request)}
    if detail is not None:
        body["details"] = detail
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def handle_validation_error(request: Request, exc: RequestValidationError):
    body = {
        "code": status_to_code(422),
        "message": "Request validation failed",
        "details": jsonable_encoder(exc.errors()),
        "trace_id": _trace_id(request),
    }
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=body)


async def handle_rate_limit(request: Request, exc: RateLimitExceeded):
    logger.info({
        "function": "rate_limit",
        "path": str(request.url.path),
        "limit": str(getattr(exc, "detail", "")),
    })
    body = {
        "code": status_to_code(429),
        "message": "Too many requests. Please wait a bit and try again.",
        "details": str(getattr(exc, "detail", "")),
        "trace_id": _trace_id(request),
    }
    return JSONResponse(status_code=429, content=body, headers={"Retry-After": "60"})


async def handle_unhandled_exception(request: Request, exc: Exception):
    logger.exception("unhandled error on %s", request.url.path)
    body = {
        "code": "INTERNAL_SERVER_ERROR",
        "message": "An unexpected error occurred",
        "details": str(exc),
        "trace_id": _trace_id(request),
    }
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)
