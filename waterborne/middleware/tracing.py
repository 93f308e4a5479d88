import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Read by the JSON log formatter and the error envelope handlers.
TRACE_ID_CTX_VAR: ContextVar[str] = ContextVar("trace_id", default="")

TRACE_HEADER = "x-trace-id"


class TracingMiddleware(BaseHTTPMiddleware):
    """Tag each request with a trace id (the caller's x-trace-id, or a new uuid4)."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        incoming = (request.headers.get(TRACE_HEADER) or "").strip()[:64]
        trace_id = incoming or str(uuid.uuid4())
        token = TRACE_ID_CTX_VAR.set(trace_id)
        request.state.trace_id = trace_id
        try:
            response = await call_next(request)
        finally:
            TRACE_ID_CTX_VAR.reset(token)
        response.headers[TRACE_HEADER] = trace_id
        return response
