"""
Request context middleware for log correlation

Every request gets a correlation ID (echoed back in X-Request-ID) and the
caller's voter session id. Both are bound into the structlog contextvars,
so each log line emitted while the request is handled carries them.
"""

import uuid
import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from server.dependencies import SESSION_HEADER

UNKNOWN_SESSION = "anonymous"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind request_id and voter_session for the lifetime of a request"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        voter_session = request.headers.get(SESSION_HEADER, UNKNOWN_SESSION)[:64]

        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            voter_session=voter_session,
        )

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            structlog.contextvars.clear_contextvars()


def get_request_id(request: Request) -> str:
    """Get request ID from request state"""
    return getattr(request.state, "request_id", "unknown")
