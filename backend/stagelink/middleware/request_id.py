"""
StageLink Backend — Request ID Middleware
===========================================

What:  Assigns a correlation id to each request and echoes it back.
Why:   Every log line and every error body carries the id, so a client
       report ("request 3f9a1c20 failed") maps straight to server logs.
How:   Client-supplied X-Request-ID is reused when it looks sane, otherwise
       a short random id is generated. Stored in a ContextVar for loggers
       and exception handlers, and in request.state for route handlers.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Accept client ids that are short and log-safe (no spaces, no control chars)
_CLIENT_ID = re.compile(r"^[A-Za-z0-9._\-]{1,64}$")


def _new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        supplied = request.headers.get("X-Request-ID", "")
        rid = supplied if _CLIENT_ID.match(supplied) else _new_request_id()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        return response
