"""X-Request-ID propagation middleware."""

from __future__ import annotations

import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

_HEADER = "X-Request-ID"
_MAX_LENGTH = 128


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Expose ``request.state.request_id`` and echo it in the response.

    A client-supplied ``X-Request-ID`` is kept; otherwise a new UUID is
    generated.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = _sanitise(request.headers.get(_HEADER, "")) or uuid.uuid4().hex
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[_HEADER] = request_id
        return response


def _sanitise(value: str) -> str:
    """Drop oversized or non-printable ids."""
    value = value.strip()
    if len(value) > _MAX_LENGTH or not value.isprintable():
        return ""
    return value
