"""Request correlation middleware.

Every request carries an id that is echoed in the response, stored on
``request.state`` for error bodies, and bound to the log context. Ids
forwarded by the gateway are reused when they look like ids; anything else
is replaced so arbitrary header text never reaches logs or responses.
"""

from __future__ import annotations

import re
import uuid
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from app.observability.logging import bind_context, clear_context

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response


REQUEST_ID_HEADER = "X-Request-ID"

_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def resolve_request_id(incoming: str | None) -> str:
    """Reuse a well-formed incoming id, otherwise mint a new one."""
    if incoming is not None:
        candidate = incoming.strip()
        if _VALID_REQUEST_ID.match(candidate):
            return candidate
    return uuid.uuid4().hex


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assign a correlation id to each request and its log lines."""

    def __init__(self, app: ASGIApp, header_name: str = REQUEST_ID_HEADER) -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        # Context is per task; drop anything left by a previous request.
        clear_context()

        request_id = resolve_request_id(request.headers.get(self.header_name))
        request.state.request_id = request_id
        bind_context(request_id=request_id)

        response = await call_next(request)
        response.headers[self.header_name] = request_id
        return response
