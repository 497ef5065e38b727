"""Custom middleware components."""

from app.core.middleware.logging import LoggingMiddleware, get_client_ip
from app.core.middleware.request_id import RequestIDMiddleware

__all__ = [
    "LoggingMiddleware",
    "RequestIDMiddleware",
    "get_client_ip",
]
