"""Middleware for HTTP error logging."""

import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from docvault.core.logging import collection_context

logger = logging.getLogger(__name__)

# Path prefixes whose next segment names a container or collection
_SCOPED_PREFIXES = ("/api/items/", "/api/v1/collections/")


def _scope_from_path(path: str) -> str | None:
    for prefix in _SCOPED_PREFIXES:
        if path.startswith(prefix):
            segment = path[len(prefix):].split("/", 1)[0]
            return segment or None
    return None


class HTTPErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to ensure all HTTP errors are logged.

    - 4xx responses: logged at WARN level
    - 5xx responses: logged at ERROR level
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log errors.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            HTTP response
        """
        start_time = time.time()

        scope_name = _scope_from_path(request.url.path)
        token = collection_context.set(scope_name)
        try:
            response = await call_next(request)
        finally:
            collection_context.reset(token)

        duration_ms = (time.time() - start_time) * 1000
        details = {
            "http_status": response.status_code,
            "method": request.method,
            "path": request.url.path,
            "scope_name": scope_name,
            "duration_ms": duration_ms,
        }

        if 400 <= response.status_code < 500:
            logger.warning("Client error response", extra=details)
        elif response.status_code >= 500:
            logger.error("Server error response", extra=details)

        return response
