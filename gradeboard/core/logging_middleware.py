import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class LoggingMiddleware(BaseHTTPMiddleware):
    """Access log line per request; client errors at WARNING, server errors at ERROR."""

    async def dispatch(self, request: Request, call_next):
        start = time.monotonic()
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"

        response = await call_next(request)

        duration = time.monotonic() - start
        logger.log(
            _level_for(response.status_code),
            "%s %s -> %s (%.3fs)",
            request.method,
            path,
            response.status_code,
            duration,
        )

        return response
