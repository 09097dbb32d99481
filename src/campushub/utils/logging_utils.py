"""
# Logging Utilities

Helpers shared by the application entry point and middleware stack:

- **`RequestLoggingMiddleware`**: logs every HTTP request with method, path, client IP,
  user agent, status code and duration.
- **`log_application_lifecycle`**: structured startup/shutdown events.
- **`log_error_with_context`**: error logging with a context dict and traceback.
- **`log_performance`**: decorator that times an async operation.
"""

import functools
import time
from typing import Any, Callable, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from campushub.managers.logging_manager import get_logger

logger = get_logger(prefix="[Lifecycle]")
request_logger = get_logger(prefix="[Request]")
perf_logger = get_logger(prefix="[Performance]")


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log each request once it has been handled.

    Requests that raise are logged at error level with the elapsed time before the
    exception continues to the registered exception handlers.
    """

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        method = request.method
        path = request.url.path
        ip = _client_ip(request)
        user_agent = request.headers.get("user-agent", "-")

        try:
            response = await call_next(request)
        except Exception as e:
            duration = (time.time() - start_time) * 1000
            request_logger.error(
                "%s %s from %s failed after %.1fms: %s", method, path, ip, duration, e
            )
            raise

        duration = (time.time() - start_time) * 1000
        log = request_logger.warning if response.status_code >= 400 else request_logger.info
        log(
            "%s %s %d %.1fms ip=%s ua=%s",
            method,
            path,
            response.status_code,
            duration,
            ip,
            user_agent,
        )
        return response


def log_application_lifecycle(event: str, details: Optional[Dict[str, Any]] = None) -> None:
    """Log an application lifecycle event (startup phases, shutdown, failures)."""
    if details:
        logger.info("%s: %s", event, details)
    else:
        logger.info("%s", event)


def log_error_with_context(error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
    """Log an exception together with the request or operation context that produced it."""
    logger.error(
        "%s: %s | context=%s",
        type(error).__name__,
        error,
        context or {},
        exc_info=(type(error), error, error.__traceback__),
    )


def log_performance(operation: str) -> Callable:
    """
    Decorator timing an async callable and logging its duration.

    Example:
        ```python
        @log_performance("send_sms")
        async def send(self, to, message):
            ...
        ```
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                return await func(*args, **kwargs)
            finally:
                perf_logger.debug("%s completed in %.3fs", operation, time.time() - start_time)

        return wrapper

    return decorator
