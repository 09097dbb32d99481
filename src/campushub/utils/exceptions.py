"""
# Application Errors & Exception Handlers

Two classes of error reach the API boundary:

- **Operational errors** (`AppError`): expected failures such as not-found, validation
  failure or conflict. They carry an HTTP status code and a message that is safe to show
  to the client.
- **Programming / unknown errors**: anything else. These are logged server-side with a
  traceback and surfaced to clients as a generic 500.

`register_exception_handlers()` installs FastAPI handlers that render both classes into the
standard error envelope:

```json
{"success": false, "status": "fail", "message": "Organization not found"}
```

`status` is `"fail"` for 4xx responses and `"error"` for everything else. In development
(`DEBUG=True`) the envelope also carries the exception type and traceback.
"""

import traceback
from typing import Any, Dict

from bson.errors import InvalidId
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import DuplicateKeyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from campushub.config import settings
from campushub.managers.logging_manager import get_logger
from campushub.utils.logging_utils import log_error_with_context

logger = get_logger(prefix="[ErrorHandler]")

GENERIC_ERROR_MESSAGE = "Something went wrong!"


class AppError(Exception):
    """
    Operational error raised by services and dependencies.

    Args:
        message: Client-safe error message.
        status_code: HTTP status code for the response.
    """

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.status = "fail" if 400 <= status_code < 500 else "error"
        self.is_operational = True


def _status_label(status_code: int) -> str:
    return "fail" if 400 <= status_code < 500 else "error"


def _error_body(status_code: int, message: str, exc: Exception = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "status": _status_label(status_code), "message": message}
    if exc is not None and not settings.is_production:
        body["error"] = type(exc).__name__
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return body


def format_validation_errors(errors) -> str:
    """Join every field-level validation message into one string."""
    messages = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        msg = error.get("msg", "Invalid value")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        messages.append(f'"{".".join(loc)}" {msg}' if loc else msg)
    return ", ".join(messages)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        log_error_with_context(exc, {"path": request.url.path, "method": request.method})
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.status_code, exc.message))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.status_code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = format_validation_errors(exc.errors())
    logger.debug("Validation failed on %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_body(400, message))


async def invalid_id_handler(request: Request, exc: InvalidId) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=_error_body(404, "Resource not found"))


async def duplicate_key_handler(request: Request, exc: DuplicateKeyError) -> JSONResponse:
    logger.warning("Duplicate key on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content=_error_body(400, "Duplicate field value entered")
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log_error_with_context(exc, {"path": request.url.path, "method": request.method})
    message = GENERIC_ERROR_MESSAGE if settings.is_production else str(exc) or GENERIC_ERROR_MESSAGE
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=_error_body(500, message, exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Install every error handler on the application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(InvalidId, invalid_id_handler)
    app.add_exception_handler(DuplicateKeyError, duplicate_key_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
