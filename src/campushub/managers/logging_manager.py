"""
# Logging Manager

Central factory for application loggers. Every module obtains its logger through `get_logger()`
so that formatting and levels are configured in exactly one place.

Loggers can carry a **prefix** (e.g. `[AuthService]`) that is prepended to every message,
which makes it easy to grep a single component out of the combined application log.

## Usage Example

```python
from campushub.managers.logging_manager import get_logger

logger = get_logger(prefix="[OfficerService]")
logger.info("Created officer %s for org %s", officer_id, org_id)
```
"""

import logging
import sys
from typing import Optional

from campushub.config import settings

DEFAULT_LOGGER_NAME = "campushub"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_configured = False


class PrefixAdapter(logging.LoggerAdapter):
    """Logger adapter that prepends a fixed component prefix to each message."""

    def process(self, msg, kwargs):
        return f"{self.extra['prefix']} {msg}", kwargs


def _configure_root() -> None:
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger(DEFAULT_LOGGER_NAME)
    root.addHandler(handler)
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    root.propagate = False
    _configured = True


def get_logger(name: str = DEFAULT_LOGGER_NAME, prefix: Optional[str] = None):
    """
    Return a configured logger, optionally wrapped with a message prefix.

    Args:
        name: Logger name. Child names (`campushub.db`) inherit the root handler.
        prefix: Optional tag such as `[AuthService]` prepended to every message.

    Returns:
        A `logging.Logger`, or a `PrefixAdapter` around one when `prefix` is given.
    """
    _configure_root()
    if name != DEFAULT_LOGGER_NAME and not name.startswith(f"{DEFAULT_LOGGER_NAME}."):
        name = f"{DEFAULT_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    if prefix:
        return PrefixAdapter(logger, {"prefix": prefix})
    return logger
