r"""Structured logging utilities for retry engine log records.

The executors bind the key of the operation they run to a context
variable for the duration of the call. :class:`StructuredFormatter`
renders every record as a JSON object and adds that key, so log lines
emitted by the operation itself can be correlated with the retry loop.

Structured logging is opt-in:

```python
import logging

from smartretry.utils.structured_logging import StructuredFormatter

handler = logging.StreamHandler()
handler.setFormatter(StructuredFormatter())
logger = logging.getLogger("smartretry")
logger.addHandler(handler)
logger.setLevel(logging.DEBUG)
```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "bind_operation_key",
    "get_operation_key",
    "log_structured",
]

import contextvars
import json
import logging
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

_operation_key: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation_key", default=None
)

# Attributes every LogRecord carries; anything else came from ``extra``
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


def get_operation_key() -> str | None:
    """Get the operation key bound to the current context.

    Returns:
        The operation key, or None outside of an executor call.

    Example:
        ```pycon
        >>> from smartretry.utils.structured_logging import (
        ...     bind_operation_key,
        ...     get_operation_key,
        ... )
        >>> get_operation_key()
        >>> with bind_operation_key("db_write:users"):
        ...     get_operation_key()
        ...
        'db_write:users'

        ```
    """
    return _operation_key.get()


@contextmanager
def bind_operation_key(operation_key: str) -> Iterator[None]:
    """Bind an operation key to the current context.

    The previous value is restored on exit. The binding is local to the
    current thread or asyncio task.

    Args:
        operation_key: The operation key to bind.
    """
    token = _operation_key.set(operation_key)
    try:
        yield
    finally:
        _operation_key.reset(token)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for retry engine log records.

    Output fields: ``timestamp`` (ISO 8601, UTC), ``level``, ``logger``,
    ``message``, ``function``, ``line``, ``thread``, the bound
    ``operation_key`` if any, ``exception`` if any, and every field passed
    through ``extra``.

    Example:
        ```pycon
        >>> import json
        >>> import logging
        >>> from smartretry.utils.structured_logging import StructuredFormatter
        >>> record = logging.LogRecord("smartretry", logging.INFO, __file__, 1, "hello", (), None)
        >>> json.loads(StructuredFormatter().format(record))["message"]
        'hello'

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
            "thread": record.threadName,
        }

        operation_key = get_operation_key()
        if operation_key is not None:
            log_data["operation_key"] = operation_key

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: ARG002
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def log_structured(
    logger: logging.Logger,
    level: int,
    message: str,
    **fields: Any,
) -> None:
    """Log a message with structured fields.

    Args:
        logger: Logger to use.
        level: Log level (e.g., logging.INFO).
        message: Log message.
        **fields: Extra fields rendered by :class:`StructuredFormatter`.
    """
    logger.log(level, message, extra=fields)
