r"""Instrumentation collaborators used to measure attempts.

The executors run every attempt through a monitor under the label
``retry_<operation key>``. A monitor must be transparent: it returns the
value of the wrapped function and lets its exceptions propagate
unchanged. Timing is the monitor's own business; the engine only ships a
pass-through monitor and a monitor that logs durations.
"""

from __future__ import annotations

__all__ = [
    "AsyncPerformanceMonitor",
    "LoggingMonitor",
    "NullMonitor",
    "PerformanceMonitor",
    "check_monitor",
]

import logging
import time
from typing import TYPE_CHECKING, Protocol, TypeVar

from smartretry.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class PerformanceMonitor(Protocol):
    """Measures synchronous attempts."""

    def measure(self, label: str, func: Callable[[], T]) -> T:
        """Run ``func`` and return its value, measuring it under ``label``."""


class AsyncPerformanceMonitor(Protocol):
    """Measures asynchronous attempts."""

    async def measure_async(self, label: str, func: Callable[[], Awaitable[T]]) -> T:
        """Await ``func()`` and return its value, measuring it under
        ``label``."""


class NullMonitor:
    """Monitor that only runs the wrapped function.

    Example:
        ```pycon
        >>> from smartretry.monitor import NullMonitor
        >>> NullMonitor().measure("retry_demo", lambda: 42)
        42

        ```
    """

    def measure(self, label: str, func: Callable[[], T]) -> T:  # noqa: ARG002
        return func()

    async def measure_async(self, label: str, func: Callable[[], Awaitable[T]]) -> T:  # noqa: ARG002
        return await func()


class LoggingMonitor:
    """Monitor that logs the duration of every attempt.

    Durations are logged at DEBUG level with the structured fields
    ``label``, ``duration_ms`` and ``succeeded``.

    Args:
        level: The log level of the duration records.
    """

    def __init__(self, level: int = logging.DEBUG) -> None:
        self.level = level

    def _log(self, label: str, start: float, succeeded: bool) -> None:
        duration_ms = (time.perf_counter() - start) * 1000.0
        log_structured(
            logger,
            self.level,
            f"{label} took {duration_ms:.1f}ms",
            label=label,
            duration_ms=duration_ms,
            succeeded=succeeded,
        )

    def measure(self, label: str, func: Callable[[], T]) -> T:
        start = time.perf_counter()
        try:
            result = func()
        except Exception:
            self._log(label, start, succeeded=False)
            raise
        self._log(label, start, succeeded=True)
        return result

    async def measure_async(self, label: str, func: Callable[[], Awaitable[T]]) -> T:
        start = time.perf_counter()
        try:
            result = await func()
        except Exception:
            self._log(label, start, succeeded=False)
            raise
        self._log(label, start, succeeded=True)
        return result


def check_monitor(monitor: object, method: str) -> None:
    """Check that a monitor provides a measuring method.

    Args:
        monitor: The monitor to check.
        method: The required method name, ``"measure"`` or
            ``"measure_async"``.

    Raises:
        TypeError: If the monitor does not provide a callable ``method``.

    Example:
        ```pycon
        >>> from smartretry.monitor import NullMonitor, check_monitor
        >>> check_monitor(NullMonitor(), "measure_async")
        >>> check_monitor(object(), "measure")
        Traceback (most recent call last):
            ...
        TypeError: monitor must provide a measure() method, got object

        ```
    """
    if not callable(getattr(monitor, method, None)):
        msg = f"monitor must provide a {method}() method, got {type(monitor).__name__}"
        raise TypeError(msg)
