r"""Asynchronous retry executor.

This module provides the AsyncRetryExecutor class that runs coroutine
operations with automatic retry logic and circuit breaker integration.
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor"]

import asyncio
import functools
import logging
import time
from typing import TYPE_CHECKING, TypeVar

from smartretry.exceptions import AttemptTimeoutError
from smartretry.monitor import NullMonitor, check_monitor
from smartretry.outcome import Failure, Success
from smartretry.retry.decider import RetryDecider
from smartretry.retry.executor_core import (
    check_admission,
    monitor_label,
    record_failure,
    record_success,
)
from smartretry.retry.manager import CallbackManager
from smartretry.utils.sleep import calculate_sleep_time
from smartretry.utils.structured_logging import bind_operation_key
from smartretry.utils.validation import validate_timeout

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from smartretry.callbacks import CallbackConfig
    from smartretry.circuit_breaker import CircuitBreakerRegistry
    from smartretry.monitor import AsyncPerformanceMonitor
    from smartretry.outcome import Outcome
    from smartretry.policy import RetryPolicy
    from smartretry.stats import OperationStatsRegistry

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class AsyncRetryExecutor:
    """Executes coroutine operations with automatic retry logic.

    Same protocol as :class:`~smartretry.retry.RetryExecutor`, with
    ``asyncio.sleep()`` for backoff delays so other tasks run during the
    waits. No lock is held across an attempt or a sleep.

    Cancelling the calling task aborts the loop: the ``CancelledError``
    propagates and nothing is recorded as a failure.

    Args:
        circuit_breakers: The breaker registry.
        stats: The stats registry.
        monitor: Instrumentation collaborator. Defaults to NullMonitor.
        callbacks: Optional lifecycle callbacks.

    Raises:
        TypeError: If the monitor has no ``measure_async`` method.

    Example:
        ```pycon
        >>> import asyncio
        >>> from smartretry.circuit_breaker import CircuitBreakerRegistry
        >>> from smartretry.policy import RetryPolicy
        >>> from smartretry.retry import AsyncRetryExecutor
        >>> from smartretry.stats import OperationStatsRegistry
        >>> async def fetch(attempt):
        ...     return {"attempt": attempt}
        ...
        >>> breakers = CircuitBreakerRegistry()
        >>> executor = AsyncRetryExecutor(breakers, OperationStatsRegistry(breakers))
        >>> asyncio.run(executor.execute("fetch", RetryPolicy(), fetch))
        Success(value={'attempt': 0}, attempts_used=1)

        ```
    """

    def __init__(
        self,
        circuit_breakers: CircuitBreakerRegistry,
        stats: OperationStatsRegistry,
        monitor: AsyncPerformanceMonitor | None = None,
        callbacks: CallbackConfig | None = None,
    ) -> None:
        self.circuit_breakers = circuit_breakers
        self.stats = stats
        self.monitor: AsyncPerformanceMonitor = monitor if monitor is not None else NullMonitor()
        check_monitor(self.monitor, "measure_async")
        self.callbacks: CallbackManager = CallbackManager(callbacks)

    async def execute(
        self,
        key: str,
        policy: RetryPolicy,
        operation: Callable[[int], Awaitable[T]],
    ) -> Outcome[T]:
        """Run a coroutine operation with automatic retry logic.

        Args:
            key: The operation key.
            policy: The retry policy.
            operation: Coroutine function called with the attempt index.

        Returns:
            The outcome of the call.

        Raises:
            asyncio.CancelledError: If the calling task is cancelled.
        """
        refused = check_admission(key, policy, self.circuit_breakers)
        if refused is not None:
            return refused

        self.stats.ensure(key)
        decider = RetryDecider(policy)
        label = monitor_label(key)
        measure_async = self.monitor.measure_async
        start_time = time.time()
        last_error: Exception | None = None

        with bind_operation_key(key):
            for attempt in range(policy.max_attempts):
                self.callbacks.on_attempt(key, attempt, policy.max_attempts)
                try:
                    value = await measure_async(label, functools.partial(operation, attempt))
                except Exception as exc:
                    last_error = exc
                    self.stats.record_attempt_failure(key)
                    logger.debug(
                        f"Operation '{key}' failed on attempt {attempt + 1}/{policy.max_attempts}: "
                        f"{type(exc).__name__}: {exc}"
                    )

                    should_retry, reason = decider.should_retry(exc, attempt)
                    if not should_retry:
                        logger.debug(f"Operation '{key}' will not be retried ({reason})")
                        record_failure(key, self.circuit_breakers, self.stats)
                        self.callbacks.on_failure(
                            key, attempt, policy.max_attempts, exc, False, start_time
                        )
                        return Failure(last_error=exc, attempts_used=attempt + 1)

                    if attempt < policy.max_retries:
                        sleep_time = calculate_sleep_time(attempt, policy)
                        logger.debug(f"Retrying operation '{key}' in {sleep_time:.3f}s ({reason})")
                        self.callbacks.on_retry(
                            key, attempt, policy.max_attempts, sleep_time, exc
                        )
                        try:
                            await asyncio.sleep(sleep_time)
                        except asyncio.CancelledError:
                            logger.debug(f"Retry cancelled for operation '{key}'")
                            raise
                else:
                    record_success(key, self.circuit_breakers, self.stats)
                    logger.debug(f"Operation '{key}' succeeded on attempt {attempt + 1}")
                    self.callbacks.on_success(
                        key, attempt, policy.max_attempts, value, start_time
                    )
                    return Success(value=value, attempts_used=attempt + 1)

        # All retries exhausted
        logger.debug(f"Operation '{key}' failed after {policy.max_attempts} attempts")
        record_failure(key, self.circuit_breakers, self.stats)
        self.callbacks.on_failure(
            key, policy.max_retries, policy.max_attempts, last_error, True, start_time
        )
        return Failure(last_error=last_error, attempts_used=policy.max_attempts)

    async def execute_with_timeout(
        self,
        key: str,
        timeout: float,
        policy: RetryPolicy,
        operation: Callable[[int], Awaitable[T]],
    ) -> Outcome[T]:
        """Run a coroutine operation with a deadline on every attempt.

        An attempt still running after ``timeout`` seconds is cancelled and
        fails with ``AttemptTimeoutError``, which is always retryable.

        Args:
            key: The operation key.
            timeout: Maximum seconds per attempt. Must be > 0.
            policy: The retry policy.
            operation: Coroutine function called with the attempt index.

        Returns:
            The outcome of the call.

        Raises:
            ValueError: If timeout is <= 0.
        """
        validate_timeout(timeout)
        return await self.execute(
            key,
            policy,
            functools.partial(_run_with_timeout, key, timeout, operation),
        )


async def _run_with_timeout(
    key: str, timeout: float, operation: Callable[[int], Awaitable[T]], attempt: int
) -> T:
    deadline = asyncio.timeout(timeout)
    try:
        async with deadline:
            return await operation(attempt)
    except TimeoutError as exc:
        # A TimeoutError raised by the operation itself is left untouched
        if deadline.expired():
            raise AttemptTimeoutError(key, timeout, attempt) from exc
        raise
