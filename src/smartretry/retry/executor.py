r"""Synchronous retry executor.

This module provides the RetryExecutor class that runs a blocking
operation with automatic retry logic and circuit breaker integration.
"""

from __future__ import annotations

__all__ = ["RetryExecutor"]

import contextvars
import functools
import logging
import queue
import threading
import time
from typing import TYPE_CHECKING, Any, TypeVar

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
    from collections.abc import Callable

    from smartretry.callbacks import CallbackConfig
    from smartretry.circuit_breaker import CircuitBreakerRegistry
    from smartretry.monitor import PerformanceMonitor
    from smartretry.outcome import Outcome
    from smartretry.policy import RetryPolicy
    from smartretry.stats import OperationStatsRegistry

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class RetryExecutor:
    """Executes blocking operations with automatic retry logic.

    The executor orchestrates the following components:
    - CircuitBreakerRegistry: admission checks and breaker transitions
    - OperationStatsRegistry: cumulative counters
    - RetryDecider: whether a failure is worth retrying
    - calculate_sleep_time: backoff delays between attempts
    - CallbackManager: user-defined lifecycle callbacks

    The executor never mutates counters itself; every update goes through
    a registry method.

    Args:
        circuit_breakers: The breaker registry.
        stats: The stats registry.
        monitor: Instrumentation collaborator. Defaults to NullMonitor.
        callbacks: Optional lifecycle callbacks.

    Raises:
        TypeError: If the monitor has no ``measure`` method.

    Example:
        ```pycon
        >>> from smartretry.circuit_breaker import CircuitBreakerRegistry
        >>> from smartretry.policy import RetryPolicy
        >>> from smartretry.retry import RetryExecutor
        >>> from smartretry.stats import OperationStatsRegistry
        >>> breakers = CircuitBreakerRegistry()
        >>> executor = RetryExecutor(breakers, OperationStatsRegistry(breakers))
        >>> executor.execute("echo", RetryPolicy(), lambda attempt: "hello")
        Success(value='hello', attempts_used=1)

        ```
    """

    def __init__(
        self,
        circuit_breakers: CircuitBreakerRegistry,
        stats: OperationStatsRegistry,
        monitor: PerformanceMonitor | None = None,
        callbacks: CallbackConfig | None = None,
    ) -> None:
        self.circuit_breakers = circuit_breakers
        self.stats = stats
        self.monitor: PerformanceMonitor = monitor if monitor is not None else NullMonitor()
        check_monitor(self.monitor, "measure")
        self.callbacks: CallbackManager = CallbackManager(callbacks)

    def execute(
        self,
        key: str,
        policy: RetryPolicy,
        operation: Callable[[int], T],
    ) -> Outcome[T]:
        """Run an operation with automatic retry logic.

        The operation is called with the attempt index (0-indexed) at most
        ``policy.max_retries + 1`` times:
        - Success: returns ``Success`` immediately
        - Non-retryable failure: returns ``Failure`` immediately, no sleep
        - Retryable failure: sleeps with backoff, then tries again
        - Exhaustion: returns ``Failure`` with the last error

        If the policy enables the circuit breaker and the circuit of
        ``key`` refuses the call, ``CircuitOpen`` is returned and the
        operation is never invoked.

        Args:
            key: The operation key.
            policy: The retry policy.
            operation: The operation, called with the attempt index.

        Returns:
            The outcome of the call.
        """
        refused = check_admission(key, policy, self.circuit_breakers)
        if refused is not None:
            return refused

        self.stats.ensure(key)
        decider = RetryDecider(policy)
        label = monitor_label(key)
        measure = self.monitor.measure
        start_time = time.time()
        last_error: Exception | None = None

        with bind_operation_key(key):
            for attempt in range(policy.max_attempts):
                self.callbacks.on_attempt(key, attempt, policy.max_attempts)
                try:
                    value = measure(label, functools.partial(operation, attempt))
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
                        time.sleep(sleep_time)
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

    def execute_with_timeout(
        self,
        key: str,
        timeout: float,
        policy: RetryPolicy,
        operation: Callable[[int], T],
    ) -> Outcome[T]:
        """Run an operation with a deadline on every attempt.

        Each attempt runs on its own daemon worker thread. An attempt still
        running after ``timeout`` seconds fails with ``AttemptTimeoutError``,
        which is always retryable, and is abandoned: Python threads cannot
        be interrupted, so the worker keeps running in the background and
        its result or exception is discarded. An abandoned attempt may
        therefore overlap with the following retries of the same call, and
        the operation must tolerate that. Abandoned workers never delay
        interpreter exit.

        Args:
            key: The operation key.
            timeout: Maximum seconds per attempt. Must be > 0.
            policy: The retry policy.
            operation: The operation, called with the attempt index.

        Returns:
            The outcome of the call.

        Raises:
            ValueError: If timeout is <= 0.
        """
        validate_timeout(timeout)
        return self.execute(
            key,
            policy,
            functools.partial(_run_with_timeout, key, timeout, operation),
        )


def _run_with_timeout(key: str, timeout: float, operation: Callable[[int], T], attempt: int) -> T:
    results: queue.Queue[tuple[bool, Any]] = queue.Queue(maxsize=1)
    context = contextvars.copy_context()

    def run_attempt() -> None:
        try:
            results.put((True, context.run(operation, attempt)))
        except BaseException as exc:  # noqa: BLE001
            # Re-raised on the calling thread unless the attempt timed out
            results.put((False, exc))

    # Daemon so an attempt that never returns does not block interpreter exit
    worker = threading.Thread(
        target=run_attempt, name=f"smartretry-{key}-attempt-{attempt}", daemon=True
    )
    worker.start()
    try:
        succeeded, payload = results.get(timeout=timeout)
    except queue.Empty:
        logger.debug(f"Attempt {attempt + 1} of operation '{key}' abandoned after {timeout}s")
        raise AttemptTimeoutError(key, timeout, attempt) from None
    if not succeeded:
        raise payload
    return payload
