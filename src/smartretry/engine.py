r"""Retry engine owning the circuit breaker and statistics registries.

An application builds one :class:`RetryEngine` and hands it to every
component that needs resilient calls. All breaker and statistics state
lives in the engine instance; nothing is stored at module level.

Example:
    ```pycon
    >>> from smartretry import RetryEngine, RetryPolicies
    >>> engine = RetryEngine()
    >>> outcome = engine.execute_with_retry(
    ...     "network_request:models-api",
    ...     RetryPolicies.NETWORK_REQUEST,
    ...     lambda attempt: ["gpt", "claude"],
    ... )
    >>> outcome.value
    ['gpt', 'claude']
    >>> engine.get_stats("network_request:models-api").total_successes
    1

    ```
"""

from __future__ import annotations

__all__ = ["RetryEngine"]

import logging
from typing import TYPE_CHECKING, TypeVar

from smartretry.circuit_breaker import CircuitBreakerRegistry, CircuitState
from smartretry.monitor import NullMonitor
from smartretry.policy import RetryPolicies
from smartretry.retry import AsyncRetryExecutor, RetryExecutor
from smartretry.stats import OperationStats, OperationStatsRegistry

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from smartretry.callbacks import CallbackConfig
    from smartretry.monitor import AsyncPerformanceMonitor, PerformanceMonitor
    from smartretry.outcome import Outcome
    from smartretry.policy import RetryPolicy

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class RetryEngine:
    r"""Adaptive retry and circuit breaker engine.

    Args:
        monitor: Instrumentation collaborator used for every attempt. It
            must provide ``measure`` for synchronous calls and
            ``measure_async`` for asynchronous calls. A monitor with only
            one of them serves only that side; the other side raises
            ``TypeError`` before anything is recorded. Defaults to
            ``NullMonitor``.
        callbacks: Optional lifecycle callbacks shared by every call.
        circuit_breakers: Optional breaker registry, e.g. one built with
            custom thresholds. Defaults to a registry with the documented
            thresholds (5 failures, 60s reset timeout, 3 successes).

    Raises:
        TypeError: If the monitor provides neither ``measure`` nor
            ``measure_async``.
    """

    def __init__(
        self,
        monitor: PerformanceMonitor | AsyncPerformanceMonitor | None = None,
        callbacks: CallbackConfig | None = None,
        circuit_breakers: CircuitBreakerRegistry | None = None,
    ) -> None:
        self.monitor = monitor if monitor is not None else NullMonitor()
        self.circuit_breakers = (
            circuit_breakers if circuit_breakers is not None else CircuitBreakerRegistry()
        )
        self.stats = OperationStatsRegistry(self.circuit_breakers)
        self._executor: RetryExecutor | None = None
        self._async_executor: AsyncRetryExecutor | None = None
        if hasattr(self.monitor, "measure"):
            self._executor = RetryExecutor(
                self.circuit_breakers, self.stats, self.monitor, callbacks
            )
        if hasattr(self.monitor, "measure_async"):
            self._async_executor = AsyncRetryExecutor(
                self.circuit_breakers, self.stats, self.monitor, callbacks
            )
        if self._executor is None and self._async_executor is None:
            msg = (
                "monitor must provide a measure() or measure_async() method, "
                f"got {type(self.monitor).__name__}"
            )
            raise TypeError(msg)

    def _get_executor(self) -> RetryExecutor:
        if self._executor is None:
            msg = f"monitor {type(self.monitor).__name__} cannot measure synchronous calls"
            raise TypeError(msg)
        return self._executor

    def _get_async_executor(self) -> AsyncRetryExecutor:
        if self._async_executor is None:
            msg = f"monitor {type(self.monitor).__name__} cannot measure asynchronous calls"
            raise TypeError(msg)
        return self._async_executor

    def execute_with_retry(
        self,
        key: str,
        policy: RetryPolicy,
        operation: Callable[[int], T],
    ) -> Outcome[T]:
        """Run a blocking operation with retries. See
        :meth:`RetryExecutor.execute`."""
        return self._get_executor().execute(key, policy, operation)

    async def execute_with_retry_async(
        self,
        key: str,
        policy: RetryPolicy,
        operation: Callable[[int], Awaitable[T]],
    ) -> Outcome[T]:
        """Run a coroutine operation with retries. See
        :meth:`AsyncRetryExecutor.execute`."""
        return await self._get_async_executor().execute(key, policy, operation)

    def execute_with_timeout_and_retry(
        self,
        key: str,
        timeout: float,
        policy: RetryPolicy,
        operation: Callable[[int], T],
    ) -> Outcome[T]:
        """Run a blocking operation with retries and a per-attempt
        deadline."""
        return self._get_executor().execute_with_timeout(key, timeout, policy, operation)

    async def execute_with_timeout_and_retry_async(
        self,
        key: str,
        timeout: float,
        policy: RetryPolicy,
        operation: Callable[[int], Awaitable[T]],
    ) -> Outcome[T]:
        """Run a coroutine operation with retries and a per-attempt
        deadline."""
        executor = self._get_async_executor()
        return await executor.execute_with_timeout(key, timeout, policy, operation)

    def retry(self, key: str, operation: Callable[[int], T], max_retries: int = 3) -> T:
        """Run an operation with the network preset and return its value.

        Args:
            key: The operation key.
            operation: The operation, called with the attempt index.
            max_retries: Number of retries after the initial attempt.

        Returns:
            The value returned by the operation.

        Raises:
            CircuitOpenError: If the circuit of ``key`` refused the call.
            Exception: The last error of the operation if the call failed.

        Example:
            ```pycon
            >>> from smartretry import RetryEngine
            >>> RetryEngine().retry("answer", lambda attempt: 42)
            42

            ```
        """
        policy = RetryPolicies.NETWORK_REQUEST.merge(max_retries=max_retries)
        return self.execute_with_retry(key, policy, operation).unwrap()

    async def retry_async(
        self, key: str, operation: Callable[[int], Awaitable[T]], max_retries: int = 3
    ) -> T:
        """Asynchronous counterpart of :meth:`retry`."""
        policy = RetryPolicies.NETWORK_REQUEST.merge(max_retries=max_retries)
        outcome = await self.execute_with_retry_async(key, policy, operation)
        return outcome.unwrap()

    def get_circuit_state(self, key: str) -> CircuitState:
        """Get the circuit state of a key (CLOSED if unknown)."""
        return self.circuit_breakers.get_state(key)

    def get_stats(self, key: str) -> OperationStats | None:
        """Get the statistics snapshot of a key, None if never executed."""
        return self.stats.get(key)

    def get_all_stats(self) -> list[OperationStats]:
        """Get the statistics snapshots of every executed key."""
        return self.stats.get_all()

    def reset_circuit_breaker(self, key: str) -> None:
        """Force the circuit of a key to CLOSED and zero its consecutive
        counters."""
        self.circuit_breakers.reset(key)

    def clear_stats(self, key: str) -> None:
        """Drop the statistics and the circuit breaker of a key."""
        self.stats.clear(key)

    def clear_all_stats(self) -> None:
        """Drop the statistics and the circuit breakers of every key."""
        self.stats.clear_all()
