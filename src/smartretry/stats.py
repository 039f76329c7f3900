r"""Per-operation-key cumulative statistics.

:class:`OperationStatsRegistry` keeps the cumulative counters of every
operation key and exposes them, together with the circuit breaker view of
the key, as immutable :class:`OperationStats` snapshots.
"""

from __future__ import annotations

__all__ = ["OperationStats", "OperationStatsRegistry"]

import logging
import threading
import time
from dataclasses import dataclass

from smartretry.circuit_breaker import CircuitBreakerRegistry, CircuitState

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationStats:
    """Snapshot of the statistics of one operation key.

    Attributes:
        key: The operation key.
        consecutive_failures: Consecutive failed call outcomes.
        consecutive_successes: Consecutive successful call outcomes.
        last_failure_time: Timestamp (seconds since the epoch) of the last
            failed call outcome, or None if the key never failed.
        total_retries: Failed attempts since the key was created.
        total_successes: Successful calls since the key was created.
        circuit_state: The circuit state of the key.

    Example:
        ```pycon
        >>> from smartretry.circuit_breaker import CircuitState
        >>> from smartretry.stats import OperationStats
        >>> stats = OperationStats(
        ...     key="models-api",
        ...     consecutive_failures=0,
        ...     consecutive_successes=1,
        ...     last_failure_time=None,
        ...     total_retries=1,
        ...     total_successes=3,
        ...     circuit_state=CircuitState.CLOSED,
        ... )
        >>> stats.success_rate
        75.0

        ```
    """

    key: str
    consecutive_failures: int
    consecutive_successes: int
    last_failure_time: float | None
    total_retries: int
    total_successes: int
    circuit_state: CircuitState

    @property
    def success_rate(self) -> float:
        """Percentage of successes among successes and failed attempts.

        100.0 when nothing was recorded yet.
        """
        total = self.total_successes + self.total_retries
        if total == 0:
            return 100.0
        return self.total_successes / total * 100.0

    @property
    def time_since_last_failure(self) -> float:
        """Seconds elapsed since the last failure, 0.0 if the key never
        failed."""
        if self.last_failure_time is None:
            return 0.0
        return time.time() - self.last_failure_time


class _Counters:
    __slots__ = ("last_failure_time", "total_retries", "total_successes")

    def __init__(self) -> None:
        self.total_retries = 0
        self.total_successes = 0
        self.last_failure_time: float | None = None


class OperationStatsRegistry:
    """Cumulative counters keyed by operation key.

    Counters are never reset by circuit transitions; they only disappear
    through :meth:`clear` or :meth:`clear_all`, which also drop the circuit
    breaker of the cleared keys so a cleared key starts CLOSED again.

    Lock order: the stats lock is always taken before the breaker lock.

    Args:
        circuit_breakers: The breaker registry sharing the same keys.
    """

    def __init__(self, circuit_breakers: CircuitBreakerRegistry) -> None:
        self._circuit_breakers = circuit_breakers
        self._counters: dict[str, _Counters] = {}
        self._lock = threading.Lock()

    def ensure(self, key: str) -> None:
        """Create the counters of a key if they do not exist yet."""
        with self._lock:
            self._counters.setdefault(key, _Counters())

    def record_attempt_failure(self, key: str) -> None:
        """Count one failed attempt of a key."""
        with self._lock:
            self._counters.setdefault(key, _Counters()).total_retries += 1

    def record_success(self, key: str) -> None:
        """Count one successful call of a key."""
        with self._lock:
            self._counters.setdefault(key, _Counters()).total_successes += 1

    def record_failure(self, key: str, failure_time: float) -> None:
        """Stamp the last failed call outcome of a key.

        Args:
            key: The operation key.
            failure_time: The failure timestamp (seconds since the epoch).
        """
        with self._lock:
            self._counters.setdefault(key, _Counters()).last_failure_time = failure_time

    def get(self, key: str) -> OperationStats | None:
        """Get the snapshot of a key.

        Args:
            key: The operation key.

        Returns:
            The snapshot, or None if the key was never executed.
        """
        with self._lock, self._circuit_breakers.lock:
            return self._snapshot(key)

    def get_all(self) -> list[OperationStats]:
        """Get the snapshots of every known key, in creation order."""
        with self._lock, self._circuit_breakers.lock:
            return [self._snapshot(key) for key in self._counters]

    def _snapshot(self, key: str) -> OperationStats | None:
        counters = self._counters.get(key)
        if counters is None:
            return None
        breaker = self._circuit_breakers.get_counters_unlocked(key)
        return OperationStats(
            key=key,
            consecutive_failures=breaker.consecutive_failures,
            consecutive_successes=breaker.consecutive_successes,
            last_failure_time=counters.last_failure_time,
            total_retries=counters.total_retries,
            total_successes=counters.total_successes,
            circuit_state=breaker.state,
        )

    def clear(self, key: str) -> None:
        """Drop the statistics and the circuit breaker of a key."""
        with self._lock, self._circuit_breakers.lock:
            self._counters.pop(key, None)
            self._circuit_breakers.remove_unlocked(key)
        logger.debug(f"Cleared retry stats for operation '{key}'")

    def clear_all(self) -> None:
        """Drop the statistics and the circuit breakers of every key."""
        with self._lock, self._circuit_breakers.lock:
            self._counters.clear()
            self._circuit_breakers.clear_unlocked()
        logger.debug("Cleared all retry stats")
