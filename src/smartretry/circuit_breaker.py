r"""Per-operation-key circuit breakers.

This module provides :class:`CircuitBreakerRegistry`, which keeps one
circuit breaker per operation key. Each breaker has three states:

- CLOSED: Normal operation, calls are admitted
- OPEN: After N consecutive failures, calls are refused without being attempted
- HALF_OPEN: After the reset timeout, calls are admitted as trial calls

Transitions are driven only by recorded outcomes and by the elapsed time
observed during admission checks; there are no timers.

Example:
    ```pycon
    >>> from smartretry.circuit_breaker import CircuitBreakerRegistry, CircuitState
    >>> registry = CircuitBreakerRegistry(failure_threshold=2)
    >>> registry.record_failure("models-api")
    >>> registry.record_failure("models-api")
    >>> registry.get_state("models-api")
    <CircuitState.OPEN: 'open'>
    >>> registry.is_admitted("models-api")
    False

    ```
"""

from __future__ import annotations

__all__ = ["BreakerCounters", "CircuitBreakerRegistry", "CircuitState"]

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from smartretry.config import FAILURE_THRESHOLD, RESET_TIMEOUT, SUCCESS_THRESHOLD

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)


class CircuitState(Enum):
    """Circuit breaker states.

    Attributes:
        CLOSED: Normal operation, calls are admitted.
        OPEN: Calls are refused without invoking the operation.
        HALF_OPEN: Trial calls are admitted to test recovery.
    """

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass(frozen=True)
class BreakerCounters:
    """Point-in-time view of the breaker of one operation key.

    Attributes:
        state: The circuit state.
        consecutive_failures: Consecutive failures recorded.
        consecutive_successes: Consecutive successes recorded.
    """

    state: CircuitState = CircuitState.CLOSED
    consecutive_failures: int = 0
    consecutive_successes: int = 0


class _Breaker:
    """Mutable breaker state of one key, guarded by the registry lock."""

    __slots__ = ("consecutive_failures", "consecutive_successes", "last_failure_time", "state")

    def __init__(self) -> None:
        self.state = CircuitState.CLOSED
        self.consecutive_failures = 0
        self.consecutive_successes = 0
        self.last_failure_time: float | None = None


class CircuitBreakerRegistry:
    r"""Circuit breakers keyed by operation key.

    Breakers are created lazily the first time an outcome is recorded for
    a key; unknown keys are reported as CLOSED. Every read and every
    transition happens under a single lock, so threshold checks cannot
    lose concurrent updates.

    Args:
        failure_threshold: Consecutive failures that open a CLOSED
            circuit. Must be > 0. Default is 5.
        reset_timeout: Seconds an OPEN circuit waits after its last
            failure before admitting a trial call. Must be > 0.
            Default is 60.0 seconds.
        success_threshold: Consecutive HALF_OPEN successes that close the
            circuit. Must be > 0. Default is 3.
        on_state_change: Optional callback called on every transition
            with ``(key, old_state, new_state)``. It is called with the
            registry lock held and must not call back into the registry.

    Raises:
        ValueError: If a threshold or the timeout is invalid.
    """

    def __init__(
        self,
        *,
        failure_threshold: int = FAILURE_THRESHOLD,
        reset_timeout: float = RESET_TIMEOUT,
        success_threshold: int = SUCCESS_THRESHOLD,
        on_state_change: Callable[[str, CircuitState, CircuitState], None] | None = None,
    ) -> None:
        if failure_threshold <= 0:
            msg = f"failure_threshold must be > 0, got {failure_threshold}"
            raise ValueError(msg)
        if reset_timeout <= 0:
            msg = f"reset_timeout must be > 0, got {reset_timeout}"
            raise ValueError(msg)
        if success_threshold <= 0:
            msg = f"success_threshold must be > 0, got {success_threshold}"
            raise ValueError(msg)

        self._failure_threshold = failure_threshold
        self._reset_timeout = reset_timeout
        self._success_threshold = success_threshold
        self._on_state_change = on_state_change

        self._breakers: dict[str, _Breaker] = {}
        self._lock = threading.Lock()

    @property
    def failure_threshold(self) -> int:
        return self._failure_threshold

    @property
    def reset_timeout(self) -> float:
        return self._reset_timeout

    @property
    def success_threshold(self) -> int:
        return self._success_threshold

    @property
    def lock(self) -> threading.Lock:
        """The lock guarding every breaker of the registry."""
        return self._lock

    def _change_state(self, key: str, breaker: _Breaker, new_state: CircuitState) -> None:
        """Change the state of a breaker and notify the listener.

        Must be called with the lock held.
        """
        old_state = breaker.state
        if old_state == new_state:
            return
        breaker.state = new_state
        logger.debug(
            f"Circuit breaker '{key}' state changed: {old_state.value} -> {new_state.value}"
        )
        if self._on_state_change is not None:
            try:
                self._on_state_change(key, old_state, new_state)
            except Exception as e:  # noqa: BLE001
                logger.warning(f"Error in circuit breaker state change callback: {e}")

    def is_admitted(self, key: str) -> bool:
        """Check whether the circuit of a key admits a call.

        An OPEN circuit whose reset timeout has elapsed since its last
        failure moves to HALF_OPEN as a side effect of this check, and the
        call is admitted.

        Args:
            key: The operation key.

        Returns:
            False if the circuit is OPEN and still cooling down, True otherwise.

        Example:
            ```pycon
            >>> from smartretry.circuit_breaker import CircuitBreakerRegistry
            >>> registry = CircuitBreakerRegistry()
            >>> registry.is_admitted("never-seen")
            True

            ```
        """
        with self._lock:
            breaker = self._breakers.get(key)
            if breaker is None or breaker.state != CircuitState.OPEN:
                return True

            last_failure_time = breaker.last_failure_time or 0.0
            time_since_failure = time.time() - last_failure_time
            if time_since_failure >= self._reset_timeout:
                breaker.consecutive_successes = 0
                self._change_state(key, breaker, CircuitState.HALF_OPEN)
                logger.info(f"Circuit breaker HALF_OPEN for operation '{key}'")
                return True

            logger.debug(
                f"Circuit breaker OPEN for operation '{key}', "
                f"retry after {self._reset_timeout - time_since_failure:.1f}s"
            )
            return False

    def record_success(self, key: str) -> None:
        """Record a successful call outcome.

        Resets the consecutive failure count and increments the
        consecutive success count. A HALF_OPEN circuit closes once the
        success threshold is reached.

        Args:
            key: The operation key.
        """
        with self._lock:
            breaker = self._breakers.setdefault(key, _Breaker())
            breaker.consecutive_failures = 0
            breaker.consecutive_successes += 1
            if (
                breaker.state == CircuitState.HALF_OPEN
                and breaker.consecutive_successes >= self._success_threshold
            ):
                self._change_state(key, breaker, CircuitState.CLOSED)
                logger.info(f"Circuit breaker CLOSED for operation '{key}'")

    def record_failure(self, key: str, failure_time: float | None = None) -> None:
        """Record a failed call outcome.

        Increments the consecutive failure count and stamps the failure
        time. A CLOSED circuit opens once the failure threshold is
        reached; a HALF_OPEN circuit reopens on the first failure.

        Args:
            key: The operation key.
            failure_time: The failure timestamp (seconds since the epoch).
                Defaults to now.
        """
        with self._lock:
            breaker = self._breakers.setdefault(key, _Breaker())
            breaker.consecutive_failures += 1
            breaker.consecutive_successes = 0
            breaker.last_failure_time = time.time() if failure_time is None else failure_time

            logger.debug(
                f"Circuit breaker '{key}' recorded failure "
                f"({breaker.consecutive_failures}/{self._failure_threshold})"
            )

            if breaker.state == CircuitState.HALF_OPEN or (
                breaker.state == CircuitState.CLOSED
                and breaker.consecutive_failures >= self._failure_threshold
            ):
                self._change_state(key, breaker, CircuitState.OPEN)
                logger.warning(
                    f"Circuit breaker OPEN for operation '{key}' "
                    f"({breaker.consecutive_failures} consecutive failures)"
                )

    def reset(self, key: str) -> None:
        """Manually force the circuit of a key to CLOSED.

        Zeroes both consecutive counters. This is an operator override and
        not part of the automatic protocol.

        Args:
            key: The operation key.

        Example:
            ```pycon
            >>> from smartretry.circuit_breaker import CircuitBreakerRegistry
            >>> registry = CircuitBreakerRegistry(failure_threshold=1)
            >>> registry.record_failure("upload")
            >>> registry.reset("upload")
            >>> registry.get_counters("upload")
            BreakerCounters(state=<CircuitState.CLOSED: 'closed'>, consecutive_failures=0, consecutive_successes=0)

            ```
        """
        with self._lock:
            breaker = self._breakers.setdefault(key, _Breaker())
            breaker.consecutive_failures = 0
            breaker.consecutive_successes = 0
            self._change_state(key, breaker, CircuitState.CLOSED)
        logger.info(f"Circuit breaker manually reset for operation '{key}'")

    def get_state(self, key: str) -> CircuitState:
        """Get the circuit state of a key (CLOSED if unknown)."""
        with self._lock:
            breaker = self._breakers.get(key)
            return CircuitState.CLOSED if breaker is None else breaker.state

    def get_counters(self, key: str) -> BreakerCounters:
        """Get the state and consecutive counters of a key."""
        with self._lock:
            return self.get_counters_unlocked(key)

    def get_counters_unlocked(self, key: str) -> BreakerCounters:
        """Same as :meth:`get_counters`; the caller must hold :attr:`lock`."""
        breaker = self._breakers.get(key)
        if breaker is None:
            return BreakerCounters()
        return BreakerCounters(
            state=breaker.state,
            consecutive_failures=breaker.consecutive_failures,
            consecutive_successes=breaker.consecutive_successes,
        )

    def remove_unlocked(self, key: str) -> None:
        """Drop the breaker of a key; the caller must hold :attr:`lock`."""
        self._breakers.pop(key, None)

    def clear_unlocked(self) -> None:
        """Drop every breaker; the caller must hold :attr:`lock`."""
        self._breakers.clear()
