r"""Shared core logic for retry executors.

This module provides helpers used by both the synchronous and the
asynchronous executors: admission checks and the recording of terminal
outcomes into the two registries.

Breaker counters move once per call outcome. Failed attempts that are
retried inside a call only increase ``total_retries``; the consecutive
failure count that trips the breaker grows when the whole call fails.
"""

from __future__ import annotations

__all__ = [
    "check_admission",
    "monitor_label",
    "record_failure",
    "record_success",
]

import logging
import time
from typing import TYPE_CHECKING

from smartretry.outcome import CircuitOpen

if TYPE_CHECKING:
    from smartretry.circuit_breaker import CircuitBreakerRegistry
    from smartretry.policy import RetryPolicy
    from smartretry.stats import OperationStatsRegistry

logger: logging.Logger = logging.getLogger(__name__)


def monitor_label(key: str) -> str:
    """Return the label under which the attempts of a key are measured.

    Example:
        ```pycon
        >>> from smartretry.retry.executor_core import monitor_label
        >>> monitor_label("network_request:models-api")
        'retry_network_request:models-api'

        ```
    """
    return f"retry_{key}"


def check_admission(
    key: str, policy: RetryPolicy, circuit_breakers: CircuitBreakerRegistry
) -> CircuitOpen | None:
    """Check whether a call may run.

    Args:
        key: The operation key.
        policy: The retry policy of the call.
        circuit_breakers: The breaker registry.

    Returns:
        A ``CircuitOpen`` outcome if the call is refused, None otherwise.
    """
    if policy.circuit_breaker_enabled and not circuit_breakers.is_admitted(key):
        logger.warning(f"Circuit breaker OPEN for operation '{key}', call refused")
        return CircuitOpen(operation_key=key)
    return None


def record_success(
    key: str, circuit_breakers: CircuitBreakerRegistry, stats: OperationStatsRegistry
) -> None:
    """Record a successful call outcome in both registries."""
    circuit_breakers.record_success(key)
    stats.record_success(key)


def record_failure(
    key: str, circuit_breakers: CircuitBreakerRegistry, stats: OperationStatsRegistry
) -> None:
    """Record a failed call outcome in both registries."""
    failure_time = time.time()
    circuit_breakers.record_failure(key, failure_time)
    stats.record_failure(key, failure_time)
