r"""smartretry - Adaptive retry and circuit breaker engine.

This package wraps fallible operations with retries, configurable
backoff and per-operation-key circuit breakers that stop calling a
repeatedly failing dependency until it shows signs of recovery.

Key Features:
    - Exponential, linear, fixed and Fibonacci backoff with jitter
    - Per-key circuit breakers with lazy OPEN -> HALF_OPEN probing
    - Cumulative per-key statistics with immutable snapshots
    - Synchronous and asyncio executors, with optional per-attempt timeouts
    - Outcome values instead of exceptions for exhaustion and open circuits
    - Callback hooks and pluggable instrumentation for observability

Example:
    ```pycon
    >>> from smartretry import RetryEngine, RetryPolicies, Success
    >>> engine = RetryEngine()
    >>> outcome = engine.execute_with_retry(
    ...     "file_op:config", RetryPolicies.FILE_OPERATION, lambda attempt: "loaded"
    ... )
    >>> isinstance(outcome, Success)
    True

    ```
"""

from __future__ import annotations

__all__ = [
    "AttemptTimeoutError",
    "BackoffStrategy",
    "CallbackConfig",
    "CircuitBreakerRegistry",
    "CircuitOpen",
    "CircuitOpenError",
    "CircuitState",
    "Failure",
    "FailureKind",
    "OperationStats",
    "Outcome",
    "RetryEngine",
    "RetryPolicies",
    "RetryPolicy",
    "Success",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from smartretry.backoff import BackoffStrategy
from smartretry.callbacks import CallbackConfig
from smartretry.circuit_breaker import CircuitBreakerRegistry, CircuitState
from smartretry.engine import RetryEngine
from smartretry.exceptions import AttemptTimeoutError, CircuitOpenError
from smartretry.failures import FailureKind
from smartretry.outcome import CircuitOpen, Failure, Outcome, Success
from smartretry.policy import RetryPolicies, RetryPolicy
from smartretry.stats import OperationStats

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
