r"""Retry policies and predefined presets.

A :class:`RetryPolicy` is an immutable description of how one call is
retried: the retry budget, the backoff shape and bounds, which failures
are worth retrying, and whether the circuit breaker gates the call.

Example:
    ```pycon
    >>> from smartretry.backoff import BackoffStrategy
    >>> from smartretry.policy import RetryPolicies, RetryPolicy
    >>> policy = RetryPolicy(max_retries=2, backoff_strategy=BackoffStrategy.FIXED)
    >>> policy.max_attempts
    3
    >>> RetryPolicies.DATABASE_OPERATION.circuit_breaker_enabled
    False

    ```
"""

from __future__ import annotations

__all__ = ["RetryPolicies", "RetryPolicy"]

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from smartretry.backoff.strategy import BackoffStrategy
from smartretry.config import (
    DEFAULT_BASE_DELAY,
    DEFAULT_JITTER_FACTOR,
    DEFAULT_MAX_DELAY,
    DEFAULT_MAX_RETRIES,
)
from smartretry.exceptions import AttemptTimeoutError
from smartretry.failures import TRANSIENT_FAILURE_KINDS, FailureKind, classify_failure
from smartretry.utils.validation import validate_policy_params

if TYPE_CHECKING:
    from collections.abc import Callable

    from smartretry.backoff.base import BaseBackoffStrategy


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration of the retry behavior of a single call.

    Args:
        max_retries: Number of retries after the initial attempt. Must be
            >= 1. The operation runs at most ``max_retries + 1`` times.
        base_delay: Base backoff delay in seconds. Must be >= 0.
        max_delay: Upper bound in seconds for a single backoff delay before
            jitter. Must be >= base_delay.
        jitter_factor: Relative jitter amplitude in [0, 1].
        backoff_strategy: Named backoff shape or a custom
            ``BaseBackoffStrategy`` instance.
        retryable_kinds: Failure kinds worth retrying. Defaults to the
            transient network kinds.
        retry_if: Optional custom predicate called with the exception and
            the attempt index. A True result makes the failure retryable
            even if its kind is not in ``retryable_kinds``.
        circuit_breaker_enabled: Whether the circuit breaker may refuse
            the call.
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay: float = DEFAULT_BASE_DELAY
    max_delay: float = DEFAULT_MAX_DELAY
    jitter_factor: float = DEFAULT_JITTER_FACTOR
    backoff_strategy: BackoffStrategy | BaseBackoffStrategy = BackoffStrategy.EXPONENTIAL
    retryable_kinds: frozenset[FailureKind] = field(default=TRANSIENT_FAILURE_KINDS)
    retry_if: Callable[[Exception, int], bool] | None = None
    circuit_breaker_enabled: bool = True

    def __post_init__(self) -> None:
        validate_policy_params(
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            max_delay=self.max_delay,
            jitter_factor=self.jitter_factor,
        )

    @property
    def max_attempts(self) -> int:
        """Total number of attempts allowed, including the initial one."""
        return self.max_retries + 1

    def is_retryable(self, exc: Exception, attempt: int) -> bool:
        """Indicate if a failure is worth retrying.

        A per-attempt timeout is always retryable.

        Args:
            exc: The exception raised by the operation.
            attempt: The index of the attempt that failed (0-indexed).

        Returns:
            True if the failure is retryable.

        Example:
            ```pycon
            >>> from smartretry.policy import RetryPolicy
            >>> policy = RetryPolicy()
            >>> policy.is_retryable(ConnectionResetError("reset"), 0)
            True
            >>> policy.is_retryable(KeyError("missing"), 0)
            False
            >>> policy = RetryPolicy(retry_if=lambda exc, attempt: isinstance(exc, KeyError))
            >>> policy.is_retryable(KeyError("missing"), 0)
            True

            ```
        """
        if isinstance(exc, AttemptTimeoutError):
            return True
        if classify_failure(exc) in self.retryable_kinds:
            return True
        return self.retry_if is not None and bool(self.retry_if(exc, attempt))

    def merge(self, **overrides: Any) -> RetryPolicy:
        """Create a new policy with the given parameters overridden.

        Only non-None overrides are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new validated policy.

        Example:
            ```pycon
            >>> from smartretry.policy import RetryPolicies
            >>> policy = RetryPolicies.NETWORK_REQUEST.merge(max_retries=5)
            >>> policy.max_retries, RetryPolicies.NETWORK_REQUEST.max_retries
            (5, 3)

            ```
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)


class RetryPolicies:
    """Predefined policies for common kinds of operations.

    These are plain configuration presets: callers may use them as is or
    derive variants with :meth:`RetryPolicy.merge`.
    """

    NETWORK_REQUEST = RetryPolicy(
        max_retries=3,
        base_delay=1.0,
        max_delay=10.0,
        backoff_strategy=BackoffStrategy.EXPONENTIAL,
        circuit_breaker_enabled=True,
    )

    DATABASE_OPERATION = RetryPolicy(
        max_retries=2,
        base_delay=0.5,
        max_delay=2.0,
        backoff_strategy=BackoffStrategy.LINEAR,
        circuit_breaker_enabled=False,
    )

    FILE_OPERATION = RetryPolicy(
        max_retries=2,
        base_delay=0.2,
        max_delay=1.0,
        backoff_strategy=BackoffStrategy.FIXED,
        circuit_breaker_enabled=False,
    )

    STREAMING_OPERATION = RetryPolicy(
        max_retries=5,
        base_delay=2.0,
        max_delay=30.0,
        backoff_strategy=BackoffStrategy.EXPONENTIAL,
        circuit_breaker_enabled=True,
    )
