r"""Callback types and data structures for observability.

This module lets callers hook into the retry lifecycle for logging,
metrics or alerting. Four hooks are available:

- on_attempt: Called before each attempt
- on_retry: Called before each backoff sleep
- on_success: Called when the operation succeeds
- on_failure: Called when the call ends with a failure

Attempt numbers passed to callbacks are 1-indexed.

Example:
    ```pycon
    >>> from smartretry.callbacks import CallbackConfig, RetryInfo
    >>> def log_retry(info: RetryInfo) -> None:
    ...     print(f"{info.operation_key}: attempt {info.attempt} in {info.wait_time:.1f}s")
    ...
    >>> callbacks = CallbackConfig(on_retry=log_retry)

    ```
"""

from __future__ import annotations

__all__ = [
    "AttemptInfo",
    "CallbackConfig",
    "FailureInfo",
    "RetryInfo",
    "SuccessInfo",
]

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass
class AttemptInfo:
    """Information passed to the on_attempt callback.

    Attributes:
        operation_key: The key of the operation.
        attempt: The attempt about to run (1-indexed).
        max_attempts: Total number of attempts allowed.
    """

    operation_key: str
    attempt: int
    max_attempts: int


@dataclass
class RetryInfo:
    """Information passed to the on_retry callback.

    Attributes:
        operation_key: The key of the operation.
        attempt: The attempt that will run after the sleep (1-indexed).
            The first retry is attempt 2.
        max_attempts: Total number of attempts allowed.
        wait_time: The backoff delay in seconds.
        error: The exception that triggered the retry.
    """

    operation_key: str
    attempt: int
    max_attempts: int
    wait_time: float
    error: Exception


@dataclass
class SuccessInfo:
    """Information passed to the on_success callback.

    Attributes:
        operation_key: The key of the operation.
        attempt: The attempt that succeeded (1-indexed).
        max_attempts: Total number of attempts allowed.
        value: The value returned by the operation.
        total_time: Seconds spent on all attempts including backoff.
    """

    operation_key: str
    attempt: int
    max_attempts: int
    value: Any
    total_time: float


@dataclass
class FailureInfo:
    """Information passed to the on_failure callback.

    Attributes:
        operation_key: The key of the operation.
        attempt: The last attempt that ran (1-indexed).
        max_attempts: Total number of attempts allowed.
        error: The exception raised by the last attempt.
        retryable: False if the call stopped on a non-retryable failure.
        total_time: Seconds spent on all attempts including backoff.
    """

    operation_key: str
    attempt: int
    max_attempts: int
    error: Exception
    retryable: bool
    total_time: float


@dataclass
class CallbackConfig:
    """Configuration for callbacks.

    Attributes:
        on_attempt: Optional callback invoked before each attempt.
        on_retry: Optional callback invoked before each backoff sleep.
        on_success: Optional callback invoked when the operation succeeds.
        on_failure: Optional callback invoked when the call fails.
    """

    on_attempt: Callable[[AttemptInfo], None] | None = None
    on_retry: Callable[[RetryInfo], None] | None = None
    on_success: Callable[[SuccessInfo], None] | None = None
    on_failure: Callable[[FailureInfo], None] | None = None
