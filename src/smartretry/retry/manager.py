r"""Callback manager for retry lifecycle events.

This module provides the CallbackManager class that invokes the
user-defined callbacks of a :class:`~smartretry.callbacks.CallbackConfig`
with 1-indexed attempt numbers.
"""

from __future__ import annotations

__all__ = ["CallbackManager"]

import time
from typing import Any

from smartretry.callbacks import (
    AttemptInfo,
    CallbackConfig,
    FailureInfo,
    RetryInfo,
    SuccessInfo,
)


class CallbackManager:
    """Manages callback invocations during the retry lifecycle.

    Args:
        callbacks: Callback configuration. Defaults to no callbacks.
    """

    def __init__(self, callbacks: CallbackConfig | None = None) -> None:
        self.callbacks = callbacks if callbacks is not None else CallbackConfig()

    def on_attempt(self, key: str, attempt: int, max_attempts: int) -> None:
        """Invoke on_attempt before the attempt ``attempt`` (0-indexed)."""
        if self.callbacks.on_attempt:
            self.callbacks.on_attempt(
                AttemptInfo(operation_key=key, attempt=attempt + 1, max_attempts=max_attempts)
            )

    def on_retry(
        self, key: str, attempt: int, max_attempts: int, sleep_time: float, error: Exception
    ) -> None:
        """Invoke on_retry after the failed attempt ``attempt``
        (0-indexed)."""
        if self.callbacks.on_retry:
            self.callbacks.on_retry(
                RetryInfo(
                    operation_key=key,
                    attempt=attempt + 2,  # Next attempt number
                    max_attempts=max_attempts,
                    wait_time=sleep_time,
                    error=error,
                )
            )

    def on_success(
        self, key: str, attempt: int, max_attempts: int, value: Any, start_time: float
    ) -> None:
        """Invoke on_success after the successful attempt ``attempt``
        (0-indexed)."""
        if self.callbacks.on_success:
            self.callbacks.on_success(
                SuccessInfo(
                    operation_key=key,
                    attempt=attempt + 1,
                    max_attempts=max_attempts,
                    value=value,
                    total_time=time.time() - start_time,
                )
            )

    def on_failure(
        self,
        key: str,
        attempt: int,
        max_attempts: int,
        error: Exception,
        retryable: bool,
        start_time: float,
    ) -> None:
        """Invoke on_failure after the last attempt ``attempt``
        (0-indexed)."""
        if self.callbacks.on_failure:
            self.callbacks.on_failure(
                FailureInfo(
                    operation_key=key,
                    attempt=attempt + 1,
                    max_attempts=max_attempts,
                    error=error,
                    retryable=retryable,
                    total_time=time.time() - start_time,
                )
            )
