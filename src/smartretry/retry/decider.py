r"""Retry decision logic.

This module provides the RetryDecider class that decides whether a
failed attempt is worth retrying under a given policy.
"""

from __future__ import annotations

__all__ = ["RetryDecider"]

import logging
from typing import TYPE_CHECKING

from smartretry.failures import classify_failure

if TYPE_CHECKING:
    from smartretry.policy import RetryPolicy

logger: logging.Logger = logging.getLogger(__name__)


class RetryDecider:
    """Decides whether a failed attempt should be retried.

    Args:
        policy: The retry policy of the call.

    Example:
        ```pycon
        >>> from smartretry.policy import RetryPolicy
        >>> from smartretry.retry import RetryDecider
        >>> decider = RetryDecider(RetryPolicy())
        >>> decider.should_retry(ConnectionRefusedError("refused"))
        (True, 'connection')
        >>> decider.should_retry(ValueError("bad input"))
        (False, 'non-retryable ValueError')

        ```
    """

    def __init__(self, policy: RetryPolicy) -> None:
        self.policy = policy

    def should_retry(self, exc: Exception, attempt: int = 0) -> tuple[bool, str]:
        """Determine if a failure should be retried.

        The answer only depends on the failure. Whether attempts remain is
        checked by the executor.

        Args:
            exc: The exception raised by the attempt.
            attempt: The index of the failed attempt (0-indexed).

        Returns:
            Tuple of (should_retry, reason).
        """
        if self.policy.is_retryable(exc, attempt):
            return (True, classify_failure(exc).value)
        return (False, f"non-retryable {type(exc).__name__}")
