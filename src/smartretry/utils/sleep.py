r"""Backoff delay calculation with clamping and jitter.

This module turns a retry policy and an attempt index into the number of
seconds the executors sleep before the next attempt.
"""

from __future__ import annotations

__all__ = ["calculate_sleep_time"]

import logging
import random
from typing import TYPE_CHECKING

from smartretry.backoff.strategy import resolve_backoff

if TYPE_CHECKING:
    from smartretry.policy import RetryPolicy

logger: logging.Logger = logging.getLogger(__name__)


def calculate_sleep_time(attempt: int, policy: RetryPolicy) -> float:
    """Calculate the delay before the next attempt.

    The sleep time is calculated as follows:
    1. Compute the raw delay with the policy's backoff strategy.
    2. Clamp it to ``policy.max_delay``.
    3. Perturb it by ``clamped * jitter_factor * uniform(-1, 1)``. The draw
       is independent for every call so concurrent callers sharing an
       operation key do not retry in lockstep.
    4. Floor the result at 0.

    Args:
        attempt: The index of the attempt that just failed (0-indexed).
        policy: The retry policy of the call.

    Returns:
        The delay in seconds, always >= 0.

    Example:
        ```pycon
        >>> from smartretry.backoff import BackoffStrategy
        >>> from smartretry.policy import RetryPolicy
        >>> from smartretry.utils.sleep import calculate_sleep_time
        >>> policy = RetryPolicy(base_delay=1.0, max_delay=5.0, jitter_factor=0.0)
        >>> [calculate_sleep_time(attempt, policy) for attempt in range(5)]
        [1.0, 2.0, 4.0, 5.0, 5.0]

        ```
    """
    backoff = resolve_backoff(policy.backoff_strategy, policy.base_delay)
    clamped = min(backoff.calculate(attempt), policy.max_delay)

    if policy.jitter_factor > 0:
        jitter = clamped * policy.jitter_factor * random.uniform(-1.0, 1.0)  # noqa: S311
        sleep_time = max(0.0, clamped + jitter)
        logger.debug(f"Backoff {sleep_time:.3f}s (base={clamped:.3f}s, jitter={jitter:.3f}s)")
    else:
        sleep_time = max(0.0, clamped)
        logger.debug(f"Backoff {sleep_time:.3f}s")
    return sleep_time
