r"""Parameter validation utilities for retry policies.

This module provides validation functions that check retry policy
parameters before they are used by the retry executors.
"""

from __future__ import annotations

__all__ = ["validate_policy_params", "validate_timeout"]


def validate_policy_params(
    max_retries: int,
    base_delay: float,
    max_delay: float,
    jitter_factor: float,
) -> None:
    """Validate retry policy parameters.

    Args:
        max_retries: Number of retries after the initial attempt. Must be >= 1.
        base_delay: Base backoff delay in seconds. Must be >= 0.
        max_delay: Upper bound for a single backoff delay in seconds.
            Must be >= base_delay.
        jitter_factor: Relative jitter amplitude. Must be in [0, 1].

    Raises:
        ValueError: If any parameter is out of range.

    Example:
        ```pycon
        >>> from smartretry.utils.validation import validate_policy_params
        >>> validate_policy_params(max_retries=3, base_delay=1.0, max_delay=10.0, jitter_factor=0.1)
        >>> validate_policy_params(max_retries=0, base_delay=1.0, max_delay=10.0, jitter_factor=0.1)
        Traceback (most recent call last):
            ...
        ValueError: max_retries must be >= 1, got 0

        ```
    """
    if max_retries < 1:
        msg = f"max_retries must be >= 1, got {max_retries}"
        raise ValueError(msg)
    if base_delay < 0:
        msg = f"base_delay must be >= 0, got {base_delay}"
        raise ValueError(msg)
    if max_delay < base_delay:
        msg = f"max_delay must be >= base_delay ({base_delay}), got {max_delay}"
        raise ValueError(msg)
    if not 0.0 <= jitter_factor <= 1.0:
        msg = f"jitter_factor must be in [0, 1], got {jitter_factor}"
        raise ValueError(msg)


def validate_timeout(timeout: float) -> None:
    """Validate a per-attempt timeout.

    Args:
        timeout: Maximum seconds a single attempt may run. Must be > 0.

    Raises:
        ValueError: If timeout is <= 0.
    """
    if timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)
