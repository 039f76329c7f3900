r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

from smartretry.backoff.base import BaseBackoffStrategy


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy.

    Calculates delay as: base_delay * (2 ** attempt). This is the shape
    used by the network and streaming presets.

    Args:
        base_delay: The delay in seconds before the first retry.

    Example:
        ```pycon
        >>> from smartretry.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(base_delay=0.5)
        >>> [backoff.calculate(attempt) for attempt in range(4)]
        [0.5, 1.0, 2.0, 4.0]

        ```
    """

    def __init__(self, base_delay: float = 1.0) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)
        self.base_delay = base_delay

    def calculate(self, attempt: int) -> float:
        return self.base_delay * (2**attempt)
