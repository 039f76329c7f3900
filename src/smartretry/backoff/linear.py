r"""Linear backoff strategy."""

from __future__ import annotations

__all__ = ["LinearBackoff"]

from smartretry.backoff.base import BaseBackoffStrategy


class LinearBackoff(BaseBackoffStrategy):
    """Linear backoff strategy.

    Calculates delay as: base_delay * (attempt + 1), so each retry waits
    one more base step than the previous one.

    Args:
        base_delay: The delay step in seconds.

    Example:
        ```pycon
        >>> from smartretry.backoff import LinearBackoff
        >>> backoff = LinearBackoff(base_delay=0.5)
        >>> [backoff.calculate(attempt) for attempt in range(3)]
        [0.5, 1.0, 1.5]

        ```
    """

    def __init__(self, base_delay: float = 1.0) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)
        self.base_delay = base_delay

    def calculate(self, attempt: int) -> float:
        return self.base_delay * (attempt + 1)
