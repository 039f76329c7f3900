r"""Constant (fixed) backoff strategy."""

from __future__ import annotations

__all__ = ["ConstantBackoff"]

from smartretry.backoff.base import BaseBackoffStrategy


class ConstantBackoff(BaseBackoffStrategy):
    """Constant backoff strategy.

    Every retry waits the same delay, whatever the attempt index.

    Args:
        base_delay: The fixed delay in seconds.

    Example:
        ```pycon
        >>> from smartretry.backoff import ConstantBackoff
        >>> backoff = ConstantBackoff(base_delay=0.2)
        >>> backoff.calculate(0), backoff.calculate(7)
        (0.2, 0.2)

        ```
    """

    def __init__(self, base_delay: float = 1.0) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)
        self.base_delay = base_delay

    def calculate(self, attempt: int) -> float:  # noqa: ARG002
        return self.base_delay
