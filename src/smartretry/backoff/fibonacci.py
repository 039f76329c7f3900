r"""Fibonacci backoff strategy."""

from __future__ import annotations

__all__ = ["FibonacciBackoff", "fibonacci"]

from smartretry.backoff.base import BaseBackoffStrategy


def fibonacci(n: int) -> int:
    """Return the nth Fibonacci number with ``fib(0) = 0`` and ``fib(1) =
    1``.

    Args:
        n: The position in the sequence. Negative values are treated as 0.

    Returns:
        The nth Fibonacci number.

    Example:
        ```pycon
        >>> from smartretry.backoff.fibonacci import fibonacci
        >>> [fibonacci(n) for n in range(8)]
        [0, 1, 1, 2, 3, 5, 8, 13]

        ```
    """
    a, b = 0, 1
    for _ in range(max(n, 0)):
        a, b = b, a + b
    return a


class FibonacciBackoff(BaseBackoffStrategy):
    """Fibonacci backoff strategy.

    Calculates delay as: base_delay * fib(attempt + 1), which gives the
    multipliers 1, 1, 2, 3, 5, 8, ... for attempts 0, 1, 2, 3, 4, 5, ...

    Args:
        base_delay: The delay in seconds multiplied by the Fibonacci number.

    Example:
        ```pycon
        >>> from smartretry.backoff import FibonacciBackoff
        >>> backoff = FibonacciBackoff(base_delay=1.0)
        >>> [backoff.calculate(attempt) for attempt in range(5)]
        [1.0, 1.0, 2.0, 3.0, 5.0]

        ```
    """

    def __init__(self, base_delay: float = 1.0) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)
        self.base_delay = base_delay

    def calculate(self, attempt: int) -> float:
        return self.base_delay * fibonacci(attempt + 1)
