r"""Named backoff strategies used by retry policies."""

from __future__ import annotations

__all__ = ["BackoffStrategy", "resolve_backoff"]

from enum import Enum

from smartretry.backoff.base import BaseBackoffStrategy
from smartretry.backoff.constant import ConstantBackoff
from smartretry.backoff.exponential import ExponentialBackoff
from smartretry.backoff.fibonacci import FibonacciBackoff
from smartretry.backoff.linear import LinearBackoff


class BackoffStrategy(Enum):
    """Backoff shapes selectable by name in a retry policy.

    Attributes:
        EXPONENTIAL: ``base_delay * 2 ** attempt``.
        LINEAR: ``base_delay * (attempt + 1)``.
        FIXED: ``base_delay``.
        FIBONACCI: ``base_delay * fib(attempt + 1)``.
    """

    EXPONENTIAL = "exponential"
    LINEAR = "linear"
    FIXED = "fixed"
    FIBONACCI = "fibonacci"

    def create(self, base_delay: float) -> BaseBackoffStrategy:
        """Instantiate the strategy class implementing this shape.

        Args:
            base_delay: The base delay in seconds.

        Returns:
            The backoff strategy instance.

        Example:
            ```pycon
            >>> from smartretry.backoff import BackoffStrategy
            >>> BackoffStrategy.LINEAR.create(0.5).calculate(2)
            1.5

            ```
        """
        return _STRATEGY_CLASSES[self](base_delay=base_delay)


_STRATEGY_CLASSES: dict[BackoffStrategy, type[BaseBackoffStrategy]] = {
    BackoffStrategy.EXPONENTIAL: ExponentialBackoff,
    BackoffStrategy.LINEAR: LinearBackoff,
    BackoffStrategy.FIXED: ConstantBackoff,
    BackoffStrategy.FIBONACCI: FibonacciBackoff,
}


def resolve_backoff(
    strategy: BackoffStrategy | BaseBackoffStrategy, base_delay: float
) -> BaseBackoffStrategy:
    """Return a strategy instance for a named or custom strategy.

    Args:
        strategy: A named strategy or an already-built custom strategy.
            Custom strategies are returned unchanged and ignore ``base_delay``.
        base_delay: The base delay used to build named strategies.

    Returns:
        The backoff strategy instance.
    """
    if isinstance(strategy, BaseBackoffStrategy):
        return strategy
    return strategy.create(base_delay)
