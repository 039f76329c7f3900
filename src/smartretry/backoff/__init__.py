r"""Backoff strategies for inter-attempt delays.

This package provides the exponential, linear, fixed and Fibonacci
backoff shapes, and the :class:`BackoffStrategy` enum used to select them
by name in a retry policy.
"""

from __future__ import annotations

__all__ = [
    "BackoffStrategy",
    "BaseBackoffStrategy",
    "ConstantBackoff",
    "ExponentialBackoff",
    "FibonacciBackoff",
    "LinearBackoff",
    "resolve_backoff",
]

from smartretry.backoff.base import BaseBackoffStrategy
from smartretry.backoff.constant import ConstantBackoff
from smartretry.backoff.exponential import ExponentialBackoff
from smartretry.backoff.fibonacci import FibonacciBackoff
from smartretry.backoff.linear import LinearBackoff
from smartretry.backoff.strategy import BackoffStrategy, resolve_backoff
