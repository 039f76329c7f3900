r"""Retry package implementing the retry loop by composition.

Public API:
    - RetryDecider: Logic for deciding whether to retry a failure
    - CallbackManager: Manager for callback invocations
    - RetryExecutor: Synchronous retry executor
    - AsyncRetryExecutor: Asynchronous retry executor
"""

from __future__ import annotations

__all__ = [
    "AsyncRetryExecutor",
    "CallbackManager",
    "RetryDecider",
    "RetryExecutor",
]

from smartretry.retry.decider import RetryDecider
from smartretry.retry.executor import RetryExecutor
from smartretry.retry.executor_async import AsyncRetryExecutor
from smartretry.retry.manager import CallbackManager
