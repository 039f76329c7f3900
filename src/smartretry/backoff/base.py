r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy maps the index of a failed attempt to the raw delay
    to wait before the next attempt. Clamping and jitter are applied on top
    of this value by ``smartretry.utils.sleep.calculate_sleep_time``.
    """

    @abstractmethod
    def calculate(self, attempt: int) -> float:
        """Calculate the raw delay after a failed attempt.

        Args:
            attempt: The index of the attempt that just failed (0-indexed).
                attempt=0 is the delay before the first retry.

        Returns:
            The delay in seconds, before clamping and jitter.
        """
