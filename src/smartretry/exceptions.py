r"""Exceptions raised by the retry engine."""

from __future__ import annotations

__all__ = ["AttemptTimeoutError", "CircuitOpenError"]


class CircuitOpenError(RuntimeError):
    """Exception raised when a call is refused by an open circuit.

    The executors never raise this exception: they return a
    ``CircuitOpen`` outcome instead. It is raised by the helpers that
    convert an outcome back into a value or an exception.

    Args:
        operation_key: The key of the operation whose circuit is open.

    Example:
        ```pycon
        >>> from smartretry.exceptions import CircuitOpenError
        >>> raise CircuitOpenError("models-api")
        Traceback (most recent call last):
            ...
        smartretry.exceptions.CircuitOpenError: Circuit breaker is open for operation: models-api

        ```
    """

    def __init__(self, operation_key: str) -> None:
        super().__init__(f"Circuit breaker is open for operation: {operation_key}")
        self.operation_key = operation_key


class AttemptTimeoutError(TimeoutError):
    """Exception used when a single attempt exceeds its deadline.

    Args:
        operation_key: The key of the operation that timed out.
        timeout: The per-attempt deadline in seconds.
        attempt: The attempt number (0-indexed).
    """

    def __init__(self, operation_key: str, timeout: float, attempt: int) -> None:
        super().__init__(
            f"Attempt {attempt + 1} of operation '{operation_key}' timed out after {timeout}s"
        )
        self.operation_key = operation_key
        self.timeout = timeout
        self.attempt = attempt
