r"""Outcome values returned by the retry executors.

Every call ends with exactly one of three outcomes:

- :class:`Success`: the operation returned a value
- :class:`Failure`: every attempt failed, or a non-retryable failure occurred
- :class:`CircuitOpen`: the operation was never invoked

Example:
    ```pycon
    >>> from smartretry.outcome import CircuitOpen, Failure, Success
    >>> def describe(outcome):
    ...     match outcome:
    ...         case Success(value=value, attempts_used=attempts):
    ...             return f"got {value} after {attempts} attempt(s)"
    ...         case Failure(last_error=error):
    ...             return f"failed: {error}"
    ...         case CircuitOpen(operation_key=key):
    ...             return f"{key} is unavailable"
    ...
    >>> describe(Success(value=42, attempts_used=2))
    'got 42 after 2 attempt(s)'
    >>> describe(CircuitOpen(operation_key="models-api"))
    'models-api is unavailable'

    ```
"""

from __future__ import annotations

__all__ = ["CircuitOpen", "Failure", "Outcome", "Success"]

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

from smartretry.exceptions import CircuitOpenError
from smartretry.failures import FailureKind, classify_failure

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """The operation returned a value.

    Attributes:
        value: The value returned by the operation.
        attempts_used: Number of attempts run, including the successful one.
    """

    value: T
    attempts_used: int

    def unwrap(self) -> T:
        """Return the value."""
        return self.value


@dataclass(frozen=True)
class Failure:
    """The call failed.

    Attributes:
        last_error: The exception raised by the last attempt.
        attempts_used: Number of attempts run.
    """

    last_error: Exception
    attempts_used: int

    @property
    def kind(self) -> FailureKind:
        """The failure kind of the last error."""
        return classify_failure(self.last_error)

    def unwrap(self) -> NoReturn:
        """Re-raise the last error."""
        raise self.last_error


@dataclass(frozen=True)
class CircuitOpen:
    """The circuit of the operation key refused the call.

    Attributes:
        operation_key: The key whose circuit is open.
    """

    operation_key: str

    def unwrap(self) -> NoReturn:
        """Raise :class:`~smartretry.exceptions.CircuitOpenError`."""
        raise CircuitOpenError(self.operation_key)


Outcome = Union[Success[T], Failure, CircuitOpen]
