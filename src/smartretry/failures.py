r"""Failure classification for retry decisions.

Operation failures are mapped onto a small closed set of
:class:`FailureKind` tags. The retry loop branches on the tag rather than
on the exception hierarchy, so custom policies only need to list the kinds
they consider transient.

Example:
    ```pycon
    >>> import socket
    >>> from smartretry.failures import FailureKind, classify_failure
    >>> classify_failure(TimeoutError("slow"))
    <FailureKind.TIMEOUT: 'timeout'>
    >>> classify_failure(socket.gaierror("no such host"))
    <FailureKind.HOST_UNRESOLVED: 'host_unresolved'>
    >>> classify_failure(ValueError("bad payload"))
    <FailureKind.OTHER: 'other'>

    ```
"""

from __future__ import annotations

__all__ = ["TRANSIENT_FAILURE_KINDS", "FailureKind", "classify_failure"]

import socket
from enum import Enum

import httpx


class FailureKind(Enum):
    """Kinds of operation failures.

    Attributes:
        TIMEOUT: The operation (or a single attempt) took too long.
        CONNECTION: The connection could not be established or was lost.
        HOST_UNRESOLVED: The host name could not be resolved.
        OTHER: Anything else. Not retried by default.
    """

    TIMEOUT = "timeout"
    CONNECTION = "connection"
    HOST_UNRESOLVED = "host_unresolved"
    OTHER = "other"


# Kinds retried by default ("transient network" failures)
TRANSIENT_FAILURE_KINDS = frozenset(
    {FailureKind.TIMEOUT, FailureKind.CONNECTION, FailureKind.HOST_UNRESOLVED}
)


def classify_failure(exc: BaseException) -> FailureKind:
    """Classify an exception raised by an operation.

    Args:
        exc: The exception raised by the operation.

    Returns:
        The failure kind of the exception.

    Example:
        ```pycon
        >>> import httpx
        >>> from smartretry.failures import classify_failure
        >>> classify_failure(httpx.ConnectError("refused"))
        <FailureKind.CONNECTION: 'connection'>
        >>> classify_failure(httpx.ReadTimeout("slow"))
        <FailureKind.TIMEOUT: 'timeout'>

        ```
    """
    if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
        return FailureKind.TIMEOUT
    if isinstance(exc, socket.gaierror):
        return FailureKind.HOST_UNRESOLVED
    if isinstance(exc, (httpx.NetworkError, ConnectionError)):
        return FailureKind.CONNECTION
    return FailureKind.OTHER
