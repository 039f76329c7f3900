from __future__ import annotations

import socket

import httpx
import pytest

from smartretry.exceptions import AttemptTimeoutError
from smartretry.failures import TRANSIENT_FAILURE_KINDS, FailureKind, classify_failure

#######################################
#     Tests for classify_failure     #
#######################################


@pytest.mark.parametrize(
    "exc",
    [
        TimeoutError("slow"),
        AttemptTimeoutError("models-api", 1.0, 0),
        httpx.ReadTimeout("slow read"),
        httpx.ConnectTimeout("slow connect"),
        httpx.PoolTimeout("pool exhausted"),
    ],
)
def test_classify_failure_timeout(exc: Exception) -> None:
    assert classify_failure(exc) == FailureKind.TIMEOUT


@pytest.mark.parametrize(
    "exc",
    [
        ConnectionError("lost"),
        ConnectionRefusedError("refused"),
        ConnectionResetError("reset"),
        BrokenPipeError("broken"),
        httpx.ConnectError("refused"),
        httpx.ReadError("connection closed"),
    ],
)
def test_classify_failure_connection(exc: Exception) -> None:
    assert classify_failure(exc) == FailureKind.CONNECTION


def test_classify_failure_host_unresolved() -> None:
    assert classify_failure(socket.gaierror(-2, "Name or service not known")) == (
        FailureKind.HOST_UNRESOLVED
    )


@pytest.mark.parametrize(
    "exc",
    [
        ValueError("bad payload"),
        KeyError("missing"),
        OSError("disk full"),
        RuntimeError("boom"),
        httpx.DecodingError("bad encoding"),
    ],
)
def test_classify_failure_other(exc: Exception) -> None:
    assert classify_failure(exc) == FailureKind.OTHER


def test_transient_failure_kinds() -> None:
    """Test that every kind except OTHER is transient."""
    assert TRANSIENT_FAILURE_KINDS == frozenset(
        {FailureKind.TIMEOUT, FailureKind.CONNECTION, FailureKind.HOST_UNRESOLVED}
    )
