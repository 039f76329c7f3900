from __future__ import annotations

import socket
from unittest.mock import Mock

import pytest

from smartretry.exceptions import AttemptTimeoutError
from smartretry.policy import RetryPolicy
from smartretry.retry import RetryDecider

###################################
#     Tests for RetryDecider     #
###################################


@pytest.mark.parametrize(
    ("exc", "reason"),
    [
        (ConnectionRefusedError("refused"), "connection"),
        (TimeoutError("slow"), "timeout"),
        (AttemptTimeoutError("db", 1.0, 0), "timeout"),
        (socket.gaierror(-2, "unknown host"), "host_unresolved"),
    ],
)
def test_should_retry_transient(exc: Exception, reason: str) -> None:
    assert RetryDecider(RetryPolicy()).should_retry(exc) == (True, reason)


def test_should_retry_non_retryable() -> None:
    decider = RetryDecider(RetryPolicy())
    assert decider.should_retry(ValueError("bad input")) == (False, "non-retryable ValueError")


def test_should_retry_custom_predicate() -> None:
    retry_if = Mock(return_value=True)
    decider = RetryDecider(RetryPolicy(retry_if=retry_if))
    exc = KeyError("missing")
    assert decider.should_retry(exc, attempt=1) == (True, "other")
    retry_if.assert_called_once_with(exc, 1)


def test_should_retry_does_not_depend_on_remaining_attempts() -> None:
    """Test that the last attempt index does not change the decision."""
    decider = RetryDecider(RetryPolicy(max_retries=1))
    assert decider.should_retry(ConnectionResetError("reset"), attempt=1) == (True, "connection")
