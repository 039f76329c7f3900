from __future__ import annotations

from unittest.mock import Mock, patch

from smartretry.callbacks import (
    AttemptInfo,
    CallbackConfig,
    FailureInfo,
    RetryInfo,
    SuccessInfo,
)
from smartretry.retry import CallbackManager

######################################
#     Tests for CallbackManager     #
######################################


def test_callback_manager_without_callbacks() -> None:
    """Test that every hook is a no-op without callbacks."""
    manager = CallbackManager()
    manager.on_attempt("db", 0, 3)
    manager.on_retry("db", 0, 3, 1.0, ValueError())
    manager.on_success("db", 0, 3, "ok", 0.0)
    manager.on_failure("db", 2, 3, ValueError(), True, 0.0)


def test_callback_manager_on_attempt(mock_callback: Mock) -> None:
    CallbackManager(CallbackConfig(on_attempt=mock_callback)).on_attempt("db", 0, 3)
    mock_callback.assert_called_once_with(
        AttemptInfo(operation_key="db", attempt=1, max_attempts=3)
    )


def test_callback_manager_on_retry(mock_callback: Mock) -> None:
    """Test that the first retry is reported as attempt 2."""
    error = ConnectionResetError("reset")
    CallbackManager(CallbackConfig(on_retry=mock_callback)).on_retry("db", 0, 3, 0.5, error)
    mock_callback.assert_called_once_with(
        RetryInfo(operation_key="db", attempt=2, max_attempts=3, wait_time=0.5, error=error)
    )


def test_callback_manager_on_success(mock_callback: Mock) -> None:
    manager = CallbackManager(CallbackConfig(on_success=mock_callback))
    with patch("smartretry.retry.manager.time.time", return_value=102.5):
        manager.on_success("db", 1, 3, "ok", start_time=100.0)
    mock_callback.assert_called_once_with(
        SuccessInfo(operation_key="db", attempt=2, max_attempts=3, value="ok", total_time=2.5)
    )


def test_callback_manager_on_failure(mock_callback: Mock) -> None:
    error = ValueError("bad input")
    manager = CallbackManager(CallbackConfig(on_failure=mock_callback))
    with patch("smartretry.retry.manager.time.time", return_value=101.0):
        manager.on_failure("db", 0, 3, error, retryable=False, start_time=100.0)
    mock_callback.assert_called_once_with(
        FailureInfo(
            operation_key="db",
            attempt=1,
            max_attempts=3,
            error=error,
            retryable=False,
            total_time=1.0,
        )
    )
