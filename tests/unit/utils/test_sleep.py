r"""Unit tests for backoff delay calculation."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from smartretry.backoff import BackoffStrategy, ConstantBackoff
from smartretry.policy import RetryPolicy
from smartretry.utils.sleep import calculate_sleep_time

#############################################
#     Tests for calculate_sleep_time       #
#############################################


@pytest.mark.parametrize("attempt", range(8))
def test_calculate_sleep_time_fixed_within_jitter_bounds(attempt: int) -> None:
    """Test that FIXED delays stay within base_delay * (1 +/- jitter)."""
    policy = RetryPolicy(
        base_delay=2.0, max_delay=10.0, jitter_factor=0.25, backoff_strategy=BackoffStrategy.FIXED
    )
    for _ in range(50):
        delay = calculate_sleep_time(attempt, policy)
        assert abs(delay - 2.0) <= 2.0 * 0.25


@pytest.mark.parametrize("attempt", range(12))
def test_calculate_sleep_time_exponential_bounded_by_max_delay(attempt: int) -> None:
    """Test that clamped exponential delays never exceed max_delay * (1 +
    jitter)."""
    policy = RetryPolicy(base_delay=1.0, max_delay=5.0, jitter_factor=0.5)
    for _ in range(50):
        assert 0.0 <= calculate_sleep_time(attempt, policy) <= 5.0 * 1.5


def test_calculate_sleep_time_exponential_without_jitter() -> None:
    policy = RetryPolicy(base_delay=1.0, max_delay=5.0, jitter_factor=0.0)
    assert [calculate_sleep_time(attempt, policy) for attempt in range(5)] == [
        1.0,
        2.0,
        4.0,
        5.0,
        5.0,
    ]


def test_calculate_sleep_time_fibonacci_without_jitter() -> None:
    policy = RetryPolicy(
        base_delay=1.0,
        max_delay=100.0,
        jitter_factor=0.0,
        backoff_strategy=BackoffStrategy.FIBONACCI,
    )
    assert [calculate_sleep_time(attempt, policy) for attempt in range(4)] == [1.0, 1.0, 2.0, 3.0]


def test_calculate_sleep_time_linear_without_jitter() -> None:
    policy = RetryPolicy(
        base_delay=0.5, max_delay=1.0, jitter_factor=0.0, backoff_strategy=BackoffStrategy.LINEAR
    )
    assert [calculate_sleep_time(attempt, policy) for attempt in range(3)] == [0.5, 1.0, 1.0]


@pytest.mark.parametrize(("draw", "expected"), [(1.0, 3.0), (-1.0, 1.0), (0.0, 2.0)])
def test_calculate_sleep_time_applies_symmetric_jitter(draw: float, expected: float) -> None:
    """Test that the jitter is clamped * jitter_factor * U(-1, 1)."""
    policy = RetryPolicy(
        base_delay=2.0, max_delay=2.0, jitter_factor=0.5, backoff_strategy=BackoffStrategy.FIXED
    )
    with patch("smartretry.utils.sleep.random.uniform", return_value=draw) as uniform:
        assert calculate_sleep_time(0, policy) == expected
    uniform.assert_called_once_with(-1.0, 1.0)


def test_calculate_sleep_time_never_negative() -> None:
    policy = RetryPolicy(
        base_delay=1.0, max_delay=1.0, jitter_factor=1.0, backoff_strategy=BackoffStrategy.FIXED
    )
    with patch("smartretry.utils.sleep.random.uniform", return_value=-1.0):
        assert calculate_sleep_time(0, policy) == 0.0


def test_calculate_sleep_time_draws_independently() -> None:
    """Test that consecutive calls draw new jitter values."""
    policy = RetryPolicy(base_delay=1.0, max_delay=1.0, jitter_factor=1.0)
    delays = {calculate_sleep_time(0, policy) for _ in range(20)}
    assert len(delays) > 1


def test_calculate_sleep_time_custom_strategy_clamped() -> None:
    """Test that a custom strategy is still clamped to max_delay."""
    policy = RetryPolicy(
        base_delay=0.0,
        max_delay=2.0,
        jitter_factor=0.0,
        backoff_strategy=ConstantBackoff(base_delay=9.0),
    )
    assert calculate_sleep_time(0, policy) == 2.0
