from __future__ import annotations

import dataclasses
from unittest.mock import patch

import pytest
from coola.equality import objects_are_equal

from smartretry.circuit_breaker import CircuitBreakerRegistry, CircuitState
from smartretry.stats import OperationStats, OperationStatsRegistry


@pytest.fixture
def breakers() -> CircuitBreakerRegistry:
    return CircuitBreakerRegistry()


@pytest.fixture
def stats(breakers: CircuitBreakerRegistry) -> OperationStatsRegistry:
    return OperationStatsRegistry(breakers)


def make_stats(**kwargs) -> OperationStats:
    values = {
        "key": "models-api",
        "consecutive_failures": 0,
        "consecutive_successes": 0,
        "last_failure_time": None,
        "total_retries": 0,
        "total_successes": 0,
        "circuit_state": CircuitState.CLOSED,
    }
    values.update(kwargs)
    return OperationStats(**values)


#####################################
#     Tests for OperationStats     #
#####################################


def test_operation_stats_success_rate_empty() -> None:
    assert make_stats().success_rate == 100.0


@pytest.mark.parametrize(
    ("total_successes", "total_retries", "expected"),
    [(3, 1, 75.0), (0, 4, 0.0), (5, 0, 100.0), (1, 1, 50.0)],
)
def test_operation_stats_success_rate(
    total_successes: int, total_retries: int, expected: float
) -> None:
    stats = make_stats(total_successes=total_successes, total_retries=total_retries)
    assert stats.success_rate == expected


def test_operation_stats_time_since_last_failure_never_failed() -> None:
    assert make_stats().time_since_last_failure == 0.0


def test_operation_stats_time_since_last_failure() -> None:
    stats = make_stats(last_failure_time=1000.0)
    with patch("smartretry.stats.time.time", return_value=1042.0):
        assert stats.time_since_last_failure == 42.0


def test_operation_stats_is_frozen() -> None:
    stats = make_stats()
    with pytest.raises(dataclasses.FrozenInstanceError):
        stats.total_retries = 3


#############################################
#     Tests for OperationStatsRegistry     #
#############################################


def test_operation_stats_registry_get_unknown(stats: OperationStatsRegistry) -> None:
    assert stats.get("never-seen") is None
    assert stats.get_all() == []


def test_operation_stats_registry_ensure(stats: OperationStatsRegistry) -> None:
    stats.ensure("models-api")
    assert stats.get("models-api") == make_stats()


def test_operation_stats_registry_ensure_keeps_counters(stats: OperationStatsRegistry) -> None:
    stats.record_success("models-api")
    stats.ensure("models-api")
    assert stats.get("models-api").total_successes == 1


def test_operation_stats_registry_counters(stats: OperationStatsRegistry) -> None:
    stats.record_attempt_failure("models-api")
    stats.record_attempt_failure("models-api")
    stats.record_success("models-api")
    stats.record_failure("models-api", failure_time=1234.5)
    snapshot = stats.get("models-api")
    assert snapshot.total_retries == 2
    assert snapshot.total_successes == 1
    assert snapshot.last_failure_time == 1234.5


def test_operation_stats_registry_includes_breaker_view(
    breakers: CircuitBreakerRegistry, stats: OperationStatsRegistry
) -> None:
    stats.ensure("models-api")
    for _ in range(5):
        breakers.record_failure("models-api", failure_time=1000.0)
    assert stats.get("models-api") == make_stats(
        consecutive_failures=5, circuit_state=CircuitState.OPEN
    )


def test_operation_stats_registry_snapshots_are_stable(stats: OperationStatsRegistry) -> None:
    """Test that two reads without intervening calls are equal."""
    stats.record_attempt_failure("models-api")
    stats.record_success("models-api")
    assert objects_are_equal(stats.get("models-api"), stats.get("models-api"))
    assert objects_are_equal(stats.get_all(), stats.get_all())


def test_operation_stats_registry_snapshot_is_a_copy(stats: OperationStatsRegistry) -> None:
    stats.record_success("models-api")
    snapshot = stats.get("models-api")
    stats.record_success("models-api")
    assert snapshot.total_successes == 1
    assert stats.get("models-api").total_successes == 2


def test_operation_stats_registry_get_all_in_creation_order(
    stats: OperationStatsRegistry,
) -> None:
    stats.ensure("b")
    stats.ensure("a")
    stats.ensure("c")
    assert [snapshot.key for snapshot in stats.get_all()] == ["b", "a", "c"]


def test_operation_stats_registry_clear(
    breakers: CircuitBreakerRegistry, stats: OperationStatsRegistry
) -> None:
    """Test that clearing a key also drops its circuit breaker."""
    stats.ensure("models-api")
    stats.ensure("upload")
    for _ in range(5):
        breakers.record_failure("models-api")
    stats.clear("models-api")
    assert stats.get("models-api") is None
    assert breakers.get_state("models-api") == CircuitState.CLOSED
    assert breakers.is_admitted("models-api")
    assert stats.get("upload") is not None


def test_operation_stats_registry_clear_unknown(stats: OperationStatsRegistry) -> None:
    stats.clear("never-seen")
    assert stats.get_all() == []


def test_operation_stats_registry_clear_all(
    breakers: CircuitBreakerRegistry, stats: OperationStatsRegistry
) -> None:
    for key in ("models-api", "upload"):
        stats.ensure(key)
        for _ in range(5):
            breakers.record_failure(key)
    stats.clear_all()
    assert stats.get_all() == []
    assert breakers.get_state("models-api") == CircuitState.CLOSED
    assert breakers.get_state("upload") == CircuitState.CLOSED
