from __future__ import annotations

import pytest

from smartretry.utils.validation import validate_policy_params, validate_timeout

###############################################
#     Tests for validate_policy_params       #
###############################################


def test_validate_policy_params_valid() -> None:
    validate_policy_params(max_retries=1, base_delay=0.0, max_delay=0.0, jitter_factor=0.0)
    validate_policy_params(max_retries=5, base_delay=2.0, max_delay=30.0, jitter_factor=1.0)


@pytest.mark.parametrize(
    ("params", "message"),
    [
        ({"max_retries": 0}, r"max_retries must be >= 1, got 0"),
        ({"base_delay": -0.1}, r"base_delay must be >= 0, got -0.1"),
        ({"max_delay": 0.5}, r"max_delay must be >= base_delay"),
        ({"jitter_factor": -0.1}, r"jitter_factor must be in \[0, 1\], got -0.1"),
        ({"jitter_factor": 1.5}, r"jitter_factor must be in \[0, 1\], got 1.5"),
    ],
)
def test_validate_policy_params_invalid(params: dict, message: str) -> None:
    values = {"max_retries": 3, "base_delay": 1.0, "max_delay": 10.0, "jitter_factor": 0.1}
    values.update(params)
    with pytest.raises(ValueError, match=message):
        validate_policy_params(**values)


#########################################
#     Tests for validate_timeout       #
#########################################


def test_validate_timeout_valid() -> None:
    validate_timeout(0.01)


@pytest.mark.parametrize("timeout", [0, -1.0])
def test_validate_timeout_invalid(timeout: float) -> None:
    with pytest.raises(ValueError, match=r"timeout must be > 0"):
        validate_timeout(timeout)
