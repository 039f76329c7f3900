r"""Utility functions for the retry engine."""

from __future__ import annotations

__all__ = [
    "calculate_sleep_time",
    "validate_policy_params",
    "validate_timeout",
]

from smartretry.utils.sleep import calculate_sleep_time
from smartretry.utils.validation import validate_policy_params, validate_timeout
