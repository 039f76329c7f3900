r"""Configuration defaults for the retry engine.

This module gathers the documented default values used by retry
policies and by the circuit breaker registry.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_BASE_DELAY",
    "DEFAULT_JITTER_FACTOR",
    "DEFAULT_MAX_DELAY",
    "DEFAULT_MAX_RETRIES",
    "FAILURE_THRESHOLD",
    "RESET_TIMEOUT",
    "SUCCESS_THRESHOLD",
]

# Default maximum number of retries
# Total attempts = max_retries + 1 (initial attempt)
DEFAULT_MAX_RETRIES = 3

# Default base delay in seconds fed to the backoff strategy
DEFAULT_BASE_DELAY = 1.0

# Default upper bound in seconds for a single backoff delay (before jitter)
DEFAULT_MAX_DELAY = 30.0

# Default jitter factor: delays are perturbed by up to +/-10%
DEFAULT_JITTER_FACTOR = 0.1

# Consecutive terminal failures that trip a CLOSED circuit to OPEN
FAILURE_THRESHOLD = 5

# Seconds an OPEN circuit waits after the last failure before admitting a trial call
RESET_TIMEOUT = 60.0

# Consecutive HALF_OPEN successes needed to close the circuit again
SUCCESS_THRESHOLD = 3
