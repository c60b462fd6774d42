"""
Bounded retry with exponential backoff.

with_retry() runs any zero-argument callable, so callers bind their own
arguments and per-instance retry settings with a lambda.

Delay before attempt n+1 is min(base_delay * 2^(n-1), max_delay), so the
defaults sleep 1s, 2s, 4s, ... capped at 10s. The final failure is always
re-raised unchanged.
"""
import logging
import time
from typing import Callable, Optional, Tuple, Type, TypeVar

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 1.0
DEFAULT_MAX_DELAY = 10.0


def backoff_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    """Delay to wait after the given (1-based) failed attempt."""
    return min(base_delay * (2 ** (attempt - 1)), max_delay)


def with_retry(
    operation: Callable[[], T],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay: float = DEFAULT_BASE_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
    logger: Optional[logging.Logger] = None,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,)
) -> T:
    """
    Call operation until it succeeds or max_attempts is reached.

    Args:
        operation: Zero-argument callable to run
        max_attempts: Maximum number of attempts (default: 3)
        base_delay: Initial delay in seconds (default: 1.0)
        max_delay: Upper bound on any single delay (default: 10.0)
        logger: Logger for retry messages (default: module logger)
        retry_on: Exception types that trigger a retry; others propagate at once

    Returns:
        Whatever operation returns on its first successful attempt

    Raises:
        The exception from the final attempt, unchanged
    """
    log = logger or logging.getLogger(__name__)
    attempt = 1
    while True:
        try:
            return operation()
        except retry_on as e:
            if attempt >= max_attempts:
                log.error(f"All {max_attempts} attempts failed: {e}")
                raise

            delay = backoff_delay(attempt, base_delay, max_delay)
            log.warning(
                f"Attempt {attempt}/{max_attempts} failed: {e}. Retrying in {delay}s..."
            )
            time.sleep(delay)
            attempt += 1

