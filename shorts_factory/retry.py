"""
Retry Logic with Exponential Backoff

Wraps fallible provider coroutines with bounded exponential-backoff retry.
Only rate-limit errors are retried; every other failure propagates
unchanged on the first occurrence. The cancellation token is checked
before every attempt, including the first.
"""

import logging
from asyncio import sleep
from typing import Awaitable, Callable, Optional, TypeVar

from shorts_factory.cancellation import CancellationToken, check_cancelled
from shorts_factory.errors import ProviderError, RateLimitError, status_of


logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_INITIAL_DELAY_MS = 2000

RATE_LIMIT_STATUS = 429


def is_rate_limit_error(error: Exception) -> bool:
    """Check if an error signals provider throttling.

    Args:
        error: Exception to check

    Returns:
        True for RateLimitError or errors carrying status 429. The message
        is only inspected for unclassified errors without a status.
    """
    if isinstance(error, RateLimitError):
        return True
    status = status_of(error)
    if status is not None:
        return status == RATE_LIMIT_STATUS
    if isinstance(error, ProviderError):
        return False
    return "429" in str(error)


def calculate_backoff_delay(attempt: int, initial_delay_ms: int = DEFAULT_INITIAL_DELAY_MS) -> float:
    """Calculate exponential backoff delay in milliseconds.

    Uses delay = initial_delay_ms * 2 ** (attempt - 1), with attempt being
    the 1-based number of the attempt that just failed:
    - after attempt 1: 2000ms
    - after attempt 2: 4000ms

    Args:
        attempt: Number of the failed attempt (1-indexed)
        initial_delay_ms: Base delay in milliseconds

    Returns:
        Delay in milliseconds
    """
    return initial_delay_ms * (2 ** (attempt - 1))


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    initial_delay_ms: int = DEFAULT_INITIAL_DELAY_MS,
    token: Optional[CancellationToken] = None,
    label: str = "operation",
) -> T:
    """Run ``operation`` with rate-limit retry.

    Retrying a paid generation call may incur duplicate cost; this layer
    does not try to prevent that.

    Args:
        operation: Zero-argument coroutine function
        max_attempts: Maximum number of attempts (>= 1)
        initial_delay_ms: Delay before the second attempt, doubled afterwards
        token: Optional cancellation token checked before every attempt
        label: Name used in log messages

    Returns:
        Result of the first successful attempt

    Raises:
        GenerationCancelled: If the token is cancelled at an attempt boundary
        Exception: The last error, unchanged, when it is not a rate limit or
            when attempts are exhausted

    Example:
        >>> script_json = await with_retry(
        ...     lambda: provider.generate_script_json(topic, language),
        ...     max_attempts=3,
        ...     initial_delay_ms=2000,
        ...     token=token,
        ... )
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        check_cancelled(token)
        try:
            return await operation()
        except Exception as e:
            if not is_rate_limit_error(e) or attempt == max_attempts:
                if attempt > 1:
                    logger.error(
                        f"{label} failed on attempt {attempt}/{max_attempts}: "
                        f"{type(e).__name__}: {e}"
                    )
                raise

            delay_ms = calculate_backoff_delay(attempt, initial_delay_ms)
            logger.warning(
                f"Rate limit in {label} (attempt {attempt}/{max_attempts}). "
                f"Retrying in {delay_ms}ms..."
            )
            await sleep(delay_ms / 1000)

    raise AssertionError("unreachable")
