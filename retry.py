"""
Retry decorator with exponential backoff.

Used by adapters to handle transient Dropbox API failures (rate limits,
5xx responses, dropped connections).
"""

import random
import time
from functools import wraps
from typing import TypeVar, Callable, ParamSpec

import httpx

from logging_config import logger, log_retry
from models import DbxError, ErrorKind

T = TypeVar("T")
P = ParamSpec("P")


# Exceptions that should trigger retry
RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    ConnectionError,
    TimeoutError,
    httpx.TimeoutException,
    httpx.TransportError,
)

# HTTP status codes that should trigger retry
RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({
    429,  # Rate limited
    500,  # Internal server error
    502,  # Bad gateway
    503,  # Service unavailable
    504,  # Gateway timeout
})

# Cap on a server-provided Retry-After before we give up waiting (seconds)
MAX_RETRY_AFTER = 60.0


def _get_http_status(exception: Exception) -> int | None:
    """
    Extract HTTP status code from exception if available.

    Works with httpx.HTTPStatusError, DbxError details, and
    requests-style exceptions.
    """
    if isinstance(exception, DbxError):
        status = exception.details.get("status")
        return status if isinstance(status, int) else None

    # httpx.HTTPStatusError carries the response
    response = getattr(exception, "response", None)
    if response is not None and hasattr(response, "status_code"):
        status = response.status_code
        if isinstance(status, int):
            return status

    # Check for status_code attribute (requests-style)
    if hasattr(exception, "status_code"):
        status = exception.status_code
        if isinstance(status, int):
            return status

    return None


def _should_retry(exception: Exception) -> bool:
    """Determine if an exception is retryable."""
    if isinstance(exception, DbxError):
        return exception.retryable

    # Check if it's a known retryable exception type
    if isinstance(exception, RETRYABLE_EXCEPTIONS):
        return True

    # Check for HTTP status code
    status = _get_http_status(exception)
    if status is not None and status in RETRYABLE_STATUS_CODES:
        return True

    return False


def _convert_to_dbx_error(exception: Exception) -> DbxError:
    """Convert an exception to a DbxError if not already one."""
    if isinstance(exception, DbxError):
        return exception

    # Check HTTP status first (more reliable than string matching)
    status = _get_http_status(exception)
    if status is not None:
        if status == 401:
            return DbxError(ErrorKind.AUTH_EXPIRED, str(exception))
        elif status == 403:
            return DbxError(ErrorKind.PERMISSION_DENIED, str(exception))
        elif status == 404:
            return DbxError(ErrorKind.NOT_FOUND, str(exception))
        elif status == 429:
            return DbxError(ErrorKind.RATE_LIMITED, str(exception), retryable=True)
        elif status >= 500:
            return DbxError(ErrorKind.SERVER_ERROR, str(exception), retryable=True)

    # Fall back to exception type
    if isinstance(exception, (httpx.TimeoutException, TimeoutError)):
        return DbxError(ErrorKind.TIMEOUT, str(exception), retryable=True)
    if isinstance(exception, (httpx.TransportError, ConnectionError)):
        return DbxError(ErrorKind.NETWORK_ERROR, str(exception), retryable=True)

    return DbxError(ErrorKind.UNKNOWN, str(exception))


def _calculate_wait_with_jitter(
    delay_ms: int,
    attempt: int,
    backoff_multiplier: float,
    jitter: float,
) -> int:
    """
    Exponential backoff with symmetric jitter.

    attempt is zero-based: attempt 0 waits ~delay_ms, attempt n waits
    ~delay_ms * backoff_multiplier**n, spread by +/- jitter fraction.
    """
    base = delay_ms * (backoff_multiplier ** attempt)
    spread = base * jitter
    return max(0, int(base + random.uniform(-spread, spread)))


def _retry_after_ms(exception: Exception) -> int | None:
    """Server-provided wait (Retry-After) in milliseconds, if any."""
    retry_after = getattr(exception, "retry_after", None)
    if isinstance(retry_after, (int, float)) and retry_after >= 0:
        return int(min(retry_after, MAX_RETRY_AFTER) * 1000)
    return None


def with_retry(
    max_attempts: int = 3,
    delay_ms: int = 1000,
    backoff_multiplier: float = 2.0,
    jitter: float = 0.1,
    convert_errors: bool = True,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Retry decorator with exponential backoff.

    Args:
        max_attempts: Maximum number of attempts (including the first)
        delay_ms: Initial delay in milliseconds
        backoff_multiplier: Multiplier for exponential backoff
        jitter: Random spread as a fraction of each delay
        convert_errors: Convert exceptions to DbxError on final failure

    Returns:
        Decorated function with retry logic

    Example:
        @with_retry(max_attempts=3, delay_ms=1000)
        def send(call: PreparedCall) -> httpx.Response:
            return client.post(call.url, headers=call.headers, content=call.content)
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            last_exception: Exception | None = None

            for attempt in range(max_attempts):
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    last_exception = e

                    if not _should_retry(e) or attempt == max_attempts - 1:
                        logger.error(
                            f"{func.__name__} failed after {attempt + 1} attempts: {e}"
                        )
                        if convert_errors:
                            converted = _convert_to_dbx_error(e)
                            if converted is e:
                                raise
                            raise converted from e
                        raise

                    wait_ms = _retry_after_ms(e)
                    if wait_ms is None:
                        wait_ms = _calculate_wait_with_jitter(
                            delay_ms, attempt, backoff_multiplier, jitter
                        )
                    log_retry(attempt + 1, max_attempts, wait_ms, str(e))
                    time.sleep(wait_ms / 1000)

            # Should never reach here, but satisfy type checker
            assert last_exception is not None
            if convert_errors:
                raise _convert_to_dbx_error(last_exception) from last_exception
            raise last_exception

        return wrapper

    return decorator
