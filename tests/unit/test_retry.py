"""
Tests for retry decorator and helper functions.

Tests cover:
- _get_http_status: HTTP status extraction from various exception types
- _should_retry: Determining if an exception should trigger retry
- _convert_to_dbx_error: Converting exceptions to DbxError
- _calculate_wait_with_jitter: Backoff calculation
- with_retry decorator, including server-provided Retry-After
"""

import pytest
from unittest.mock import Mock, MagicMock

import httpx

from retry import (
    _get_http_status,
    _should_retry,
    _convert_to_dbx_error,
    _calculate_wait_with_jitter,
    _retry_after_ms,
    with_retry,
    MAX_RETRY_AFTER,
    RETRYABLE_STATUS_CODES,
)
from models import DbxError, ErrorKind


def _status_error(status: int) -> httpx.HTTPStatusError:
    request = httpx.Request("POST", "https://api.dropboxapi.com/2/files/get_metadata")
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)


class TestGetHttpStatus:
    """Tests for _get_http_status function."""

    def test_httpx_status_error(self) -> None:
        """Extract status from httpx.HTTPStatusError."""
        assert _get_http_status(_status_error(404)) == 404

    def test_requests_style_exception(self) -> None:
        """Extract status from requests-style exception."""
        exc = Exception("Request failed")
        exc.status_code = 500
        assert _get_http_status(exc) == 500

    def test_dbx_error_details_status(self) -> None:
        """DbxError carries the status in its details."""
        exc = DbxError(ErrorKind.ENDPOINT_ERROR, "conflict", details={"status": 409})
        assert _get_http_status(exc) == 409

    def test_no_status_returns_none(self) -> None:
        """Plain exception without status returns None."""
        assert _get_http_status(Exception("Generic error")) is None

    def test_non_int_status_ignored(self) -> None:
        """Non-integer status is ignored."""
        exc = Exception("Error")
        exc.status_code = "not_a_number"
        assert _get_http_status(exc) is None


class TestShouldRetry:
    """Tests for _should_retry function."""

    def test_connection_error_is_retryable(self) -> None:
        assert _should_retry(ConnectionError("Connection refused"))

    def test_timeout_error_is_retryable(self) -> None:
        assert _should_retry(TimeoutError("Request timed out"))

    def test_httpx_transport_errors_are_retryable(self) -> None:
        """Dropped connections and read timeouts from httpx retry."""
        assert _should_retry(httpx.ConnectError("refused"))
        assert _should_retry(httpx.ReadTimeout("slow"))

    def test_retryable_dbx_error(self) -> None:
        """DbxError decides for itself via its retryable flag."""
        assert _should_retry(DbxError(ErrorKind.RATE_LIMITED, "slow down", retryable=True))
        assert not _should_retry(DbxError(ErrorKind.NOT_FOUND, "missing"))

    def test_server_errors_are_retryable(self) -> None:
        """HTTP 5xx should trigger retry."""
        for status in [500, 502, 503, 504]:
            assert _should_retry(_status_error(status)), f"HTTP {status} should be retryable"

    def test_rate_limited_is_retryable(self) -> None:
        assert _should_retry(_status_error(429))

    def test_client_errors_are_not_retryable(self) -> None:
        for status in [400, 401, 403, 404, 409]:
            assert not _should_retry(_status_error(status)), f"HTTP {status} should not retry"

    def test_generic_exception_is_not_retryable(self) -> None:
        assert not _should_retry(ValueError("Invalid input"))

    def test_all_retryable_status_codes_covered(self) -> None:
        """Verify all documented retryable codes."""
        assert RETRYABLE_STATUS_CODES == {429, 500, 502, 503, 504}


class TestConvertToDbxError:
    """Tests for _convert_to_dbx_error function."""

    def test_dbx_error_passes_through(self) -> None:
        """Existing DbxError is returned unchanged."""
        original = DbxError(ErrorKind.NOT_FOUND, "File missing")
        assert _convert_to_dbx_error(original) is original

    def test_401_becomes_auth_expired(self) -> None:
        assert _convert_to_dbx_error(_status_error(401)).kind == ErrorKind.AUTH_EXPIRED

    def test_403_becomes_permission_denied(self) -> None:
        assert _convert_to_dbx_error(_status_error(403)).kind == ErrorKind.PERMISSION_DENIED

    def test_404_becomes_not_found(self) -> None:
        assert _convert_to_dbx_error(_status_error(404)).kind == ErrorKind.NOT_FOUND

    def test_429_becomes_rate_limited(self) -> None:
        result = _convert_to_dbx_error(_status_error(429))
        assert result.kind == ErrorKind.RATE_LIMITED
        assert result.retryable

    def test_5xx_becomes_server_error(self) -> None:
        for status in [500, 502, 503, 504]:
            result = _convert_to_dbx_error(_status_error(status))
            assert result.kind == ErrorKind.SERVER_ERROR
            assert result.retryable

    def test_connection_error_becomes_network_error(self) -> None:
        result = _convert_to_dbx_error(ConnectionError("Connection refused"))
        assert result.kind == ErrorKind.NETWORK_ERROR
        assert result.retryable

    def test_httpx_timeout_becomes_timeout(self) -> None:
        result = _convert_to_dbx_error(httpx.ReadTimeout("Timed out"))
        assert result.kind == ErrorKind.TIMEOUT
        assert result.retryable

    def test_unknown_exception_becomes_unknown(self) -> None:
        result = _convert_to_dbx_error(ValueError("Important message"))
        assert result.kind == ErrorKind.UNKNOWN
        assert "Important message" in result.message


class TestCalculateWaitWithJitter:
    """Tests for _calculate_wait_with_jitter function."""

    def test_first_attempt_uses_base_delay(self) -> None:
        results = [_calculate_wait_with_jitter(1000, 0, 2.0, 0.25) for _ in range(100)]
        assert all(750 <= r <= 1250 for r in results)

    def test_exponential_backoff(self) -> None:
        """With backoff_multiplier=2 and no jitter, attempt 2 waits 4x base."""
        assert _calculate_wait_with_jitter(1000, 2, 2.0, 0.0) == 4000

    def test_never_returns_negative(self) -> None:
        results = [_calculate_wait_with_jitter(100, 0, 2.0, 0.5) for _ in range(1000)]
        assert all(r >= 0 for r in results)


class TestRetryAfter:
    """Server-provided waits override the computed backoff."""

    def test_retry_after_in_ms(self) -> None:
        exc = DbxError(ErrorKind.RATE_LIMITED, "slow down", retryable=True, retry_after=2)
        assert _retry_after_ms(exc) == 2000

    def test_retry_after_capped(self) -> None:
        exc = DbxError(ErrorKind.RATE_LIMITED, "slow down", retryable=True, retry_after=3600)
        assert _retry_after_ms(exc) == int(MAX_RETRY_AFTER * 1000)

    def test_no_retry_after(self) -> None:
        assert _retry_after_ms(ConnectionError("x")) is None

    def test_decorator_sleeps_for_retry_after(self, no_sleep: MagicMock) -> None:
        attempts = [0]

        @with_retry(max_attempts=3, delay_ms=1)
        def rate_limited_once() -> str:
            attempts[0] += 1
            if attempts[0] == 1:
                raise DbxError(ErrorKind.RATE_LIMITED, "too_many_requests", retryable=True, retry_after=5)
            return "ok"

        assert rate_limited_once() == "ok"
        no_sleep.assert_called_once_with(5.0)


class TestWithRetry:
    """Tests for the with_retry decorator."""

    def test_successful_call_returns_result(self) -> None:
        @with_retry(max_attempts=3, delay_ms=1)
        def succeed() -> str:
            return "success"

        assert succeed() == "success"

    def test_retries_on_retryable_error(self) -> None:
        attempts = [0]

        @with_retry(max_attempts=3, delay_ms=1)
        def fail_then_succeed() -> str:
            attempts[0] += 1
            if attempts[0] < 3:
                raise ConnectionError("Temporary failure")
            return "success"

        assert fail_then_succeed() == "success"
        assert attempts[0] == 3

    def test_raises_on_non_retryable_error(self) -> None:
        """Non-retryable errors are raised immediately."""
        attempts = [0]

        @with_retry(max_attempts=3, delay_ms=1)
        def fail_not_found() -> str:
            attempts[0] += 1
            raise _status_error(404)

        with pytest.raises(DbxError) as exc_info:
            fail_not_found()

        assert exc_info.value.kind == ErrorKind.NOT_FOUND
        assert attempts[0] == 1

    def test_dbx_error_reraised_unchanged(self) -> None:
        original = DbxError(ErrorKind.ENDPOINT_ERROR, "path/conflict/folder/")

        @with_retry(max_attempts=3, delay_ms=1)
        def conflict() -> str:
            raise original

        with pytest.raises(DbxError) as exc_info:
            conflict()
        assert exc_info.value is original

    def test_raises_after_max_attempts(self) -> None:
        attempts = [0]

        @with_retry(max_attempts=3, delay_ms=1)
        def always_fail() -> str:
            attempts[0] += 1
            raise ConnectionError("Always fails")

        with pytest.raises(DbxError) as exc_info:
            always_fail()

        assert exc_info.value.kind == ErrorKind.NETWORK_ERROR
        assert attempts[0] == 3

    def test_convert_errors_false_preserves_original(self) -> None:
        @with_retry(max_attempts=3, delay_ms=1, convert_errors=False)
        def fail_immediately() -> str:
            raise _status_error(404)

        with pytest.raises(httpx.HTTPStatusError):
            fail_immediately()

    def test_send_is_decorated(self) -> None:
        """The adapter's transport call carries the retry wrapper."""
        from adapters.dropbox import send
        assert hasattr(send, "__wrapped__"), "send missing @with_retry"
