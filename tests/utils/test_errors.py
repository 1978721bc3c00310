"""Tests for error utilities."""

import httpx
import pytest

from oura_toolkit.utils.errors import (
    OuraApiError,
    format_error,
    get_no_data_message,
    parse_error_body,
)


class TestOuraApiError:
    """Status-specific error messages."""

    def test_unauthorized(self):
        error = OuraApiError(401, "Unauthorized", "")

        assert "Authentication failed" in error.message
        assert "invalid or expired" in error.message
        assert error.status == 401
        assert error.status_text == "Unauthorized"

    @pytest.mark.parametrize(
        ("status", "fragment"),
        [
            (403, "Access denied"),
            (404, "Endpoint not found"),
            (426, "Subscription required"),
            (429, "5000 requests"),
            (500, "temporarily unavailable (500)"),
            (502, "temporarily unavailable"),
            (503, "temporarily unavailable"),
            (504, "temporarily unavailable"),
        ],
    )
    def test_status_messages(self, status, fragment):
        assert fragment in str(OuraApiError(status, "", ""))

    def test_bad_request_uses_detail(self):
        error = OuraApiError(400, "Bad Request", '{"detail": "Invalid date format"}')

        assert error.message == "Invalid request: Invalid date format"

    def test_bad_request_without_body_gives_hint(self):
        error = OuraApiError(400, "Bad Request", "")

        assert "YYYY-MM-DD" in error.message

    def test_unknown_status(self):
        assert OuraApiError(418, "", "teapot").message == "Oura API error (418): teapot"
        assert OuraApiError(418, "", "").message == "Oura API error (418): Unknown error"

    def test_is_exception(self):
        with pytest.raises(OuraApiError):
            raise OuraApiError(500, "Internal Server Error", "")


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        ('{"detail": "d"}', "d"),
        ('{"message": "m"}', "m"),
        ('{"error": "e"}', "e"),
        ('{"other": "x"}', None),
        ("[1, 2]", None),
        ("plain text", "plain text"),
        ("x" * 250, None),
        ("", None),
    ],
)
def test_parse_error_body(body, expected):
    assert parse_error_body(body) == expected


class TestFormatError:
    """User-facing error formatting."""

    def test_api_error(self):
        assert format_error(OuraApiError(401, "", "")).startswith("Authentication failed")

    def test_httpx_connect_error(self):
        assert format_error(httpx.ConnectError("refused")).startswith("Network error")

    def test_httpx_timeout(self):
        assert format_error(httpx.ReadTimeout("slow")).startswith("Request timed out")

    @pytest.mark.parametrize(
        ("message", "prefix"),
        [
            ("fetch failed", "Network error"),
            ("getaddrinfo ENOTFOUND api.ouraring.com", "Network error"),
            ("connect ETIMEDOUT", "Request timed out"),
            ("request timeout", "Request timed out"),
        ],
    )
    def test_message_patterns(self, message, prefix):
        assert format_error(RuntimeError(message)).startswith(prefix)

    def test_plain_exception(self):
        assert format_error(ValueError("bad value")) == "bad value"

    def test_non_exception(self):
        assert format_error("oops") == "An unknown error occurred"


class TestNoDataMessage:
    """Hints for empty results."""

    def test_single_date(self):
        message = get_no_data_message("readiness", "2024-01-15")

        assert message.startswith("No readiness data found for 2024-01-15.")
        assert "hasn't synced" in message
        assert "woke up" not in message

    def test_date_range(self):
        message = get_no_data_message("activity", "2024-01-01", "2024-01-07")

        assert "2024-01-01 to 2024-01-07" in message

    def test_same_start_and_end(self):
        message = get_no_data_message("activity", "2024-01-01", "2024-01-01")

        assert "for 2024-01-01." in message

    def test_sleep_tip(self):
        assert "woke up" in get_no_data_message("sleep", "2024-01-15")
