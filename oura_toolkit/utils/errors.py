"""Oura API errors and user-facing error messages."""

import json

import httpx

TOKEN_URL = "https://cloud.ouraring.com/personal-access-tokens"

SERVER_ERROR_STATUSES = (500, 502, 503, 504)


class OuraApiError(Exception):
    """Non-success response from the Oura API."""

    def __init__(self, status: int, status_text: str = "", body: str = "") -> None:
        self.status = status
        self.status_text = status_text
        self.body = body
        super().__init__(get_error_message(status, body))

    @property
    def message(self) -> str:
        return str(self)


def get_error_message(status: int, body: str) -> str:
    """Get a user-friendly error message for an HTTP status code."""
    if status == 400:
        detail = parse_error_body(body) or "Check your date format (YYYY-MM-DD) and date range."
        return f"Invalid request: {detail}"
    if status == 401:
        return (
            "Authentication failed: Your Oura access token is invalid or expired. "
            f"Get a new token at {TOKEN_URL}"
        )
    if status == 403:
        return (
            "Access denied: Your token doesn't have permission for this data. "
            "Make sure you granted the required scopes when creating your token."
        )
    if status == 404:
        return (
            "Endpoint not found: This Oura API endpoint may have changed. "
            "Try updating the oura-toolkit package."
        )
    if status == 426:
        return "Subscription required: This feature requires an Oura subscription."
    if status == 429:
        return (
            "Rate limited: Too many requests to Oura API. Please wait a moment and try again. "
            "(Limit: 5000 requests per 5 minutes)"
        )
    if status in SERVER_ERROR_STATUSES:
        return f"Oura API is temporarily unavailable ({status}). Please try again in a few minutes."
    return f"Oura API error ({status}): {parse_error_body(body) or 'Unknown error'}"


def parse_error_body(body: str) -> str | None:
    """Extract a useful message from an error response body.

    The Oura API reports errors as ``{"detail": "..."}``; ``message`` and
    ``error`` keys are accepted as well. Short non-JSON bodies are returned as-is.
    """
    if not body:
        return None

    try:
        parsed = json.loads(body)
    except json.JSONDecodeError:
        return body if len(body) < 200 else None

    if not isinstance(parsed, dict):
        return None
    for key in ("detail", "message", "error"):
        if parsed.get(key):
            return str(parsed[key])
    return None


def format_error(error: object) -> str:
    """Format an error for display to the user."""
    if isinstance(error, OuraApiError):
        return error.message

    if isinstance(error, httpx.TimeoutException):
        return "Request timed out: Oura API took too long to respond. Please try again."
    if isinstance(error, httpx.ConnectError):
        return "Network error: Unable to connect to Oura API. Check your internet connection."

    if isinstance(error, Exception):
        text = str(error)
        if "fetch failed" in text or "ENOTFOUND" in text:
            return "Network error: Unable to connect to Oura API. Check your internet connection."
        if "ETIMEDOUT" in text or "timeout" in text:
            return "Request timed out: Oura API took too long to respond. Please try again."
        return text

    return "An unknown error occurred"


def get_no_data_message(data_type: str, start_date: str, end_date: str | None = None) -> str:
    """Explain why a query may have returned no data."""
    date_range = f"{start_date} to {end_date}" if end_date and end_date != start_date else start_date

    tips = [
        f"No {data_type} data found for {date_range}.",
        "",
        "This could mean:",
        "• Your Oura ring hasn't synced yet - open the Oura app to sync",
        "• You didn't wear your ring during this period",
        "• The data is still being processed (can take a few hours)",
    ]

    if data_type == "sleep":
        tips.append("• Sleep data appears on the day you woke up, not when you fell asleep")

    return "\n".join(tips)
