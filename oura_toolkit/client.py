"""Async client for the Oura API v2.

Thin wrapper over ``httpx.AsyncClient`` for the ``usercollection`` endpoints
(https://cloud.ouraring.com/v2/docs). Responses are returned as parsed JSON.

Usage:
    async with OuraClient(token) as client:
        sleep = await client.get_daily_sleep("2024-01-01", "2024-01-07")
"""

import logging
from datetime import date, timedelta
from types import TracebackType
from typing import Any

import httpx

from .utils.errors import OuraApiError

logger = logging.getLogger(__name__)

BASE_URL = "https://api.ouraring.com/v2/usercollection"


def add_days(date_str: str, days: int) -> str:
    """Add days to a YYYY-MM-DD date string."""
    return (date.fromisoformat(date_str) + timedelta(days=days)).isoformat()


class OuraClient:
    """Async Oura API client.

    Provides:
    - Bearer token authentication
    - One method per collection endpoint
    - Date-window widening for endpoints that return nothing for single-day queries
    """

    def __init__(
        self,
        access_token: str,
        *,
        base_url: str = BASE_URL,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize client.

        Args:
            access_token: Oura personal access token
            base_url: API base URL
            timeout: Request timeout in seconds
            http_client: Optional pre-configured client (not closed by this client)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._headers = {"Authorization": f"Bearer {access_token}"}
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(follow_redirects=True)

    async def __aenter__(self) -> "OuraClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this client created it."""
        if self._owns_client:
            await self._client.aclose()

    async def fetch(self, endpoint: str, params: dict[str, str] | None = None) -> Any:
        """GET an endpoint and return its parsed JSON body.

        Raises:
            OuraApiError: On a non-success status code
            httpx.RequestError: On network failures and timeouts
        """
        url = f"{self.base_url}/{endpoint}"
        logger.debug("GET %s params=%s", url, params)

        response = await self._client.get(
            url,
            params=params,
            headers=self._headers,
            timeout=self.timeout,
        )

        if not response.is_success:
            raise OuraApiError(response.status_code, response.reason_phrase, response.text)

        return response.json()

    async def _fetch_range(self, endpoint: str, start_date: str, end_date: str) -> dict[str, Any]:
        return await self.fetch(endpoint, {"start_date": start_date, "end_date": end_date})

    async def _fetch_widened(
        self,
        endpoint: str,
        start_date: str,
        end_date: str,
        pad_days: int = 1,
        day_field: str = "day",
    ) -> dict[str, Any]:
        """Fetch a date range, widening single-day queries and filtering client-side.

        Several endpoints return empty results when start_date == end_date.
        """
        if start_date != end_date:
            return await self._fetch_range(endpoint, start_date, end_date)

        response = await self._fetch_range(
            endpoint,
            add_days(start_date, -pad_days),
            add_days(end_date, pad_days),
        )
        response["data"] = [
            item
            for item in response.get("data", [])
            if isinstance(item.get(day_field), str) and start_date <= item[day_field] <= end_date
        ]
        return response

    # Sleep
    async def get_daily_sleep(self, start_date: str, end_date: str) -> dict[str, Any]:
        return await self._fetch_range("daily_sleep", start_date, end_date)

    async def get_sleep(self, start_date: str, end_date: str) -> dict[str, Any]:
        return await self._fetch_widened("sleep", start_date, end_date)

    async def get_sleep_time(self, start_date: str, end_date: str) -> dict[str, Any]:
        return await self._fetch_range("sleep_time", start_date, end_date)

    # Readiness, activity and stress
    async def get_daily_readiness(self, start_date: str, end_date: str) -> dict[str, Any]:
        return await self._fetch_range("daily_readiness", start_date, end_date)

    async def get_daily_activity(self, start_date: str, end_date: str) -> dict[str, Any]:
        return await self._fetch_widened("daily_activity", start_date, end_date)

    async def get_daily_stress(self, start_date: str, end_date: str) -> dict[str, Any]:
        return await self._fetch_range("daily_stress", start_date, end_date)

    async def get_daily_resilience(self, start_date: str, end_date: str) -> dict[str, Any]:
        return await self._fetch_range("daily_resilience", start_date, end_date)

    # Cardio
    async def get_heart_rate(self, start_date: str, end_date: str) -> dict[str, Any]:
        return await self._fetch_range("heartrate", start_date, end_date)

    async def get_daily_spo2(self, start_date: str, end_date: str) -> dict[str, Any]:
        return await self._fetch_range("daily_spo2", start_date, end_date)

    async def get_vo2_max(self, start_date: str, end_date: str) -> dict[str, Any]:
        return await self._fetch_range("vO2_max", start_date, end_date)

    async def get_daily_cardiovascular_age(self, start_date: str, end_date: str) -> dict[str, Any]:
        return await self._fetch_range("daily_cardiovascular_age", start_date, end_date)

    # Workouts, sessions and tags
    async def get_workouts(self, start_date: str, end_date: str) -> dict[str, Any]:
        return await self._fetch_widened("workout", start_date, end_date)

    async def get_sessions(self, start_date: str, end_date: str) -> dict[str, Any]:
        return await self._fetch_widened("session", start_date, end_date)

    async def get_tags(self, start_date: str, end_date: str) -> dict[str, Any]:
        return await self._fetch_widened("tag", start_date, end_date)

    async def get_enhanced_tags(self, start_date: str, end_date: str) -> dict[str, Any]:
        # enhanced_tag needs at least +/-2 days and is keyed by start_day
        return await self._fetch_widened(
            "enhanced_tag",
            start_date,
            end_date,
            pad_days=3,
            day_field="start_day",
        )

    async def get_rest_mode_periods(self, start_date: str, end_date: str) -> dict[str, Any]:
        return await self._fetch_range("rest_mode_period", start_date, end_date)

    # Account
    async def get_ring_configuration(self) -> dict[str, Any]:
        return await self.fetch("ring_configuration")

    async def get_personal_info(self) -> dict[str, Any]:
        return await self.fetch("personal_info")
