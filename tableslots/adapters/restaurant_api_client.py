"""
REST client for the booking backend that owns restaurant data.
"""

import asyncio
import logging
from datetime import date
from typing import Any, Dict, List

import requests

from ..domain.exceptions import DataSourceError
from ..domain.models import Booking, OpeningHours, SpecialPeriod, Table
from . import payloads

logger = logging.getLogger(__name__)


class RestaurantApiClient:
    """
    Client for the booking backend's restaurant endpoints.

    Blocking HTTP calls are pushed to a worker thread so several dates can be
    fetched concurrently by the availability service.
    """

    def __init__(
        self,
        base_url: str,
        access_token: str | None = None,
        timeout: float = 30,
        session: requests.Session | None = None
    ):
        """
        Initialize the API client.

        Args:
            base_url: Backend root URL, e.g. https://bookings.example.com
            access_token: Optional bearer token forwarded as-is
            timeout: Per-request timeout in seconds
            session: Optional preconfigured requests session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {"Accept": "application/json"}
        if access_token:
            self.headers["Authorization"] = f"Bearer {access_token}"

    async def get_opening_hours(self, restaurant_id: int | str) -> List[OpeningHours]:
        items = await self._fetch_list(f"/api/restaurants/{restaurant_id}/opening-hours")
        return payloads.parse_opening_hours(items)

    async def get_special_periods(self, restaurant_id: int | str) -> List[SpecialPeriod]:
        items = await self._fetch_list(f"/api/restaurants/{restaurant_id}/special-periods")
        return payloads.parse_special_periods(items)

    async def get_tables(self, restaurant_id: int | str) -> List[Table]:
        items = await self._fetch_list(f"/api/restaurants/{restaurant_id}/tables")
        return payloads.parse_tables(items)

    async def get_bookings(self, restaurant_id: int | str, day: date) -> List[Booking]:
        items = await self._fetch_list(
            f"/api/restaurants/{restaurant_id}/bookings",
            params={"date": day.isoformat()}
        )
        return payloads.parse_bookings(items)

    async def _fetch_list(self, path: str, params: Dict[str, Any] | None = None) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self._get_list, path, params)

    def _get_list(self, path: str, params: Dict[str, Any] | None = None) -> List[Dict[str, Any]]:
        """
        GET a JSON array from the backend.

        Raises:
            DataSourceError: If the request fails or the body is not a JSON array
        """
        url = f"{self.base_url}{path}"
        logger.debug("GET %s params=%s", url, params)

        try:
            response = self.session.get(
                url,
                headers=self.headers,
                params=params,
                timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as exc:
            raise DataSourceError(f"Failed to fetch {url}: {exc}") from exc
        except ValueError as exc:
            raise DataSourceError(f"Invalid JSON from {url}: {exc}") from exc

        if not isinstance(data, list):
            raise DataSourceError(f"Expected a JSON array from {url}, got {type(data).__name__}")

        return data

    def test_connection(self, restaurant_id: int | str) -> int:
        """
        Check the backend is reachable by listing the restaurant's tables.

        Returns:
            Number of tables the backend reports
        """
        return len(self._get_list(f"/api/restaurants/{restaurant_id}/tables"))
