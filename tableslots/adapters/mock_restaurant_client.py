"""
Mock booking backend for running without a live API.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List

from ..domain.exceptions import DataSourceError
from ..domain.models import Booking, OpeningHours, SpecialPeriod, Table
from . import payloads

logger = logging.getLogger(__name__)

DEFAULT_DATA_FILE = Path(__file__).parent / "mock_restaurant_data.json"


class MockRestaurantClient:
    """
    Serves restaurant data from a JSON file shaped like the backend responses.

    Format:
    {
        "restaurants": {
            "1": {
                "openingHours": [...],
                "specialPeriods": [...],
                "tables": [...],
                "bookings": [...]
            }
        }
    }
    """

    def __init__(self, data_file: Path | None = None):
        self.data_file = data_file or DEFAULT_DATA_FILE
        self.restaurants = self._load_data()

    def _load_data(self) -> Dict[str, Dict[str, Any]]:
        """Load mock restaurant data from the JSON file."""
        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as exc:
            raise DataSourceError(f"Could not read mock data {self.data_file}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise DataSourceError(f"Invalid JSON in {self.data_file}: {exc}") from exc

        restaurants = data.get("restaurants") if isinstance(data, dict) else None
        if not isinstance(restaurants, dict):
            raise DataSourceError(f"{self.data_file} must contain a 'restaurants' mapping")

        return {str(key): value for key, value in restaurants.items()}

    def _records(self, restaurant_id: int | str, key: str) -> List[Dict[str, Any]]:
        restaurant = self.restaurants.get(str(restaurant_id))
        if restaurant is None:
            logger.warning("No mock data for restaurant %s", restaurant_id)
            return []
        return list(restaurant.get(key, []))

    async def get_opening_hours(self, restaurant_id: int | str) -> List[OpeningHours]:
        return payloads.parse_opening_hours(self._records(restaurant_id, "openingHours"))

    async def get_special_periods(self, restaurant_id: int | str) -> List[SpecialPeriod]:
        return payloads.parse_special_periods(self._records(restaurant_id, "specialPeriods"))

    async def get_tables(self, restaurant_id: int | str) -> List[Table]:
        return payloads.parse_tables(self._records(restaurant_id, "tables"))

    async def get_bookings(self, restaurant_id: int | str, day: date) -> List[Booking]:
        bookings = payloads.parse_bookings(self._records(restaurant_id, "bookings"))
        return [booking for booking in bookings if booking.booking_date == day]

    def test_connection(self, restaurant_id: int | str) -> int:
        return len(self._records(restaurant_id, "tables"))
