"""
Tests for backend payload parsing and the data-source adapters.
"""

import asyncio
import json
from datetime import date

import pytest
import requests

from tableslots.adapters import payloads
from tableslots.adapters.mock_restaurant_client import MockRestaurantClient
from tableslots.adapters.restaurant_api_client import RestaurantApiClient
from tableslots.domain.exceptions import DataSourceError
from tableslots.services.availability_service import AvailabilityService


class FakeResponse:
    def __init__(self, data, status_code=200):
        self._data = data
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if isinstance(self._data, Exception):
            raise self._data
        return self._data


class FakeSession:
    def __init__(self, responses):
        self.responses = responses
        self.requests = []

    def get(self, url, headers=None, params=None, timeout=None):
        self.requests.append({"url": url, "headers": headers, "params": params, "timeout": timeout})
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response


class TestPayloads:
    """Tests for camelCase record parsing."""

    def test_parse_booking(self):
        """Test a backend booking record becomes a Booking."""
        [booking] = payloads.parse_bookings([
            {
                "id": 12,
                "bookingDate": "2024-12-24T00:00:00.000Z",
                "startTime": "19:00:00",
                "endTime": None,
                "guestCount": 4,
                "tableId": 3,
                "status": "confirmed",
            }
        ])

        assert booking.booking_date == date(2024, 12, 24)
        assert booking.start_time == "19:00"
        assert booking.end_time is None
        assert booking.table_id == 3

    def test_malformed_records_are_skipped(self, caplog):
        """Test one bad record does not drop the others."""
        tables = payloads.parse_tables([
            {"id": 1, "capacity": 4},
            {"id": 2, "capacity": 0},
            {"capacity": 2},
            {"id": 4, "capacity": "six"},
        ])

        assert [table.id for table in tables] == [1]
        assert "Skipping malformed table record" in caplog.text

    def test_parse_special_period_defaults_closed(self):
        """Test special periods without isOpen are closures."""
        [period] = payloads.parse_special_periods([
            {"name": "Inventory", "startDate": "2024-01-02", "endDate": "2024-01-03"}
        ])

        assert period.is_open is False
        assert period.name == "Inventory"

    def test_open_special_period_without_times(self):
        """Test an open period without times keeps the record with the default window."""
        [period] = payloads.parse_special_periods([
            {"name": "Event", "startDate": "2024-05-01", "endDate": "2024-05-01", "isOpen": True,
             "openTime": None, "closeTime": ""}
        ])

        assert period.is_open is True
        assert period.open_time == "09:00"
        assert period.close_time == "22:00"

    def test_parse_opening_hours(self):
        """Test weekly hours records."""
        hours = payloads.parse_opening_hours([
            {"dayOfWeek": 0, "isOpen": False, "openTime": "", "closeTime": ""},
            {"dayOfWeek": 5, "isOpen": True, "openTime": "12:00", "closeTime": "23:00"},
        ])

        assert [(h.day_of_week, h.is_open) for h in hours] == [(0, False), (5, True)]


class TestRestaurantApiClient:
    """Tests for the REST adapter."""

    BASE = "https://bookings.example.com"

    def test_fetches_and_parses_tables(self):
        """Test tables are requested with the bearer token."""
        session = FakeSession({
            f"{self.BASE}/api/restaurants/7/tables": FakeResponse([{"id": 1, "capacity": 4}])
        })
        client = RestaurantApiClient(self.BASE + "/", access_token="secret", session=session)

        tables = asyncio.run(client.get_tables(7))

        assert [table.capacity for table in tables] == [4]
        assert session.requests[0]["headers"]["Authorization"] == "Bearer secret"

    def test_bookings_are_requested_per_date(self):
        """Test the date is passed as query parameter."""
        session = FakeSession({f"{self.BASE}/api/restaurants/7/bookings": FakeResponse([])})
        client = RestaurantApiClient(self.BASE, session=session)

        asyncio.run(client.get_bookings(7, date(2024, 12, 24)))

        assert session.requests[0]["params"] == {"date": "2024-12-24"}

    def test_http_errors_become_data_source_errors(self):
        """Test failed requests raise DataSourceError."""
        session = FakeSession({
            f"{self.BASE}/api/restaurants/7/opening-hours": FakeResponse([], status_code=500),
            f"{self.BASE}/api/restaurants/7/tables": requests.exceptions.ConnectionError("refused"),
        })
        client = RestaurantApiClient(self.BASE, session=session)

        with pytest.raises(DataSourceError, match="Failed to fetch"):
            asyncio.run(client.get_opening_hours(7))
        with pytest.raises(DataSourceError, match="refused"):
            asyncio.run(client.get_tables(7))

    def test_non_list_body_is_rejected(self):
        """Test an object body is not accepted as a record list."""
        session = FakeSession({
            f"{self.BASE}/api/restaurants/7/special-periods": FakeResponse({"message": "oops"}),
            f"{self.BASE}/api/restaurants/7/tables": FakeResponse(ValueError("no json")),
        })
        client = RestaurantApiClient(self.BASE, session=session)

        with pytest.raises(DataSourceError, match="Expected a JSON array"):
            asyncio.run(client.get_special_periods(7))
        with pytest.raises(DataSourceError, match="Invalid JSON"):
            asyncio.run(client.get_tables(7))


class TestMockRestaurantClient:
    """Tests for the JSON-file data source."""

    def test_bundled_data_drives_the_service(self):
        """Test Christmas is closed and New Year's Eve runs until midnight."""
        service = AvailabilityService(data_source=MockRestaurantClient())

        christmas = asyncio.run(service.get_day_availability(1, "2024-12-25", 2))
        new_years_eve = asyncio.run(service.get_day_availability(1, "2024-12-31", 2))

        assert christmas.is_open is False
        assert christmas.closure_reason == "Christmas Day"
        assert new_years_eve.total_slots == 12
        assert new_years_eve.time_slots[-1].time == "23:30"

    def test_bookings_are_filtered_by_date(self):
        """Test only the requested date's bookings are returned."""
        client = MockRestaurantClient()

        assert len(asyncio.run(client.get_bookings(1, date(2024, 12, 24)))) == 4
        assert asyncio.run(client.get_bookings(1, date(2024, 12, 23))) == []

    def test_unknown_restaurant_has_no_data(self):
        """Test an unknown restaurant yields empty inputs."""
        client = MockRestaurantClient()

        assert asyncio.run(client.get_tables(99)) == []

    def test_custom_data_file(self, tmp_path):
        """Test a custom data file is loaded."""
        data_file = tmp_path / "data.json"
        data_file.write_text(json.dumps({"restaurants": {"5": {"tables": [{"id": 1, "capacity": 2}]}}}))

        client = MockRestaurantClient(data_file=data_file)

        assert len(asyncio.run(client.get_tables(5))) == 1

    def test_invalid_data_file(self, tmp_path):
        """Test unreadable or malformed data raises DataSourceError."""
        broken = tmp_path / "broken.json"
        broken.write_text("{not json")

        with pytest.raises(DataSourceError):
            MockRestaurantClient(data_file=broken)
        with pytest.raises(DataSourceError):
            MockRestaurantClient(data_file=tmp_path / "missing.json")
