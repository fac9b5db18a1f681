"""
Application services for answering availability queries.

The service fetches restaurant data through a data-source adapter and
delegates the slot computation to the domain-level
``AvailabilityCalculator``. Data sources are described by a protocol so the
REST client, the mock client or a test stub can be plugged in.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, timedelta
from typing import Dict, List, Protocol

import pendulum

from ..domain.availability_calculator import AvailabilityCalculator
from ..domain.exceptions import InvalidArgumentError
from ..domain.models import (
    Booking,
    DayAvailability,
    OpeningHours,
    SpecialPeriod,
    Table,
    coerce_date,
    validate_guest_count,
)

logger = logging.getLogger(__name__)


class RestaurantDataSource(Protocol):
    """Protocol describing the restaurant data the service needs."""

    async def get_opening_hours(self, restaurant_id: int | str) -> List[OpeningHours]:
        """Return the weekly opening hours."""

    async def get_special_periods(self, restaurant_id: int | str) -> List[SpecialPeriod]:
        """Return special periods overriding the weekly schedule."""

    async def get_tables(self, restaurant_id: int | str) -> List[Table]:
        """Return the restaurant's tables."""

    async def get_bookings(self, restaurant_id: int | str, day: date) -> List[Booking]:
        """Return bookings for one date."""


class AvailabilityService:
    """
    Orchestrates data retrieval and availability calculation.
    """

    def __init__(
        self,
        data_source: RestaurantDataSource,
        calculator: AvailabilityCalculator | None = None,
    ) -> None:
        self._data_source = data_source
        self._calculator = calculator or AvailabilityCalculator()

    async def get_day_availability(
        self,
        restaurant_id: int | str,
        day: date | str,
        guest_count: int,
        *,
        now: datetime | None = None,
        timezone: str | None = None,
    ) -> DayAvailability:
        """
        Fetch one date's inputs and compute its availability.

        The previous day's bookings are fetched too, so bookings running past
        midnight still block the early slots.

        Raises:
            InvalidArgumentError: Before any fetch, if the query is malformed
            DataSourceError: If the data source fails
        """
        target = coerce_date(day)
        validate_guest_count(guest_count)

        opening_hours, special_periods, tables, previous_bookings, bookings = await asyncio.gather(
            self._data_source.get_opening_hours(restaurant_id),
            self._data_source.get_special_periods(restaurant_id),
            self._data_source.get_tables(restaurant_id),
            self._data_source.get_bookings(restaurant_id, target - timedelta(days=1)),
            self._data_source.get_bookings(restaurant_id, target),
        )

        return self._calculator.compute_day_availability(
            target,
            guest_count,
            opening_hours,
            special_periods,
            tables,
            [*previous_bookings, *bookings],
            now=now,
            timezone=timezone,
        )

    async def get_month_availability(
        self,
        restaurant_id: int | str,
        year: int,
        month: int,
        guest_count: int,
        *,
        now: datetime | None = None,
        timezone: str | None = None,
    ) -> Dict[date, DayAvailability]:
        """
        Compute availability for every day of a month.

        Schedule and tables are fetched once; each day's bookings, plus those of
        the day before the month, are fetched concurrently.

        Returns:
            Ordered mapping of date -> DayAvailability
        """
        if month not in range(1, 13):
            raise InvalidArgumentError(f"month must be between 1 and 12, got {month!r}")
        validate_guest_count(guest_count)

        try:
            first_day = pendulum.date(year, month, 1)
        except (TypeError, ValueError) as exc:
            raise InvalidArgumentError(f"Invalid month {year}-{month}: {exc}") from exc

        days = [date(year, month, day_of_month) for day_of_month in range(1, first_day.days_in_month + 1)]

        opening_hours, special_periods, tables, *daily_bookings = await asyncio.gather(
            self._data_source.get_opening_hours(restaurant_id),
            self._data_source.get_special_periods(restaurant_id),
            self._data_source.get_tables(restaurant_id),
            self._data_source.get_bookings(restaurant_id, days[0] - timedelta(days=1)),
            *(self._data_source.get_bookings(restaurant_id, day) for day in days),
        )
        logger.debug("Fetched month %d-%02d for restaurant %s", year, month, restaurant_id)

        return {
            day: self._calculator.compute_day_availability(
                day,
                guest_count,
                opening_hours,
                special_periods,
                tables,
                [*previous_bookings, *bookings],
                now=now,
                timezone=timezone,
            )
            for day, previous_bookings, bookings in zip(days, daily_bookings, daily_bookings[1:])
        }
