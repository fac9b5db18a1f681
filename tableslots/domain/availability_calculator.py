"""
Core business logic for calculating bookable reservation slots.

Pure domain logic: callers pass in already fetched opening hours, special
periods, tables and bookings. Nothing here performs I/O or reads the clock.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Sequence

import pendulum

from .exceptions import InvalidArgumentError
from .models import (
    MINUTES_PER_DAY,
    Booking,
    DayAvailability,
    OccupancyMode,
    OpeningHours,
    SpecialPeriod,
    Table,
    TimeSlot,
    coerce_date,
    validate_guest_count,
    weekday_index,
)
from .slots import DEFAULT_SLOT_INTERVAL_MINUTES, generate_time_slots, window_minutes

logger = logging.getLogger(__name__)

DEFAULT_BOOKING_MINUTES = 60


@dataclass(frozen=True)
class EffectiveHours:
    """Opening window that applies to one specific date."""
    is_open: bool
    open_time: str | None = None
    close_time: str | None = None
    closure_reason: str | None = None


@dataclass(frozen=True)
class _SlotOccupancy:
    available: bool
    booked_guests: int
    remaining_capacity: int


class AvailabilityCalculator:
    """
    Calculates which reservation start times can still be booked on a date.

    Algorithm:
    1. Resolve the effective opening hours (special period beats weekly schedule)
    2. Generate candidate slots at a fixed interval inside the opening window
    3. Collect the bookings whose [start, end) interval contains each slot
    4. Seat those bookings and check whether a table still fits the party
    5. Aggregate slot counts for the day
    """

    def __init__(
        self,
        slot_interval_minutes: int = DEFAULT_SLOT_INTERVAL_MINUTES,
        default_booking_minutes: int = DEFAULT_BOOKING_MINUTES,
        occupancy_mode: OccupancyMode = OccupancyMode.TABLES
    ):
        if slot_interval_minutes <= 0:
            raise InvalidArgumentError("slot_interval_minutes must be greater than zero")
        if default_booking_minutes <= 0:
            raise InvalidArgumentError("default_booking_minutes must be greater than zero")

        self.slot_interval_minutes = slot_interval_minutes
        self.default_booking_minutes = default_booking_minutes
        self.occupancy_mode = OccupancyMode(occupancy_mode)

    def compute_day_availability(
        self,
        date: date | str,
        guest_count: int,
        opening_hours: Sequence[OpeningHours],
        special_periods: Sequence[SpecialPeriod],
        tables: Sequence[Table],
        bookings: Sequence[Booking],
        *,
        now: datetime | None = None,
        timezone: str | None = None
    ) -> DayAvailability:
        """
        Compute the ordered slot list for one date and party size.

        Args:
            date: Calendar date to inspect (date or YYYY-MM-DD)
            guest_count: Size of the party that wants to book
            opening_hours: Weekly schedule, one record per weekday
            special_periods: Date-range overrides of the weekly schedule
            tables: Restaurant tables
            bookings: Existing bookings; the previous day's count only where they
                run past midnight, other dates are ignored
            now: Current instant; slots starting at or before it are not bookable
            timezone: Restaurant IANA timezone used to place slots relative to now

        Returns:
            DayAvailability for the date

        Raises:
            InvalidArgumentError: If date, guest_count or timezone are invalid
        """
        day = coerce_date(date)
        guests = validate_guest_count(guest_count)
        now_local = self._localise_now(now, timezone)

        hours = self.resolve_effective_hours(day, opening_hours, special_periods)
        if not hours.is_open:
            return DayAvailability.closed(day, hours.closure_reason or "closed")

        slot_times = generate_time_slots(hours.open_time, hours.close_time, self.slot_interval_minutes)
        open_minutes, _ = window_minutes(hours.open_time, hours.close_time)

        # (shift, booking): shift moves a previous-day booking onto this day's clock
        previous_day = day - timedelta(days=1)
        day_bookings = sorted(
            (
                (0 if booking.booking_date == day else MINUTES_PER_DAY, booking)
                for booking in bookings
                if booking.holds_capacity and (
                    booking.booking_date == day
                    or (
                        booking.booking_date == previous_day
                        and booking.end_minutes(self.default_booking_minutes) > MINUTES_PER_DAY
                    )
                )
            ),
            key=lambda pair: pair[1].start_minutes() - pair[0]
        )
        active_tables = [
            table for _, table in sorted(
                ((index, table) for index, table in enumerate(tables) if table.is_active),
                key=lambda pair: (pair[1].capacity, pair[0])
            )
        ]

        time_slots: List[TimeSlot] = []
        for offset, slot_time in enumerate(slot_times):
            minute = open_minutes + offset * self.slot_interval_minutes
            overlapping = [
                booking for shift, booking in day_bookings
                if booking.occupies(minute + shift, self.default_booking_minutes)
            ]
            occupancy = self._evaluate_slot(guests, active_tables, overlapping)

            available = occupancy.available
            if available and now_local is not None and not self._starts_after(day, minute, now_local):
                available = False

            time_slots.append(
                TimeSlot(
                    time=slot_time,
                    available=available,
                    booked_guests=occupancy.booked_guests,
                    remaining_capacity=occupancy.remaining_capacity
                )
            )

        result = DayAvailability(
            date=day,
            is_open=True,
            total_slots=len(time_slots),
            available_slots=sum(1 for slot in time_slots if slot.available),
            time_slots=time_slots,
            open_time=hours.open_time,
            close_time=hours.close_time
        )
        logger.debug(
            "Availability for %s (%d guests): %d/%d slots bookable",
            day, guests, result.available_slots, result.total_slots
        )
        return result

    def resolve_effective_hours(
        self,
        day: date,
        opening_hours: Sequence[OpeningHours],
        special_periods: Sequence[SpecialPeriod]
    ) -> EffectiveHours:
        """
        Determine the opening window that applies to a date.

        A covering special period wholly replaces the weekly schedule. When
        several periods cover the date, the one starting latest wins and ties
        go to the period listed last.
        """
        covering = [
            (index, period) for index, period in enumerate(special_periods)
            if period.covers(day)
        ]
        if covering:
            if len(covering) > 1:
                logger.warning(
                    "%d special periods cover %s; using the one that starts latest",
                    len(covering), day
                )
            _, period = max(covering, key=lambda pair: (pair[1].start_date, pair[0]))
            if not period.is_open:
                return EffectiveHours(is_open=False, closure_reason=period.name or "closed")
            return EffectiveHours(is_open=True, open_time=period.open_time, close_time=period.close_time)

        weekday = weekday_index(day)
        matching = [hours for hours in opening_hours if hours.day_of_week == weekday]
        if len(matching) > 1:
            logger.warning("Multiple opening hours records for weekday %d; using the first", weekday)

        if not matching or not matching[0].is_open:
            return EffectiveHours(is_open=False, closure_reason="closed")

        return EffectiveHours(
            is_open=True,
            open_time=matching[0].open_time,
            close_time=matching[0].close_time
        )

    def _evaluate_slot(
        self,
        guest_count: int,
        tables: List[Table],
        overlapping: List[Booking]
    ) -> _SlotOccupancy:
        booked_guests = sum(booking.guest_count for booking in overlapping)

        if self.occupancy_mode is OccupancyMode.GUESTS:
            total_capacity = sum(table.capacity for table in tables)
            remaining = max(0, total_capacity - booked_guests)
            fits_a_table = any(table.capacity >= guest_count for table in tables)
            return _SlotOccupancy(
                available=fits_a_table and remaining >= guest_count,
                booked_guests=booked_guests,
                remaining_capacity=remaining
            )

        free_tables = self._free_tables(tables, overlapping)
        return _SlotOccupancy(
            available=any(table.capacity >= guest_count for table in free_tables),
            booked_guests=booked_guests,
            remaining_capacity=sum(table.capacity for table in free_tables)
        )

    @staticmethod
    def _free_tables(tables: List[Table], overlapping: List[Booking]) -> List[Table]:
        """
        Seat overlapping bookings and return the tables left over.

        Bookings already assigned to a table take it first. The rest are
        seated in start-time order on the smallest free table that fits
        them; a party too large for every free table takes the largest one.
        Input tables are sorted by ascending capacity and stay that way.
        """
        free: Dict[Any, Table] = {table.id: table for table in tables}
        unseated: List[Booking] = []

        for booking in overlapping:
            if booking.table_id is not None and booking.table_id in free:
                del free[booking.table_id]
            else:
                unseated.append(booking)

        for booking in unseated:
            if not free:
                break
            candidates = list(free.values())
            fitting = [table for table in candidates if table.capacity >= booking.guest_count]
            chosen = fitting[0] if fitting else candidates[-1]
            del free[chosen.id]

        return list(free.values())

    @staticmethod
    def _localise_now(now: datetime | None, timezone: str | None) -> pendulum.DateTime | None:
        if timezone is not None:
            try:
                tz = pendulum.timezone(timezone)
            except (KeyError, ValueError) as exc:
                raise InvalidArgumentError(f"Unknown timezone {timezone!r}") from exc
        else:
            tz = None

        if now is None:
            return None
        if not isinstance(now, datetime):
            raise InvalidArgumentError(f"now must be a datetime, got {now!r}")

        # Naive datetimes are read as restaurant-local wall clock time
        instant = pendulum.instance(now, tz=tz or "UTC")
        return instant.in_timezone(tz) if tz is not None else instant

    def _starts_after(self, day: date, minute: int, now_local: pendulum.DateTime) -> bool:
        hour, minute_of_hour = divmod(minute, 60)
        slot_start = pendulum.datetime(
            day.year, day.month, day.day, hour, minute_of_hour, tz=now_local.timezone
        )
        return slot_start > now_local


def compute_day_availability(
    date: date | str,
    guest_count: int,
    opening_hours: Sequence[OpeningHours],
    special_periods: Sequence[SpecialPeriod],
    tables: Sequence[Table],
    bookings: Sequence[Booking],
    *,
    now: datetime | None = None,
    timezone: str | None = None
) -> DayAvailability:
    """Compute availability with the default 30-minute slot calculator."""
    return AvailabilityCalculator().compute_day_availability(
        date,
        guest_count,
        opening_hours,
        special_periods,
        tables,
        bookings,
        now=now,
        timezone=timezone
    )
