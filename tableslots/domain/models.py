"""
Domain models for restaurant opening hours, tables, bookings and slots.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List

import pendulum

from .exceptions import InvalidArgumentError

MINUTES_PER_DAY = 24 * 60

# Bookings in these states no longer hold a table
INACTIVE_BOOKING_STATUSES = frozenset({"cancelled", "canceled", "no-show", "no_show"})

_CLOCK_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_clock_time(value: str) -> int:
    """
    Parse a local ``HH:MM`` time of day into minutes after midnight.

    ``24:00`` is accepted and maps to the end of the day.

    Raises:
        InvalidArgumentError: If the value is not a valid time of day
    """
    if not isinstance(value, str):
        raise InvalidArgumentError(f"Time of day must be an 'HH:MM' string, got {value!r}")

    match = _CLOCK_TIME_PATTERN.match(value.strip())
    if not match:
        raise InvalidArgumentError(f"Time of day must look like 'HH:MM', got {value!r}")

    hour, minute = int(match.group(1)), int(match.group(2))
    if minute > 59 or hour > 24 or (hour == 24 and minute != 0):
        raise InvalidArgumentError(f"Time of day out of range: {value!r}")

    return hour * 60 + minute


def format_clock_time(minutes: int) -> str:
    """Format minutes after midnight as ``HH:MM``."""
    hour, minute = divmod(minutes, 60)
    return f"{hour:02d}:{minute:02d}"


def coerce_date(value: Any, field_name: str = "date") -> date:
    """
    Normalise a calendar date given as ``date``/``datetime`` or ``YYYY-MM-DD``.

    Raises:
        InvalidArgumentError: If the value is not a valid calendar date
    """
    if isinstance(value, str):
        try:
            value = pendulum.from_format(value.strip(), "YYYY-MM-DD")
        except ValueError as exc:
            raise InvalidArgumentError(f"Invalid {field_name} {value!r}: {exc}") from exc
    if not isinstance(value, date):
        raise InvalidArgumentError(f"Invalid {field_name}: {value!r}")

    # Plain dates only, whatever date or datetime subclass came in
    return date(value.year, value.month, value.day)


def validate_guest_count(guest_count: Any) -> int:
    """
    Check a requested party size.

    Raises:
        InvalidArgumentError: If guest_count is not a positive integer
    """
    if isinstance(guest_count, bool) or not isinstance(guest_count, int):
        raise InvalidArgumentError(f"guest_count must be an integer, got {guest_count!r}")
    if guest_count <= 0:
        raise InvalidArgumentError(f"guest_count must be greater than zero, got {guest_count}")
    return guest_count


def weekday_index(day: date) -> int:
    """Weekday index as stored by the booking backend (0=Sunday, 6=Saturday)."""
    return day.isoweekday() % 7


def _check_open_window(owner: str, is_open: bool, open_time: str | None, close_time: str | None) -> None:
    if not is_open:
        return
    if open_time is None or close_time is None:
        raise InvalidArgumentError(f"{owner} is open but has no opening and closing time")
    parse_clock_time(open_time)
    parse_clock_time(close_time)


@dataclass(frozen=True)
class OpeningHours:
    """
    Regular opening hours for one weekday.

    Invariant: times are only meaningful (and only validated) when is_open is set.
    """
    day_of_week: int  # 0=Sunday, 6=Saturday
    is_open: bool = True
    open_time: str | None = None
    close_time: str | None = None

    def __post_init__(self):
        if isinstance(self.day_of_week, bool) or self.day_of_week not in range(7):
            raise InvalidArgumentError(
                f"day_of_week must be between 0 (Sunday) and 6 (Saturday), got {self.day_of_week!r}"
            )
        _check_open_window(f"Opening hours for day {self.day_of_week}", self.is_open, self.open_time, self.close_time)


@dataclass(frozen=True)
class SpecialPeriod:
    """
    Date-range override of the weekly schedule (holidays, private events).

    Both dates are inclusive.
    """
    start_date: date
    end_date: date
    is_open: bool = False
    open_time: str | None = None
    close_time: str | None = None
    name: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "start_date", coerce_date(self.start_date, "start_date"))
        object.__setattr__(self, "end_date", coerce_date(self.end_date, "end_date"))
        if self.end_date < self.start_date:
            raise InvalidArgumentError(
                f"Special period ends ({self.end_date}) before it starts ({self.start_date})"
            )
        _check_open_window(f"Special period {self.name or self.start_date}", self.is_open, self.open_time, self.close_time)

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class Table:
    """A bookable table."""
    id: int | str
    capacity: int
    is_active: bool = True

    def __post_init__(self):
        if isinstance(self.capacity, bool) or not isinstance(self.capacity, int) or self.capacity <= 0:
            raise InvalidArgumentError(f"Table {self.id} capacity must be a positive integer, got {self.capacity!r}")


@dataclass(frozen=True)
class Booking:
    """
    A committed reservation.

    Without an end time a booking lasts the calculator's default duration.
    An end time earlier than the start time runs past midnight.
    """
    booking_date: date
    start_time: str
    guest_count: int
    end_time: str | None = None
    table_id: int | str | None = None
    status: str = "confirmed"
    id: int | str | None = None

    def __post_init__(self):
        object.__setattr__(self, "booking_date", coerce_date(self.booking_date, "booking_date"))
        parse_clock_time(self.start_time)
        if self.end_time is not None:
            parse_clock_time(self.end_time)
        if isinstance(self.guest_count, bool) or not isinstance(self.guest_count, int) or self.guest_count <= 0:
            raise InvalidArgumentError(f"Booking guest_count must be a positive integer, got {self.guest_count!r}")

    @property
    def holds_capacity(self) -> bool:
        """Whether the booking still occupies a table."""
        return (self.status or "").lower() not in INACTIVE_BOOKING_STATUSES

    def start_minutes(self) -> int:
        return parse_clock_time(self.start_time)

    def end_minutes(self, default_duration_minutes: int = 60) -> int:
        start = self.start_minutes()
        if self.end_time is None:
            return start + default_duration_minutes

        end = parse_clock_time(self.end_time)
        if end == start:
            return start + default_duration_minutes
        if end < start:
            end += MINUTES_PER_DAY
        return end

    def occupies(self, minute: int, default_duration_minutes: int = 60) -> bool:
        """Check if the half-open interval [start, end) contains the given minute."""
        return self.start_minutes() <= minute < self.end_minutes(default_duration_minutes)


class OccupancyMode(str, Enum):
    """How existing bookings consume restaurant capacity."""
    TABLES = "tables"  # bookings occupy whole tables
    GUESTS = "guests"  # bookings consume seats from the pooled capacity


class OccupancyLevel(str, Enum):
    """Coarse day indicator shown in calendar views."""
    CLOSED = "closed"
    FULLY_BOOKED = "fully_booked"
    LIMITED = "limited"
    MODERATE = "moderate"
    AVAILABLE = "available"


@dataclass
class TimeSlot:
    """
    A candidate reservation start time and whether it can be booked.
    """
    time: str
    available: bool
    booked_guests: int = 0
    remaining_capacity: int = 0


@dataclass
class DayAvailability:
    """
    Availability of one restaurant for one date.
    """
    date: date
    is_open: bool
    total_slots: int = 0
    available_slots: int = 0
    time_slots: List[TimeSlot] = field(default_factory=list)
    open_time: str | None = None
    close_time: str | None = None
    closure_reason: str | None = None

    @classmethod
    def closed(cls, day: date, reason: str = "closed") -> "DayAvailability":
        return cls(date=day, is_open=False, closure_reason=reason)

    @property
    def occupancy(self) -> OccupancyLevel:
        """Bucket the share of bookable slots into a calendar indicator."""
        if not self.is_open:
            return OccupancyLevel.CLOSED

        ratio = self.available_slots / max(self.total_slots, 1)
        if ratio == 0:
            return OccupancyLevel.FULLY_BOOKED
        if ratio < 0.3:
            return OccupancyLevel.LIMITED
        if ratio < 0.7:
            return OccupancyLevel.MODERATE
        return OccupancyLevel.AVAILABLE

    def available_times(self) -> List[str]:
        return [slot.time for slot in self.time_slots if slot.available]

    def to_api_dict(self) -> Dict[str, Any]:
        """
        Render the calendar-availability response body.

        Format:
        {
            "date": "2024-12-24",
            "isOpen": true,
            "openTime": "17:00",
            "closeTime": "22:00",
            "allTimeSlots": ["17:00", "17:30", ...],
            "availableSlots": ["17:30", ...],
            "totalSlots": 10,
            "occupancy": "moderate"
        }
        """
        payload: Dict[str, Any] = {
            "date": self.date.isoformat(),
            "isOpen": self.is_open,
            "openTime": self.open_time,
            "closeTime": self.close_time,
            "allTimeSlots": [slot.time for slot in self.time_slots],
            "availableSlots": self.available_times(),
            "totalSlots": self.total_slots,
            "occupancy": self.occupancy.value,
        }
        if self.closure_reason:
            payload["closureReason"] = self.closure_reason
        return payload
