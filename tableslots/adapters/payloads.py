"""
Parsing of booking-backend JSON records into domain models.

The backend speaks camelCase; records that cannot be parsed are skipped with
a warning so one bad row does not hide a whole day's availability.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, TypeVar

import pendulum

from ..domain.models import Booking, OpeningHours, SpecialPeriod, Table, coerce_date

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Window assumed for open special periods that carry no times
DEFAULT_SPECIAL_OPEN_TIME = "09:00"
DEFAULT_SPECIAL_CLOSE_TIME = "22:00"


def _clock(value: Any) -> str | None:
    """Accept HH:MM and database style HH:MM:SS values."""
    if value is None or value == "":
        return None
    text = str(value).strip()
    if text.count(":") == 2:
        text = text.rsplit(":", 1)[0]
    return text


def _calendar_date(value: Any):
    """Take the calendar date as written, ignoring any time component."""
    if isinstance(value, str) and len(value.strip()) > 10:
        return pendulum.parse(value.strip()).date()
    return coerce_date(value)


def parse_opening_hours_record(item: Dict[str, Any]) -> OpeningHours:
    return OpeningHours(
        day_of_week=int(item["dayOfWeek"]),
        is_open=bool(item.get("isOpen", True)),
        open_time=_clock(item.get("openTime")),
        close_time=_clock(item.get("closeTime"))
    )


def parse_special_period_record(item: Dict[str, Any]) -> SpecialPeriod:
    is_open = bool(item.get("isOpen", False))
    open_time = _clock(item.get("openTime"))
    close_time = _clock(item.get("closeTime"))
    if is_open:
        open_time = open_time or DEFAULT_SPECIAL_OPEN_TIME
        close_time = close_time or DEFAULT_SPECIAL_CLOSE_TIME

    return SpecialPeriod(
        start_date=_calendar_date(item["startDate"]),
        end_date=_calendar_date(item["endDate"]),
        is_open=is_open,
        open_time=open_time,
        close_time=close_time,
        name=item.get("name")
    )


def parse_table_record(item: Dict[str, Any]) -> Table:
    return Table(
        id=item["id"],
        capacity=int(item["capacity"]),
        is_active=bool(item.get("isActive", True))
    )


def parse_booking_record(item: Dict[str, Any]) -> Booking:
    return Booking(
        id=item.get("id"),
        booking_date=_calendar_date(item["bookingDate"]),
        start_time=_clock(item["startTime"]),
        end_time=_clock(item.get("endTime")),
        guest_count=int(item["guestCount"]),
        table_id=item.get("tableId"),
        status=item.get("status") or "confirmed"
    )


def _parse_all(kind: str, items: Iterable[Dict[str, Any]], parser: Callable[[Dict[str, Any]], T]) -> List[T]:
    parsed: List[T] = []
    for item in items:
        try:
            parsed.append(parser(item))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed %s record %r: %s", kind, item, exc)
    return parsed


def parse_opening_hours(items: Iterable[Dict[str, Any]]) -> List[OpeningHours]:
    return _parse_all("opening hours", items, parse_opening_hours_record)


def parse_special_periods(items: Iterable[Dict[str, Any]]) -> List[SpecialPeriod]:
    return _parse_all("special period", items, parse_special_period_record)


def parse_tables(items: Iterable[Dict[str, Any]]) -> List[Table]:
    return _parse_all("table", items, parse_table_record)


def parse_bookings(items: Iterable[Dict[str, Any]]) -> List[Booking]:
    return _parse_all("booking", items, parse_booking_record)
