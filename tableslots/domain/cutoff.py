"""
Cut-off policy: how close to its start time a guest may still change a booking.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

import pendulum

from .exceptions import InvalidArgumentError
from .models import Booking, weekday_index

DEFAULT_CUT_OFF_HOURS = 2
ASSUMED_BOOKING_MINUTES = 120


@dataclass(frozen=True)
class CutOffTime:
    """Restaurant rule for one weekday."""
    day_of_week: int  # 0=Sunday, 6=Saturday
    hours_before_booking: int
    is_enabled: bool = True

    def __post_init__(self):
        if isinstance(self.day_of_week, bool) or self.day_of_week not in range(7):
            raise InvalidArgumentError(f"day_of_week must be between 0 and 6, got {self.day_of_week!r}")
        if self.hours_before_booking < 0:
            raise InvalidArgumentError("hours_before_booking must not be negative")


@dataclass(frozen=True)
class BookingPermissions:
    """What a guest may still do with an existing booking."""
    can_modify: bool
    can_cancel: bool
    is_booking_started: bool
    is_past_booking: bool
    cut_off_hours: int


def evaluate_booking_permissions(
    booking: Booking,
    now: datetime,
    timezone: str,
    cut_off_times: Sequence[CutOffTime] = (),
    default_cut_off_hours: int = DEFAULT_CUT_OFF_HOURS,
    assumed_duration_minutes: int = ASSUMED_BOOKING_MINUTES
) -> BookingPermissions:
    """
    Decide whether a booking can still be modified or cancelled.

    The enabled rule for the booking's weekday applies; without one the
    default cut-off is used. Changes are allowed only while ``now`` is before
    ``start - cut_off_hours`` and the booking has not started yet.

    Args:
        booking: Booking to evaluate
        now: Current instant (naive values are read as restaurant local time)
        timezone: Restaurant IANA timezone
        cut_off_times: Per-weekday cut-off rules
        default_cut_off_hours: Cut-off when no enabled rule matches
        assumed_duration_minutes: Duration of bookings without an end time

    Raises:
        InvalidArgumentError: If the timezone is unknown
    """
    try:
        tz = pendulum.timezone(timezone)
    except (KeyError, ValueError) as exc:
        raise InvalidArgumentError(f"Unknown timezone {timezone!r}") from exc

    day = booking.booking_date
    hour, minute = divmod(booking.start_minutes(), 60)
    start = pendulum.datetime(day.year, day.month, day.day, hour, minute, tz=tz)
    end = start.add(minutes=booking.end_minutes(assumed_duration_minutes) - booking.start_minutes())
    now_local = pendulum.instance(now, tz=tz).in_timezone(tz)

    weekday = weekday_index(day)
    rule = next(
        (rule for rule in cut_off_times if rule.day_of_week == weekday and rule.is_enabled),
        None
    )
    cut_off_hours = rule.hours_before_booking if rule else default_cut_off_hours

    is_booking_started = now_local >= start
    is_past_booking = now_local > end
    allowed = (
        not is_booking_started
        and not is_past_booking
        and now_local < start.subtract(hours=cut_off_hours)
    )

    return BookingPermissions(
        can_modify=allowed,
        can_cancel=allowed,
        is_booking_started=is_booking_started,
        is_past_booking=is_past_booking,
        cut_off_hours=cut_off_hours
    )
