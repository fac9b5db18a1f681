"""
Slot generation shared by every availability view.
"""

from typing import List

from .exceptions import InvalidArgumentError
from .models import MINUTES_PER_DAY, format_clock_time, parse_clock_time

DEFAULT_SLOT_INTERVAL_MINUTES = 30


def window_minutes(open_time: str, close_time: str) -> tuple[int, int]:
    """
    Convert an opening window to minutes after midnight.

    A closing time of 00:00 means the restaurant closes at midnight.
    """
    open_minutes = parse_clock_time(open_time)
    close_minutes = parse_clock_time(close_time)
    if close_minutes == 0:
        close_minutes = MINUTES_PER_DAY
    return open_minutes, close_minutes


def generate_time_slots(
    open_time: str,
    close_time: str,
    interval_minutes: int = DEFAULT_SLOT_INTERVAL_MINUTES
) -> List[str]:
    """
    Generate candidate start times between opening and closing.

    A slot is only offered when a full interval fits before closing, so
    09:00-10:00 yields ["09:00", "09:30"] and never a slot starting at 10:00.

    Args:
        open_time: Opening time (HH:MM)
        close_time: Closing time (HH:MM)
        interval_minutes: Step between consecutive slots

    Returns:
        Ordered list of HH:MM strings (empty if the window is too short)
    """
    if isinstance(interval_minutes, bool) or not isinstance(interval_minutes, int) or interval_minutes <= 0:
        raise InvalidArgumentError(f"Slot interval must be a positive number of minutes, got {interval_minutes!r}")

    open_minutes, close_minutes = window_minutes(open_time, close_time)

    return [
        format_clock_time(minute)
        for minute in range(open_minutes, close_minutes - interval_minutes + 1, interval_minutes)
    ]
