"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability_calculator import AvailabilityCalculator, compute_day_availability
from .cutoff import BookingPermissions, CutOffTime, evaluate_booking_permissions
from .exceptions import DataSourceError, InvalidArgumentError, TableslotsError
from .models import (
    Booking,
    DayAvailability,
    OccupancyLevel,
    OccupancyMode,
    OpeningHours,
    SpecialPeriod,
    Table,
    TimeSlot,
)
from .slots import generate_time_slots

__all__ = [
    "AvailabilityCalculator",
    "Booking",
    "BookingPermissions",
    "CutOffTime",
    "DataSourceError",
    "DayAvailability",
    "InvalidArgumentError",
    "OccupancyLevel",
    "OccupancyMode",
    "OpeningHours",
    "SpecialPeriod",
    "Table",
    "TableslotsError",
    "TimeSlot",
    "compute_day_availability",
    "evaluate_booking_permissions",
    "generate_time_slots",
]
