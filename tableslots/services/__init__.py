"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability_service import AvailabilityService, RestaurantDataSource

__all__ = ["AvailabilityService", "RestaurantDataSource"]
