"""
Adapters layer - Booking backend integrations.
"""

from .mock_restaurant_client import MockRestaurantClient
from .restaurant_api_client import RestaurantApiClient

__all__ = ["MockRestaurantClient", "RestaurantApiClient"]
