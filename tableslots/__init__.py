"""
tableslots - bookable reservation slots for restaurants.
"""

__version__ = "0.3.0"
