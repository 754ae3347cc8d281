# eventhub/repositories/__init__.py
"""
Repository layer for the EventHub booking API.

Usage:
    from eventhub.repositories import RepositoryFactory

    repository = RepositoryFactory.create_booking_repository(db)
    booking = repository.find_by_identifier("BK-1A2B3C4D")
"""

from .base_repository import BaseRepository
from .booking_repository import BookingFilters, BookingRepository
from .catalog_repository import EventTypeRepository, PhotographyTypeRepository
from .factory import RepositoryFactory
from .listing_repository import (
    ListingRepository,
    VendorCategoryRepository,
    VendorRepository,
    VenueRepository,
)
from .location_repository import LocationRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "BookingFilters",
    "BookingRepository",
    "EventTypeRepository",
    "ListingRepository",
    "LocationRepository",
    "PhotographyTypeRepository",
    "RepositoryFactory",
    "UserRepository",
    "VendorCategoryRepository",
    "VendorRepository",
    "VenueRepository",
]
