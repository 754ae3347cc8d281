# eventhub/repositories/factory.py
"""
Repository Factory for the EventHub booking API

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session


# Avoid circular imports
if TYPE_CHECKING:
    from .booking_repository import BookingRepository
    from .catalog_repository import EventTypeRepository, PhotographyTypeRepository
    from .listing_repository import VendorCategoryRepository, VendorRepository, VenueRepository
    from .location_repository import LocationRepository
    from .user_repository import UserRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations in tests.
    """

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        """Create repository for booking operations."""
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_venue_repository(db: Session) -> "VenueRepository":
        """Create repository for venue lookups and search."""
        from .listing_repository import VenueRepository

        return VenueRepository(db)

    @staticmethod
    def create_vendor_repository(db: Session) -> "VendorRepository":
        """Create repository for vendor lookups and search."""
        from .listing_repository import VendorRepository

        return VendorRepository(db)

    @staticmethod
    def create_vendor_category_repository(db: Session) -> "VendorCategoryRepository":
        """Create repository for vendor category names."""
        from .listing_repository import VendorCategoryRepository

        return VendorCategoryRepository(db)

    @staticmethod
    def create_location_repository(db: Session) -> "LocationRepository":
        """Create repository for service locations."""
        from .location_repository import LocationRepository

        return LocationRepository(db)

    @staticmethod
    def create_user_repository(db: Session) -> "UserRepository":
        """Create repository for user lookups."""
        from .user_repository import UserRepository

        return UserRepository(db)

    @staticmethod
    def create_event_type_repository(db: Session) -> "EventTypeRepository":
        """Create repository for event types."""
        from .catalog_repository import EventTypeRepository

        return EventTypeRepository(db)

    @staticmethod
    def create_photography_type_repository(db: Session) -> "PhotographyTypeRepository":
        """Create repository for photography types."""
        from .catalog_repository import PhotographyTypeRepository

        return PhotographyTypeRepository(db)
