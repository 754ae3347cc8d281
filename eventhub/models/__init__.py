"""
Database models for the EventHub booking API.

Bookings are the only records this package writes; venues, vendors,
categories, locations, users and catalog lookups are read-only collaborators.
"""

from .booking import Booking, BookingStatus, BookingType, TimeSlot
from .catalog import EventType, PhotographyType
from .location import Location
from .user import User, UserRole
from .venue import Vendor, VendorCategory, Venue

__all__ = [
    "Booking",
    "BookingStatus",
    "BookingType",
    "EventType",
    "Location",
    "PhotographyType",
    "TimeSlot",
    "User",
    "UserRole",
    "Vendor",
    "VendorCategory",
    "Venue",
]
