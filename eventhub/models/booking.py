# eventhub/models/booking.py
"""
Booking model for the EventHub marketplace.

A booking is a request from a customer against either a venue or a vendor.
The target is a weak reference (``venue_id``) disambiguated by
``booking_type``; the booking also carries denormalized fields (title,
address, category) so it can still be rendered when the target record is
gone.
"""

from datetime import datetime, timezone
from enum import Enum
import logging
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Index, Integer, String, Text

from ..core.ulid_helper import generate_booking_number, generate_ulid
from ..database import Base

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BookingStatus(str, Enum):
    """Booking lifecycle statuses (stored lowercase)."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    REJECTED = "rejected"

    @classmethod
    def terminal(cls) -> frozenset:
        """Stored values that end the lifecycle; none of them can be cancelled."""
        return frozenset(status.value for status in (cls.CANCELLED, cls.COMPLETED, cls.REJECTED))


class BookingType(str, Enum):
    """Which identity space ``venue_id`` refers to."""

    VENUE = "venue"
    VENDOR = "vendor"


class TimeSlot(str, Enum):
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    EVENING = "Evening"
    NIGHT = "Night"


class Booking(Base):
    """Booking request against a venue or vendor."""

    __tablename__ = "bookings"

    # Primary key
    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    booking_id = Column(
        String(16), nullable=False, unique=True, index=True, default=generate_booking_number
    )

    # Target and owner (weak references, compared as strings)
    booking_type = Column(String(10), nullable=False, index=True)
    venue_id = Column(String(64), nullable=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)

    # Scheduling
    event_date = Column(String(40), nullable=True, index=True)
    end_date = Column(String(40), nullable=True)
    start_time = Column(String(40), nullable=True)
    end_time = Column(String(40), nullable=True)
    time_slot = Column(String(20), nullable=True)

    # Descriptive fields
    title = Column(String(255), nullable=True)
    event_hall = Column(String(255), nullable=True)
    venue_address = Column(Text, nullable=True)
    special_requirement = Column(Text, nullable=True)
    expected_guests = Column(Integer, nullable=True)
    photographer_type = Column(String(100), nullable=True)
    category_id = Column(String(64), nullable=True)
    category_type = Column(String(100), nullable=True)
    coverage_duration = Column(Float, nullable=True)
    number_of_photographers = Column(Integer, nullable=True)
    budget_range = Column(Float, nullable=True)
    meal_type = Column(String(100), nullable=True)
    cuisine = Column(String(100), nullable=True)
    serving_style = Column(String(100), nullable=True)
    additional_service = Column(String(255), nullable=True)
    food_preference = Column(String(100), nullable=True)
    event_id = Column(String(64), nullable=True)
    photographers_id = Column(String(64), nullable=True)
    notes = Column(Text, nullable=True)

    reference_images = Column(JSON, nullable=False, default=list)
    payment_details = Column(JSON, nullable=True)
    additional_services = Column(JSON, nullable=True)

    # Lifecycle
    booking_status = Column(
        String(20), nullable=True, default=BookingStatus.PENDING.value, index=True
    )
    cancellation_reason = Column(Text, nullable=True)
    cancellation_date = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    rejection_date = Column(DateTime(timezone=True), nullable=True)

    is_deleted = Column(Boolean, nullable=False, default=False, index=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (Index("ix_bookings_user_created", "user_id", "created_at"),)

    def __init__(self, **kwargs: Any):
        """Initialize booking with the lifecycle defaults applied eagerly."""
        super().__init__(**kwargs)
        if self.booking_status is None:
            self.booking_status = BookingStatus.PENDING.value
        if self.reference_images is None:
            self.reference_images = []
        if self.is_deleted is None:
            self.is_deleted = False

    @property
    def normalized_status(self) -> str:
        """Lowercased status; missing or empty means pending."""
        return (self.booking_status or "").strip().lower() or BookingStatus.PENDING.value

    def is_owned_by(self, user_id: Any) -> bool:
        return str(self.user_id) == str(user_id)

    def to_dict(self) -> Dict[str, Optional[Any]]:
        """Client-facing field map (camelCase keys)."""
        return {
            "id": self.id,
            "bookingId": self.booking_id,
            "bookingType": self.booking_type,
            "venueId": self.venue_id,
            "userId": self.user_id,
            "eventDate": self.event_date,
            "endDate": self.end_date,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "timeSlot": self.time_slot,
            "title": self.title,
            "eventHall": self.event_hall,
            "venueAddress": self.venue_address,
            "specialRequirement": self.special_requirement,
            "expectedGuests": self.expected_guests,
            "photographerType": self.photographer_type,
            "categoryId": self.category_id,
            "categoryType": self.category_type,
            "coverageDuration": self.coverage_duration,
            "numberOfPhotographers": self.number_of_photographers,
            "budgetRange": self.budget_range,
            "mealType": self.meal_type,
            "cuisine": self.cuisine,
            "servingStyle": self.serving_style,
            "additionalService": self.additional_service,
            "foodPreference": self.food_preference,
            "eventId": self.event_id,
            "photographersId": self.photographers_id,
            "notes": self.notes,
            "referenceImages": list(self.reference_images or []),
            "paymentDetails": self.payment_details,
            "additionalServices": self.additional_services,
            "bookingStatus": self.booking_status,
            "cancellationReason": self.cancellation_reason,
            "cancellationDate": self.cancellation_date,
            "rejectionReason": self.rejection_reason,
            "rejectionDate": self.rejection_date,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    def __repr__(self) -> str:
        return (
            f"<Booking {self.booking_id}: {self.booking_type}:{self.venue_id} "
            f"user={self.user_id} status={self.booking_status}>"
        )
