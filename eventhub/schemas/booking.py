# eventhub/schemas/booking.py
"""
Booking request and response schemas.

Field names are snake_case in Python and camelCase on the wire
(``bookingType``, ``referenceImages``...), matching the web and mobile clients.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from ..models.booking import BookingType, TimeSlot
from ._strict_base import StrictModel, StrictRequestModel


def _ensure_date_string(value: object, field_name: str) -> object:
    """Accept ISO dates and datetimes ("2025-06-01", "2025-06-01T10:00:00Z")."""
    if value is None or not isinstance(value, str):
        return value
    candidate = value.strip()
    if not candidate:
        return None
    try:
        if len(candidate) == 10:
            date.fromisoformat(candidate)
        else:
            datetime.fromisoformat(candidate.replace("Z", "+00:00"))
    except ValueError:
        raise ValueError(f"{field_name} must be an ISO 8601 date string")
    return candidate


class _BookingFields(StrictRequestModel):
    """Descriptive booking fields shared by create and update."""

    event_hall: Optional[str] = None
    venue_id: Optional[str] = None
    title: Optional[str] = Field(None, max_length=255)
    event_date: Optional[str] = None
    end_date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    time_slot: Optional[TimeSlot] = None
    venue_address: Optional[str] = None
    special_requirement: Optional[str] = None
    expected_guests: Optional[int] = Field(None, ge=1)
    photographer_type: Optional[str] = None
    category_id: Optional[str] = None
    category_type: Optional[str] = None
    coverage_duration: Optional[float] = None
    number_of_photographers: Optional[int] = Field(None, ge=1)
    budget_range: Optional[float] = None
    reference_images: Optional[List[str]] = None
    meal_type: Optional[str] = None
    cuisine: Optional[str] = None
    serving_style: Optional[str] = None
    additional_service: Optional[str] = None
    food_preference: Optional[str] = None
    event_id: Optional[str] = None
    photographers_id: Optional[str] = None
    payment_details: Optional[Dict[str, Any]] = None
    additional_services: Optional[List[Any]] = None
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator("event_date", "end_date", mode="before")
    @classmethod
    def _validate_dates(cls, v: object, info) -> object:
        return _ensure_date_string(v, info.field_name)


class BookingCreate(_BookingFields):
    """Booking request against a venue or vendor."""

    booking_type: BookingType = Field(..., description="Whether venue_id is a venue or a vendor")


class BookingUpdate(_BookingFields):
    """
    Partial booking update from the owner.

    ``booking_id`` is accepted so existing clients can echo the record back,
    but it is never written.
    """

    booking_type: Optional[BookingType] = None
    booking_id: Optional[str] = None

    @field_validator("booking_type", mode="before")
    @classmethod
    def _booking_type_not_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("bookingType cannot be null")
        return v


class BookingCancel(StrictRequestModel):
    cancellation_reason: str = Field(..., min_length=1, description="Reason for cancellation")
    notes: Optional[str] = Field(None, max_length=2000)


class BookingAccept(StrictRequestModel):
    booking_id: str = Field(..., min_length=1)
    notes: Optional[str] = Field(None, max_length=2000)


class BookingReject(StrictRequestModel):
    booking_id: str = Field(..., min_length=1)
    rejection_reason: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=2000)


# Responses


class BookingListResponse(StrictModel):
    """A page of composite booking views."""

    bookings: List[Dict[str, Any]]
    total: int
    page: int
    limit: int


class BookingCancelResponse(StrictModel):
    id: str
    booking_id: str
    booking_status: str
    cancellation_reason: Optional[str] = None
    cancellation_date: Optional[datetime] = None
    notes: Optional[str] = None
    updated_at: Optional[datetime] = None


class BookingStatusChangeResponse(StrictModel):
    id: str
    booking_id: str
    booking_status: str
    notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    rejection_date: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StatusMigrationResponse(StrictModel):
    updated: int
    message: str
