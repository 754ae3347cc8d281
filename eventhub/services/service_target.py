# eventhub/services/service_target.py
"""
Booking target resolution.

A booking points at a venue or a vendor through ``venue_id``; which table
depends on ``booking_type``. The resolver turns that weak reference into one
``ServiceTarget`` value up front, so pricing, location and display code never
branch on booking type again. When nothing resolves, a placeholder is built
from the booking's own denormalized fields.
"""

from dataclasses import dataclass, field
import logging
from typing import Any, ClassVar, Dict, List, Optional, Union

from ..core.constants import (
    ADDRESS_NOT_AVAILABLE,
    CITY_NOT_AVAILABLE,
    DEFAULT_MAP_IMAGE_URL,
    DEFAULT_PLACEHOLDER_CATEGORY,
    UNKNOWN_VENDOR,
)
from ..core.exceptions import RepositoryException
from ..models.booking import Booking, BookingType
from ..repositories.listing_repository import (
    VendorCategoryRepository,
    VendorRepository,
    VenueRepository,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceTarget:
    """Fields shared by every kind of booking target."""

    kind: ClassVar[str] = "unknown"

    id: Optional[str]
    title: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    price: Optional[float] = None
    pricing: Optional[List[Dict[str, Any]]] = None
    form_data: Dict[str, Any] = field(default_factory=dict)
    average_rating: Optional[float] = None
    total_ratings: Optional[int] = None
    image_url: Optional[str] = None

    @property
    def display_name(self) -> Optional[str]:
        return self.title or self.name

    @property
    def is_placeholder(self) -> bool:
        return False


@dataclass(frozen=True)
class VenueTarget(ServiceTarget):
    kind: ClassVar[str] = BookingType.VENUE.value


@dataclass(frozen=True)
class VendorTarget(ServiceTarget):
    kind: ClassVar[str] = BookingType.VENDOR.value


@dataclass(frozen=True)
class PlaceholderTarget(ServiceTarget):
    kind: ClassVar[str] = "placeholder"

    @property
    def is_placeholder(self) -> bool:
        return True


AnyServiceTarget = Union[VenueTarget, VendorTarget, PlaceholderTarget]


def _from_listing(target_cls, record: Any, category_name: Optional[str] = None):
    return target_cls(
        id=str(record.id),
        title=record.title,
        name=record.name,
        description=record.description,
        category_id=record.category_id,
        category_name=category_name,
        price=record.price,
        pricing=record.pricing,
        form_data=dict(record.form_data or {}),
        average_rating=record.average_rating,
        total_ratings=record.total_ratings,
        image_url=record.image_url,
    )


def build_placeholder(booking: Booking) -> PlaceholderTarget:
    """Stand-in target synthesized from the booking's own fields."""
    title = booking.title or UNKNOWN_VENDOR
    return PlaceholderTarget(
        id=booking.venue_id,
        title=title,
        name=title,
        category_id=booking.category_id,
        category_name=booking.category_type or DEFAULT_PLACEHOLDER_CATEGORY,
        price=0,
        pricing=[],
        form_data={
            "pricing": [],
            "address": booking.venue_address or ADDRESS_NOT_AVAILABLE,
            "location": booking.venue_address or ADDRESS_NOT_AVAILABLE,
            "city": CITY_NOT_AVAILABLE,
            "latitude": 0,
            "longitude": 0,
            "pinTitle": title,
            "mapImageUrl": DEFAULT_MAP_IMAGE_URL,
        },
    )


class ServiceTargetResolver:
    """
    Resolves a booking's venue/vendor reference.

    Lookup failures are logged and treated as misses; resolution never raises.
    """

    def __init__(
        self,
        venue_repository: VenueRepository,
        vendor_repository: VendorRepository,
        category_repository: VendorCategoryRepository,
    ):
        self.venue_repository = venue_repository
        self.vendor_repository = vendor_repository
        self.category_repository = category_repository

    def resolve(self, booking: Booking) -> AnyServiceTarget:
        """Resolve the booking's target, falling back to a placeholder."""
        target_id = booking.venue_id
        target: Optional[AnyServiceTarget] = None

        if target_id:
            booking_type = (booking.booking_type or "").lower()
            if booking_type == BookingType.VENUE.value:
                target = self.find_venue(target_id)
            elif booking_type == BookingType.VENDOR.value:
                target = self.find_vendor(target_id)

            if target is None:
                target = self.resolve_any(target_id)

        if target is None:
            logger.info(
                f"No venue or vendor found for booking {booking.booking_id} "
                f"(target {target_id}); using placeholder"
            )
            target = build_placeholder(booking)
        return target

    def resolve_any(self, target_id: Optional[str]) -> Optional[AnyServiceTarget]:
        """Venue first, then vendor; None when neither exists."""
        if not target_id:
            return None
        return self.find_venue(target_id) or self.find_vendor(target_id)

    def find_venue(self, venue_id: str) -> Optional[VenueTarget]:
        try:
            venue = self.venue_repository.get_active_by_id(venue_id)
        except RepositoryException as e:
            logger.warning(f"Venue lookup failed for {venue_id}: {e}")
            return None
        return _from_listing(VenueTarget, venue) if venue else None

    def find_vendor(self, vendor_id: str) -> Optional[VendorTarget]:
        try:
            vendor = self.vendor_repository.get_active_by_id(vendor_id)
        except RepositoryException as e:
            logger.warning(f"Vendor lookup failed for {vendor_id}: {e}")
            return None
        if not vendor:
            return None
        return _from_listing(VendorTarget, vendor, self._category_name(vendor.category_id))

    def _category_name(self, category_id: Optional[str]) -> Optional[str]:
        if not category_id:
            return None
        try:
            return self.category_repository.get_name(category_id)
        except RepositoryException as e:
            logger.warning(f"Category lookup failed for {category_id}: {e}")
            return None
