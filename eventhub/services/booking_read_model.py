# eventhub/services/booking_read_model.py
"""
Booking read model.

Builds the denormalized booking view served to clients: booking fields plus
the resolved venue/vendor, its location, a derived price and the requester's
identity. Nothing here is persisted; every read recomputes the view.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from ..core.constants import (
    NO_DESCRIPTION,
    PLACEHOLDER_IMAGE_MARKER,
    UNKNOWN_CUSTOMER,
    UNKNOWN_EMAIL,
    UNKNOWN_SERVICE,
    UNKNOWN_USER,
    UNKNOWN_VENUE,
)
from ..core.exceptions import (
    BookingNotFoundException,
    DomainException,
    RepositoryException,
    ValidationException,
)
from ..models.booking import Booking
from ..repositories.booking_repository import BookingFilters, BookingRepository
from ..repositories.catalog_repository import EventTypeRepository, PhotographyTypeRepository
from ..repositories.listing_repository import VendorRepository, VenueRepository
from ..repositories.user_repository import UserRepository
from .location_enrichment import LocationEnrichmentService
from .pricing_rules import derive_price, rating_label
from .service_target import AnyServiceTarget, ServiceTargetResolver

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Failed to fetch bookings"
MULTI_IMAGE_FIELD_TYPE = "MultiImageUpload"
DEFAULT_INFO_RATING = 5
DEFAULT_LABEL_RATING = 4.4


@dataclass
class BookingQuery:
    """Listing filters as supplied by the client."""

    search: Optional[str] = None
    statuses: List[str] = field(default_factory=list)
    booking_type: Optional[str] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None


def _multi_image_field_url(target: AnyServiceTarget) -> Optional[str]:
    fields = target.form_data.get("fields")
    if not isinstance(fields, list):
        return None
    for form_field in fields:
        if not isinstance(form_field, Mapping) or form_field.get("type") != MULTI_IMAGE_FIELD_TYPE:
            continue
        values = form_field.get("actualValue")
        if not isinstance(values, list) or not values:
            continue
        first = values[0]
        if isinstance(first, str):
            return first
        if isinstance(first, Mapping):
            url = first.get("url")
            if isinstance(url, Mapping):
                return url.get("imageUrl")
            return url
    return None


def _form_image_url(target: AnyServiceTarget) -> Optional[str]:
    return target.form_data.get("imageUrl")


def _form_first_image(target: AnyServiceTarget) -> Optional[str]:
    images = target.form_data.get("images")
    if isinstance(images, list) and images:
        return images[0]
    return None


def _listing_image_url(target: AnyServiceTarget) -> Optional[str]:
    return target.image_url


IMAGE_URL_RULES: Tuple[Callable[[AnyServiceTarget], Optional[str]], ...] = (
    _multi_image_field_url,
    _form_image_url,
    _form_first_image,
    _listing_image_url,
)


def extract_image_url(target: AnyServiceTarget) -> str:
    """First image URL any rule finds, else an empty string."""
    for rule in IMAGE_URL_RULES:
        value = rule(target)
        if value and isinstance(value, str):
            return value
    return ""


def clean_reference_images(images: Any) -> List[str]:
    """Drop non-string, empty and placeholder entries."""
    if not isinstance(images, list):
        return []
    return [
        url
        for url in images
        if isinstance(url, str) and url and PLACEHOLDER_IMAGE_MARKER not in url
    ]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class BookingReadModelComposer:
    """Composes booking views for the admin list, the user list and the detail page."""

    def __init__(
        self,
        booking_repository: BookingRepository,
        venue_repository: VenueRepository,
        vendor_repository: VendorRepository,
        resolver: ServiceTargetResolver,
        location_service: LocationEnrichmentService,
        user_repository: UserRepository,
        event_type_repository: EventTypeRepository,
        photography_type_repository: PhotographyTypeRepository,
    ):
        self.booking_repository = booking_repository
        self.venue_repository = venue_repository
        self.vendor_repository = vendor_repository
        self.resolver = resolver
        self.location_service = location_service
        self.user_repository = user_repository
        self.event_type_repository = event_type_repository
        self.photography_type_repository = photography_type_repository

    # Listings

    def list_for_admin(self, query: BookingQuery, page: int, limit: int) -> Dict[str, Any]:
        """Every booking, filtered, newest first; paginated in SQL."""
        try:
            filters = self._to_filters(query, include_vendors=True)
            rows, total = self.booking_repository.list_filtered(
                filters, skip=(page - 1) * limit, limit=limit
            )
            return {
                "bookings": [self.compose(booking) for booking in rows],
                "total": total,
                "page": page,
                "limit": limit,
            }
        except DomainException:
            raise
        except Exception as e:
            logger.error(f"Error listing bookings for admin: {e}", exc_info=True)
            raise ValidationException(FETCH_FAILED_MESSAGE)

    def list_for_user(
        self, user_id: str, query: BookingQuery, page: int, limit: int
    ) -> Dict[str, Any]:
        """
        One user's bookings, newest first.

        Search narrows by venue ids only. All matches are fetched and the
        page is cut in memory.
        """
        try:
            filters = self._to_filters(query, include_vendors=False)
            rows = self.booking_repository.list_for_user(str(user_id), filters)
            skip = (page - 1) * limit
            return {
                "bookings": [self.compose(booking) for booking in rows[skip : skip + limit]],
                "total": len(rows),
                "page": page,
                "limit": limit,
            }
        except DomainException:
            raise
        except Exception as e:
            logger.error(f"Error listing bookings for user {user_id}: {e}", exc_info=True)
            raise ValidationException(FETCH_FAILED_MESSAGE)

    # Detail

    def get_by_booking_id(
        self, booking_id: str, requesting_user_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Detail view by booking number or internal id.

        Any authenticated user may read a booking; admins and vendors review
        bookings they do not own.
        """
        booking = self.booking_repository.find_by_identifier(booking_id)
        if not booking:
            raise BookingNotFoundException(booking_id)

        logger.debug(f"Booking {booking.booking_id} requested by {requesting_user_id}")
        target = self.resolver.resolve(booking)
        location = self.location_service.locate(target)
        view = self._compose_view(booking, target, location)

        view.update(
            {
                "referenceImages": clean_reference_images(booking.reference_images),
                "categoryType": booking.category_type,
                "venueOrVendorInfo": None
                if target.is_placeholder
                else self._target_info(target, location),
                "event": self._lookup_named(self.event_type_repository, booking.event_id),
                "photographyType": self._lookup_named(
                    self.photography_type_repository, booking.photographers_id
                ),
            }
        )
        return view

    # Composition

    def compose(self, booking: Booking) -> Dict[str, Any]:
        """Enrich a single booking: target, location, price, requester."""
        target = self.resolver.resolve(booking)
        location = self.location_service.locate(target)
        return self._compose_view(booking, target, location)

    def _compose_view(
        self, booking: Booking, target: AnyServiceTarget, location: Dict[str, Any]
    ) -> Dict[str, Any]:
        price = derive_price(target)
        customer_name, customer_email, user_name = self._requester(booking.user_id)
        pricing = target.pricing
        if pricing is None:
            pricing = target.form_data.get("pricing") or []

        view = booking.to_dict()
        view.update(
            {
                "bookingNumber": booking.booking_id or booking.id,
                "title": target.display_name or UNKNOWN_VENUE,
                "description": target.description or NO_DESCRIPTION,
                "location": location,
                "price": price,
                "amount": price,
                "pricing": pricing,
                "status": booking.normalized_status,
                "rating": target.average_rating or 0,
                "reviews": target.total_ratings or 0,
                "imageUrl": extract_image_url(target),
                "customerName": customer_name,
                "customerEmail": customer_email,
                "userName": user_name,
                "userEmail": customer_email,
                "serviceName": target.display_name or UNKNOWN_SERVICE,
                "startDateTime": booking.event_date or booking.start_time or _now_iso(),
                "endDateTime": booking.end_date or booking.end_time or _now_iso(),
                "referenceImages": list(booking.reference_images or []),
            }
        )
        return view

    def _requester(self, user_id: Optional[str]) -> Tuple[str, str, str]:
        user = None
        if user_id:
            try:
                user = self.user_repository.get_by_id(str(user_id))
            except RepositoryException as e:
                logger.warning(f"User lookup failed for {user_id}: {e}")

        if not user:
            return UNKNOWN_CUSTOMER, UNKNOWN_EMAIL, UNKNOWN_USER
        full_name = user.full_name
        return (
            full_name or UNKNOWN_CUSTOMER,
            user.email or UNKNOWN_EMAIL,
            full_name or UNKNOWN_USER,
        )

    @staticmethod
    def _target_info(target: AnyServiceTarget, location: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "title": target.display_name or "Unknown",
            "location": location,
            "description": target.description
            or target.form_data.get("description")
            or NO_DESCRIPTION,
            "price": target.price or 0,
            "imagePath": target.image_url or "",
            "rating": target.average_rating or DEFAULT_INFO_RATING,
            "reviews": target.total_ratings or 0,
            "ratingLabel": rating_label(target.average_rating or DEFAULT_LABEL_RATING),
        }

    @staticmethod
    def _lookup_named(repository: Any, record_id: Optional[str]) -> Optional[Dict[str, Any]]:
        """Event/photography type as a small dict; None on miss or failure."""
        if not record_id:
            return None
        try:
            record = repository.get_active_by_id(record_id)
        except RepositoryException as e:
            logger.warning(f"Lookup failed for {record_id}: {e}")
            return None
        if not record:
            return None
        return {"id": record.id, "name": record.name, "description": record.description}

    # Filters

    def _to_filters(self, query: BookingQuery, *, include_vendors: bool) -> BookingFilters:
        filters = BookingFilters(
            statuses=list(query.statuses or []),
            booking_type=query.booking_type or None,
            date_from=query.date_from or None,
            date_to=query.date_to or None,
        )
        search = (query.search or "").strip()
        if search:
            ids: Sequence[str] = self.venue_repository.search_ids(search)
            if include_vendors:
                ids = list(ids) + self.vendor_repository.search_ids(search)
            filters.venue_ids = list(dict.fromkeys(ids))
        return filters
