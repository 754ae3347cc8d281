# eventhub/services/booking_service.py
"""
Booking Service for the EventHub booking API

Handles the booking lifecycle:
- Creating booking requests (with reference image ingestion)
- Owner updates and cancellations
- Admin accept/reject transitions
- Status normalization for legacy rows
- Read access through the booking read model

Image uploads run outside any database transaction so slow storage providers
never hold a connection open.
"""

from datetime import datetime, timezone
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import (
    BookingNotFoundException,
    BookingOwnershipException,
    BookingStateException,
    NotFoundException,
    RepositoryException,
    ServiceException,
    ValidationException,
)
from ..core.ulid_helper import generate_booking_number
from ..models.booking import Booking, BookingStatus, BookingType
from ..repositories.booking_repository import BookingRepository
from ..repositories.factory import RepositoryFactory
from ..schemas.booking import BookingCancel, BookingCreate, BookingUpdate
from .base import BaseService
from .booking_read_model import BookingQuery, BookingReadModelComposer
from .location_enrichment import LocationEnrichmentService
from .reference_image_service import ReferenceImageService
from .service_target import ServiceTargetResolver

logger = logging.getLogger(__name__)

BOOKING_NUMBER_ATTEMPTS = 5

CANCEL_BLOCKED_MESSAGES = {
    BookingStatus.CANCELLED.value: "Booking is already cancelled",
    BookingStatus.COMPLETED.value: "Cannot cancel a completed booking",
    BookingStatus.REJECTED.value: "Cannot cancel a rejected booking",
}

ACCEPT_BLOCKED_MESSAGES = {
    BookingStatus.CONFIRMED.value: "Booking is already confirmed",
    BookingStatus.CANCELLED.value: "Cannot accept a cancelled booking",
    BookingStatus.COMPLETED.value: "Cannot accept a completed booking",
    BookingStatus.REJECTED.value: "Cannot accept a rejected booking",
}

REJECT_BLOCKED_MESSAGES = {
    BookingStatus.REJECTED.value: "Booking is already rejected",
    BookingStatus.CANCELLED.value: "Cannot reject a cancelled booking",
    BookingStatus.COMPLETED.value: "Cannot reject a completed booking",
    BookingStatus.CONFIRMED.value: "Cannot reject a confirmed booking. Please cancel it instead.",
}

VENDOR_ACCEPT_MESSAGE = (
    "Vendors cannot accept bookings directly. Please submit an offer instead using the "
    "/bookings/{bookingId}/vendor-offer endpoint."
)
VENDOR_REJECT_MESSAGE = (
    "Vendors cannot reject bookings directly. "
    "Simply do not submit an offer if you are not interested."
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Lifecycle guards


def ensure_owner(booking: Booking, user_id: Any, action: str) -> None:
    """Only the requester may mutate a booking; ids compare as strings."""
    if not booking.is_owned_by(user_id):
        raise BookingOwnershipException(action, booking.booking_id)


def _ensure_not_blocked(booking: Booking, blocked: Dict[str, str]) -> None:
    status = booking.normalized_status
    if status in blocked:
        raise BookingStateException(blocked[status], status)


def ensure_cancellable(booking: Booking) -> None:
    status = booking.normalized_status
    if status in BookingStatus.terminal():
        raise BookingStateException(CANCEL_BLOCKED_MESSAGES[status], status)


def ensure_acceptable(booking: Booking) -> None:
    if (booking.booking_type or "").lower() == BookingType.VENDOR.value:
        raise ValidationException(VENDOR_ACCEPT_MESSAGE, code="VENDOR_BOOKING")
    _ensure_not_blocked(booking, ACCEPT_BLOCKED_MESSAGES)


def ensure_rejectable(booking: Booking) -> None:
    if (booking.booking_type or "").lower() == BookingType.VENDOR.value:
        raise ValidationException(VENDOR_REJECT_MESSAGE, code="VENDOR_BOOKING")
    _ensure_not_blocked(booking, REJECT_BLOCKED_MESSAGES)


class BookingService(BaseService):
    """
    Service layer for booking operations.

    Mutations are guarded (ownership, status) before any write; reads are
    delegated to the booking read model.
    """

    repository: BookingRepository

    def __init__(
        self,
        db: Session,
        repository: Optional[BookingRepository] = None,
        read_model: Optional[BookingReadModelComposer] = None,
        image_service: Optional[ReferenceImageService] = None,
    ):
        """
        Initialize booking service.

        Args:
            db: Database session
            repository: Optional BookingRepository instance
            read_model: Optional composer for booking views
            image_service: Optional reference image ingestion service
        """
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_booking_repository(db)
        self.read_model = read_model or self._build_read_model(db, self.repository)
        self.image_service = image_service or ReferenceImageService()

    @staticmethod
    def _build_read_model(
        db: Session, booking_repository: BookingRepository
    ) -> BookingReadModelComposer:
        venue_repository = RepositoryFactory.create_venue_repository(db)
        vendor_repository = RepositoryFactory.create_vendor_repository(db)
        resolver = ServiceTargetResolver(
            venue_repository,
            vendor_repository,
            RepositoryFactory.create_vendor_category_repository(db),
        )
        return BookingReadModelComposer(
            booking_repository=booking_repository,
            venue_repository=venue_repository,
            vendor_repository=vendor_repository,
            resolver=resolver,
            location_service=LocationEnrichmentService(
                RepositoryFactory.create_location_repository(db)
            ),
            user_repository=RepositoryFactory.create_user_repository(db),
            event_type_repository=RepositoryFactory.create_event_type_repository(db),
            photography_type_repository=RepositoryFactory.create_photography_type_repository(db),
        )

    # Reads

    @BaseService.measure_operation("list_admin_bookings")
    def list_admin_bookings(self, query: BookingQuery, page: int, limit: int) -> Dict[str, Any]:
        return self.read_model.list_for_admin(query, page, limit)

    @BaseService.measure_operation("list_user_bookings")
    def list_user_bookings(
        self, user_id: str, query: BookingQuery, page: int, limit: int
    ) -> Dict[str, Any]:
        return self.read_model.list_for_user(user_id, query, page, limit)

    @BaseService.measure_operation("get_booking_detail")
    def get_booking_detail(self, booking_id: str, user_id: Optional[str] = None) -> Dict[str, Any]:
        try:
            return self.read_model.get_by_booking_id(booking_id, user_id)
        except RepositoryException as e:
            self.logger.error(f"Error fetching booking {booking_id}: {str(e)}")
            raise ValidationException(f"Failed to fetch booking: {str(e)}")

    # Mutations

    @BaseService.measure_operation("create_booking")
    def create_booking(self, user_id: str, data: BookingCreate) -> Booking:
        """
        Create a pending booking request.

        Reference images are uploaded first; whatever succeeds is stored.

        Raises:
            ValidationException: If the booking cannot be created
        """
        try:
            uploaded = self._upload_reference_images(data.reference_images)
            fields = data.model_dump(mode="json", exclude={"reference_images"}, exclude_none=True)

            with self.transaction():
                booking = self.repository.create(
                    **fields,
                    booking_id=self._new_booking_number(),
                    user_id=str(user_id),
                    reference_images=uploaded,
                    booking_status=BookingStatus.PENDING.value,
                )

            self.log_operation(
                "create_booking",
                booking_id=booking.booking_id,
                booking_type=booking.booking_type,
                reference_images=len(uploaded),
            )
            return booking
        except (ValidationException, NotFoundException):
            raise
        except Exception as e:
            self.logger.error(f"Error creating booking for user {user_id}: {str(e)}", exc_info=True)
            raise ValidationException(f"Failed to create booking: {str(e)}")

    @BaseService.measure_operation("update_booking")
    def update_booking(self, booking_id: str, user_id: str, data: BookingUpdate) -> Dict[str, Any]:
        """
        Merge the supplied fields into the owner's booking.

        ``booking_id`` is never written. New reference images replace the
        stored ones only when at least one upload succeeded.

        Returns:
            The refreshed detail view

        Raises:
            ValidationException: If the user does not own the booking or the write fails
        """
        try:
            booking = self._get_booking_or_404(booking_id)
            ensure_owner(booking, user_id, "update")

            uploaded = self._upload_reference_images(data.reference_images)
            changes = data.model_dump(
                mode="json", exclude_unset=True, exclude={"booking_id", "reference_images"}
            )
            if uploaded:
                changes["reference_images"] = uploaded

            with self.transaction():
                self.repository.apply_changes(booking, **changes)
        except (ValidationException, NotFoundException):
            raise
        except Exception as e:
            self.logger.error(f"Error updating booking {booking_id}: {str(e)}", exc_info=True)
            raise ValidationException(f"Failed to update booking: {str(e)}")

        self.log_operation("update_booking", booking_id=booking.booking_id, fields=sorted(changes))
        return self.get_booking_detail(booking.booking_id, user_id)

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(self, booking_id: str, user_id: str, data: BookingCancel) -> Booking:
        """
        Cancel the owner's booking.

        Raises:
            BookingNotFoundException: If booking not found
            BookingOwnershipException: If the user does not own the booking
            BookingStateException: If the booking is cancelled, completed or rejected
            ValidationException: If the write fails
        """
        try:
            with self.transaction():
                booking = self._get_booking_or_404(booking_id)
                ensure_owner(booking, user_id, "cancel")
                ensure_cancellable(booking)

                self.repository.apply_changes(
                    booking,
                    booking_status=BookingStatus.CANCELLED.value,
                    cancellation_reason=data.cancellation_reason,
                    cancellation_date=_utcnow(),
                    notes=data.notes or None,
                )
        except (ValidationException, NotFoundException):
            raise
        except Exception as e:
            self.logger.error(f"Error cancelling booking {booking_id}: {str(e)}", exc_info=True)
            raise ValidationException(f"Failed to cancel booking: {str(e)}")

        self.log_operation("cancel_booking", booking_id=booking.booking_id, user_id=user_id)
        return booking

    @BaseService.measure_operation("accept_booking")
    def accept_booking(self, booking_id: str, notes: Optional[str] = None) -> Booking:
        """Confirm a pending venue booking and clear any earlier rejection."""
        with self.transaction():
            booking = self._get_booking_or_404(booking_id)
            ensure_acceptable(booking)

            changes: Dict[str, Any] = {
                "booking_status": BookingStatus.CONFIRMED.value,
                "rejection_reason": None,
                "rejection_date": None,
            }
            if notes:
                changes["notes"] = notes
            self.repository.apply_changes(booking, **changes)

        self.log_operation("accept_booking", booking_id=booking.booking_id)
        return booking

    @BaseService.measure_operation("reject_booking")
    def reject_booking(
        self, booking_id: str, rejection_reason: Optional[str], notes: Optional[str] = None
    ) -> Booking:
        """
        Reject a pending venue booking.

        Raises:
            ValidationException: If the transition is not allowed, the reason
                is missing, or the write fails
        """
        try:
            with self.transaction():
                booking = self._get_booking_or_404(booking_id)
                ensure_rejectable(booking)
                if not rejection_reason or not rejection_reason.strip():
                    raise ValidationException("Rejection reason is required")

                changes: Dict[str, Any] = {
                    "booking_status": BookingStatus.REJECTED.value,
                    "rejection_reason": rejection_reason.strip(),
                    "rejection_date": _utcnow(),
                }
                if notes:
                    changes["notes"] = notes
                self.repository.apply_changes(booking, **changes)
        except (ValidationException, NotFoundException):
            raise
        except Exception as e:
            self.logger.error(f"Error rejecting booking {booking_id}: {str(e)}", exc_info=True)
            raise ValidationException(f"Failed to reject booking: {str(e)}")

        self.log_operation("reject_booking", booking_id=booking.booking_id)
        return booking

    @BaseService.measure_operation("migrate_booking_statuses")
    def migrate_booking_statuses(self) -> Dict[str, Any]:
        """
        Normalize legacy status values.

        Missing or empty statuses become ``pending``; any other status is
        lowercased.
        """
        with self.transaction():
            missing = self.repository.find_missing_status()
            for booking in missing:
                booking.booking_status = BookingStatus.PENDING.value

            non_lowercase = self.repository.find_non_lowercase_status()
            for booking in non_lowercase:
                booking.booking_status = booking.booking_status.strip().lower()
            self.repository.flush()

        updated, converted = len(missing), len(non_lowercase)
        self.logger.info(
            f"Status migration completed: {updated} set to pending, {converted} lowercased"
        )
        return {
            "updated": updated + converted,
            "message": (
                f"Successfully updated {updated} bookings to pending status and converted "
                f"{converted} uppercase statuses to lowercase"
            ),
        }

    # Helpers

    def _get_booking_or_404(self, booking_id: str) -> Booking:
        booking = self.repository.find_by_identifier(booking_id)
        if not booking:
            raise BookingNotFoundException(booking_id)
        return booking

    def _new_booking_number(self) -> str:
        for _ in range(BOOKING_NUMBER_ATTEMPTS):
            candidate = generate_booking_number()
            if not self.repository.booking_number_exists(candidate):
                return candidate
            self.logger.warning(f"Booking number collision on {candidate}; regenerating")
        raise ServiceException("Could not allocate a unique booking number")

    def _upload_reference_images(self, images: Optional[List[str]]) -> List[str]:
        """Best-effort ingestion; the booking write never depends on it."""
        if not images:
            return []
        try:
            return self.image_service.ingest(images)
        except Exception as e:
            self.logger.error(f"Reference image ingestion failed: {str(e)}", exc_info=True)
            return []
