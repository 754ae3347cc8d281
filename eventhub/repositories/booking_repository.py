# eventhub/repositories/booking_repository.py
"""
Booking Repository for the EventHub booking API

Implements all data access operations for booking management:
- Lookups by booking number or internal id
- Filtered admin listing with SQL pagination
- Per-user listing (pagination applied by the caller)
- Status normalization queries
"""

from dataclasses import dataclass, field
import logging
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException
from ..models.booking import Booking, BookingStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


@dataclass
class BookingFilters:
    """Criteria shared by the admin and user listings."""

    statuses: List[str] = field(default_factory=list)
    booking_type: Optional[str] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    # None means "no venue restriction"; an empty list means "match nothing".
    venue_ids: Optional[List[str]] = None


class BookingRepository(BaseRepository[Booking]):
    """
    Repository for booking data access.

    Soft-deleted bookings are excluded from every read.
    """

    def __init__(self, db: Session):
        """Initialize with Booking model."""
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    # Lookups

    def get_by_booking_number(self, booking_number: str) -> Optional[Booking]:
        """Find a live booking by its public ``BK-`` identifier."""
        try:
            return (
                self._active_query()
                .filter(Booking.booking_id == str(booking_number))
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting booking {booking_number}: {str(e)}")
            raise RepositoryException(f"Failed to get booking: {str(e)}")

    def find_by_identifier(self, identifier: str) -> Optional[Booking]:
        """
        Resolve a booking from either identifier form.

        The public booking number is tried first, then the internal id.
        """
        booking = self.get_by_booking_number(identifier)
        if booking:
            return booking
        try:
            return self._active_query().filter(Booking.id == str(identifier)).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting booking by id {identifier}: {str(e)}")
            raise RepositoryException(f"Failed to get booking: {str(e)}")

    def booking_number_exists(self, booking_number: str) -> bool:
        """Uniqueness check for a freshly generated booking number (deleted rows count)."""
        try:
            return (
                self.db.query(Booking.id).filter(Booking.booking_id == booking_number).first()
                is not None
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking booking number {booking_number}: {str(e)}")
            raise RepositoryException(f"Failed to check booking number: {str(e)}")

    # Listings

    def list_filtered(
        self, filters: BookingFilters, *, skip: int, limit: int
    ) -> Tuple[List[Booking], int]:
        """
        Admin listing: filtered, newest first, paginated in SQL.

        Returns:
            (page of bookings, total matching count)
        """
        if filters.venue_ids is not None and not filters.venue_ids:
            return [], 0

        query = self._apply_filters(self._active_query(), filters)
        try:
            total = query.order_by(None).count()
            rows = (
                query.order_by(Booking.created_at.desc(), Booking.id.desc())
                .offset(skip)
                .limit(limit)
                .all()
            )
            return rows, total
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing bookings: {str(e)}")
            raise RepositoryException(f"Failed to list bookings: {str(e)}")

    def list_for_user(self, user_id: str, filters: BookingFilters) -> List[Booking]:
        """All of one user's bookings matching the filters, newest first."""
        if filters.venue_ids is not None and not filters.venue_ids:
            return []

        query = self._active_query().filter(Booking.user_id == str(user_id))
        query = self._apply_filters(query, filters)
        return self._execute_query(query.order_by(Booking.created_at.desc(), Booking.id.desc()))

    # Status normalization

    def find_missing_status(self) -> List[Booking]:
        """Live bookings whose status is null or empty."""
        query = self._active_query().filter(
            or_(Booking.booking_status.is_(None), Booking.booking_status == "")
        )
        return self._execute_query(query)

    def find_non_lowercase_status(self) -> List[Booking]:
        """Live bookings whose stored status is not already lowercase."""
        query = self._active_query().filter(
            Booking.booking_status.isnot(None),
            Booking.booking_status != "",
            Booking.booking_status != func.lower(Booking.booking_status),
        )
        return self._execute_query(query)

    # Query helpers

    def _active_query(self) -> Query:
        return self._build_query().filter(Booking.is_deleted.is_(False))

    def _apply_filters(self, query: Query, filters: BookingFilters) -> Query:
        status_clause = self._status_clause(filters.statuses)
        if status_clause is not None:
            query = query.filter(status_clause)

        if filters.booking_type:
            query = query.filter(Booking.booking_type == filters.booking_type)

        # Day-granular comparison so "2025-06-30" includes "2025-06-30T18:00:00Z".
        if filters.date_from and filters.date_to:
            event_day = func.substr(Booking.event_date, 1, 10)
            query = query.filter(
                event_day >= filters.date_from[:10],
                event_day <= filters.date_to[:10],
            )

        if filters.venue_ids:
            query = query.filter(Booking.venue_id.in_(filters.venue_ids))

        return query

    @staticmethod
    def _status_clause(statuses: Sequence[str]):
        wanted = {s.strip().lower() for s in statuses if s and s.strip()}
        if not wanted:
            return None

        clauses = []
        explicit = sorted(wanted - {BookingStatus.PENDING.value})
        if explicit:
            clauses.append(func.lower(Booking.booking_status).in_(explicit))
        if BookingStatus.PENDING.value in wanted:
            clauses.append(Booking.booking_status.is_(None))
            clauses.append(Booking.booking_status == "")
            clauses.append(func.lower(Booking.booking_status) == BookingStatus.PENDING.value)
        return or_(*clauses)
