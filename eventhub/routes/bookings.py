# eventhub/routes/bookings.py
"""
Booking routes

All business logic delegated to BookingService; every service call runs in a
worker thread so the event loop stays free.

Endpoints:
    GET /user - Current user's bookings
    GET /admin - All bookings with filters (admin/enterprise)
    GET /all - Alias of /admin
    POST /request-booking - Create a booking request
    POST /accept - Confirm a booking (admin)
    POST /reject - Reject a booking (admin)
    POST /migrate-status - Normalize legacy statuses (admin)
    GET /{booking_id} - Booking detail
    PUT /{booking_id} - Update a booking (owner)
    PUT /{booking_id}/cancel - Cancel a booking (owner)
"""

import asyncio
import logging
from typing import Any, Dict, List, NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Query, status

from ..api.dependencies import get_booking_service, get_current_active_user, require_admin
from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from ..core.exceptions import DomainException
from ..models.booking import Booking
from ..models.user import User
from ..schemas.booking import (
    BookingAccept,
    BookingCancel,
    BookingCancelResponse,
    BookingCreate,
    BookingListResponse,
    BookingReject,
    BookingStatusChangeResponse,
    BookingUpdate,
    StatusMigrationResponse,
)
from ..services.booking_read_model import BookingQuery
from ..services.booking_service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/booking", tags=["bookings"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


def parse_status_filter(values: Optional[List[str]]) -> List[str]:
    """Accept ``?status=a&status=b`` as well as ``?status=a,b``."""
    statuses: List[str] = []
    for value in values or []:
        statuses.extend(part.strip() for part in value.split(",") if part.strip())
    return statuses


def _status_change_response(booking: Booking) -> BookingStatusChangeResponse:
    return BookingStatusChangeResponse(
        id=booking.id,
        booking_id=booking.booking_id,
        booking_status=booking.booking_status,
        notes=booking.notes,
        rejection_reason=booking.rejection_reason,
        rejection_date=booking.rejection_date,
        updated_at=booking.updated_at,
    )


# ============================================================================
# Static routes (no path parameters)
# ============================================================================


@router.get("/user", response_model=BookingListResponse)
async def list_user_bookings(
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    search: Optional[str] = Query(None),
    booking_type: Optional[str] = Query(None, alias="bookingType"),
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    """List the current user's bookings, newest first."""
    query = BookingQuery(search=search, booking_type=booking_type)
    try:
        return await asyncio.to_thread(
            booking_service.list_user_bookings, current_user.id, query, page, limit
        )
    except DomainException as e:
        handle_domain_exception(e)


async def _list_admin(
    booking_service: BookingService,
    page: int,
    limit: int,
    search: Optional[str],
    status_values: Optional[List[str]],
    booking_type: Optional[str],
    date_from: Optional[str],
    date_to: Optional[str],
) -> Dict[str, Any]:
    query = BookingQuery(
        search=search,
        statuses=parse_status_filter(status_values),
        booking_type=booking_type,
        date_from=date_from,
        date_to=date_to,
    )
    try:
        return await asyncio.to_thread(booking_service.list_admin_bookings, query, page, limit)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/admin", response_model=BookingListResponse)
async def list_admin_bookings(
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    search: Optional[str] = Query(None),
    status_values: Optional[List[str]] = Query(None, alias="status"),
    booking_type: Optional[str] = Query(None, alias="bookingType"),
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    _admin: User = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    """List every booking with optional status, type, date and text filters."""
    return await _list_admin(
        booking_service, page, limit, search, status_values, booking_type, date_from, date_to
    )


@router.get("/all", response_model=BookingListResponse)
async def list_all_bookings(
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    search: Optional[str] = Query(None),
    status_values: Optional[List[str]] = Query(None, alias="status"),
    booking_type: Optional[str] = Query(None, alias="bookingType"),
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    _admin: User = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    """Alias of ``GET /booking/admin``."""
    return await _list_admin(
        booking_service, page, limit, search, status_values, booking_type, date_from, date_to
    )


@router.post("/request-booking", status_code=status.HTTP_201_CREATED)
async def request_booking(
    booking_data: BookingCreate = Body(...),
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    """Create a pending booking request; reference images are uploaded first."""
    try:
        booking = await asyncio.to_thread(
            booking_service.create_booking, current_user.id, booking_data
        )
        return booking.to_dict()
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/accept", response_model=BookingStatusChangeResponse)
async def accept_booking(
    payload: BookingAccept = Body(...),
    _admin: User = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingStatusChangeResponse:
    """Confirm a booking."""
    try:
        booking = await asyncio.to_thread(
            booking_service.accept_booking, payload.booking_id, payload.notes
        )
        return _status_change_response(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/reject", response_model=BookingStatusChangeResponse)
async def reject_booking(
    payload: BookingReject = Body(...),
    _admin: User = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingStatusChangeResponse:
    """Reject a booking with a reason."""
    try:
        booking = await asyncio.to_thread(
            booking_service.reject_booking,
            payload.booking_id,
            payload.rejection_reason,
            payload.notes,
        )
        return _status_change_response(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/migrate-status", response_model=StatusMigrationResponse)
async def migrate_booking_statuses(
    _admin: User = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    """Set missing statuses to pending and lowercase the rest."""
    try:
        return await asyncio.to_thread(booking_service.migrate_booking_statuses)
    except DomainException as e:
        handle_domain_exception(e)


# ============================================================================
# Dynamic routes (with path parameters)
# ============================================================================


@router.get("/{booking_id}")
async def get_booking(
    booking_id: str = Path(..., description="Booking number (BK-XXXXXXXX) or internal id"),
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    """Full booking detail with target, location and catalog lookups."""
    try:
        return await asyncio.to_thread(
            booking_service.get_booking_detail, booking_id, current_user.id
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{booking_id}")
async def update_booking(
    booking_id: str = Path(..., description="Booking number (BK-XXXXXXXX) or internal id"),
    update_data: BookingUpdate = Body(...),
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> Dict[str, Any]:
    """Update the current user's booking."""
    try:
        return await asyncio.to_thread(
            booking_service.update_booking, booking_id, current_user.id, update_data
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{booking_id}/cancel", response_model=BookingCancelResponse)
async def cancel_booking(
    booking_id: str = Path(..., description="Booking number (BK-XXXXXXXX) or internal id"),
    cancel_data: BookingCancel = Body(...),
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingCancelResponse:
    """Cancel the current user's booking."""
    try:
        booking = await asyncio.to_thread(
            booking_service.cancel_booking, booking_id, current_user.id, cancel_data
        )
        return BookingCancelResponse(
            id=booking.id,
            booking_id=booking.booking_id,
            booking_status=booking.booking_status,
            cancellation_reason=booking.cancellation_reason,
            cancellation_date=booking.cancellation_date,
            notes=booking.notes,
            updated_at=booking.updated_at,
        )
    except DomainException as e:
        handle_domain_exception(e)
