from .booking import (
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

__all__ = [
    "BookingAccept",
    "BookingCancel",
    "BookingCancelResponse",
    "BookingCreate",
    "BookingListResponse",
    "BookingReject",
    "BookingStatusChangeResponse",
    "BookingUpdate",
    "StatusMigrationResponse",
]
