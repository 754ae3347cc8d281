# eventhub/core/exceptions.py
"""
Domain-specific exceptions for the EventHub booking API.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        """Convert to an HTTPException carrying the domain payload."""
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when business validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class UnauthorizedException(DomainException):
    """Raised when user is not authenticated."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenException(DomainException):
    """Raised when user lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details if self.details else {},
            },
        )


# Specific business exceptions


class BookingNotFoundException(NotFoundException):
    """Raised when a booking cannot be found by booking number or id."""

    def __init__(self, booking_id: str):
        super().__init__(
            message="Booking not found",
            code="BOOKING_NOT_FOUND",
            details={"booking_id": booking_id},
        )


class BookingOwnershipException(ValidationException):
    """Raised when a user acts on a booking they do not own.

    Surfaced as a bad request rather than 403 so clients handle it like any
    other rejected mutation.
    """

    def __init__(self, action: str, booking_id: str):
        super().__init__(
            message=f"You can only {action} your own bookings",
            code="BOOKING_NOT_OWNED",
            details={"booking_id": booking_id},
        )


class BookingStateException(ValidationException):
    """Raised when a status transition is not allowed from the current state."""

    def __init__(self, message: str, current_status: str):
        super().__init__(
            message=message,
            code="INVALID_BOOKING_STATE",
            details={"current_status": current_status},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
