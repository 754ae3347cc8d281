# eventhub/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.booking_service import BookingService
from .database import get_db


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Get BookingService instance bound to the request session."""
    return BookingService(db)
