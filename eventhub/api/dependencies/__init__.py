# eventhub/api/dependencies/__init__.py
"""
Central export point for all dependencies.
"""

from .auth import get_current_active_user, get_current_user, require_admin
from .database import get_db
from .services import get_booking_service

__all__ = [
    # Auth
    "get_current_user",
    "get_current_active_user",
    "require_admin",
    # Database
    "get_db",
    # Services
    "get_booking_service",
]
