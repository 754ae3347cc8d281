# eventhub/services/__init__.py
"""
Service layer for the EventHub booking API.

Services hold business rules; repositories own data access and routes stay
thin.
"""

from .base import BaseService
from .booking_read_model import BookingQuery, BookingReadModelComposer
from .booking_service import BookingService
from .location_enrichment import LocationEnrichmentService
from .reference_image_service import ReferenceImageService
from .service_target import ServiceTargetResolver

__all__ = [
    "BaseService",
    "BookingQuery",
    "BookingReadModelComposer",
    "BookingService",
    "LocationEnrichmentService",
    "ReferenceImageService",
    "ServiceTargetResolver",
]
