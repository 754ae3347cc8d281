"""Application-wide constants for the EventHub booking API."""

from __future__ import annotations

API_TITLE = "EventHub Booking API"
API_VERSION = "0.1.0"
API_DESCRIPTION = (
    "Booking lifecycle, enrichment and reference-image ingestion for venues and vendors"
)

# Booking identifiers
BOOKING_ID_PREFIX = "BK-"
BOOKING_ID_PATTERN = r"^BK-[0-9A-F]{8}$"

# Pagination
DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100

# Composite view fallbacks
DEFAULT_MAP_IMAGE_URL = "https://maps.googleapis.com/..."
ADDRESS_NOT_AVAILABLE = "Address not available"
CITY_NOT_AVAILABLE = "City not available"
NO_DESCRIPTION = "No description available"
UNKNOWN_VENUE = "Unknown Venue"
UNKNOWN_VENDOR = "Unknown Vendor"
UNKNOWN_SERVICE = "Unknown Service"
UNKNOWN_CUSTOMER = "Unknown Customer"
UNKNOWN_USER = "Unknown User"
UNKNOWN_EMAIL = "unknown@example.com"
DEFAULT_PLACEHOLDER_CATEGORY = "PhotoGrapher"

# Reference images
REFERENCE_IMAGE_PATTERN = r"^data:image/(png|jpeg|jpg);base64,(.+)$"
REFERENCE_IMAGE_FOLDER = "booking"
REFERENCE_IMAGE_FILE_PREFIX = "request_booking"
PLACEHOLDER_IMAGE_MARKER = "placeholder"
DEFAULT_SUPABASE_BUCKETS = ("profiles", "uploads")
LOCAL_UPLOADS_URL_PREFIX = "/uploads"

# Roles allowed to see and act on every booking
ADMIN_ROLES = frozenset({"admin", "enterprise"})
