# eventhub/services/location_enrichment.py
"""
Location overlay for booking targets.

The locations table holds the authoritative address and coordinates for a
venue or vendor. When a row exists its values win over the coordinates
embedded in the listing's ``form_data``.
"""

import logging
from typing import Any, Dict, Optional

from ..core.config import settings
from ..core.constants import ADDRESS_NOT_AVAILABLE, CITY_NOT_AVAILABLE
from ..core.exceptions import RepositoryException
from ..models.location import Location
from ..repositories.location_repository import LocationRepository
from .service_target import ServiceTarget

logger = logging.getLogger(__name__)


def _first_present(*values: Any) -> Any:
    """First value that is not None (zero counts as present)."""
    for value in values:
        if value is not None:
            return value
    return 0


class LocationEnrichmentService:
    def __init__(self, location_repository: LocationRepository):
        self.location_repository = location_repository

    def enrich(self, service_id: Optional[str]) -> Optional[Location]:
        """Stored location for a venue/vendor id, or None on miss or lookup failure."""
        if not service_id:
            return None
        try:
            return self.location_repository.get_active_for_service(str(service_id))
        except RepositoryException as e:
            logger.warning(f"Location lookup failed for service {service_id}: {e}")
            return None

    @staticmethod
    def build_location(target: ServiceTarget, stored: Optional[Location]) -> Dict[str, Any]:
        """Composite ``location`` object; every key is always present."""
        form = target.form_data or {}
        return {
            "address": (stored.address if stored else None)
            or form.get("address")
            or form.get("location")
            or ADDRESS_NOT_AVAILABLE,
            "city": form.get("city") or CITY_NOT_AVAILABLE,
            "latitude": _first_present(
                stored.latitude if stored else None, form.get("latitude")
            ),
            "longitude": _first_present(
                stored.longitude if stored else None, form.get("longitude")
            ),
            "pinTitle": form.get("pinTitle") or target.name or target.title or "",
            "mapImageUrl": form.get("mapImageUrl") or settings.map_image_placeholder_url,
        }

    def locate(self, target: ServiceTarget) -> Dict[str, Any]:
        """Enrich and build in one step (placeholders skip the lookup)."""
        stored = None if target.is_placeholder else self.enrich(target.id)
        return self.build_location(target, stored)
