# eventhub/repositories/location_repository.py
"""Location lookups keyed by the venue or vendor id they describe."""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.location import Location
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class LocationRepository(BaseRepository[Location]):
    def __init__(self, db: Session):
        super().__init__(db, Location)

    def get_active_for_service(self, service_id: str) -> Optional[Location]:
        """The active, non-deleted location for ``service_id`` (string equality)."""
        try:
            return (
                self._build_query()
                .filter(
                    Location.service_id == str(service_id),
                    Location.is_active.is_(True),
                    Location.is_deleted.is_(False),
                )
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting location for {service_id}: {str(e)}")
            raise RepositoryException(f"Failed to get location: {str(e)}")
