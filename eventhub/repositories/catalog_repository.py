# eventhub/repositories/catalog_repository.py
"""Event type and photography type lookups used by the booking detail view."""

from sqlalchemy.orm import Session

from ..models.catalog import EventType, PhotographyType
from .base_repository import BaseRepository


class EventTypeRepository(BaseRepository[EventType]):
    def __init__(self, db: Session):
        super().__init__(db, EventType)


class PhotographyTypeRepository(BaseRepository[PhotographyType]):
    def __init__(self, db: Session):
        super().__init__(db, PhotographyType)
