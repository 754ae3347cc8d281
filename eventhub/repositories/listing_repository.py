# eventhub/repositories/listing_repository.py
"""
Venue and vendor repositories.

Listings are read-only from the booking side: live-record lookups for target
resolution and free-text id search for the booking listings.
"""

import logging
import re
from typing import Any, Iterator, List, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.venue import Vendor, VendorCategory, Venue
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

ListingT = TypeVar("ListingT", Venue, Vendor)

# form_data keys included in free-text search
SEARCHABLE_FORM_KEYS = ("location", "address", "city", "description")


def _search_texts(row: Any) -> Iterator[str]:
    for value in (row.title, row.name, row.description):
        if isinstance(value, str):
            yield value
    form_data = row.form_data if isinstance(row.form_data, dict) else {}
    for key in SEARCHABLE_FORM_KEYS:
        value = form_data.get(key)
        if isinstance(value, str):
            yield value


class ListingRepository(BaseRepository[ListingT]):
    """Shared data access for venues and vendors."""

    def __init__(self, db: Session, model: Type[ListingT]):
        super().__init__(db, model)

    def search_ids(self, term: str) -> List[str]:
        """
        Ids of live listings whose text matches ``term``.

        ``term`` is a case-insensitive regular expression; a term that does not
        compile is matched literally. Searched: title, name, description and
        form_data location/address/city/description.
        """
        term = (term or "").strip()
        if not term:
            return []

        try:
            matcher = re.compile(term, re.IGNORECASE)
        except re.error:
            matcher = re.compile(re.escape(term), re.IGNORECASE)

        model = self.model
        try:
            rows = (
                self.db.query(model.id, model.title, model.name, model.description, model.form_data)
                .filter(model.is_deleted.is_(False))
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error searching {model.__name__} for '{term}': {str(e)}")
            raise RepositoryException(f"Failed to search {model.__name__}: {str(e)}")

        return [row.id for row in rows if any(matcher.search(text) for text in _search_texts(row))]


class VenueRepository(ListingRepository[Venue]):
    def __init__(self, db: Session):
        super().__init__(db, Venue)


class VendorRepository(ListingRepository[Vendor]):
    def __init__(self, db: Session):
        super().__init__(db, Vendor)


class VendorCategoryRepository(BaseRepository[VendorCategory]):
    def __init__(self, db: Session):
        super().__init__(db, VendorCategory)

    def get_name(self, category_id: str) -> Optional[str]:
        """Display name of a live category, or None."""
        category = self.get_active_by_id(category_id)
        return category.name if category else None
