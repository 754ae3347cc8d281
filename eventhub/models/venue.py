# eventhub/models/venue.py
"""
Venue and vendor listings.

Both are owned by the listing subsystems; the booking subsystem only reads
them. ``form_data`` is the provider-defined bag (address, coordinates,
pricing, dynamic form fields) stored as JSON.
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Integer, String, Text

from ..core.ulid_helper import generate_ulid
from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _ListingColumns:
    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    title = Column(String(255), nullable=True)
    name = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    category_id = Column(String(64), nullable=True)
    price = Column(Float, nullable=True)
    pricing = Column(JSON, nullable=True)
    form_data = Column(JSON, nullable=True)
    average_rating = Column(Float, nullable=True)
    total_ratings = Column(Integer, nullable=True)
    image_url = Column(String(1024), nullable=True)
    is_deleted = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class Venue(_ListingColumns, Base):
    """Bookable venue (hall, banquet, lawn...)."""

    __tablename__ = "venues"

    def __repr__(self) -> str:
        return f"<Venue {self.id}: {self.title or self.name}>"


class Vendor(_ListingColumns, Base):
    """Bookable vendor (photographer, caterer, decorator...)."""

    __tablename__ = "vendors"

    def __repr__(self) -> str:
        return f"<Vendor {self.id}: {self.title or self.name}>"


class VendorCategory(Base):
    """Vendor category display names (e.g. Catering, Photography)."""

    __tablename__ = "vendor_categories"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    name = Column(String(255), nullable=False)
    is_deleted = Column(Boolean, nullable=False, default=False)
