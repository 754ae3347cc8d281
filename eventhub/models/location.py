# eventhub/models/location.py
"""Authoritative map location for a venue or vendor, keyed by service id."""

from sqlalchemy import Boolean, Column, Float, String, Text

from ..core.ulid_helper import generate_ulid
from ..database import Base


class Location(Base):
    __tablename__ = "locations"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    service_id = Column(String(64), nullable=False, index=True)
    address = Column(Text, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_deleted = Column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Location {self.service_id}: {self.latitude},{self.longitude}>"
