# eventhub/models/catalog.py
"""Lookup tables referenced from booking details (event and photography types)."""

from sqlalchemy import Boolean, Column, String, Text

from ..core.ulid_helper import generate_ulid
from ..database import Base


class EventType(Base):
    __tablename__ = "event_types"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    is_deleted = Column(Boolean, nullable=False, default=False)


class PhotographyType(Base):
    __tablename__ = "photography_types"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    is_deleted = Column(Boolean, nullable=False, default=False)
