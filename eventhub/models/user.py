# eventhub/models/user.py
"""User accounts referenced by bookings (owner and requester identity)."""

from enum import Enum

from sqlalchemy import Boolean, Column, String

from ..core.ulid_helper import generate_ulid
from ..database import Base


class UserRole(str, Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"
    ENTERPRISE = "enterprise"


class User(Base):
    __tablename__ = "users"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    role = Column(String(20), nullable=False, default=UserRole.CUSTOMER.value)
    is_active = Column(Boolean, nullable=False, default=True)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.email} ({self.role})>"
