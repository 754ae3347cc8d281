# tests/conftest.py
"""
Pytest configuration.

Environment is pinned BEFORE any eventhub import so settings pick up an
in-memory database and the local-only upload store.
"""

import os

os.environ["CI"] = "true"  # skip .env loading
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["LOCAL_UPLOADS_ONLY"] = "true"
os.environ["UPLOAD_DELAY_SECONDS"] = "0"

from typing import Any, Callable

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from eventhub.database import Base
import eventhub.models  # noqa: F401
from eventhub.models.booking import Booking
from eventhub.models.user import User, UserRole
from eventhub.models.venue import Vendor, VendorCategory, Venue

from tests.helpers import CUSTOMER_ID


@pytest.fixture
def db() -> Session:
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    def _make(**overrides: Any) -> User:
        values = {
            "id": CUSTOMER_ID,
            "first_name": "Asha",
            "last_name": "Rao",
            "email": "asha.rao@example.com",
            "role": UserRole.CUSTOMER.value,
            "is_active": True,
        }
        values.update(overrides)
        user = User(**values)
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_venue(db: Session) -> Callable[..., Venue]:
    def _make(**overrides: Any) -> Venue:
        values = {
            "title": "Lakeview Banquet Hall",
            "description": "Lakeside hall for 300 guests",
            "form_data": {"address": "12 Lake Road", "city": "Pune"},
        }
        values.update(overrides)
        venue = Venue(**values)
        db.add(venue)
        db.commit()
        return venue

    return _make


@pytest.fixture
def make_vendor(db: Session) -> Callable[..., Vendor]:
    def _make(category_name: str = "Catering", **overrides: Any) -> Vendor:
        category = VendorCategory(name=category_name)
        db.add(category)
        db.flush()
        values = {"title": "Spice Route Caterers", "category_id": category.id, "form_data": {}}
        values.update(overrides)
        vendor = Vendor(**values)
        db.add(vendor)
        db.commit()
        return vendor

    return _make


@pytest.fixture
def make_booking(db: Session) -> Callable[..., Booking]:
    counter = {"n": 0}

    def _make(**overrides: Any) -> Booking:
        counter["n"] += 1
        values = {
            "booking_id": f"BK-{counter['n']:08X}",
            "booking_type": "venue",
            "venue_id": "missing-venue",
            "user_id": CUSTOMER_ID,
            "event_date": "2025-06-15",
            "title": "Wedding reception",
        }
        values.update(overrides)
        booking = Booking(**values)
        db.add(booking)
        db.commit()
        return booking

    return _make
