"""ULID and booking-number generation helpers."""

import uuid

import ulid

from .constants import BOOKING_ID_PREFIX


def generate_ulid() -> str:
    """Generate a new ULID string."""
    return str(ulid.ULID())


def generate_booking_number() -> str:
    """Human-readable booking number, e.g. ``BK-A9098A0F``."""
    return f"{BOOKING_ID_PREFIX}{str(uuid.uuid4()).split('-')[0].upper()}"
