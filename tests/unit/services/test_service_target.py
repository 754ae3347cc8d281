"""Booking target resolution and placeholder synthesis."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from eventhub.core.constants import ADDRESS_NOT_AVAILABLE, DEFAULT_PLACEHOLDER_CATEGORY
from eventhub.core.exceptions import RepositoryException
from eventhub.services.service_target import (
    PlaceholderTarget,
    ServiceTargetResolver,
    VendorTarget,
    VenueTarget,
    build_placeholder,
)


def _listing(**overrides):
    values = {
        "id": "L1",
        "title": "Listing",
        "name": None,
        "description": None,
        "category_id": None,
        "price": None,
        "pricing": None,
        "form_data": {},
        "average_rating": None,
        "total_ratings": None,
        "image_url": None,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def _booking(**overrides):
    values = {
        "booking_id": "BK-0000000A",
        "booking_type": "venue",
        "venue_id": "L1",
        "title": None,
        "category_id": None,
        "category_type": None,
        "venue_address": None,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.fixture
def repos():
    venue_repo = MagicMock()
    vendor_repo = MagicMock()
    category_repo = MagicMock()
    venue_repo.get_active_by_id.return_value = None
    vendor_repo.get_active_by_id.return_value = None
    category_repo.get_name.return_value = None
    return venue_repo, vendor_repo, category_repo


@pytest.fixture
def resolver(repos):
    return ServiceTargetResolver(*repos)


class TestResolve:
    def test_venue_booking_resolves_venue(self, resolver, repos):
        repos[0].get_active_by_id.return_value = _listing(title="Lakeview")

        target = resolver.resolve(_booking())

        assert isinstance(target, VenueTarget)
        assert target.display_name == "Lakeview"
        repos[1].get_active_by_id.assert_not_called()

    def test_vendor_booking_attaches_category_name(self, resolver, repos):
        repos[1].get_active_by_id.return_value = _listing(category_id="cat-1")
        repos[2].get_name.return_value = "Catering"

        target = resolver.resolve(_booking(booking_type="vendor"))

        assert isinstance(target, VendorTarget)
        assert target.category_name == "Catering"
        repos[2].get_name.assert_called_once_with("cat-1")

    def test_mismatched_type_falls_back_to_other_table(self, resolver, repos):
        repos[1].get_active_by_id.return_value = _listing(title="Shutterbugs")

        target = resolver.resolve(_booking(booking_type="venue"))

        assert isinstance(target, VendorTarget)
        assert target.title == "Shutterbugs"

    def test_booking_type_is_case_insensitive(self, resolver, repos):
        repos[1].get_active_by_id.return_value = _listing()

        target = resolver.resolve(_booking(booking_type="VENDOR"))

        assert isinstance(target, VendorTarget)
        repos[0].get_active_by_id.assert_not_called()

    def test_unresolved_target_becomes_placeholder(self, resolver):
        target = resolver.resolve(_booking(title="Haldi ceremony", venue_address="5 MG Road"))

        assert isinstance(target, PlaceholderTarget)
        assert target.is_placeholder
        assert target.display_name == "Haldi ceremony"
        assert target.form_data["address"] == "5 MG Road"

    def test_missing_venue_id_skips_lookups(self, resolver, repos):
        target = resolver.resolve(_booking(venue_id=None))

        assert target.is_placeholder
        repos[0].get_active_by_id.assert_not_called()
        repos[1].get_active_by_id.assert_not_called()

    def test_lookup_failures_degrade_to_placeholder(self, resolver, repos):
        repos[0].get_active_by_id.side_effect = RepositoryException("connection reset")
        repos[1].get_active_by_id.side_effect = RepositoryException("connection reset")

        target = resolver.resolve(_booking())

        assert target.is_placeholder

    def test_category_failure_leaves_name_empty(self, resolver, repos):
        repos[1].get_active_by_id.return_value = _listing(category_id="cat-1")
        repos[2].get_name.side_effect = RepositoryException("boom")

        target = resolver.resolve(_booking(booking_type="vendor"))

        assert isinstance(target, VendorTarget)
        assert target.category_name is None


class TestPlaceholder:
    def test_defaults(self):
        placeholder = build_placeholder(_booking())

        assert placeholder.title == "Unknown Vendor"
        assert placeholder.category_name == DEFAULT_PLACEHOLDER_CATEGORY
        assert placeholder.price == 0
        assert placeholder.pricing == []
        assert placeholder.form_data["address"] == ADDRESS_NOT_AVAILABLE
        assert placeholder.form_data["latitude"] == 0
        assert placeholder.form_data["longitude"] == 0

    def test_uses_booking_category_type(self):
        placeholder = build_placeholder(_booking(category_type="Decorator"))
        assert placeholder.category_name == "Decorator"
