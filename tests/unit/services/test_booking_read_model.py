"""Composite booking views built from the booking and its collaborators."""

from unittest.mock import MagicMock

import pytest

from eventhub.core.constants import UNKNOWN_CUSTOMER, UNKNOWN_EMAIL
from eventhub.core.exceptions import BookingNotFoundException, ValidationException
from eventhub.models.catalog import EventType, PhotographyType
from eventhub.models.location import Location
from eventhub.repositories.booking_repository import BookingRepository
from eventhub.services.booking_read_model import (
    BookingQuery,
    clean_reference_images,
    extract_image_url,
)
from eventhub.services.booking_service import BookingService
from eventhub.services.service_target import VenueTarget

from tests.helpers import CUSTOMER_ID, OTHER_USER_ID


@pytest.fixture
def composer(db):
    return BookingService._build_read_model(db, BookingRepository(db))


class TestCompose:
    def test_venue_view_with_stored_location(
        self, db, composer, make_user, make_venue, make_booking
    ):
        make_user()
        venue = make_venue(pricing=[{"price": 100}, {"price": 300}], average_rating=4.6)
        db.add(
            Location(service_id=venue.id, address="1 Stored Lane", latitude=1.5, longitude=2.5)
        )
        db.commit()
        booking = make_booking(venue_id=venue.id)

        view = composer.compose(booking)

        assert view["bookingNumber"] == booking.booking_id
        assert view["title"] == "Lakeview Banquet Hall"
        assert view["price"] == 200
        assert view["amount"] == 200
        assert view["pricing"] == [{"price": 100}, {"price": 300}]
        assert view["rating"] == 4.6
        assert view["location"]["address"] == "1 Stored Lane"
        assert view["location"]["city"] == "Pune"
        assert view["customerName"] == "Asha Rao"
        assert view["customerEmail"] == "asha.rao@example.com"
        assert view["status"] == "pending"
        assert view["startDateTime"] == "2025-06-15"

    def test_vendor_catering_view_prices_from_category(self, composer, make_vendor, make_booking):
        vendor = make_vendor(category_name="Catering")
        booking = make_booking(booking_type="vendor", venue_id=vendor.id)

        view = composer.compose(booking)

        assert view["serviceName"] == "Spice Route Caterers"
        assert view["price"] == 100

    def test_missing_target_and_user_degrade(self, composer, make_booking):
        booking = make_booking(venue_id="deleted-venue", title="Sangeet night")

        view = composer.compose(booking)

        assert view["title"] == "Sangeet night"
        assert view["price"] == 0
        assert view["pricing"] == []
        assert view["customerName"] == UNKNOWN_CUSTOMER
        assert view["customerEmail"] == UNKNOWN_EMAIL
        assert view["location"]["latitude"] == 0

    def test_status_is_normalized(self, composer, make_booking):
        view = composer.compose(make_booking(booking_status="CONFIRMED"))
        assert view["status"] == "confirmed"
        assert view["bookingStatus"] == "CONFIRMED"


class TestDetail:
    def test_detail_adds_target_info_and_lookups(self, db, composer, make_venue, make_booking):
        venue = make_venue(price=45000, image_url="https://img.example.com/hall.jpg")
        event = EventType(name="Wedding", description="Wedding ceremony")
        style = PhotographyType(name="Candid")
        db.add_all([event, style])
        db.commit()
        booking = make_booking(
            venue_id=venue.id,
            event_id=event.id,
            photographers_id=style.id,
            category_type="Hall",
            reference_images=["https://cdn/a.png", "https://cdn/placeholder.png", ""],
        )

        view = composer.get_by_booking_id(booking.booking_id)

        assert view["referenceImages"] == ["https://cdn/a.png"]
        assert view["categoryType"] == "Hall"
        assert view["event"] == {
            "id": event.id,
            "name": "Wedding",
            "description": "Wedding ceremony",
        }
        assert view["photographyType"]["name"] == "Candid"
        info = view["venueOrVendorInfo"]
        assert info["price"] == 45000
        assert info["imagePath"] == "https://img.example.com/hall.jpg"
        assert info["rating"] == 5
        assert info["ratingLabel"] == "excellent"

    def test_detail_by_internal_id(self, composer, make_booking):
        booking = make_booking()
        assert composer.get_by_booking_id(booking.id)["bookingId"] == booking.booking_id

    def test_detail_for_placeholder_has_no_target_info(self, composer, make_booking):
        booking = make_booking(venue_id="gone")
        view = composer.get_by_booking_id(booking.booking_id)
        assert view["venueOrVendorInfo"] is None
        assert view["event"] is None

    def test_detail_is_readable_by_non_owner(self, composer, make_booking):
        booking = make_booking()
        view = composer.get_by_booking_id(booking.booking_id, OTHER_USER_ID)
        assert view["userId"] == CUSTOMER_ID

    def test_unknown_booking(self, composer):
        with pytest.raises(BookingNotFoundException):
            composer.get_by_booking_id("BK-FFFFFFFF")


class TestListings:
    def test_admin_search_matches_venue_text(self, composer, make_venue, make_booking):
        lakeview = make_venue(title="Lakeview Lawns")
        hilltop = make_venue(title="Hilltop Terrace", form_data={"city": "Nashik"})
        make_booking(venue_id=lakeview.id)
        wanted = make_booking(venue_id=hilltop.id)

        page = composer.list_for_admin(BookingQuery(search="nashik"), page=1, limit=10)

        assert page["total"] == 1
        assert [view["bookingId"] for view in page["bookings"]] == [wanted.booking_id]

    def test_admin_search_includes_vendors(self, composer, make_vendor, make_booking):
        vendor = make_vendor(title="Frame Story Studio", category_name="Photography")
        make_booking(booking_type="vendor", venue_id=vendor.id)

        page = composer.list_for_admin(BookingQuery(search="frame story"), page=1, limit=10)

        assert page["total"] == 1

    def test_admin_search_without_matches_is_empty(self, composer, make_booking):
        make_booking()

        page = composer.list_for_admin(BookingQuery(search="nowhere"), page=1, limit=10)

        assert page == {"bookings": [], "total": 0, "page": 1, "limit": 10}

    def test_user_search_is_venue_only(self, composer, make_vendor, make_booking):
        vendor = make_vendor(title="Frame Story Studio")
        make_booking(booking_type="vendor", venue_id=vendor.id)

        page = composer.list_for_user(CUSTOMER_ID, BookingQuery(search="frame"), 1, 10)

        assert page["total"] == 0

    def test_user_listing_pages_in_memory(self, composer, make_booking):
        for _ in range(3):
            make_booking()
        make_booking(user_id=OTHER_USER_ID)

        page = composer.list_for_user(CUSTOMER_ID, BookingQuery(), page=2, limit=2)

        assert page["total"] == 3
        assert len(page["bookings"]) == 1
        assert page["page"] == 2

    def test_repository_failure_becomes_validation_error(self):
        booking_repo = MagicMock()
        booking_repo.list_filtered.side_effect = RuntimeError("db gone")
        composer = BookingService._build_read_model(MagicMock(), booking_repo)

        with pytest.raises(ValidationException, match="Failed to fetch bookings"):
            composer.list_for_admin(BookingQuery(), page=1, limit=10)


class TestImageHelpers:
    def test_multi_image_field_wins(self):
        target = VenueTarget(
            id="v1",
            image_url="https://img/listing.jpg",
            form_data={
                "imageUrl": "https://img/form.jpg",
                "fields": [
                    {"type": "Text", "actualValue": "x"},
                    {
                        "type": "MultiImageUpload",
                        "actualValue": [{"url": {"imageUrl": "https://img/field.jpg"}}],
                    },
                ],
            },
        )
        assert extract_image_url(target) == "https://img/field.jpg"

    def test_image_fallback_order(self):
        from_form = VenueTarget(id="v1", form_data={"images": ["https://i/1"]})
        assert extract_image_url(from_form) == "https://i/1"
        assert extract_image_url(VenueTarget(id="v1", image_url="https://i/2")) == "https://i/2"
        assert extract_image_url(VenueTarget(id="v1")) == ""

    def test_clean_reference_images(self):
        assert clean_reference_images(None) == []
        assert clean_reference_images(["https://a", None, "", "https://placeholder/x"]) == [
            "https://a"
        ]
