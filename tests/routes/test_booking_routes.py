"""HTTP surface of /booking with an in-memory database."""

import base64

from fastapi.testclient import TestClient
import pytest

from eventhub.api.dependencies.database import get_db
from eventhub.api.dependencies.services import get_booking_service
from eventhub.auth import create_access_token
from eventhub.main import app
from eventhub.services.booking_service import BookingService
from eventhub.services.local_storage_client import LocalStorageClient
from eventhub.services.reference_image_service import ReferenceImageService

from tests.helpers import ADMIN_ID, CUSTOMER_ID, OTHER_USER_ID


def _auth(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


@pytest.fixture
def client(db, tmp_path):
    def _get_db():
        yield db

    def _get_booking_service():
        images = ReferenceImageService([LocalStorageClient(root=tmp_path)], delay_seconds=0)
        return BookingService(db, image_service=images)

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_booking_service] = _get_booking_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def users(make_user):
    make_user()
    make_user(id=OTHER_USER_ID, email="other@example.com", first_name="Ravi")
    make_user(id=ADMIN_ID, email="ops@example.com", role="admin")


@pytest.fixture
def customer():
    return _auth(CUSTOMER_ID)


@pytest.fixture
def admin():
    return _auth(ADMIN_ID)


def _create(client, headers, **overrides):
    payload = {"bookingType": "venue", "venueId": "venue-1", "eventDate": "2025-06-15"}
    payload.update(overrides)
    response = client.post("/booking/request-booking", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestAuth:
    def test_health_is_public(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_missing_token_is_problem_document(self, client):
        response = client.get("/booking/user")

        assert response.status_code == 401
        assert response.headers["content-type"].startswith("application/problem+json")
        body = response.json()
        assert body["title"] == "Unauthorized"
        assert body["detail"] == "Not authenticated"
        assert body["instance"] == "/booking/user"

    def test_invalid_token(self, client):
        response = client.get("/booking/user", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_unknown_subject(self, client):
        response = client.get("/booking/user", headers=_auth("01HZZZNOBODY00000000000000"))
        assert response.status_code == 404

    def test_admin_routes_require_admin_role(self, client, users, customer):
        assert client.get("/booking/admin", headers=customer).status_code == 403
        assert client.post("/booking/migrate-status", headers=customer).status_code == 403


class TestCreateAndRead:
    def test_create_returns_pending_booking(self, client, users, customer):
        body = _create(client, customer, expectedGuests=120)

        assert body["bookingId"].startswith("BK-")
        assert body["bookingStatus"] == "pending"
        assert body["userId"] == CUSTOMER_ID
        assert body["expectedGuests"] == 120
        assert body["referenceImages"] == []

    def test_create_uploads_reference_images(self, client, users, customer, tmp_path):
        image = "data:image/png;base64," + base64.b64encode(b"\x89PNG-body").decode()

        body = _create(client, customer, referenceImages=[image, "not-an-image"])

        assert len(body["referenceImages"]) == 1
        url = body["referenceImages"][0]
        assert url.startswith("/uploads/booking/request_booking_")
        assert (tmp_path / url.removeprefix("/uploads/")).exists()

    def test_create_validation_error(self, client, users, customer):
        response = client.post(
            "/booking/request-booking", json={"venueId": "venue-1"}, headers=customer
        )

        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"

    def test_unknown_fields_rejected(self, client, users, customer):
        response = client.post(
            "/booking/request-booking",
            json={"bookingType": "venue", "bookingStatus": "confirmed"},
            headers=customer,
        )
        assert response.status_code == 422

    def test_user_listing_is_scoped(self, client, users, customer):
        _create(client, customer)
        _create(client, customer)
        _create(client, _auth(OTHER_USER_ID))

        body = client.get("/booking/user", headers=customer).json()

        assert body["total"] == 2
        assert body["page"] == 1
        assert body["limit"] == 10
        assert {view["userId"] for view in body["bookings"]} == {CUSTOMER_ID}
        assert body["bookings"][0]["customerName"] == "Asha Rao"

    def test_detail_and_not_found(self, client, users, customer):
        created = _create(client, customer, title="Reception")

        detail = client.get(f"/booking/{created['bookingId']}", headers=customer)
        assert detail.status_code == 200
        assert detail.json()["title"] == "Reception"
        assert detail.json()["venueOrVendorInfo"] is None

        missing = client.get("/booking/BK-FFFFFFFF", headers=customer)
        assert missing.status_code == 404
        assert missing.json()["code"] == "BOOKING_NOT_FOUND"
        assert missing.json()["detail"] == "Booking not found"


class TestAdminListing:
    def test_status_accepts_comma_separated_and_repeated(self, client, users, customer, admin):
        first = _create(client, customer)
        _create(client, customer)
        client.post("/booking/accept", json={"bookingId": first["bookingId"]}, headers=admin)

        comma = client.get("/booking/admin?status=confirmed,rejected", headers=admin).json()
        repeated = client.get(
            "/booking/admin",
            params=[("status", "confirmed"), ("status", "rejected")],
            headers=admin,
        ).json()

        assert comma["total"] == 1
        assert repeated["total"] == 1
        assert comma["bookings"][0]["status"] == "confirmed"

    def test_all_is_alias_of_admin(self, client, users, customer, admin):
        _create(client, customer)
        _create(client, _auth(OTHER_USER_ID))

        admin_page = client.get("/booking/admin", headers=admin).json()
        all_page = client.get("/booking/all", headers=admin).json()

        assert admin_page["total"] == all_page["total"] == 2

    def test_cancelled_outside_date_range(self, client, users, customer, admin):
        created = _create(client, customer, eventDate="2025-03-10")
        client.put(
            f"/booking/{created['bookingId']}/cancel",
            json={"cancellationReason": "Plans changed"},
            headers=customer,
        )

        body = client.get(
            "/booking/admin",
            params={"status": "cancelled", "dateFrom": "2025-06-01", "dateTo": "2025-06-30"},
            headers=admin,
        ).json()

        assert body == {"bookings": [], "total": 0, "page": 1, "limit": 10}


class TestMutations:
    def test_update_by_owner(self, client, users, customer):
        created = _create(client, customer)

        response = client.put(
            f"/booking/{created['bookingId']}",
            json={"title": "Engagement", "bookingId": "BK-00000000"},
            headers=customer,
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Engagement"
        assert response.json()["bookingId"] == created["bookingId"]

    def test_null_booking_type_is_a_validation_problem(self, client, users, customer):
        created = _create(client, customer)

        response = client.put(
            f"/booking/{created['bookingId']}", json={"bookingType": None}, headers=customer
        )

        assert response.status_code == 422
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.json()["code"] == "validation_error"
        detail = client.get(f"/booking/{created['bookingId']}", headers=customer).json()
        assert detail["bookingType"] == "venue"

    def test_update_by_other_user(self, client, users, customer):
        created = _create(client, customer)

        response = client.put(
            f"/booking/{created['bookingId']}", json={"title": "x"}, headers=_auth(OTHER_USER_ID)
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "You can only update your own bookings"

    def test_cancel_then_cancel_again(self, client, users, customer):
        created = _create(client, customer)
        url = f"/booking/{created['bookingId']}/cancel"

        first = client.put(url, json={"cancellationReason": "Venue closed"}, headers=customer)
        second = client.put(url, json={"cancellationReason": "Again"}, headers=customer)

        assert first.status_code == 200
        body = first.json()
        assert set(body) == {
            "id",
            "bookingId",
            "bookingStatus",
            "cancellationReason",
            "cancellationDate",
            "notes",
            "updatedAt",
        }
        assert body["bookingStatus"] == "cancelled"
        assert second.status_code == 400
        assert second.json()["detail"] == "Booking is already cancelled"
        assert second.json()["code"] == "INVALID_BOOKING_STATE"

    def test_cancel_requires_reason(self, client, users, customer):
        created = _create(client, customer)
        response = client.put(
            f"/booking/{created['bookingId']}/cancel",
            json={"cancellationReason": ""},
            headers=customer,
        )
        assert response.status_code == 422

    def test_accept_and_reject(self, client, users, customer, admin):
        to_accept = _create(client, customer)
        to_reject = _create(client, customer)

        accepted = client.post(
            "/booking/accept",
            json={"bookingId": to_accept["bookingId"], "notes": "Confirmed by phone"},
            headers=admin,
        )
        no_reason = client.post(
            "/booking/reject", json={"bookingId": to_reject["bookingId"]}, headers=admin
        )
        rejected = client.post(
            "/booking/reject",
            json={"bookingId": to_reject["bookingId"], "rejectionReason": "Fully booked"},
            headers=admin,
        )

        assert accepted.status_code == 200
        assert accepted.json()["bookingStatus"] == "confirmed"
        assert accepted.json()["notes"] == "Confirmed by phone"
        assert no_reason.status_code == 400
        assert no_reason.json()["detail"] == "Rejection reason is required"
        assert rejected.status_code == 200
        assert rejected.json()["rejectionReason"] == "Fully booked"
        assert rejected.json()["rejectionDate"] is not None

    def test_vendor_booking_cannot_be_accepted(self, client, users, customer, admin):
        created = _create(client, customer, bookingType="vendor")

        response = client.post(
            "/booking/accept", json={"bookingId": created["bookingId"]}, headers=admin
        )

        assert response.status_code == 400
        assert "vendor-offer" in response.json()["detail"]

    def test_migrate_status(self, client, users, admin):
        response = client.post("/booking/migrate-status", headers=admin)

        assert response.status_code == 200
        assert response.json()["updated"] == 0


class TestMetrics:
    def test_prometheus_exposition(self, client, users, customer):
        _create(client, customer)

        response = client.get("/metrics/prometheus?refresh=1")

        assert response.status_code == 200
        assert "eventhub_service_operations_total" in response.text
