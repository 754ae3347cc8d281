"""Problem-document rendering for domain, HTTP and unexpected errors."""

from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest

from eventhub.core.exceptions import (
    BookingStateException,
    ForbiddenException,
    ServiceException,
    UnauthorizedException,
)
from eventhub.errors import register_error_handlers


@pytest.fixture
def client():
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/forbidden")
    def forbidden():
        raise ForbiddenException("Admins only", code="ADMIN_ONLY").to_http_exception()

    @app.get("/unauthorized")
    def unauthorized():
        raise UnauthorizedException("Sign in first")

    @app.get("/state")
    def state():
        raise BookingStateException("Booking is already cancelled", "cancelled")

    @app.get("/service")
    def service():
        raise ServiceException("")

    @app.get("/boom")
    def boom():
        raise RuntimeError("secret stack detail")

    @app.get("/items/{item_id}")
    def item(item_id: int):
        return {"id": item_id}

    return TestClient(app, raise_server_exceptions=False)


def test_http_exception_from_domain_payload(client):
    response = client.get("/forbidden")

    assert response.status_code == 403
    assert response.headers["content-type"].startswith("application/problem+json")
    assert response.json() == {
        "type": "about:blank",
        "title": "Forbidden",
        "status": 403,
        "detail": "Admins only",
        "instance": "/forbidden",
        "code": "ADMIN_ONLY",
    }


def test_raised_domain_exception_uses_class_status(client):
    response = client.get("/unauthorized")

    assert response.status_code == 401
    assert response.json()["code"] == "UnauthorizedException"


def test_domain_details_become_errors(client):
    body = client.get("/state").json()

    assert body["status"] == 400
    assert body["code"] == "INVALID_BOOKING_STATE"
    assert body["errors"] == {"current_status": "cancelled"}


def test_service_exception_has_default_message(client):
    response = client.get("/service")

    assert response.status_code == 500
    assert response.json()["detail"] == "An error occurred processing your request"


def test_unhandled_error_hides_internals(client):
    response = client.get("/boom")

    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "internal_server_error"
    assert "secret" not in response.text
    assert body["title"] == "Internal Server Error"


def test_request_validation_problem(client):
    response = client.get("/items/not-a-number")

    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "validation_error"
    assert body["detail"] == "Request validation failed"
    assert body["errors"][0]["loc"] == ["path", "item_id"]
