"""JWT issue/verify helpers and the current-user-id dependency."""

from datetime import timedelta

from fastapi import HTTPException
import jwt
import pytest

from eventhub.auth import create_access_token, decode_access_token, get_current_user_id

from tests.helpers import CUSTOMER_ID


def test_token_round_trip_keeps_subject():
    token = create_access_token({"sub": CUSTOMER_ID})

    payload = decode_access_token(token)

    assert payload["sub"] == CUSTOMER_ID
    assert "exp" in payload


def test_expired_token_rejected():
    token = create_access_token({"sub": CUSTOMER_ID}, expires_delta=timedelta(seconds=-30))

    with pytest.raises(jwt.ExpiredSignatureError):
        decode_access_token(token)


def test_numeric_subject_is_issued_as_string():
    token = create_access_token({"sub": 42})
    assert decode_access_token(token)["sub"] == "42"


async def test_dependency_returns_subject_as_string():
    token = create_access_token({"sub": 42})
    assert await get_current_user_id(token) == "42"


async def test_dependency_without_token():
    with pytest.raises(HTTPException) as exc_info:
        await get_current_user_id(None)

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Not authenticated"


@pytest.mark.parametrize(
    "token",
    [
        "garbage",
        create_access_token({"role": "admin"}),
        jwt.encode({"sub": CUSTOMER_ID}, "some-other-secret", algorithm="HS256"),
    ],
)
async def test_dependency_rejects_bad_credentials(token):
    with pytest.raises(HTTPException) as exc_info:
        await get_current_user_id(token)

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Could not validate credentials"
