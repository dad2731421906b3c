"""Tests for the error taxonomy and the envelope-producing handlers."""

import uuid

import pytest
from httpx import AsyncClient

from rentora.errors import (
    AlreadyFavoritedError,
    AlreadyReviewedError,
    AppError,
    ConflictError,
    ForbiddenError,
    InvalidBookingError,
    InvalidDatesError,
    InvalidPasswordError,
    InvalidStatusError,
    MaxStayError,
    MinStayError,
    NotAvailableError,
    NotCompletedError,
    NotEligibleError,
    NotFoundError,
    ValidationError,
)


class TestErrorTaxonomy:
    @pytest.mark.parametrize(
        ("error", "code", "status_code"),
        [
            (ValidationError(), "VALIDATION_ERROR", 400),
            (NotFoundError(), "NOT_FOUND", 404),
            (ForbiddenError(), "FORBIDDEN", 403),
            (ConflictError(), "DUPLICATE_ENTRY", 409),
            (InvalidDatesError(), "INVALID_DATES", 400),
            (InvalidBookingError(), "INVALID_BOOKING", 400),
            (MinStayError(3), "MIN_STAY", 400),
            (MaxStayError(30), "MAX_STAY", 400),
            (NotAvailableError(), "NOT_AVAILABLE", 409),
            (InvalidStatusError(), "INVALID_STATUS", 400),
            (AlreadyReviewedError(), "ALREADY_REVIEWED", 409),
            (NotEligibleError(), "NOT_ELIGIBLE", 403),
            (NotCompletedError(), "NOT_COMPLETED", 400),
            (InvalidPasswordError(), "INVALID_PASSWORD", 400),
            (AlreadyFavoritedError(), "ALREADY_EXISTS", 409),
        ],
    )
    def test_codes_and_statuses(self, error: AppError, code: str, status_code: int):
        assert error.code == code
        assert error.status_code == status_code
        assert isinstance(error, AppError)

    def test_min_stay_details(self):
        err = MinStayError(3)
        assert err.message == "Minimum stay is 3 days"
        assert err.to_dict() == {"code": "MIN_STAY", "message": "Minimum stay is 3 days", "details": {"minStayDays": 3}}

    def test_custom_message_overrides_default(self):
        assert NotFoundError("Booking not found").message == "Booking not found"

    def test_to_dict_omits_missing_details(self):
        assert NotAvailableError().to_dict() == {
            "code": "NOT_AVAILABLE",
            "message": "Property not available for selected dates",
        }


class TestErrorEnvelope:
    async def test_domain_error(self, client: AsyncClient):
        response = await client.get(f"/api/v1/properties/{uuid.uuid4()}")
        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "NOT_FOUND"
        assert body["error"]["message"] == "Property not found"

    async def test_request_validation_is_400(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/register", json={"email": "not-an-email"})
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert any(d["field"].endswith("email") for d in error["details"])

    async def test_missing_token_is_401(self, client: AsyncClient):
        response = await client.get("/api/v1/auth/me")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    async def test_unknown_route_is_404(self, client: AsyncClient):
        response = await client.get("/api/v1/nope")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    async def test_malformed_uuid_is_validation_error(self, client: AsyncClient):
        response = await client.get("/api/v1/properties/not-a-uuid")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
