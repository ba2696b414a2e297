"""
Unit tests for the REST exception handler.
"""
import pytest

from api.exceptions import custom_exception_handler
from core.domain.exceptions import (
    DomainException,
    DuplicateLicenseError,
    InvalidAdminSecretError,
    StoreUnavailableError,
)


@pytest.mark.parametrize(
    "exc,status_code,code",
    [
        (DuplicateLicenseError(), 409, "DUPLICATE_LICENSE"),
        (InvalidAdminSecretError(), 401, "INVALID_ADMIN_SECRET"),
        (StoreUnavailableError(), 503, "STORE_UNAVAILABLE"),
        (DomainException("Bad input", code="BAD_INPUT"), 400, "BAD_INPUT"),
    ],
)
def test_domain_status(exc, status_code, code):
    response = custom_exception_handler(exc, {})

    assert response.status_code == status_code
    assert response.data["error"]["code"] == code


def test_store_unavailable_asks_for_retry():
    response = custom_exception_handler(StoreUnavailableError(), {})
    assert response["Retry-After"] == "1"


def test_unexpected_error_hides_details():
    response = custom_exception_handler(RuntimeError("boom"), {})

    assert response.status_code == 500
    assert response.data == {
        "error": {"code": "INTERNAL_ERROR", "message": "An internal error occurred"}
    }
