"""
Unit tests for API error mapping and middleware helpers.
"""
import pytest
from rest_framework.exceptions import ValidationError

from api.exceptions import custom_exception_handler, domain_status_code
from core.domain.exceptions import (
    EmailMismatchError,
    IdentityAlreadyConsumedError,
    IdentityIneligibleError,
    InputInvalidError,
    LicenseNotFoundError,
    MachineMismatchError,
    StoreUnavailableError,
)
from core.middleware.metrics import normalize_endpoint


class TestDomainStatusCode:
    """Tests for domain_status_code."""

    @pytest.mark.parametrize(
        "exc, status_code",
        [
            (InputInvalidError(), 400),
            (IdentityIneligibleError(), 400),
            (IdentityAlreadyConsumedError(), 409),
            (LicenseNotFoundError(), 404),
            (EmailMismatchError(), 403),
            (MachineMismatchError(), 409),
            (StoreUnavailableError(), 503),
        ],
    )
    def test_mapping(self, exc, status_code):
        assert domain_status_code(exc) == status_code


class TestCustomExceptionHandler:
    """Tests for custom_exception_handler."""

    def test_domain_error_body(self):
        response = custom_exception_handler(MachineMismatchError(), {})

        assert response.status_code == 409
        assert response.data == {
            "error": {
                "code": "MACHINE_MISMATCH",
                "message": "This license key is already activated on a different machine",
            }
        }

    def test_store_unavailable_sets_retry_after(self):
        response = custom_exception_handler(StoreUnavailableError(), {})

        assert response.status_code == 503
        assert response["Retry-After"] == "5"

    def test_validation_error_is_input_invalid(self):
        response = custom_exception_handler(
            ValidationError({"email": ["Enter a valid email address."]}), {}
        )

        assert response.status_code == 400
        assert response.data["error"]["code"] == "INPUT_INVALID"
        assert response.data["error"]["message"] == "email: Enter a valid email address."

    def test_unexpected_error_is_internal(self):
        response = custom_exception_handler(RuntimeError("boom"), {})

        assert response.status_code == 500
        assert response.data["error"]["code"] == "INTERNAL_ERROR"
        assert "boom" not in str(response.data)


class TestNormalizeEndpoint:
    """Tests for metric label normalisation."""

    def test_collapses_keys_and_ids(self):
        assert normalize_endpoint("/api/v1/licenses/ABCD-1234-EFGH/7") == "/api/v1/licenses/{key}/{id}"

    def test_plain_path_unchanged(self):
        assert normalize_endpoint("/api/v1/licenses/issue") == "/api/v1/licenses/issue"
