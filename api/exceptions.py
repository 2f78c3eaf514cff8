"""
API exception handlers.

This module maps domain exceptions to REST API responses of the form
{"error": {"code": ..., "message": ...}}.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    DomainException,
    EmailMismatchError,
    IdentityAlreadyConsumedError,
    IdentityIneligibleError,
    InputInvalidError,
    LicenseNotFoundError,
    MachineMismatchError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)

STORE_RETRY_AFTER_SECONDS = 5

DOMAIN_STATUS_CODES = (
    (InputInvalidError, status.HTTP_400_BAD_REQUEST),
    (IdentityIneligibleError, status.HTTP_400_BAD_REQUEST),
    (IdentityAlreadyConsumedError, status.HTTP_409_CONFLICT),
    (LicenseNotFoundError, status.HTTP_404_NOT_FOUND),
    (EmailMismatchError, status.HTTP_403_FORBIDDEN),
    (MachineMismatchError, status.HTTP_409_CONFLICT),
    (StoreUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, trace_id)
    elif isinstance(exc, ValidationError):
        response = _handle_validation_error(exc, trace_id)
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        code = exc.default_code.upper().replace("-", "_")
        detail = response.data.get("detail", exc.default_detail)
        response.data = {"error": {"code": code, "message": str(detail)}}
    elif isinstance(exc, Http404):
        response = Response(
            {"error": {"code": "NOT_FOUND", "message": "Resource not found"}},
            status=status.HTTP_404_NOT_FOUND,
        )
    else:
        response = _handle_unexpected_exception(exc, trace_id)

    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "trace_id", getattr(request, "correlation_id", None))


def domain_status_code(exc: DomainException) -> int:
    """HTTP status for a domain exception."""
    for exc_type, status_code in DOMAIN_STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def _handle_domain_exception(exc: DomainException, trace_id: Optional[str]) -> Response:
    """Handle domain-specific exceptions."""
    status_code = domain_status_code(exc)
    response = Response({"error": {"code": exc.code, "message": exc.message}}, status=status_code)

    if isinstance(exc, StoreUnavailableError):
        logger.error("Store unavailable: %s", exc.message, extra={"trace_id": trace_id})
        response["Retry-After"] = str(STORE_RETRY_AFTER_SECONDS)
    else:
        logger.warning(
            "Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id}
        )
    return response


def _first_error_message(detail: Any) -> str:
    """Flatten DRF error details into one readable message."""
    if isinstance(detail, dict):
        for field, errors in detail.items():
            message = _first_error_message(errors)
            if field == "non_field_errors":
                return message
            return f"{field}: {message}"
    if isinstance(detail, list) and detail:
        return _first_error_message(detail[0])
    return str(detail)


def _handle_validation_error(exc: ValidationError, trace_id: Optional[str]) -> Response:
    """Handle serializer validation errors as INPUT_INVALID."""
    message = _first_error_message(exc.detail) or "Invalid input"
    logger.warning("Invalid input: %s", message, extra={"trace_id": trace_id})
    return Response(
        {"error": {"code": "INPUT_INVALID", "message": message, "fields": exc.detail}},
        status=status.HTTP_400_BAD_REQUEST,
    )


def _handle_unexpected_exception(exc: Exception, trace_id: Optional[str]) -> Response:
    """Handle unexpected or untracked exceptions."""
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
    return Response(
        {"error": {"code": "INTERNAL_ERROR", "message": "An internal error occurred"}},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
