"""
License API views.

These endpoints are used by the desktop client to:
- Request a license key for an allow-listed user ID
- Activate a license on a machine
- Check license status
"""

from asgiref.sync import async_to_sync
from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from allowlist.infrastructure.repositories.django_allowlist_repository import (
    DjangoAllowListRepository,
)
from api.v1.licenses.serializers import (
    ActivateLicenseRequestSerializer,
    ActivateLicenseResponseSerializer,
    IssueLicenseRequestSerializer,
    IssueLicenseResponseSerializer,
    LicenseStatusQuerySerializer,
    LicenseStatusResponseSerializer,
)
from api.v1.serializers import ErrorResponseSerializer
from core.domain.value_objects import ActivationResult
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.activate_license import ActivateLicenseCommand
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.handlers.activate_license_handler import ActivateLicenseHandler
from licenses.application.handlers.get_license_status_handler import GetLicenseStatusHandler
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.application.queries.get_license_status import GetLicenseStatusQuery
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

_allowlist_repo = DjangoAllowListRepository()
_license_repo = DjangoLicenseRepository()

tracer = get_tracer(__name__)

ISSUED_BY_EMAIL_MESSAGE = "User ID validated and license key sent to your email!"
ISSUED_WITHOUT_EMAIL_MESSAGE = "User ID validated, but email is not configured on the server."

ACTIVATION_MESSAGES = {
    ActivationResult.ACTIVATED: "License activated successfully.",
    ActivationResult.ALREADY_ACTIVATED: "This license is already active on this device.",
}


class IssueLicenseView(APIView):
    """View for issuing licenses."""

    @extend_schema(
        operation_id="issue_license",
        summary="Issue License",
        description=(
            "Consume an allow-listed user ID and issue a license key for it. "
            "The key is emailed to the requester; when email is not configured "
            "it is returned in the response instead."
        ),
        tags=["Licenses"],
        request=IssueLicenseRequestSerializer,
        responses={
            201: IssueLicenseResponseSerializer,
            400: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
            503: ErrorResponseSerializer,
        },
    )
    def post(self, request: Request) -> Response:
        """Issue a license for a user ID."""
        return async_to_sync(self._handle_issue_license)(request)

    async def _handle_issue_license(self, request: Request) -> Response:
        """Async handler for issue license."""
        with tracer.start_as_current_span("issue_license") as span:
            serializer = IssueLicenseRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            data = serializer.validated_data

            handler = IssueLicenseHandler(
                allowlist_repository=_allowlist_repo,
                license_repository=_license_repo,
            )
            result = await handler.handle(
                IssueLicenseCommand(
                    user_id=data["user_id"],
                    email=data["email"],
                    name=data["name"],
                    phone_number=data["phone_number"],
                )
            )

            if getattr(settings, "LICENSE_EMAIL_ENABLED", False):
                body = {"status": "SUCCESS", "message": ISSUED_BY_EMAIL_MESSAGE}
            else:
                body = {
                    "status": "SUCCESS",
                    "message": ISSUED_WITHOUT_EMAIL_MESSAGE,
                    "license_key": result.license_key,
                }

            span.set_status(Status(StatusCode.OK))
            return Response(
                IssueLicenseResponseSerializer(body).data, status=status.HTTP_201_CREATED
            )


class ActivateLicenseView(APIView):
    """View for activating licenses."""

    @extend_schema(
        operation_id="activate_license",
        summary="Activate License",
        description=(
            "Bind a license key to a machine. Repeating the call from the bound "
            "machine returns ALREADY_ACTIVATED; any other machine is refused."
        ),
        tags=["Licenses"],
        request=ActivateLicenseRequestSerializer,
        responses={
            200: ActivateLicenseResponseSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
        },
    )
    def post(self, request: Request) -> Response:
        """Activate a license on a machine."""
        return async_to_sync(self._handle_activate_license)(request)

    async def _handle_activate_license(self, request: Request) -> Response:
        """Async handler for activate license."""
        with tracer.start_as_current_span("activate_license") as span:
            serializer = ActivateLicenseRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            data = serializer.validated_data

            handler = ActivateLicenseHandler(license_repository=_license_repo)
            result = await handler.handle(
                ActivateLicenseCommand(
                    license_key=data["license_key"],
                    email=data["email"],
                    machine_id=data["machine_id"],
                )
            )

            span.set_attribute("activation.result", result.result.value)
            span.set_status(Status(StatusCode.OK))
            body = {
                "status": result.result.value,
                "message": ACTIVATION_MESSAGES[result.result],
                "activated_at": result.activated_at,
            }
            return Response(ActivateLicenseResponseSerializer(body).data, status=status.HTTP_200_OK)


class GetLicenseStatusView(APIView):
    """View for checking license status."""

    @extend_schema(
        operation_id="get_license_status",
        summary="Check License Status",
        description="Return the activation state of a license key.",
        tags=["Licenses"],
        parameters=[
            OpenApiParameter(
                name="license_key",
                type=str,
                location=OpenApiParameter.QUERY,
                required=True,
                description="License key string",
            ),
            OpenApiParameter(
                name="machine_id",
                type=str,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Machine to compare against the bound machine",
            ),
        ],
        responses={
            200: LicenseStatusResponseSerializer,
            400: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
    )
    def get(self, request: Request) -> Response:
        """Get license status."""
        return async_to_sync(self._handle_get_license_status)(request)

    async def _handle_get_license_status(self, request: Request) -> Response:
        """Async handler for get license status."""
        with tracer.start_as_current_span("get_license_status") as span:
            serializer = LicenseStatusQuerySerializer(data=request.query_params)
            serializer.is_valid(raise_exception=True)
            data = serializer.validated_data

            handler = GetLicenseStatusHandler(license_repository=_license_repo)
            result = await handler.handle(
                GetLicenseStatusQuery(
                    license_key=data["license_key"],
                    machine_id=data.get("machine_id") or None,
                )
            )

            span.set_attribute("license.status", result.status)
            span.set_status(Status(StatusCode.OK))
            return Response(LicenseStatusResponseSerializer(result).data, status=status.HTTP_200_OK)
