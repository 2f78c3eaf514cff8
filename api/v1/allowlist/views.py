"""
Allow-list API views.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from allowlist.application.handlers.check_user_identity_handler import CheckUserIdentityHandler
from allowlist.application.queries.check_user_identity import CheckUserIdentityQuery
from allowlist.infrastructure.repositories.django_allowlist_repository import (
    DjangoAllowListRepository,
)
from api.v1.allowlist.serializers import (
    CheckUserIdentityRequestSerializer,
    CheckUserIdentityResponseSerializer,
)
from api.v1.serializers import ErrorResponseSerializer
from core.instrumentation import Status, StatusCode, get_tracer

_allowlist_repo = DjangoAllowListRepository()

tracer = get_tracer(__name__)


class CheckUserIdentityView(APIView):
    """View for probing user ID eligibility."""

    @extend_schema(
        operation_id="check_user_id",
        summary="Check User ID",
        description=(
            "Report whether a user ID is on the allow-list and still unused. "
            "Does not consume the ID."
        ),
        tags=["Allow-list"],
        request=CheckUserIdentityRequestSerializer,
        responses={200: CheckUserIdentityResponseSerializer, 400: ErrorResponseSerializer},
    )
    def post(self, request: Request) -> Response:
        """Check a user ID."""
        return async_to_sync(self._handle_check)(request)

    async def _handle_check(self, request: Request) -> Response:
        """Async handler for user ID check."""
        with tracer.start_as_current_span("check_user_id") as span:
            serializer = CheckUserIdentityRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            handler = CheckUserIdentityHandler(allowlist_repository=_allowlist_repo)
            result = await handler.handle(
                CheckUserIdentityQuery(user_id=serializer.validated_data["user_id"])
            )

            span.set_attribute("allowlist.eligible", result.is_valid_and_unused)
            span.set_status(Status(StatusCode.OK))
            return Response(
                CheckUserIdentityResponseSerializer(result).data, status=status.HTTP_200_OK
            )
