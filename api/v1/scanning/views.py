"""
Content scanning API views.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.scanning.serializers import (
    AnalyzeFileRequestSerializer,
    ClassificationVerdictSerializer,
)
from api.v1.serializers import ErrorResponseSerializer
from core.instrumentation import Status, StatusCode, get_tracer
from scanning.application.commands.classify_content import ClassifyContentCommand
from scanning.application.handlers.classify_content_handler import ClassifyContentHandler
from scanning.infrastructure.gemini_classifier import get_content_classifier

tracer = get_tracer(__name__)


class AnalyzeFileView(APIView):
    """View for AI classification of file content."""

    @extend_schema(
        operation_id="analyze_file",
        summary="Analyze File",
        description=(
            "Ask the content classifier whether a file looks malicious. "
            "When the classifier is unavailable a benign verdict with zero "
            "confidence is returned."
        ),
        tags=["Scanning"],
        request=AnalyzeFileRequestSerializer,
        responses={200: ClassificationVerdictSerializer, 400: ErrorResponseSerializer},
    )
    def post(self, request: Request) -> Response:
        """Classify a file."""
        return async_to_sync(self._handle_analyze)(request)

    async def _handle_analyze(self, request: Request) -> Response:
        """Async handler for file analysis."""
        with tracer.start_as_current_span("analyze_file") as span:
            serializer = AnalyzeFileRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            data = serializer.validated_data

            handler = ClassifyContentHandler(classifier=get_content_classifier())
            verdict = await handler.handle(
                ClassifyContentCommand(file_name=data["file_name"], file_content=data["file_content"])
            )

            span.set_attribute("scan.is_malicious", verdict.is_malicious)
            span.set_status(Status(StatusCode.OK))
            return Response(
                ClassificationVerdictSerializer(verdict.to_dict()).data, status=status.HTTP_200_OK
            )
