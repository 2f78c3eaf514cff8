"""
Serializers for content scanning API endpoints.
"""

from django.conf import settings
from rest_framework import serializers

from api.v1.serializers import LegacyFieldAliasMixin

DEFAULT_MAX_CONTENT_LENGTH = 200_000


class AnalyzeFileRequestSerializer(LegacyFieldAliasMixin, serializers.Serializer):
    """Serializer for analyze file request."""

    legacy_aliases = {"fileName": "file_name", "fileContent": "file_content"}

    file_name = serializers.CharField(max_length=255)
    file_content = serializers.CharField(trim_whitespace=False)

    def validate_file_content(self, value):
        limit = getattr(settings, "CONTENT_SCAN_MAX_LENGTH", DEFAULT_MAX_CONTENT_LENGTH)
        if len(value) > limit:
            raise serializers.ValidationError(f"File content exceeds {limit} characters.")
        return value


class ClassificationVerdictSerializer(serializers.Serializer):
    """Serializer for a classification verdict."""

    is_malicious = serializers.BooleanField()
    confidence_score = serializers.FloatField(min_value=0.0, max_value=1.0)
    reason = serializers.CharField(allow_blank=True)
    threat_type = serializers.CharField()
