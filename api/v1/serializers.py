"""
Shared serializer helpers for the v1 API.
"""

from rest_framework import serializers


class LegacyFieldAliasMixin:
    """
    Accept camelCase field names sent by older desktop clients.

    A snake_case key wins when both spellings are present.
    """

    legacy_aliases = {}

    def to_internal_value(self, data):
        if hasattr(data, "items"):
            data = dict(data.items())
            for legacy, current in self.legacy_aliases.items():
                if legacy in data and current not in data:
                    data[current] = data.pop(legacy)
        return super().to_internal_value(data)


class ErrorDetailSerializer(serializers.Serializer):
    """Serializer for the error body."""

    code = serializers.CharField()
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    """Serializer for error responses."""

    error = ErrorDetailSerializer()
