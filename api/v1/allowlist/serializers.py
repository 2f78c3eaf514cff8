"""
Serializers for allow-list API endpoints.
"""

from rest_framework import serializers

from api.v1.serializers import LegacyFieldAliasMixin
from core.domain.value_objects import USER_IDENTITY_MAX_LENGTH


class CheckUserIdentityRequestSerializer(LegacyFieldAliasMixin, serializers.Serializer):
    """Serializer for user ID check request."""

    legacy_aliases = {"userId": "user_id"}

    user_id = serializers.CharField(max_length=USER_IDENTITY_MAX_LENGTH)


class CheckUserIdentityResponseSerializer(serializers.Serializer):
    """Serializer for user ID check response."""

    user_id = serializers.CharField()
    is_valid_and_unused = serializers.BooleanField()
    message = serializers.CharField()
