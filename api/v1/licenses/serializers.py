"""
Serializers for license API endpoints.
"""

from rest_framework import serializers

from api.v1.serializers import LegacyFieldAliasMixin
from core.domain.value_objects import MACHINE_ID_MAX_LENGTH, USER_IDENTITY_MAX_LENGTH


class IssueLicenseRequestSerializer(LegacyFieldAliasMixin, serializers.Serializer):
    """Serializer for issue license request."""

    legacy_aliases = {"userId": "user_id", "phoneNumber": "phone_number"}

    user_id = serializers.CharField(max_length=USER_IDENTITY_MAX_LENGTH)
    email = serializers.EmailField()
    name = serializers.CharField(max_length=255)
    phone_number = serializers.CharField(max_length=50)


class IssueLicenseResponseSerializer(serializers.Serializer):
    """Serializer for issue license response."""

    status = serializers.CharField()
    message = serializers.CharField()
    license_key = serializers.CharField(required=False)


class ActivateLicenseRequestSerializer(LegacyFieldAliasMixin, serializers.Serializer):
    """Serializer for activate license request."""

    legacy_aliases = {"licenseKey": "license_key", "machineId": "machine_id"}

    license_key = serializers.CharField(max_length=64)
    email = serializers.EmailField()
    machine_id = serializers.CharField(max_length=MACHINE_ID_MAX_LENGTH)


class ActivateLicenseResponseSerializer(serializers.Serializer):
    """Serializer for activate license response."""

    status = serializers.CharField()
    message = serializers.CharField()
    activated_at = serializers.DateTimeField()


class LicenseStatusQuerySerializer(LegacyFieldAliasMixin, serializers.Serializer):
    """Serializer for license status query parameters."""

    legacy_aliases = {"licenseKey": "license_key", "machineId": "machine_id"}

    license_key = serializers.CharField(max_length=64)
    machine_id = serializers.CharField(
        max_length=MACHINE_ID_MAX_LENGTH, required=False, allow_blank=True
    )


class LicenseStatusResponseSerializer(serializers.Serializer):
    """Serializer for license status response."""

    license_key = serializers.CharField()
    status = serializers.CharField()
    is_activated = serializers.BooleanField()
    activated_at = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()
    machine_matches = serializers.BooleanField(allow_null=True)
