"""
Django admin configuration for licenses app.
"""
from django.contrib import admin
from django.utils.html import format_html

from licenses.domain.license_key import mask_license_key
from licenses.infrastructure.models import License


@admin.register(License)
class LicenseAdmin(admin.ModelAdmin):
    """Admin interface for License model."""

    list_display = [
        "masked_key",
        "user_identity",
        "owner_email",
        "status_display",
        "activated_at",
        "created_at",
    ]
    list_filter = ["status", "activated_at", "created_at"]
    search_fields = ["user_identity", "owner_email", "owner_name"]
    readonly_fields = [
        "license_key",
        "user_identity",
        "status",
        "bound_machine_id",
        "activated_at",
        "created_at",
        "updated_at",
    ]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("license_key", "user_identity", "status"),
            },
        ),
        (
            "Owner",
            {
                "fields": ("owner_name", "owner_email", "owner_phone"),
            },
        ),
        (
            "Activation",
            {
                "fields": ("bound_machine_id", "activated_at"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def masked_key(self, obj):
        """Display the key without exposing it in list views."""
        return mask_license_key(obj.license_key)

    masked_key.short_description = "License Key"

    def status_display(self, obj):
        """Display status with color coding."""
        color = "green" if obj.is_activated else "orange"
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            color,
            obj.status,
        )

    status_display.short_description = "Status"

    def has_add_permission(self, request):
        """Licenses are only created through issuance."""
        return False
