"""
Django admin configuration for allowlist app.
"""
from django.contrib import admin
from django.utils.html import format_html

from allowlist.infrastructure.models import AllowListEntry


@admin.register(AllowListEntry)
class AllowListEntryAdmin(admin.ModelAdmin):
    """Admin interface for AllowListEntry model."""

    list_display = ["user_id", "state_display", "consumed_at", "created_at"]
    list_filter = ["consumed_at", "created_at"]
    search_fields = ["user_id"]
    readonly_fields = ["consumed_at", "created_at"]

    def state_display(self, obj):
        """Display eligibility state."""
        if obj.is_consumed:
            return format_html('<span style="color: gray;">{}</span>', "Used")
        return format_html('<span style="color: green;">{}</span>', "Eligible")

    state_display.short_description = "State"

    def get_readonly_fields(self, request, obj=None):
        """User IDs cannot be renamed once stored."""
        if obj is not None:
            return ["user_id", *self.readonly_fields]
        return self.readonly_fields

    def has_delete_permission(self, request, obj=None):
        """Consumed entries must stay."""
        if obj is not None and obj.is_consumed:
            return False
        return super().has_delete_permission(request, obj)
