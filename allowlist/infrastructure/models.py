"""
AllowListEntry Django ORM model.

This is the infrastructure layer model for the allow-list.
Domain entities are in allowlist.domain.entry.
"""
from django.db import models

from core.domain.value_objects import USER_IDENTITY_MAX_LENGTH


class AllowListEntry(models.Model):
    """
    A provisioned user ID.

    consumed_at is NULL while the ID is eligible and is set exactly once
    when a license is issued for it.
    """

    user_id = models.CharField(max_length=USER_IDENTITY_MAX_LENGTH, unique=True)
    consumed_at = models.DateTimeField(null=True, blank=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "allowlist_entries"
        ordering = ["user_id"]
        verbose_name_plural = "allow-list entries"

    def __str__(self):
        return self.user_id

    @property
    def is_consumed(self) -> bool:
        return self.consumed_at is not None
