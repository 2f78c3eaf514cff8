"""
License Django ORM model.

This is the infrastructure layer model for licenses.
Domain entities are in licenses.domain.license.
"""
from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.domain.value_objects import MACHINE_ID_MAX_LENGTH, USER_IDENTITY_MAX_LENGTH
from licenses.domain.license_key import KEY_LENGTH


class License(models.Model):
    """
    An issued license key and its activation binding.

    One row per consumed allow-list identity.
    """

    STATUS_CHOICES = [
        ("ASSIGNED", "Assigned"),
        ("ACTIVATED", "Activated"),
    ]

    license_key = models.CharField(max_length=KEY_LENGTH, unique=True)
    owner_email = models.EmailField(db_index=True)
    owner_name = models.CharField(max_length=255)
    owner_phone = models.CharField(max_length=50)
    user_identity = models.CharField(max_length=USER_IDENTITY_MAX_LENGTH, unique=True)
    status = models.CharField(
        max_length=20, choices=STATUS_CHOICES, default="ASSIGNED", db_index=True
    )
    bound_machine_id = models.CharField(
        max_length=MACHINE_ID_MAX_LENGTH,
        null=True,
        blank=True,
        help_text="Machine the license is bound to; set once on activation",
    )
    activated_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "licenses"
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(
                        status="ASSIGNED",
                        bound_machine_id__isnull=True,
                        activated_at__isnull=True,
                    )
                    | Q(
                        status="ACTIVATED",
                        bound_machine_id__isnull=False,
                        activated_at__isnull=False,
                    )
                ),
                name="license_binding_matches_status",
            ),
        ]

    def __str__(self):
        return self.license_key

    @property
    def is_activated(self) -> bool:
        return self.status == "ACTIVATED"
