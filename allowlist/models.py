"""
Django model discovery for the allowlist app.
"""
from allowlist.infrastructure.models import AllowListEntry

__all__ = ["AllowListEntry"]
