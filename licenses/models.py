"""
Django model discovery for the licenses app.
"""
from licenses.infrastructure.models import License

__all__ = ["License"]
