"""
GetLicenseStatusQuery.

Query to get the activation state of a license key.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class GetLicenseStatusQuery:
    """Query to get license status for a license key."""

    license_key: str
    machine_id: Optional[str] = None
