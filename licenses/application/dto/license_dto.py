"""
License DTOs for API responses.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.value_objects import ActivationResult


@dataclass
class IssueLicenseResponseDTO:
    """DTO for issue license response."""

    license_key: str
    user_id: str
    email: str
    created_at: datetime


@dataclass
class ActivateLicenseResponseDTO:
    """DTO for activate license response."""

    result: ActivationResult
    license_key: str
    machine_id: str
    activated_at: datetime

    @property
    def is_new_activation(self) -> bool:
        return self.result == ActivationResult.ACTIVATED


@dataclass
class LicenseStatusDTO:
    """DTO for license status response."""

    license_key: str
    status: str
    is_activated: bool
    activated_at: Optional[datetime]
    created_at: datetime
    machine_matches: Optional[bool] = None
