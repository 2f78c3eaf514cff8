"""
Allow-list DTOs for API responses.
"""
from dataclasses import dataclass


@dataclass
class UserIdentityCheckDTO:
    """DTO for user ID eligibility check response."""

    user_id: str
    is_valid_and_unused: bool
    message: str
