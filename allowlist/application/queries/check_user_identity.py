"""
CheckUserIdentityQuery.

Query to probe whether a user ID could be used to request a license.
"""
from dataclasses import dataclass


@dataclass
class CheckUserIdentityQuery:
    """Query to check allow-list eligibility without consuming the ID."""

    user_id: str
