"""
AllowListEntry domain entity.

An entry exists for every provisioned user ID. It starts eligible and
becomes consumed exactly once, when a license is issued for it.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.value_objects import UserIdentity


@dataclass(frozen=True)
class AllowListEntry:
    """AllowListEntry domain entity."""

    user_identity: UserIdentity
    consumed_at: Optional[datetime]
    created_at: datetime

    @property
    def is_consumed(self) -> bool:
        return self.consumed_at is not None

    @property
    def is_eligible(self) -> bool:
        return self.consumed_at is None
