"""
Pytest configuration and shared fixtures.
"""

import asyncio
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest
from django.core.cache import cache

from allowlist.domain.entry import AllowListEntry
from allowlist.infrastructure.models import AllowListEntry as AllowListEntryModel
from allowlist.infrastructure.repositories.django_allowlist_repository import (
    DjangoAllowListRepository,
)
from allowlist.ports.allowlist_repository import AllowListRepository
from core.domain.events import EventBus
from core.domain.value_objects import Email, LicenseStatus, UserIdentity
from licenses.domain.license import License, OwnerInfo
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from licenses.ports.license_repository import LicenseRepository


class InMemoryAllowListRepository(AllowListRepository):
    """Allow-list store backed by a dict, for unit tests."""

    def __init__(self, user_ids=()):
        self.entries: Dict[str, Optional[datetime]] = {user_id: None for user_id in user_ids}
        self.created_at = datetime.now(timezone.utc)

    async def is_eligible(self, user_id: str) -> bool:
        return user_id in self.entries and self.entries[user_id] is None

    async def try_consume(self, user_id: str) -> bool:
        # Yield so concurrent callers interleave between the check and the write.
        await asyncio.sleep(0)
        if self.entries.get(user_id, True) is not None:
            return False
        self.entries[user_id] = datetime.now(timezone.utc)
        return True

    async def find(self, user_id: str) -> Optional[AllowListEntry]:
        if user_id not in self.entries:
            return None
        return AllowListEntry(
            user_identity=UserIdentity(user_id),
            consumed_at=self.entries[user_id],
            created_at=self.created_at,
        )

    async def add_eligible(self, user_ids) -> int:
        added = 0
        for user_id in user_ids:
            if user_id not in self.entries:
                self.entries[user_id] = None
                added += 1
        return added

    async def find_consumed(self) -> List[AllowListEntry]:
        return [
            await self.find(user_id)
            for user_id, consumed_at in self.entries.items()
            if consumed_at is not None
        ]


class InMemoryLicenseRepository(LicenseRepository):
    """License store backed by a dict, for unit tests."""

    def __init__(self):
        self.licenses: Dict[str, License] = {}
        self.taken_keys = set()

    async def insert_if_absent(self, license: License) -> bool:
        await asyncio.sleep(0)
        if license.license_key in self.licenses or license.license_key in self.taken_keys:
            return False
        self.licenses[license.license_key] = license
        return True

    async def find_by_key(self, license_key: str) -> Optional[License]:
        return self.licenses.get(license_key)

    async def find_by_user_identity(self, user_id: str) -> Optional[License]:
        for license in self.licenses.values():
            if license.user_identity.value == user_id:
                return license
        return None

    async def exists_by_key(self, license_key: str) -> bool:
        return license_key in self.licenses

    async def compare_and_swap_status(self, license_key, expected_status, new_fields) -> bool:
        await asyncio.sleep(0)
        current = self.licenses.get(license_key)
        if current is None or current.status != expected_status:
            return False
        fields = dict(new_fields)
        fields["status"] = LicenseStatus(fields["status"])
        self.licenses[license_key] = replace(current, **fields)
        return True


class RecordingEventBus(EventBus):
    """Event bus that only records what was published."""

    def __init__(self):
        self.published = []

    async def publish(self, event) -> None:
        self.published.append(event)

    def subscribe(self, event_type, handler) -> None:
        pass

    def of_type(self, event_type):
        return [event for event in self.published if isinstance(event, event_type)]


@pytest.fixture(autouse=True)
def clear_cache():
    """Start every test with an empty cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def allowlist_repository():
    """Fixture for AllowListRepository."""
    return DjangoAllowListRepository()


@pytest.fixture
def license_repository():
    """Fixture for LicenseRepository."""
    return DjangoLicenseRepository()


@pytest.fixture
def memory_allowlist():
    """In-memory allow-list seeded with a few IDs."""
    return InMemoryAllowListRepository(["U100", "U200", "U300"])


@pytest.fixture
def memory_licenses():
    """Empty in-memory license store."""
    return InMemoryLicenseRepository()


@pytest.fixture
def recording_bus():
    """Event bus that records published events."""
    return RecordingEventBus()


@pytest.fixture
def owner():
    """Fixture for a sample requester."""
    return OwnerInfo(
        email=Email("ada@example.com"),
        name="Ada Lovelace",
        phone="+44 20 7946 0000",
    )


@pytest.fixture
def sample_license(owner):
    """Fixture for an unsaved License entity."""
    return License.create(
        license_key="ABCD-1234-EFGH",
        user_identity=UserIdentity("U100"),
        owner=owner,
    )


@pytest.fixture
def eligible_user_ids(db):
    """Allow-list entries saved in database."""
    user_ids = ["U100", "U200", "U300"]
    AllowListEntryModel.objects.bulk_create(
        [AllowListEntryModel(user_id=user_id) for user_id in user_ids]
    )
    return user_ids


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()
