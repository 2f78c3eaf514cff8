"""
Unit tests for the license lifecycle service.
"""
import asyncio

import pytest

from core.domain.exceptions import (
    EmailMismatchError,
    IdentityAlreadyConsumedError,
    IdentityIneligibleError,
    InputInvalidError,
    LicenseNotFoundError,
    MachineMismatchError,
    StoreUnavailableError,
)
from core.domain.value_objects import ActivationResult, LicenseStatus
from licenses.domain.events import LicenseActivated, LicenseIssued
from licenses.domain.license_key import LicenseKeyGenerator, is_well_formed
from licenses.domain.services import LicenseLifecycle


@pytest.fixture
def lifecycle(memory_allowlist, memory_licenses, recording_bus):
    return LicenseLifecycle(
        allowlist_repository=memory_allowlist,
        license_repository=memory_licenses,
        event_bus=recording_bus,
    )


@pytest.fixture
def issued_license(lifecycle, owner):
    return asyncio.run(lifecycle.issue("U100", owner))


class TestIssue:
    """Tests for LicenseLifecycle.issue."""

    @pytest.mark.asyncio
    async def test_issue_consumes_identity(self, lifecycle, memory_allowlist, owner):
        license = await lifecycle.issue("U100", owner)

        assert is_well_formed(license.license_key)
        assert license.status == LicenseStatus.ASSIGNED
        assert license.user_identity.value == "U100"
        assert await memory_allowlist.is_eligible("U100") is False

    @pytest.mark.asyncio
    async def test_issue_persists_and_publishes(
        self, lifecycle, memory_licenses, recording_bus, owner
    ):
        license = await lifecycle.issue("U100", owner)

        assert await memory_licenses.find_by_key(license.license_key) == license
        events = recording_bus.of_type(LicenseIssued)
        assert len(events) == 1
        assert events[0].license_key == license.license_key
        assert events[0].recipient_email == "ada@example.com"
        assert events[0].recipient_name == "Ada Lovelace"

    @pytest.mark.asyncio
    async def test_issue_trims_user_id(self, lifecycle, owner):
        license = await lifecycle.issue("  U200 ", owner)
        assert license.user_identity.value == "U200"

    @pytest.mark.asyncio
    async def test_unknown_identity_rejected(self, lifecycle, memory_licenses, owner):
        with pytest.raises(IdentityIneligibleError, match="not a valid ID"):
            await lifecycle.issue("U999", owner)
        assert memory_licenses.licenses == {}

    @pytest.mark.asyncio
    async def test_second_issue_rejected(self, lifecycle, memory_licenses, owner):
        await lifecycle.issue("U100", owner)

        with pytest.raises(IdentityAlreadyConsumedError, match="already been used"):
            await lifecycle.issue("U100", owner)
        assert len(memory_licenses.licenses) == 1

    @pytest.mark.asyncio
    async def test_blank_identity_is_invalid_input(self, lifecycle, owner):
        with pytest.raises(InputInvalidError):
            await lifecycle.issue("   ", owner)

    @pytest.mark.asyncio
    async def test_concurrent_issue_yields_one_license(
        self, lifecycle, memory_licenses, owner
    ):
        results = await asyncio.gather(
            *[lifecycle.issue("U100", owner) for _ in range(10)],
            return_exceptions=True,
        )

        issued = [r for r in results if not isinstance(r, Exception)]
        rejected = [r for r in results if isinstance(r, Exception)]
        assert len(issued) == 1
        assert all(isinstance(e, IdentityAlreadyConsumedError) for e in rejected)
        assert len(memory_licenses.licenses) == 1

    @pytest.mark.asyncio
    async def test_key_collision_at_insert_is_retried(
        self, memory_allowlist, memory_licenses, recording_bus, owner
    ):
        candidates = iter(["AAAA-AAAA-AAAA", "BBBB-BBBB-BBBB"])
        memory_licenses.taken_keys.add("AAAA-AAAA-AAAA")
        lifecycle = LicenseLifecycle(
            allowlist_repository=memory_allowlist,
            license_repository=memory_licenses,
            key_generator=LicenseKeyGenerator(generate=lambda: next(candidates)),
            event_bus=recording_bus,
        )

        license = await lifecycle.issue("U100", owner)

        assert license.license_key == "BBBB-BBBB-BBBB"

    @pytest.mark.asyncio
    async def test_exhausted_key_space_is_store_unavailable(
        self, memory_allowlist, memory_licenses, recording_bus, owner
    ):
        memory_licenses.taken_keys.add("AAAA-AAAA-AAAA")
        lifecycle = LicenseLifecycle(
            allowlist_repository=memory_allowlist,
            license_repository=memory_licenses,
            key_generator=LicenseKeyGenerator(
                generate=lambda: "AAAA-AAAA-AAAA", max_attempts=3
            ),
            event_bus=recording_bus,
        )

        with pytest.raises(StoreUnavailableError):
            await lifecycle.issue("U100", owner)
        assert recording_bus.published == []
        # The identity stays consumed and is left for reconciliation.
        assert [e.user_identity.value for e in await memory_allowlist.find_consumed()] == [
            "U100"
        ]


class TestActivate:
    """Tests for LicenseLifecycle.activate."""

    @pytest.mark.asyncio
    async def test_first_activation_binds(self, lifecycle, issued_license, recording_bus):
        result, license = await lifecycle.activate(
            issued_license.license_key, "ada@example.com", "machine-1"
        )

        assert result == ActivationResult.ACTIVATED
        assert license.bound_machine_id == "machine-1"
        assert license.activated_at is not None
        assert len(recording_bus.of_type(LicenseActivated)) == 1

    @pytest.mark.asyncio
    async def test_repeat_activation_is_idempotent(
        self, lifecycle, issued_license, recording_bus
    ):
        _, first = await lifecycle.activate(
            issued_license.license_key, "ada@example.com", "machine-1"
        )
        result, second = await lifecycle.activate(
            issued_license.license_key, "ada@example.com", "machine-1"
        )

        assert result == ActivationResult.ALREADY_ACTIVATED
        assert second.activated_at == first.activated_at
        assert len(recording_bus.of_type(LicenseActivated)) == 1

    @pytest.mark.asyncio
    async def test_other_machine_rejected(self, lifecycle, issued_license, memory_licenses):
        await lifecycle.activate(issued_license.license_key, "ada@example.com", "machine-1")

        with pytest.raises(MachineMismatchError):
            await lifecycle.activate(issued_license.license_key, "ada@example.com", "machine-2")

        stored = await memory_licenses.find_by_key(issued_license.license_key)
        assert stored.bound_machine_id == "machine-1"

    @pytest.mark.asyncio
    async def test_email_differing_in_case_rejected(
        self, lifecycle, issued_license, memory_licenses
    ):
        with pytest.raises(EmailMismatchError):
            await lifecycle.activate(issued_license.license_key, "ADA@EXAMPLE.COM", "machine-1")

        stored = await memory_licenses.find_by_key(issued_license.license_key)
        assert stored.status == LicenseStatus.ASSIGNED

    @pytest.mark.asyncio
    async def test_email_surrounding_whitespace_ignored(self, lifecycle, issued_license):
        result, _ = await lifecycle.activate(
            issued_license.license_key, " ada@example.com ", "machine-1"
        )
        assert result == ActivationResult.ACTIVATED

    @pytest.mark.asyncio
    async def test_wrong_email_rejected(self, lifecycle, issued_license, memory_licenses):
        with pytest.raises(EmailMismatchError):
            await lifecycle.activate(issued_license.license_key, "bob@example.com", "machine-1")

        stored = await memory_licenses.find_by_key(issued_license.license_key)
        assert stored.status == LicenseStatus.ASSIGNED

    @pytest.mark.asyncio
    @pytest.mark.parametrize("key", ["NOTREAL-KEY", "ZZZZ-ZZZZ-ZZZZ"])
    async def test_unknown_key_not_found(self, lifecycle, key):
        with pytest.raises(LicenseNotFoundError):
            await lifecycle.activate(key, "ada@example.com", "machine-1")

    @pytest.mark.asyncio
    async def test_blank_machine_id_is_invalid_input(self, lifecycle, issued_license):
        with pytest.raises(InputInvalidError):
            await lifecycle.activate(issued_license.license_key, "ada@example.com", " ")

    @pytest.mark.asyncio
    async def test_concurrent_activation_same_machine(self, lifecycle, issued_license):
        results = await asyncio.gather(
            *[
                lifecycle.activate(issued_license.license_key, "ada@example.com", "machine-1")
                for _ in range(5)
            ]
        )

        outcomes = [result for result, _ in results]
        assert outcomes.count(ActivationResult.ACTIVATED) == 1
        assert outcomes.count(ActivationResult.ALREADY_ACTIVATED) == 4

    @pytest.mark.asyncio
    async def test_concurrent_activation_different_machines(
        self, lifecycle, issued_license, memory_licenses
    ):
        results = await asyncio.gather(
            *[
                lifecycle.activate(
                    issued_license.license_key, "ada@example.com", f"machine-{i}"
                )
                for i in range(5)
            ],
            return_exceptions=True,
        )

        winners = [r for r in results if not isinstance(r, Exception)]
        assert len(winners) == 1
        assert all(isinstance(r, MachineMismatchError) for r in results if r not in winners)
        stored = await memory_licenses.find_by_key(issued_license.license_key)
        assert stored.bound_machine_id == winners[0][1].bound_machine_id
