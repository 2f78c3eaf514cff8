"""
Unit tests for allow-list provisioning and reconciliation.
"""
import json

import pytest

from allowlist.application.services.provisioning import (
    find_unlicensed_consumptions,
    provision_allowlist,
    read_user_ids,
)
from core.domain.exceptions import InputInvalidError
from core.domain.value_objects import UserIdentity
from licenses.domain.license import License


class TestReadUserIds:
    """Tests for read_user_ids."""

    def test_reads_strings_and_numbers(self, tmp_path):
        path = tmp_path / "user_ids.json"
        path.write_text(json.dumps(["U1", " U2 ", 42, ""]))

        assert read_user_ids(path) == ["U1", "U2", "42"]

    def test_empty_file_is_empty_list(self, tmp_path):
        path = tmp_path / "user_ids.json"
        path.write_text("")

        assert read_user_ids(path) == []

    def test_rejects_invalid_json(self, tmp_path):
        path = tmp_path / "user_ids.json"
        path.write_text("[U1,")

        with pytest.raises(InputInvalidError, match="not valid JSON"):
            read_user_ids(path)

    def test_rejects_object(self, tmp_path):
        path = tmp_path / "user_ids.json"
        path.write_text(json.dumps({"ids": ["U1"]}))

        with pytest.raises(InputInvalidError, match="JSON array"):
            read_user_ids(path)

    @pytest.mark.parametrize("item", [True, None, {"id": "U1"}, 1.5])
    def test_rejects_unsupported_items(self, tmp_path, item):
        path = tmp_path / "user_ids.json"
        path.write_text(json.dumps([item]))

        with pytest.raises(InputInvalidError, match="Unsupported"):
            read_user_ids(path)

    def test_rejects_overlong_id(self, tmp_path):
        path = tmp_path / "user_ids.json"
        path.write_text(json.dumps(["U1", "U" * 101]))

        with pytest.raises(InputInvalidError, match="too long"):
            read_user_ids(path)


class TestProvisionAllowlist:
    """Tests for provision_allowlist."""

    @pytest.mark.asyncio
    async def test_adds_only_new_ids(self, memory_allowlist):
        report = await provision_allowlist(memory_allowlist, ["U100", "U400", "U500"])

        assert report.received == 3
        assert report.added == 2
        assert await memory_allowlist.is_eligible("U400")

    @pytest.mark.asyncio
    async def test_never_resets_consumed_ids(self, memory_allowlist):
        await memory_allowlist.try_consume("U100")

        await provision_allowlist(memory_allowlist, ["U100"])

        assert await memory_allowlist.is_eligible("U100") is False

    @pytest.mark.asyncio
    async def test_imports_consumed_ids(self, memory_allowlist):
        await memory_allowlist.try_consume("U200")

        report = await provision_allowlist(memory_allowlist, ["U400"], consumed_ids=["U100", "U200"])

        assert report.marked_consumed == 1
        assert report.already_consumed == ["U200"]
        assert await memory_allowlist.is_eligible("U100") is False
        assert await memory_allowlist.is_eligible("U400") is True


class TestFindUnlicensedConsumptions:
    """Tests for find_unlicensed_consumptions."""

    @pytest.mark.asyncio
    async def test_reports_consumed_ids_without_license(
        self, memory_allowlist, memory_licenses, owner
    ):
        await memory_allowlist.try_consume("U100")
        await memory_allowlist.try_consume("U200")
        await memory_licenses.insert_if_absent(
            License.create(
                license_key="ABCD-1234-EFGH",
                user_identity=UserIdentity("U100"),
                owner=owner,
            )
        )

        orphans = await find_unlicensed_consumptions(memory_allowlist, memory_licenses)

        assert [entry.user_identity.value for entry in orphans] == ["U200"]

    @pytest.mark.asyncio
    async def test_nothing_consumed(self, memory_allowlist, memory_licenses):
        assert await find_unlicensed_consumptions(memory_allowlist, memory_licenses) == []
