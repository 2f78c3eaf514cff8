"""
Allow-list provisioning and reconciliation.

Provisioning only ever adds IDs or marks them consumed; it never resets
a consumed ID back to eligible.
"""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List

from allowlist.domain.entry import AllowListEntry
from allowlist.ports.allowlist_repository import AllowListRepository
from core.domain.exceptions import InputInvalidError
from core.domain.value_objects import UserIdentity
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


@dataclass
class ProvisioningReport:
    """Outcome of one provisioning run."""

    received: int = 0
    added: int = 0
    marked_consumed: int = 0
    already_consumed: List[str] = field(default_factory=list)


def read_user_ids(path: Path) -> List[str]:
    """
    Read a JSON array of user IDs.

    Args:
        path: File holding e.g. ["U123", "U456"]

    Returns:
        IDs as stripped strings, in file order

    Raises:
        InputInvalidError: If the file is not a JSON array of strings/numbers,
            or an ID is longer than a stored user ID may be
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8") or "[]")
    except ValueError as e:
        raise InputInvalidError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise InputInvalidError(f"{path} must contain a JSON array of user IDs")

    user_ids = []
    for item in data:
        if isinstance(item, bool) or not isinstance(item, (str, int)):
            raise InputInvalidError(f"Unsupported user ID in {path}: {item!r}")
        value = str(item).strip()
        if not value:
            continue
        try:
            user_ids.append(UserIdentity(value).value)
        except ValueError as e:
            raise InputInvalidError(f"Invalid user ID in {path}: {e}") from e
    return user_ids


async def provision_allowlist(
    repository: AllowListRepository,
    user_ids: Iterable[str],
    consumed_ids: Iterable[str] = (),
) -> ProvisioningReport:
    """
    Add eligible IDs and import previously consumed ones.

    Args:
        repository: Allow-list store
        user_ids: IDs to make eligible
        consumed_ids: IDs already used under a previous deployment

    Returns:
        ProvisioningReport
    """
    user_ids = list(user_ids)
    consumed_ids = list(consumed_ids)
    report = ProvisioningReport(received=len(user_ids))

    report.added = await repository.add_eligible(user_ids + consumed_ids)

    for user_id in consumed_ids:
        if await repository.try_consume(user_id):
            report.marked_consumed += 1
        else:
            report.already_consumed.append(user_id)

    logger.info(
        "Allow-list provisioned: %d received, %d added, %d marked consumed",
        report.received,
        report.added,
        report.marked_consumed,
    )
    return report


async def find_unlicensed_consumptions(
    allowlist_repository: AllowListRepository,
    license_repository: LicenseRepository,
) -> List[AllowListEntry]:
    """
    Find consumed IDs that have no license record.

    These are issuances that failed after consumption and need an
    operator decision.

    Returns:
        Consumed entries without a license, oldest first
    """
    orphans = []
    for entry in await allowlist_repository.find_consumed():
        license = await license_repository.find_by_user_identity(entry.user_identity.value)
        if license is None:
            orphans.append(entry)
    if orphans:
        logger.warning("%d consumed user ID(s) have no license", len(orphans))
    return orphans
