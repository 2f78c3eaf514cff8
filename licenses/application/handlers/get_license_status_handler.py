"""
GetLicenseStatusHandler.

Handler for getting license status query.
"""

from core.domain.exceptions import LicenseNotFoundError
from core.domain.value_objects import LicenseStatus
from licenses.application.dto.license_dto import LicenseStatusDTO
from licenses.application.queries.get_license_status import GetLicenseStatusQuery
from licenses.application.services.license_cache_service import LicenseCacheService
from licenses.domain.license_key import is_well_formed
from licenses.ports.license_repository import LicenseRepository


class GetLicenseStatusHandler:
    """Handler for GetLicenseStatusQuery."""

    def __init__(self, license_repository: LicenseRepository):
        """Initialize handler with repository."""
        self.license_repository = license_repository

    async def handle(self, query: GetLicenseStatusQuery) -> LicenseStatusDTO:
        """
        Handle get license status query.

        Args:
            query: GetLicenseStatusQuery

        Returns:
            LicenseStatusDTO

        Raises:
            LicenseNotFoundError: If license key not found
        """
        license_key = (query.license_key or "").strip()
        if not is_well_formed(license_key):
            raise LicenseNotFoundError()

        snapshot = await LicenseCacheService.get_license_snapshot(license_key)
        if snapshot is None:
            license = await self.license_repository.find_by_key(license_key)
            if license is None:
                raise LicenseNotFoundError()
            if license.status == LicenseStatus.ACTIVATED:
                # Activation is final; ASSIGNED records are always read from the store.
                await LicenseCacheService.set_license_snapshot(license)
            snapshot = LicenseCacheService.snapshot_from_license(license)

        machine_matches = None
        if query.machine_id:
            machine_matches = snapshot["bound_machine_id"] == query.machine_id

        return LicenseStatusDTO(
            license_key=license_key,
            status=snapshot["status"],
            is_activated=snapshot["bound_machine_id"] is not None,
            activated_at=LicenseCacheService.parse_timestamp(snapshot["activated_at"]),
            created_at=LicenseCacheService.parse_timestamp(snapshot["created_at"]),
            machine_matches=machine_matches,
        )
