"""
CheckUserIdentityHandler.

Handler for the user ID eligibility probe. Read-only: the answer can be
stale by the time a license is requested, and only issuance consumes.
"""

from allowlist.application.dto.allowlist_dto import UserIdentityCheckDTO
from allowlist.application.queries.check_user_identity import CheckUserIdentityQuery
from allowlist.ports.allowlist_repository import AllowListRepository
from core.domain.exceptions import InputInvalidError
from core.domain.value_objects import UserIdentity


class CheckUserIdentityHandler:
    """Handler for CheckUserIdentityQuery."""

    def __init__(self, allowlist_repository: AllowListRepository):
        """Initialize handler with repository."""
        self.allowlist_repository = allowlist_repository

    async def handle(self, query: CheckUserIdentityQuery) -> UserIdentityCheckDTO:
        """
        Handle user ID check query.

        Args:
            query: CheckUserIdentityQuery

        Returns:
            UserIdentityCheckDTO

        Raises:
            InputInvalidError: If the user ID is blank or too long
        """
        try:
            identity = UserIdentity(query.user_id)
        except (TypeError, ValueError) as e:
            raise InputInvalidError(str(e)) from e

        if await self.allowlist_repository.is_eligible(identity.value):
            return UserIdentityCheckDTO(
                user_id=identity.value,
                is_valid_and_unused=True,
                message="User ID is valid and unused.",
            )

        entry = await self.allowlist_repository.find(identity.value)
        if entry is None:
            message = f"User ID '{identity}' is not a valid ID."
        else:
            message = f"User ID '{identity}' has already been used."

        return UserIdentityCheckDTO(
            user_id=identity.value, is_valid_and_unused=False, message=message
        )
