"""
License key generation.

Keys have the format XXXX-XXXX-XXXX: three groups of four characters
from A-Z0-9. The space is large but finite, so every candidate is checked
against the store and the store's insert-if-absent has the final word.
"""

import logging
import re
import secrets
import string
from typing import Awaitable, Callable

from core.domain.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)

KEY_ALPHABET = string.ascii_uppercase + string.digits
KEY_GROUPS = 3
KEY_GROUP_LENGTH = 4
KEY_LENGTH = KEY_GROUPS * KEY_GROUP_LENGTH + (KEY_GROUPS - 1)
KEY_PATTERN = re.compile(r"^[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}$")

DEFAULT_MAX_ATTEMPTS = 20


def generate_license_key() -> str:
    """
    Generate a license key in format: XXXX-XXXX-XXXX.

    Returns:
        Generated license key string
    """
    parts = [
        "".join(secrets.choice(KEY_ALPHABET) for _ in range(KEY_GROUP_LENGTH))
        for _ in range(KEY_GROUPS)
    ]
    return "-".join(parts)


def is_well_formed(key: str) -> bool:
    """Check that a raw key has the issued format."""
    return bool(key) and KEY_PATTERN.match(key) is not None


def mask_license_key(key: str) -> str:
    """Keep only the first group, for logs."""
    if not key:
        return ""
    return f"{key[:KEY_GROUP_LENGTH]}-****-****"


class LicenseKeyGenerator:
    """Domain service for license key generation."""

    def __init__(
        self,
        generate: Callable[[], str] = generate_license_key,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        """
        Args:
            generate: Candidate factory
            max_attempts: Upper bound on candidates tried per call
        """
        self._generate = generate
        self.max_attempts = max_attempts

    def generate(self) -> str:
        """Produce one candidate key."""
        return self._generate()

    async def generate_unique(self, exists: Callable[[str], Awaitable[bool]]) -> str:
        """
        Generate a key that the store does not know yet.

        The check is advisory: two callers can still draw the same
        candidate, which the store's insert-if-absent resolves.

        Args:
            exists: Async predicate reporting whether a key is taken

        Returns:
            A candidate reported absent by ``exists``

        Raises:
            StoreUnavailableError: If every attempt collided
        """
        for attempt in range(1, self.max_attempts + 1):
            candidate = self.generate()
            if not await exists(candidate):
                return candidate
            logger.warning(
                "License key candidate collided (attempt %d/%d)",
                attempt,
                self.max_attempts,
            )
        raise StoreUnavailableError("Could not generate a unique license key")
