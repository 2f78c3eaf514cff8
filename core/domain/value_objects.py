"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from abc import ABC
from dataclasses import dataclass
from enum import Enum

USER_IDENTITY_MAX_LENGTH = 100
MACHINE_ID_MAX_LENGTH = 255


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class Email(ValueObject):
    """Email value object with validation."""

    value: str

    def __post_init__(self):
        """Validate email format."""
        if not self.value or "@" not in self.value:
            raise ValueError(f"Invalid email address: {self.value}")
        object.__setattr__(self, "value", self.value.strip())

    def matches(self, other: str) -> bool:
        """Exact comparison against a raw address, ignoring surrounding whitespace."""
        return self.value == (other or "").strip()

    def __str__(self) -> str:
        """Return email as string."""
        return self.value


@dataclass(frozen=True)
class UserIdentity(ValueObject):
    """Allow-list user identifier."""

    value: str

    def __post_init__(self):
        """Validate identifier."""
        value = (self.value or "").strip()
        if not value:
            raise ValueError("User ID cannot be empty")
        if len(value) > USER_IDENTITY_MAX_LENGTH:
            raise ValueError("User ID too long")
        object.__setattr__(self, "value", value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class MachineId(ValueObject):
    """Identifier of the machine a license is bound to."""

    value: str

    def __post_init__(self):
        """Validate machine identifier."""
        if not self.value or len(self.value.strip()) == 0:
            raise ValueError("Machine ID cannot be empty")
        if len(self.value) > MACHINE_ID_MAX_LENGTH:
            raise ValueError("Machine ID too long")

    def __str__(self) -> str:
        return self.value


class LicenseStatus(Enum):
    """License status value object."""

    ASSIGNED = "ASSIGNED"
    ACTIVATED = "ACTIVATED"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


class ActivationResult(Enum):
    """Successful outcomes of an activation request."""

    ACTIVATED = "VALID"
    ALREADY_ACTIVATED = "ALREADY_ACTIVATED"

    def __str__(self) -> str:
        return self.value
