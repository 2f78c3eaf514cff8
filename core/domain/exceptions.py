"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class InputInvalidError(DomainException):
    """Raised when request fields are missing or malformed."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, code="INPUT_INVALID")


class IdentityException(DomainException):
    """Base exception for allow-list identity errors."""

    pass


class IdentityIneligibleError(IdentityException):
    """Raised when a user ID is not on the allow-list."""

    def __init__(self, message: str = "User ID is not a valid ID"):
        super().__init__(message, code="IDENTITY_INELIGIBLE")


class IdentityAlreadyConsumedError(IdentityException):
    """Raised when a user ID has already been used to issue a license."""

    def __init__(self, message: str = "User ID has already been used"):
        super().__init__(message, code="IDENTITY_ALREADY_CONSUMED")


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class LicenseNotFoundError(LicenseException):
    """Raised when a license is not found."""

    def __init__(self, message: str = "Invalid license key"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class EmailMismatchError(LicenseException):
    """Raised when the activation email does not own the license."""

    def __init__(
        self, message: str = "This license key is not valid for this email address"
    ):
        super().__init__(message, code="EMAIL_MISMATCH")


class MachineMismatchError(LicenseException):
    """Raised when a license is already bound to another machine."""

    def __init__(
        self,
        message: str = "This license key is already activated on a different machine",
    ):
        super().__init__(message, code="MACHINE_MISMATCH")


class KeyCollisionError(LicenseException):
    """
    Raised when a generated license key already exists.

    Handled inside the issuance loop; never returned to callers.
    """

    def __init__(self, message: str = "License key collision"):
        super().__init__(message, code="KEY_COLLISION")


class StoreUnavailableError(DomainException):
    """Raised when a store operation fails; the request may be retried."""

    def __init__(self, message: str = "Storage is temporarily unavailable"):
        super().__init__(message, code="STORE_UNAVAILABLE")
