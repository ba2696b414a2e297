"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions. Policy outcomes of a
license verification are decisions, not exceptions.
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


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class DuplicateLicenseError(LicenseException):
    """Raised when a license already exists for an identifier."""

    def __init__(self, message: str = "A license already exists for this identifier"):
        super().__init__(message, code="DUPLICATE_LICENSE")


class InvalidAdminSecretError(DomainException):
    """Raised when the admin secret is missing or wrong."""

    def __init__(self, message: str = "Invalid admin secret"):
        super().__init__(message, code="INVALID_ADMIN_SECRET")


class InfrastructureException(DomainException):
    """Base exception for transient infrastructure failures."""

    pass


class StoreUnavailableError(InfrastructureException):
    """Raised when the license store cannot be reached."""

    def __init__(self, message: str = "License store unavailable"):
        super().__init__(message, code="STORE_UNAVAILABLE")
