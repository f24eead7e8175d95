"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """User input was missing or invalid; nothing was changed"""

    pass


class NotFoundError(DomainException):
    """Referenced debt or payment does not exist"""

    pass


class MigrationParseError(DomainException):
    """Legacy single-debt data could not be parsed"""

    pass


class AdvisoryUnavailableError(DomainException):
    """Advisory service is unreachable, misconfigured or returned garbage"""

    pass


class StorageError(DomainException):
    """Blob store read or write failed"""

    pass
