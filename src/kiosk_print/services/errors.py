"""Errors raised by application services."""


class KioskPrintError(Exception):
    """Base class for expected service failures."""


class ValidationError(KioskPrintError):
    """A request field is missing or malformed."""


class DuplicateAccountError(ValidationError):
    """The credential name is already taken for the role."""


class InvalidCredentialsError(KioskPrintError):
    """Credential name and secret do not match an account."""


class NotFoundError(KioskPrintError):
    """A referenced user, kiosk, file or job does not exist."""


class KioskOfflineError(KioskPrintError):
    """The kiosk has no live channel registered."""
