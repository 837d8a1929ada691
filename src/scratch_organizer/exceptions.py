"""Custom exceptions for scratch organizer."""


class ScratchOrganizerError(Exception):
    """Base exception for recoverable scratch organizer errors."""
    pass


class FileOperationError(ScratchOrganizerError):
    """Raised when file operations fail."""
    pass


class ConfigurationError(ScratchOrganizerError):
    """Raised when persisted settings cannot be read or are malformed."""
    pass


class InvariantViolation(RuntimeError):
    """Raised when a caller breaks the contract of a scratch operation.

    Not a subclass of ScratchOrganizerError: it signals a bug and is not
    meant to be caught and recovered from.
    """
    pass
