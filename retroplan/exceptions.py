"""
Custom exceptions for the Retroplan application.
"""


class RetroplanError(Exception):
    """Base exception for all Retroplan-related errors."""
    pass


class ValidationError(RetroplanError):
    """Raised when validation fails for a plan item or operation."""
    pass


class InvalidDateRangeError(ValidationError):
    """Raised when a phase or holiday range has its start after its end."""
    pass


class NotFoundError(RetroplanError):
    """Raised when a requested plan, phase, holiday or sub-project is not found."""
    pass


class StorageError(RetroplanError):
    """Raised when loading or saving plans fails."""
    pass


class ShareDecodeError(RetroplanError):
    """Raised when a shared plan payload cannot be decoded."""
    pass


class ConfigurationError(RetroplanError):
    """Raised when there's a configuration or setup issue."""
    pass
