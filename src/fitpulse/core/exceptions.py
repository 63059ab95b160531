"""
fitpulse exception hierarchy.

All fitpulse exceptions inherit from FitpulseError, making it easy for
consumers to catch library-level errors while still distinguishing specific
failure modes.
"""


class FitpulseError(Exception):
    """Base exception class for all fitpulse errors."""


class ConfigurationError(FitpulseError):
    """Raised for configuration errors (missing keys, invalid values)."""


class DataProcessingError(FitpulseError):
    """Raised for data processing errors."""


class FileIOError(FitpulseError):
    """Raised for file I/O errors."""


class AliasStoreError(FitpulseError):
    """Raised when the learned-alias store cannot be written."""
