"""
Exception handling utilities.

Defines the domain exception types raised where a failure cannot be
reported through a result object.
"""


class EarnhubError(Exception):
    """Base class for domain errors."""
    pass


class SettingsValidationError(EarnhubError):
    """Raised when a persisted settings payload has an invalid shape."""

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        super().__init__(f"Invalid setting '{key}': {message}")


class ProfitJobFetchError(EarnhubError):
    """Raised when the profit job cannot load its work list at all."""
    pass


class LockAcquisitionError(EarnhubError):
    """Raised when a distributed lock is held by another worker."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Lock '{key}' is held by another process")
