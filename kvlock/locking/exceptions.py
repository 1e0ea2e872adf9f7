"""Locking-layer exceptions. Contention is not an error and never raises."""


class LockError(Exception):
    """Base for all locking-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class LockUsageError(LockError):
    """Raised when the caller breaks the acquire/release contract of a LockManager."""


class LockAlreadyHeldError(LockUsageError):
    """Raised when acquiring a key this instance already holds. Release it before re-acquiring."""


class LockNotHeldError(LockUsageError):
    """Raised when releasing a key this instance never successfully locked."""


class StorageUnavailableError(LockError):
    """Raised at setup when the store cannot be reached or authenticated against."""
