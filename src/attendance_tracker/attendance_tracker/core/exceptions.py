class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class StoreError(Exception):
    """Base exception for failures at the persistence boundary.

    Store errors are transient infrastructure failures: callers report them as
    retryable and leave in-memory state untouched.
    """


class StoreReadError(StoreError):
    """Raised when sessions (or other records) cannot be read."""


class StoreWriteError(StoreError):
    """Raised when a create/update is rejected or cannot reach the store."""


class OpenSessionConflict(StoreWriteError):
    """Raised when the store already holds an open session for the employee."""


class SessionAlreadyClosed(StoreWriteError):
    """Raised when closing a session that another device has already closed."""


class GeolocationUnavailable(Exception):
    """Raised by location providers; never surfaced past check-in."""
