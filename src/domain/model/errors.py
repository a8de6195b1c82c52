"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class PermissionDeniedError(DomainError):
    """Caller lacks permission for the requested action."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class StorageError(DomainError):
    """The storage backend failed for a reason other than a constraint."""


# ── Authentication ───────────────────────────────────────


class UserExistsError(DuplicateError):
    """Username or email is already registered."""


class InvalidCredentialsError(DomainError):
    """Unknown username or wrong password.

    Both cases share this error so callers cannot tell which usernames exist.
    """


class HashError(DomainError):
    """Password hashing failed unexpectedly."""


class TokenError(DomainError):
    """A token could not be signed."""


class InvalidTokenError(TokenError):
    """A token is malformed, badly signed, or expired."""


class UnauthorizedError(DomainError):
    """Request carries no usable identity."""
