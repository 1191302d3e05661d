class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when an id (or email + role pair) does not resolve."""


class AuthenticationError(NotFoundError):
    """Raised when login credentials are invalid or nobody is logged in."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ConflictError(DomainError):
    """Raised when a uniqueness rule would be broken (e.g. duplicate email)."""
