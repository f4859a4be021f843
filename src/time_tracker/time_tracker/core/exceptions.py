class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing, malformed or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid or the session is unusable."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced user, entry or project does not exist."""


class ConflictError(DomainError):
    """Raised when the current state forbids the change (double decision, duplicate email, ...)."""
