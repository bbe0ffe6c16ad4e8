class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400


class AuthenticationError(DomainError):
    """Raised when credentials or bearer tokens are invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when a referenced id does not resolve."""

    status_code = 404


class ConflictError(DomainError):
    """Raised when an operation would break a uniqueness or reference rule."""

    status_code = 409
