from __future__ import annotations


class DomainError(Exception):
    """Base class for errors surfaced to API callers as a structured result."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, *, details: list | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(DomainError):
    status_code = 404
    code = "NOT_FOUND"


class Unauthorized(DomainError):
    status_code = 401
    code = "UNAUTHORIZED"


class ValidationError(DomainError):
    status_code = 400
    code = "VALIDATION_ERROR"


class InvalidStateError(DomainError):
    status_code = 409
    code = "INVALID_STATE"


class RateLimited(DomainError):
    status_code = 429
    code = "RATE_LIMITED"

    def __init__(self, message: str = "Too many requests", *, retry_after: int = 1) -> None:
        super().__init__(message)
        self.retry_after = retry_after
