"""Domain errors raised by services and mapped to HTTP responses by the API layer."""


class AppError(Exception):
    """
    Base class for domain failures.

    Each subclass carries a stable machine-readable code and the HTTP status the
    gateway should answer with. Services never build HTTP responses themselves.
    """

    code: str = "INTERNAL_ERROR"
    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnauthorizedError(AppError):
    """Bad credentials or an invalid, expired, unknown or already-rotated token."""

    code = "UNAUTHORIZED"
    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class ForbiddenError(AppError):
    """Authenticated, but the caller's role does not allow the action."""

    code = "FORBIDDEN"
    status_code = 403

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str, key: object) -> None:
        self.resource = resource
        super().__init__(f"{resource} not found: {key}")


class DuplicateError(AppError):
    """A unique field (e.g. email) is already taken."""

    code = "DUPLICATE"
    status_code = 409

    def __init__(self, resource: str, field: str, value: object) -> None:
        self.resource = resource
        self.field = field
        super().__init__(f"{resource} already exists with {field}: {value}")


class InvalidRequestError(AppError):
    code = "INVALID_REQUEST"
    status_code = 400
