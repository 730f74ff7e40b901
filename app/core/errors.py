"""Domain error taxonomy shared by services and mapped to HTTP in main."""


class DomainError(Exception):
    """Base error carrying a caller-facing detail message."""

    status_code: int = 400
    detail: str = "Request could not be processed"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.detail
        super().__init__(self.detail)


class ValidationError(DomainError):
    """Raised when write-side input breaks a configuration rule."""

    status_code = 400
    detail = "Invalid data"


class AccessDeniedError(DomainError):
    """Raised when the acting principal has no scope over the target."""

    status_code = 403
    detail = "Access denied"


class NotFoundError(DomainError):
    """Raised when an id-based lookup has no match."""

    status_code = 404
    detail = "Resource not found"
