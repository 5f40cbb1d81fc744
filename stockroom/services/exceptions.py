# stockroom/services/exceptions.py
"""Typed outcomes raised by the service layer.

Services never build HTTP responses; ``stockroom.api.error_handlers`` maps each
class to a status code.
"""


class ServiceError(Exception):
    """Base class for service-layer errors."""

    code: str = "service_error"

    def __init__(self, detail: str, *, code: str | None = None):
        self.detail = detail
        if code:
            self.code = code
        super().__init__(detail)


class DomainValidationError(ServiceError):
    """Invalid domain input (bad reference, duplicate key, wrong state)."""

    code = "validation_error"


class InvalidQuantityError(DomainValidationError):
    """Quantity is not usable for the requested operation (e.g. <= 0)."""

    code = "invalid_quantity"


class InsufficientStockError(DomainValidationError):
    """Not enough on-hand stock for an outbound movement."""

    code = "insufficient_stock"


class ReturnQuantityExceededError(DomainValidationError):
    """A return would bring returned_quantity above the rented quantity."""

    code = "return_quantity_exceeded"


class ResourceNotFoundError(ServiceError):
    """Resource not found."""

    code = "not_found"


class PermissionDeniedError(ServiceError):
    """The caller may not act on this resource."""

    code = "forbidden"


class AuthenticationError(ServiceError):
    """Credentials are missing, invalid or expired."""

    code = "unauthenticated"
