"""Domain errors raised by the product services.

The HTTP layer maps each class to a status code in ``app.api.errors``.
"""
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from app.services.validation import FieldError


class ProductServiceError(Exception):
    """Base class for failures scoped to a single request."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(ProductServiceError):
    """Submitted fields failed validation."""

    def __init__(self, errors: List["FieldError"]):
        super().__init__("Validation failed")
        self.errors = errors


class NotFoundError(ProductServiceError):
    """The requested product does not exist."""


class PersistenceError(ProductServiceError):
    """The product store failed."""


class UploadError(ProductServiceError):
    """The storage backend failed to persist the uploaded file."""
