from app.schemas.product import (
    ProductResponse,
    FieldErrorResponse,
    ValidationErrorResponse,
    ErrorResponse,
)

__all__ = [
    "ProductResponse",
    "FieldErrorResponse",
    "ValidationErrorResponse",
    "ErrorResponse",
]
