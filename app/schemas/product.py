from pydantic import AliasChoices, BaseModel, Field
from typing import Optional
from decimal import Decimal
from datetime import datetime


def _camel(name: str, camel: str, default=None, **kwargs):
    """Field read from the ORM attribute or its camelCase key, written as camelCase."""
    return Field(
        default,
        validation_alias=AliasChoices(name, camel),
        serialization_alias=camel,
        **kwargs
    )


class ProductBase(BaseModel):
    name: str = Field(..., description="Product name (stored lower-cased)")
    price: Decimal = Field(..., description="Product price")
    description: Optional[str] = Field(None, description="Product description")


class ProductResponse(ProductBase):
    id: str
    product_image: Optional[str] = _camel(
        "product_image", "productImage",
        description="Local filename or remote URL of the product image"
    )
    expiry_date: datetime = _camel("expiry_date", "expiryDate", ...)
    created_at: Optional[datetime] = _camel("created_at", "createdAt")
    updated_at: Optional[datetime] = _camel("updated_at", "updatedAt")

    model_config = {"from_attributes": True}


class FieldErrorResponse(BaseModel):
    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    errors: list[FieldErrorResponse]


class ErrorResponse(BaseModel):
    error: str
