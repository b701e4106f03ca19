from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile
from typing import Any, Dict, List, Optional, Tuple
from app.api.dependencies import get_product_service
from app.exceptions import ValidationError
from app.schemas.product import ProductResponse, ValidationErrorResponse, ErrorResponse
from app.services.product_service import ProductService
from app.services.upload_resolver import IncomingFile
from app.services.validation import FieldError
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])

IMAGE_FIELD = "productImage"

ERROR_RESPONSES = {
    400: {"model": ValidationErrorResponse},
    500: {"model": ErrorResponse},
}


async def read_submission(request: Request) -> Tuple[Dict[str, Any], Optional[IncomingFile]]:
    """Collect submitted fields and the optional image from a JSON, urlencoded or multipart body."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise ValidationError([FieldError("body", "Malformed JSON body")])
        if not isinstance(body, dict):
            raise ValidationError([FieldError("body", "Body must be a JSON object")])
        return body, None

    form = await request.form()
    fields: Dict[str, Any] = {}
    upload = None
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            if key == IMAGE_FIELD and upload is None:
                upload = IncomingFile(
                    filename=value.filename or "",
                    content=await value.read(),
                    content_type=value.content_type
                )
            continue
        fields[key] = value
    return fields, upload


@router.post("", response_model=ProductResponse, status_code=201, responses=ERROR_RESPONSES)
async def create_product(
    request: Request,
    service: ProductService = Depends(get_product_service)
):
    """Create a new product; accepts an optional `productImage` file."""
    fields, upload = await read_submission(request)
    product = await service.create_product(fields, upload)
    return ProductResponse.model_validate(product)


@router.get("", response_model=List[ProductResponse], responses={500: {"model": ErrorResponse}})
async def list_products(service: ProductService = Depends(get_product_service)):
    """List all products, newest first."""
    products = await service.list_products()
    return [ProductResponse.model_validate(p) for p in products]


@router.get("/{product_id}", response_model=ProductResponse, responses={500: {"model": ErrorResponse}})
async def get_product(
    product_id: str,
    service: ProductService = Depends(get_product_service)
):
    """Get a single product by ID."""
    product = await service.get_product(product_id)
    return ProductResponse.model_validate(product)


@router.put("/{product_id}", response_model=ProductResponse, responses=ERROR_RESPONSES)
async def update_product(
    product_id: str,
    request: Request,
    service: ProductService = Depends(get_product_service)
):
    """Update the fields present in the payload."""
    fields, upload = await read_submission(request)
    if upload is not None:
        logger.info("Ignoring image upload on update of product %s", product_id)
    product = await service.update_product(product_id, fields)
    return ProductResponse.model_validate(product)


@router.delete("/{product_id}", status_code=204, responses={500: {"model": ErrorResponse}})
async def delete_product(
    product_id: str,
    service: ProductService = Depends(get_product_service)
):
    """Delete a product."""
    await service.delete_product(product_id)
    return None
