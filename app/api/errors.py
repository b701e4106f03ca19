from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from app.exceptions import NotFoundError, ProductServiceError, ValidationError
import logging

logger = logging.getLogger(__name__)


async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=400,
        content={"errors": [error.to_dict() for error in exc.errors]}
    )


async def not_found_handler(request: Request, exc: NotFoundError):
    return PlainTextResponse(exc.message, status_code=404)


async def service_error_handler(request: Request, exc: ProductServiceError):
    """Persistence and upload failures, including delete of an unknown id."""
    logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=500, content={"error": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ProductServiceError, service_error_handler)
