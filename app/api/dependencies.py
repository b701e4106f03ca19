from functools import lru_cache
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import settings
from app.database import get_db
from app.services.product_service import ProductService
from app.services.product_store import SQLAlchemyProductStore
from app.services.upload_resolver import UploadBackend, UploadResolver, build_upload_backend


@lru_cache
def get_upload_backend() -> UploadBackend:
    """One backend (and boto3 client) per process."""
    return build_upload_backend(settings)


def get_product_service(
    db: AsyncSession = Depends(get_db),
    backend: UploadBackend = Depends(get_upload_backend)
) -> ProductService:
    return ProductService(
        store=SQLAlchemyProductStore(db),
        resolver=UploadResolver(backend)
    )
