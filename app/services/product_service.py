from typing import Any, Dict, List, Mapping, Optional
from app.models.product import Product
from app.exceptions import NotFoundError, PersistenceError, UploadError, ValidationError
from app.services.product_store import ProductStore
from app.services.transformer import ProductTransformer
from app.services.upload_resolver import (
    FailedUpload,
    IncomingFile,
    UploadResolver,
    canonical_reference,
)
from app.services.validation import CREATE_RULES, UPDATE_RULES, FieldValidator
import logging

logger = logging.getLogger(__name__)


class ProductService:
    """Runs the upload, validate, transform and persist pipeline for each operation."""

    def __init__(
        self,
        store: ProductStore,
        resolver: UploadResolver,
        validator: Optional[FieldValidator] = None,
        transformer: Optional[ProductTransformer] = None
    ):
        self.store = store
        self.resolver = resolver
        self.validator = validator or FieldValidator()
        self.transformer = transformer or ProductTransformer()

    async def create_product(
        self,
        fields: Mapping[str, Any],
        upload: Optional[IncomingFile] = None
    ) -> Product:
        """Create a new product, optionally with an image."""
        staged = await self.resolver.resolve(upload)
        if isinstance(staged, FailedUpload):
            logger.error("Upload failed, product not created: %s", staged.reason)
            raise UploadError(staged.reason)

        errors = self.validator.validate(fields, CREATE_RULES)
        if errors:
            await self.resolver.discard(staged)
            raise ValidationError(errors)

        record = self.transformer.for_create(fields, canonical_reference(staged))
        try:
            product = await self.store.create(record)
        except PersistenceError:
            await self.resolver.discard(staged)
            raise

        logger.info("Created product %s (image=%s)", product.id, product.product_image)
        return product

    async def list_products(self) -> List[Product]:
        """All products, newest first."""
        return await self.store.find_all()

    async def get_product(self, product_id: str) -> Product:
        """Get a product by ID."""
        product = await self.store.find_one(product_id)
        if not product:
            raise NotFoundError("Product with the specified ID does not exist")
        return product

    async def update_product(self, product_id: str, fields: Mapping[str, Any]) -> Product:
        """Apply a partial update; fields absent from the payload are left untouched."""
        errors = self.validator.validate(fields, UPDATE_RULES)
        if errors:
            raise ValidationError(errors)

        product = await self.store.find_one(product_id)
        if not product:
            raise NotFoundError("Product not found")

        changes: Dict[str, Any] = self.transformer.for_update(fields)
        product = await self.store.update(product, changes)
        logger.info("Updated product %s fields=%s", product_id, sorted(changes))
        return product

    async def delete_product(self, product_id: str) -> None:
        """Delete a product.

        An unknown id is reported as a generic persistence failure rather than
        a not-found, unlike ``get_product``.
        """
        deleted = await self.store.destroy(product_id)
        if not deleted:
            raise PersistenceError("Product not found")
        logger.info("Deleted product %s", product_id)
