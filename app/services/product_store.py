from typing import Any, Dict, List, Optional, Protocol
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select, delete
from app.models.product import Product
from app.exceptions import PersistenceError
import logging

logger = logging.getLogger(__name__)


class ProductStore(Protocol):
    """Create/find/update/delete-by-key over product records."""

    async def create(self, record: Dict[str, Any]) -> Product:
        ...

    async def find_all(self) -> List[Product]:
        ...

    async def find_one(self, product_id: str) -> Optional[Product]:
        ...

    async def update(self, product: Product, changes: Dict[str, Any]) -> Product:
        ...

    async def destroy(self, product_id: str) -> int:
        ...


class SQLAlchemyProductStore:
    """ProductStore backed by an async SQLAlchemy session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _fail(self, action: str, error: SQLAlchemyError) -> None:
        await self.session.rollback()
        logger.exception("Failed to %s product", action)
        raise PersistenceError(str(error)) from error

    async def create(self, record: Dict[str, Any]) -> Product:
        product = Product(**record)
        try:
            self.session.add(product)
            await self.session.commit()
            await self.session.refresh(product)
        except SQLAlchemyError as e:
            await self._fail("create", e)
        return product

    async def find_all(self) -> List[Product]:
        try:
            result = await self.session.execute(
                select(Product).order_by(Product.created_at.desc())
            )
        except SQLAlchemyError as e:
            await self._fail("list", e)
        return list(result.scalars().all())

    async def find_one(self, product_id: str) -> Optional[Product]:
        try:
            result = await self.session.execute(
                select(Product).where(Product.id == product_id)
            )
        except SQLAlchemyError as e:
            await self._fail("load", e)
        return result.scalar_one_or_none()

    async def update(self, product: Product, changes: Dict[str, Any]) -> Product:
        for key, value in changes.items():
            setattr(product, key, value)
        try:
            await self.session.commit()
            await self.session.refresh(product)
        except SQLAlchemyError as e:
            await self._fail("update", e)
        return product

    async def destroy(self, product_id: str) -> int:
        """Delete by id and return the number of rows removed."""
        try:
            result = await self.session.execute(
                delete(Product).where(Product.id == product_id)
            )
            await self.session.commit()
        except SQLAlchemyError as e:
            await self._fail("delete", e)
        return result.rowcount or 0
