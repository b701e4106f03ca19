from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from app.exceptions import PersistenceError
from app.models.product import Product
from app.services.product_store import SQLAlchemyProductStore

RECORD = {
    "id": "6f1c1a6e-8f4e-4a38-9d57-3a2f1e0b9c11",
    "name": "chair",
    "price": Decimal("49.99"),
    "product_image": None,
    "expiry_date": datetime(2026, 1, 1, tzinfo=timezone.utc),
}


@pytest.fixture
def session():
    session = MagicMock()
    session.commit = AsyncMock()
    session.refresh = AsyncMock()
    session.rollback = AsyncMock()
    session.execute = AsyncMock()
    return session


@pytest.mark.asyncio
async def test_create_adds_and_commits(session):
    product = await SQLAlchemyProductStore(session).create(dict(RECORD))

    assert isinstance(product, Product)
    assert product.name == "chair"
    session.add.assert_called_once_with(product)
    session.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_failure_rolls_back(session):
    session.commit.side_effect = OperationalError("INSERT", {}, Exception("db down"))

    with pytest.raises(PersistenceError, match="db down"):
        await SQLAlchemyProductStore(session).create(dict(RECORD))

    session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_update_sets_only_given_fields(session):
    product = Product(**RECORD)

    await SQLAlchemyProductStore(session).update(product, {"name": "widget"})

    assert product.name == "widget"
    assert product.price == Decimal("49.99")
    session.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_destroy_returns_rowcount(session):
    session.execute.return_value = MagicMock(rowcount=0)

    assert await SQLAlchemyProductStore(session).destroy("missing") == 0


@pytest.mark.asyncio
async def test_find_one_returns_none_when_absent(session):
    result = MagicMock()
    result.scalar_one_or_none.return_value = None
    session.execute.return_value = result

    assert await SQLAlchemyProductStore(session).find_one("missing") is None


@pytest.mark.asyncio
async def test_find_all_orders_newest_first(session):
    newest, oldest = Product(**dict(RECORD, id="b")), Product(**dict(RECORD, id="a"))
    result = MagicMock()
    result.scalars.return_value.all.return_value = [newest, oldest]
    session.execute.return_value = result

    products = await SQLAlchemyProductStore(session).find_all()

    assert products == [newest, oldest]
    statement = session.execute.await_args.args[0]
    assert "ORDER BY products.created_at DESC" in str(statement)


@pytest.mark.asyncio
async def test_destroy_deletes_matching_row(session):
    session.execute.return_value = MagicMock(rowcount=1)

    assert await SQLAlchemyProductStore(session).destroy(RECORD["id"]) == 1

    statement = session.execute.await_args.args[0]
    assert str(statement).startswith("DELETE FROM products")
    session.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_update_failure_rolls_back(session):
    session.commit.side_effect = OperationalError("UPDATE", {}, Exception("db down"))
    product = Product(**RECORD)

    with pytest.raises(PersistenceError, match="db down"):
        await SQLAlchemyProductStore(session).update(product, {"name": "widget"})

    session.rollback.assert_awaited_once()
    session.refresh.assert_not_awaited()
