from sqlalchemy import Numeric

from app.models.product import Product


def test_price_column_is_unscaled():
    price_type = Product.__table__.c.price.type

    assert isinstance(price_type, Numeric)
    assert price_type.precision is None
    assert price_type.scale is None
