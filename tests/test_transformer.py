import uuid
from datetime import datetime, timezone
from decimal import Decimal

from app.services.transformer import ProductTransformer


def test_for_create_normalizes_and_enriches():
    before = datetime.now(timezone.utc)
    record = ProductTransformer.for_create({"name": "Chair", "price": "49.99"}, None)

    assert record["name"] == "chair"
    assert record["price"] == Decimal("49.99")
    assert record["product_image"] is None
    assert uuid.UUID(record["id"]).version == 4
    assert record["expiry_date"] >= before


def test_for_create_assigns_fresh_ids():
    ids = {ProductTransformer.for_create({"name": "a", "price": 1}, None)["id"] for _ in range(50)}

    assert len(ids) == 50


def test_for_create_ignores_client_id_and_unknown_fields():
    record = ProductTransformer.for_create(
        {"id": "mine", "name": "Lamp", "price": 10, "color": "red", "description": "Desk lamp"},
        "https://cdn.example.com/lamp.png",
    )

    assert record["id"] != "mine"
    assert "color" not in record
    assert record["description"] == "Desk lamp"
    assert record["product_image"] == "https://cdn.example.com/lamp.png"


def test_for_update_only_touches_present_fields():
    assert ProductTransformer.for_update({"name": "Widget"}) == {"name": "widget"}
    assert ProductTransformer.for_update({"description": "Blue"}) == {"description": "Blue"}


def test_for_update_never_assigns_id_or_expiry():
    changes = ProductTransformer.for_update({"price": "5", "id": "x", "expiryDate": "2020-01-01"})

    assert changes == {"price": Decimal("5")}
