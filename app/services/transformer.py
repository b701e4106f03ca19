import uuid
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

# Fields a client may set; anything else in the payload is dropped.
WRITABLE_FIELDS = ("name", "price", "description")


def _whitelist(fields: Mapping[str, Any]) -> Dict[str, Any]:
    unknown = sorted(set(fields) - set(WRITABLE_FIELDS))
    if unknown:
        logger.debug("Ignoring unknown product fields: %s", unknown)
    return {key: fields[key] for key in WRITABLE_FIELDS if key in fields}


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value).strip())


class ProductTransformer:
    """Turns validated input into the record shape the store persists."""

    @staticmethod
    def for_create(fields: Mapping[str, Any], product_image: Optional[str]) -> Dict[str, Any]:
        record = _whitelist(fields)
        record["id"] = str(uuid.uuid4())
        record["name"] = record["name"].lower()
        record["price"] = _to_decimal(record["price"])
        record["product_image"] = product_image
        record["expiry_date"] = datetime.now(timezone.utc)
        return record

    @staticmethod
    def for_update(fields: Mapping[str, Any]) -> Dict[str, Any]:
        changes = _whitelist(fields)
        if "name" in changes:
            changes["name"] = changes["name"].lower()
        if "price" in changes:
            changes["price"] = _to_decimal(changes["price"])
        return changes
