import os
import tempfile

# Settings are read at import time; point local uploads somewhere disposable.
os.environ.setdefault("STORAGE_MODE", "local")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="product-uploads-"))

import itertools
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_product_service
from app.exceptions import PersistenceError, UploadError
from app.main import app
from app.models.product import Product
from app.services.product_service import ProductService
from app.services.upload_resolver import LocalImage, UploadResolver

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


class InMemoryProductStore:
    """ProductStore that keeps records in a dict and counts writes."""

    def __init__(self):
        self.products = {}
        self.writes = 0
        self.fail_with = None
        self._clock = itertools.count()

    def _tick(self):
        return BASE_TIME + timedelta(seconds=next(self._clock))

    async def create(self, record):
        if self.fail_with:
            raise PersistenceError(self.fail_with)
        product = Product(**record)
        product.created_at = product.updated_at = self._tick()
        self.products[product.id] = product
        self.writes += 1
        return product

    async def find_all(self):
        return sorted(self.products.values(), key=lambda p: p.created_at, reverse=True)

    async def find_one(self, product_id):
        return self.products.get(product_id)

    async def update(self, product, changes):
        if self.fail_with:
            raise PersistenceError(self.fail_with)
        for key, value in changes.items():
            setattr(product, key, value)
        product.updated_at = self._tick()
        self.writes += 1
        return product

    async def destroy(self, product_id):
        return 1 if self.products.pop(product_id, None) is not None else 0


class RecordingUploadBackend:
    """Upload backend that remembers what it stored and deleted."""

    def __init__(self):
        self.stored = []
        self.deleted = []
        self.fail_with = None

    async def store(self, file):
        if self.fail_with:
            raise UploadError(self.fail_with)
        self.stored.append(file)
        return LocalImage(filename=f"stored-{file.filename}")

    async def delete(self, reference):
        self.deleted.append(reference)


@pytest.fixture
def store():
    return InMemoryProductStore()


@pytest.fixture
def backend():
    return RecordingUploadBackend()


@pytest.fixture
def service(store, backend):
    return ProductService(store=store, resolver=UploadResolver(backend))


@pytest.fixture
def client(service):
    app.dependency_overrides[get_product_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()
