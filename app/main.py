from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from app.api.routes import products
from app.api.errors import register_exception_handlers
from app.config import settings
from app.database import engine
import os
import logging

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Product Catalog API",
    description="Product management with local or cloud image storage",
    version="1.0.0",
    debug=settings.debug
)

# Include routers
app.include_router(products.router)
register_exception_handlers(app)

# Serve locally stored product images
if settings.storage_mode == "local":
    os.makedirs(settings.upload_dir, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")


@app.get("/")
async def root():
    return {"message": "Product Catalog API", "docs": "/docs"}


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.on_event("startup")
async def startup():
    logger.info("Starting with storage_mode=%s", settings.storage_mode)


@app.on_event("shutdown")
async def shutdown():
    """Cleanup on shutdown."""
    await engine.dispose()
