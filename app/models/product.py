from sqlalchemy import Column, String, DateTime, Numeric
from sqlalchemy.sql import func
from app.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, index=True)  # uuid4, assigned by the transformer
    name = Column(String, nullable=False)
    price = Column(Numeric, nullable=False)  # unscaled; stored exactly as submitted
    description = Column(String, nullable=True)
    product_image = Column(String, nullable=True)  # local filename or remote URL
    expiry_date = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
