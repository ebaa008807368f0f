import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base, utcnow


class Product(Base):
    __tablename__ = "products"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    sku = Column(String(100), nullable=False, unique=True, index=True)
    barcode = Column(String(100), nullable=True)

    price = Column(Numeric(10, 2), nullable=False)
    cost = Column(Numeric(10, 2), nullable=True)

    category_id = Column(Uuid, ForeignKey("categories.id"), nullable=True, index=True)
    supplier_id = Column(Uuid, ForeignKey("suppliers.id"), nullable=True, index=True)

    min_stock_level = Column(Integer, nullable=True, default=0)
    max_stock_level = Column(Integer, nullable=True)
    reorder_point = Column(Integer, nullable=True, default=0)

    weight = Column(Numeric(10, 2), nullable=True)
    dimensions = Column(String(100), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now(), onupdate=utcnow, index=True)

    category = relationship("Category", back_populates="products")
    supplier = relationship("Supplier", back_populates="products")
    inventory_lines = relationship("InventoryLine", back_populates="product")

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "sku": self.sku,
            "barcode": self.barcode,
            "price": self.price,
            "cost": self.cost,
            "category_id": self.category_id,
            "supplier_id": self.supplier_id,
            "min_stock_level": self.min_stock_level,
            "max_stock_level": self.max_stock_level,
            "reorder_point": self.reorder_point,
            "weight": self.weight,
            "dimensions": self.dimensions,
            "is_active": bool(self.is_active),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
