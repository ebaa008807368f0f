import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Uuid, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base, utcnow


class InventoryLine(Base):
    __tablename__ = "inventory"
    __table_args__ = (
        # stock movements book against the single un-lotted line per product and location
        Index(
            "uq_inventory_unlotted_product_location",
            "product_id",
            "location_id",
            unique=True,
            postgresql_where=text("lot_number IS NULL"),
            sqlite_where=text("lot_number IS NULL"),
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    product_id = Column(Uuid, ForeignKey("products.id"), nullable=False, index=True)
    location_id = Column(Uuid, ForeignKey("locations.id"), nullable=False, index=True)

    quantity = Column(Integer, nullable=False, default=0)
    lot_number = Column(String(100), nullable=True)
    expiration_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now(), index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now(), onupdate=utcnow)

    product = relationship("Product", back_populates="inventory_lines")
    location = relationship("Location", back_populates="inventory_lines")

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "location_id": self.location_id,
            "quantity": int(self.quantity or 0),
            "lot_number": self.lot_number,
            "expiration_date": self.expiration_date,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
