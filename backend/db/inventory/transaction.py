import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..database import Base, utcnow


TRANSACTION_TYPES = ("PURCHASE", "SALE", "TRANSFER", "ADJUSTMENT", "RETURN")


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    type = Column(String(50), nullable=False, index=True)  # see TRANSACTION_TYPES

    product_id = Column(Uuid, ForeignKey("products.id"), nullable=False, index=True)
    source_location_id = Column(Uuid, ForeignKey("locations.id"), nullable=True, index=True)
    destination_location_id = Column(Uuid, ForeignKey("locations.id"), nullable=True, index=True)

    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=True)
    reference = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)

    created_by = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now(), index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now(), onupdate=utcnow)

    product = relationship("Product")
    source_location = relationship("Location", foreign_keys=[source_location_id])
    destination_location = relationship("Location", foreign_keys=[destination_location_id])
    created_by_user = relationship("User", back_populates="transactions")

    @property
    def to_schema(self):
        return {
            "id": self.id,
            "type": self.type,
            "product_id": self.product_id,
            "source_location_id": self.source_location_id,
            "destination_location_id": self.destination_location_id,
            "quantity": int(self.quantity),
            "unit_price": self.unit_price,
            "reference": self.reference,
            "notes": self.notes,
            "created_by": self.created_by,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
