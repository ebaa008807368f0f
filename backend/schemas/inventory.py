from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from .common import CamelModel, naive_utc, strip_nullable


TransactionType = Literal["PURCHASE", "SALE", "TRANSFER", "ADJUSTMENT", "RETURN"]


class ProductRef(CamelModel):
    id: UUID
    name: str
    sku: str


class LocationRef(CamelModel):
    id: UUID
    name: str


class InventoryLineRead(CamelModel):
    id: UUID
    product_id: UUID
    location_id: UUID
    quantity: int
    lot_number: Optional[str] = None
    expiration_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    product: Optional[ProductRef] = None
    location: Optional[LocationRef] = None


class InventoryLineCreate(CamelModel):
    product_id: UUID
    location_id: UUID
    quantity: int = Field(default=0, ge=0)
    lot_number: Optional[str] = Field(default=None, max_length=100)
    expiration_date: Optional[datetime] = None

    @field_validator("lot_number")
    @classmethod
    def _lot_number(cls, v: Optional[str]) -> Optional[str]:
        return strip_nullable(v)

    @field_validator("expiration_date")
    @classmethod
    def _expiration_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return naive_utc(v)


class InventoryLineUpdate(CamelModel):
    product_id: Optional[UUID] = None
    location_id: Optional[UUID] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    lot_number: Optional[str] = Field(default=None, max_length=100)
    expiration_date: Optional[datetime] = None

    @field_validator("lot_number")
    @classmethod
    def _lot_number(cls, v: Optional[str]) -> Optional[str]:
        return strip_nullable(v)

    @field_validator("expiration_date")
    @classmethod
    def _expiration_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return naive_utc(v)


class TransactionRead(CamelModel):
    id: UUID
    type: TransactionType
    product_id: UUID
    source_location_id: Optional[UUID] = None
    destination_location_id: Optional[UUID] = None
    quantity: int
    unit_price: Optional[Decimal] = None
    reference: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TransactionCreate(CamelModel):
    type: TransactionType
    product_id: UUID
    source_location_id: Optional[UUID] = None
    destination_location_id: Optional[UUID] = None
    quantity: int
    unit_price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    reference: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _type_upper(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("reference", "notes")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        return strip_nullable(v)

    @model_validator(mode="after")
    def _validate_locations(self):
        # which locations each type needs
        if self.type in ("PURCHASE", "RETURN"):
            if not self.destination_location_id or self.source_location_id:
                raise ValueError(f"{self.type} requires destinationLocationId and no sourceLocationId")
        if self.type == "SALE":
            if not self.source_location_id or self.destination_location_id:
                raise ValueError("SALE requires sourceLocationId and no destinationLocationId")
        if self.type == "TRANSFER":
            if not self.source_location_id or not self.destination_location_id:
                raise ValueError("TRANSFER requires sourceLocationId and destinationLocationId")
            if self.source_location_id == self.destination_location_id:
                raise ValueError("TRANSFER source and destination must differ")
        if self.type == "ADJUSTMENT":
            if not self.destination_location_id or self.source_location_id:
                raise ValueError("ADJUSTMENT requires destinationLocationId and no sourceLocationId")
            if self.quantity == 0:
                raise ValueError("ADJUSTMENT quantity must be non-zero")
        elif self.quantity <= 0:
            raise ValueError("quantity must be > 0")
        return self
