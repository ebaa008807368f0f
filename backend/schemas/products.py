from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from .common import CamelModel, strip_nullable, strip_required


def _money():
    return Field(default=None, ge=0, max_digits=10, decimal_places=2)


class ProductRead(CamelModel):
    id: UUID
    name: str
    description: Optional[str] = None
    sku: str
    barcode: Optional[str] = None
    price: Decimal
    cost: Optional[Decimal] = None
    category_id: Optional[UUID] = None
    supplier_id: Optional[UUID] = None
    min_stock_level: Optional[int] = None
    max_stock_level: Optional[int] = None
    reorder_point: Optional[int] = None
    weight: Optional[Decimal] = None
    dimensions: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductCreate(CamelModel):
    name: str = Field(max_length=255)
    description: Optional[str] = None
    sku: str = Field(max_length=100)
    barcode: Optional[str] = Field(default=None, max_length=100)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    cost: Optional[Decimal] = _money()
    category_id: Optional[UUID] = None
    supplier_id: Optional[UUID] = None
    min_stock_level: Optional[int] = Field(default=0, ge=0)
    max_stock_level: Optional[int] = Field(default=None, ge=0)
    reorder_point: Optional[int] = Field(default=0, ge=0)
    weight: Optional[Decimal] = _money()
    dimensions: Optional[str] = Field(default=None, max_length=100)
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return strip_required(v)

    @field_validator("sku")
    @classmethod
    def _sku(cls, v: str) -> str:
        return strip_required(v)

    @field_validator("description", "barcode", "dimensions")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        return strip_nullable(v)

    @model_validator(mode="after")
    def _stock_levels(self):
        if (
            self.min_stock_level is not None
            and self.max_stock_level is not None
            and self.max_stock_level < self.min_stock_level
        ):
            raise ValueError("maxStockLevel must be >= minStockLevel")
        return self


class ProductUpdate(ProductCreate):
    name: Optional[str] = Field(default=None, max_length=255)
    sku: Optional[str] = Field(default=None, max_length=100)
    price: Optional[Decimal] = _money()
    min_stock_level: Optional[int] = Field(default=None, ge=0)
    reorder_point: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return strip_required(v)

    @field_validator("sku")
    @classmethod
    def _sku(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return strip_required(v)
