from decimal import Decimal
from typing import Optional
from uuid import UUID

from .common import CamelModel


class InventorySummary(CamelModel):
    total_items: int
    total_lines: int
    low_stock: int
    out_of_stock: int
    total_value: Decimal


class ProductsSummary(CamelModel):
    total: int
    active: int
    categories: int


class CountSummary(CamelModel):
    total: int


class LocationsSummary(CamelModel):
    total: int
    active: int


class TransactionsSummary(CamelModel):
    total: int
    this_month: int
    value: Decimal


class ReportSummary(CamelModel):
    inventory: InventorySummary
    products: ProductsSummary
    customers: CountSummary
    suppliers: CountSummary
    locations: LocationsSummary
    transactions: TransactionsSummary


class LowStockRow(CamelModel):
    id: UUID
    name: str
    sku: str
    reorder_point: Optional[int] = None
    min_stock_level: Optional[int] = None
    on_hand: int
