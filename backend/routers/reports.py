from decimal import Decimal

from fastapi import APIRouter, Depends
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_active_user
from core.pagination import PageParams, count_rows, page_envelope
from db.database import (
    get_async_session,
    utcnow,
    Category as CategoryModel,
    Customer as CustomerModel,
    InventoryLine as InventoryLineModel,
    Location as LocationModel,
    Product as ProductModel,
    Supplier as SupplierModel,
    Transaction as TransactionModel,
)
from db.users import User
from schemas.common import Page
from schemas.reports import LowStockRow, ReportSummary

router = APIRouter()


def _money(x) -> Decimal:
    return Decimal(str(x or 0)).quantize(Decimal("0.01"))


async def _scalar(db: AsyncSession, stmt) -> int:
    res = await db.execute(stmt)
    return int(res.scalar_one() or 0)


def _on_hand_by_product():
    """Active products with their on-hand quantity summed across all locations."""
    stock = (
        select(
            InventoryLineModel.product_id.label("product_id"),
            func.sum(InventoryLineModel.quantity).label("on_hand"),
        )
        .group_by(InventoryLineModel.product_id)
        .subquery()
    )
    on_hand = func.coalesce(stock.c.on_hand, 0)
    stmt = (
        select(ProductModel, on_hand.label("on_hand"))
        .outerjoin(stock, stock.c.product_id == ProductModel.id)
        .where(ProductModel.is_active.is_(True))
    )
    return stmt, on_hand


@router.get("/summary", response_model=ReportSummary)
async def report_summary(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    products_stmt, on_hand = _on_hand_by_product()
    reorder_point = func.coalesce(ProductModel.reorder_point, 0)
    low_stock = await count_rows(db, products_stmt.where(on_hand > 0).where(on_hand <= reorder_point))
    out_of_stock = await count_rows(db, products_stmt.where(on_hand == 0))

    unit_value = func.coalesce(ProductModel.cost, ProductModel.price)
    res = await db.execute(
        select(
            func.coalesce(func.sum(InventoryLineModel.quantity), 0),
            func.count(InventoryLineModel.id),
            func.coalesce(func.sum(InventoryLineModel.quantity * unit_value), 0),
        ).select_from(InventoryLineModel).join(ProductModel, InventoryLineModel.product_id == ProductModel.id)
    )
    total_items, total_lines, total_value = res.one()

    res = await db.execute(
        select(
            func.count(ProductModel.id),
            func.coalesce(func.sum(case((ProductModel.is_active.is_(True), 1), else_=0)), 0),
        )
    )
    products_total, products_active = res.one()

    res = await db.execute(
        select(
            func.count(LocationModel.id),
            func.coalesce(func.sum(case((LocationModel.is_active.is_(True), 1), else_=0)), 0),
        )
    )
    locations_total, locations_active = res.one()

    # created_at is stored as naive UTC
    month_start = utcnow().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    res = await db.execute(
        select(
            func.count(TransactionModel.id),
            func.coalesce(func.sum(case((TransactionModel.created_at >= month_start, 1), else_=0)), 0),
            func.coalesce(func.sum(TransactionModel.quantity * TransactionModel.unit_price), 0),
        )
    )
    txn_total, txn_this_month, txn_value = res.one()

    return {
        "inventory": {
            "total_items": int(total_items or 0),
            "total_lines": int(total_lines or 0),
            "low_stock": low_stock,
            "out_of_stock": out_of_stock,
            "total_value": _money(total_value),
        },
        "products": {
            "total": int(products_total or 0),
            "active": int(products_active or 0),
            "categories": await _scalar(db, select(func.count(CategoryModel.id))),
        },
        "customers": {"total": await _scalar(db, select(func.count(CustomerModel.id)))},
        "suppliers": {"total": await _scalar(db, select(func.count(SupplierModel.id)))},
        "locations": {"total": int(locations_total or 0), "active": int(locations_active or 0)},
        "transactions": {
            "total": int(txn_total or 0),
            "this_month": int(txn_this_month or 0),
            "value": _money(txn_value),
        },
    }


@router.get("/low-stock", response_model=Page[LowStockRow])
async def low_stock_products(
    page: PageParams = Depends(),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    """Active products at or below their reorder point, lowest on-hand first."""
    stmt, on_hand = _on_hand_by_product()
    stmt = stmt.where(on_hand <= func.coalesce(ProductModel.reorder_point, 0))

    total = await count_rows(db, stmt)
    res = await db.execute(
        stmt.order_by(on_hand.asc(), ProductModel.name.asc()).limit(page.limit).offset(page.offset)
    )
    rows = [
        LowStockRow(
            id=p.id,
            name=p.name,
            sku=p.sku,
            reorder_point=p.reorder_point,
            min_stock_level=p.min_stock_level,
            on_hand=int(qty or 0),
        )
        for p, qty in res.all()
    ]
    return page_envelope(rows, total, page)
