import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_active_user, current_active_superuser
from core.pagination import PageParams, page_envelope, paginate, search_clause
from db.database import (
    get_async_session,
    Category as CategoryModel,
    InventoryLine as InventoryLineModel,
    Product as ProductModel,
    Supplier as SupplierModel,
    Transaction as TransactionModel,
)
from db.queries import apply_update, count_where, ensure_reference, get_or_404
from db.users import User
from schemas.common import Page
from schemas.products import ProductCreate, ProductRead, ProductUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


async def _ensure_sku_free(db: AsyncSession, sku: str, exclude_id: Optional[UUID] = None) -> None:
    stmt = select(ProductModel.id).where(func.lower(ProductModel.sku) == sku.lower())
    if exclude_id is not None:
        stmt = stmt.where(ProductModel.id != exclude_id)
    existing = await db.execute(stmt)
    if existing.first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Product with SKU {sku} already exists",
        )


async def _ensure_product_refs(db: AsyncSession, data: dict) -> None:
    if data.get("category_id"):
        await ensure_reference(db, CategoryModel, data["category_id"], "Category")
    if data.get("supplier_id"):
        await ensure_reference(db, SupplierModel, data["supplier_id"], "Supplier")


@router.get("", response_model=Page[ProductRead])
async def list_products(
    search: Optional[str] = Query(None),
    category_id: Optional[UUID] = Query(None, alias="categoryId"),
    supplier_id: Optional[UUID] = Query(None, alias="supplierId"),
    active: Optional[bool] = Query(None),
    page: PageParams = Depends(),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    """
    List products, most recently updated first.

    - search matches name or SKU (case-insensitive substring).
    """
    stmt = select(ProductModel)
    where = search_clause(search, ProductModel.name, ProductModel.sku)
    if where is not None:
        stmt = stmt.where(where)
    if category_id:
        stmt = stmt.where(ProductModel.category_id == category_id)
    if supplier_id:
        stmt = stmt.where(ProductModel.supplier_id == supplier_id)
    if active is not None:
        stmt = stmt.where(ProductModel.is_active.is_(active))
    stmt = stmt.order_by(ProductModel.updated_at.desc(), ProductModel.id)

    items, total = await paginate(db, stmt, page)
    return page_envelope([ProductRead(**p.to_schema) for p in items], total, page)


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(
    product_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    m = await get_or_404(db, ProductModel, product_id, "Product")
    return ProductRead(**m.to_schema)


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: ProductCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    data = payload.model_dump()
    await _ensure_sku_free(db, data["sku"])
    await _ensure_product_refs(db, data)

    m = ProductModel(**data)
    db.add(m)
    await db.commit()
    await db.refresh(m)
    logger.info("Created product %s (sku=%s)", m.id, m.sku)
    return ProductRead(**m.to_schema)


@router.put("/{product_id}", response_model=ProductRead)
async def update_product(
    product_id: UUID,
    payload: ProductUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    m = await get_or_404(db, ProductModel, product_id, "Product")

    data = payload.model_dump(exclude_unset=True)
    if data.get("sku") and data["sku"] != m.sku:
        await _ensure_sku_free(db, data["sku"], exclude_id=m.id)
    await _ensure_product_refs(db, data)

    max_level = data.get("max_stock_level", m.max_stock_level)
    min_level = data.get("min_stock_level", m.min_stock_level)
    if max_level is not None and min_level is not None and max_level < min_level:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="maxStockLevel must be >= minStockLevel",
        )

    apply_update(m, data, required=("name", "sku", "price", "is_active"))
    await db.commit()
    await db.refresh(m)
    return ProductRead(**m.to_schema)


@router.delete("/{product_id}", response_model=ProductRead)
async def delete_product(
    product_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_superuser),
):
    m = await get_or_404(db, ProductModel, product_id, "Product")

    lines = await count_where(db, InventoryLineModel.product_id, product_id)
    txns = await count_where(db, TransactionModel.product_id, product_id)
    if lines or txns:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Product has {lines} inventory line(s) and {txns} transaction(s)",
        )

    out = ProductRead(**m.to_schema)
    await db.delete(m)
    await db.commit()
    logger.info("Deleted product %s", product_id)
    return out
