import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_active_user
from core.pagination import PageParams, count_rows, page_envelope
from db.database import (
    get_async_session,
    InventoryLine as InventoryLineModel,
    Location as LocationModel,
    Product as ProductModel,
)
from db.queries import apply_update, ensure_reference, get_or_404
from db.users import User
from schemas.common import Page
from schemas.inventory import InventoryLineCreate, InventoryLineRead, InventoryLineUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def _joined_lines():
    """inventory -> product, inventory -> location (left joins)."""
    stmt = select(InventoryLineModel)
    stmt = stmt.outerjoin(ProductModel, InventoryLineModel.product_id == ProductModel.id)
    stmt = stmt.outerjoin(LocationModel, InventoryLineModel.location_id == LocationModel.id)
    return stmt.add_columns(
        ProductModel.name.label("product_name"),
        ProductModel.sku.label("product_sku"),
        LocationModel.name.label("location_name"),
    )


def _line_out(line: InventoryLineModel, product_name, product_sku, location_name) -> InventoryLineRead:
    row = line.to_schema
    row["product"] = (
        {"id": line.product_id, "name": product_name, "sku": product_sku}
        if product_name is not None
        else None
    )
    row["location"] = (
        {"id": line.location_id, "name": location_name}
        if location_name is not None
        else None
    )
    return InventoryLineRead(**row)


async def _ensure_no_unlotted_line(
    db: AsyncSession, product_id: UUID, location_id: UUID, exclude_id: Optional[UUID] = None
):
    """Only one line without a lot number may exist per product and location."""
    stmt = (
        select(InventoryLineModel.id)
        .where(InventoryLineModel.product_id == product_id)
        .where(InventoryLineModel.location_id == location_id)
        .where(InventoryLineModel.lot_number.is_(None))
    )
    if exclude_id is not None:
        stmt = stmt.where(InventoryLineModel.id != exclude_id)
    res = await db.execute(stmt.limit(1))
    existing = res.scalar_one_or_none()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Inventory line {existing} already holds un-lotted stock of this product at this location",
        )


async def _load_line_out(db: AsyncSession, line_id: UUID) -> Optional[InventoryLineRead]:
    res = await db.execute(_joined_lines().where(InventoryLineModel.id == line_id))
    row = res.first()
    if not row:
        return None
    return _line_out(*row)


@router.get("", response_model=Page[InventoryLineRead])
async def list_inventory(
    product_id: Optional[UUID] = Query(None, alias="productId"),
    location_id: Optional[UUID] = Query(None, alias="locationId"),
    page: PageParams = Depends(),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    """
    List inventory lines with their product and location, newest first.

    - productId / locationId narrow the list; total honours the same filters.
    """
    filters = []
    if product_id:
        filters.append(InventoryLineModel.product_id == product_id)
    if location_id:
        filters.append(InventoryLineModel.location_id == location_id)

    total = await count_rows(db, select(InventoryLineModel).where(*filters))

    stmt = (
        _joined_lines()
        .where(*filters)
        .order_by(InventoryLineModel.created_at.desc(), InventoryLineModel.id)
        .limit(page.limit)
        .offset(page.offset)
    )
    res = await db.execute(stmt)
    return page_envelope([_line_out(*row) for row in res.all()], total, page)


@router.get("/{line_id}", response_model=InventoryLineRead)
async def get_inventory_line(
    line_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    out = await _load_line_out(db, line_id)
    if not out:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inventory item not found")
    return out


@router.post("", response_model=InventoryLineRead, status_code=status.HTTP_201_CREATED)
async def create_inventory_line(
    payload: InventoryLineCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    await ensure_reference(db, ProductModel, payload.product_id, "Product")
    await ensure_reference(db, LocationModel, payload.location_id, "Location")
    if payload.lot_number is None:
        await _ensure_no_unlotted_line(db, payload.product_id, payload.location_id)

    m = InventoryLineModel(**payload.model_dump())
    db.add(m)
    await db.commit()
    await db.refresh(m)
    logger.info(
        "Created inventory line %s (product=%s location=%s qty=%s)",
        m.id, m.product_id, m.location_id, m.quantity,
    )
    return InventoryLineRead(**m.to_schema)


@router.put("/{line_id}", response_model=InventoryLineRead)
async def update_inventory_line(
    line_id: UUID,
    payload: InventoryLineUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    m = await get_or_404(db, InventoryLineModel, line_id, "Inventory item")

    data = payload.model_dump(exclude_unset=True)
    if data.get("product_id") and data["product_id"] != m.product_id:
        await ensure_reference(db, ProductModel, data["product_id"], "Product")
    if data.get("location_id") and data["location_id"] != m.location_id:
        await ensure_reference(db, LocationModel, data["location_id"], "Location")

    lot_number = data["lot_number"] if "lot_number" in data else m.lot_number
    if lot_number is None:
        await _ensure_no_unlotted_line(
            db,
            data.get("product_id") or m.product_id,
            data.get("location_id") or m.location_id,
            exclude_id=m.id,
        )

    apply_update(m, data, required=("product_id", "location_id", "quantity"))

    await db.commit()
    await db.refresh(m)
    return InventoryLineRead(**m.to_schema)


@router.delete("/{line_id}", response_model=InventoryLineRead)
async def delete_inventory_line(
    line_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    m = await get_or_404(db, InventoryLineModel, line_id, "Inventory item")
    out = InventoryLineRead(**m.to_schema)
    await db.delete(m)
    await db.commit()
    logger.info("Deleted inventory line %s", line_id)
    return out
