import logging
from typing import List, Optional, Tuple
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_active_user
from core.pagination import PageParams, page_envelope, paginate
from db.database import (
    get_async_session,
    InventoryLine as InventoryLineModel,
    Location as LocationModel,
    Product as ProductModel,
    Transaction as TransactionModel,
    TRANSACTION_TYPES,
)
from db.queries import ensure_reference, get_or_404
from db.users import User
from schemas.common import Page
from schemas.inventory import TransactionCreate, TransactionRead

logger = logging.getLogger(__name__)

router = APIRouter()


def _stock_deltas(payload: TransactionCreate) -> List[Tuple[UUID, int]]:
    """(location_id, delta) pairs a transaction applies; outgoing deltas come first."""
    q = int(payload.quantity)
    if payload.type in ("PURCHASE", "RETURN"):
        return [(payload.destination_location_id, q)]
    if payload.type == "SALE":
        return [(payload.source_location_id, -q)]
    if payload.type == "TRANSFER":
        return [(payload.source_location_id, -q), (payload.destination_location_id, q)]
    # ADJUSTMENT: signed delta
    return [(payload.destination_location_id, q)]


async def _stock_line(db: AsyncSession, product_id: UUID, location_id: UUID) -> Optional[InventoryLineModel]:
    # Movements book against the un-lotted line (at most one per product and location).
    res = await db.execute(
        select(InventoryLineModel)
        .where(InventoryLineModel.product_id == product_id)
        .where(InventoryLineModel.location_id == location_id)
        .where(InventoryLineModel.lot_number.is_(None))
        .with_for_update()
    )
    return res.scalar_one_or_none()


async def _apply_stock_delta(
    *,
    db: AsyncSession,
    product_id: UUID,
    location_id: UUID,
    delta: int,
) -> InventoryLineModel:
    line = await _stock_line(db, product_id, location_id)
    on_hand = int(line.quantity or 0) if line else 0
    if on_hand + delta < 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Insufficient stock at location {location_id}: on hand {on_hand}, requested {-delta}",
        )

    if line is None:
        line = InventoryLineModel(product_id=product_id, location_id=location_id, quantity=0)
        db.add(line)
    line.quantity = on_hand + delta
    return line


@router.get("", response_model=Page[TransactionRead])
async def list_transactions(
    type: Optional[str] = Query(None),
    product_id: Optional[UUID] = Query(None, alias="productId"),
    location_id: Optional[UUID] = Query(None, alias="locationId"),
    page: PageParams = Depends(),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    """
    List stock movements, newest first.

    - locationId matches either the source or the destination.
    """
    stmt = select(TransactionModel)
    if type:
        type = type.strip().upper()
        if type not in TRANSACTION_TYPES:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Unknown transaction type: {type}",
            )
        stmt = stmt.where(TransactionModel.type == type)
    if product_id:
        stmt = stmt.where(TransactionModel.product_id == product_id)
    if location_id:
        stmt = stmt.where(
            or_(
                TransactionModel.source_location_id == location_id,
                TransactionModel.destination_location_id == location_id,
            )
        )
    stmt = stmt.order_by(TransactionModel.created_at.desc(), TransactionModel.id)

    items, total = await paginate(db, stmt, page)
    return page_envelope([TransactionRead(**t.to_schema) for t in items], total, page)


@router.get("/{transaction_id}", response_model=TransactionRead)
async def get_transaction(
    transaction_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    m = await get_or_404(db, TransactionModel, transaction_id, "Transaction")
    return TransactionRead(**m.to_schema)


@router.post("", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    payload: TransactionCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    await ensure_reference(db, ProductModel, payload.product_id, "Product")
    if payload.source_location_id:
        await ensure_reference(db, LocationModel, payload.source_location_id, "Source location")
    if payload.destination_location_id:
        await ensure_reference(db, LocationModel, payload.destination_location_id, "Destination location")

    for location_id, delta in _stock_deltas(payload):
        await _apply_stock_delta(db=db, product_id=payload.product_id, location_id=location_id, delta=delta)

    m = TransactionModel(**payload.model_dump(), created_by=user.id)
    db.add(m)
    await db.commit()
    await db.refresh(m)
    logger.info(
        "Recorded %s transaction %s (product=%s qty=%s)",
        m.type, m.id, m.product_id, m.quantity,
    )
    return TransactionRead(**m.to_schema)
