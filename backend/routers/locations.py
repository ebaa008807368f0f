import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_active_user, current_active_superuser
from core.pagination import PageParams, page_envelope, paginate, search_clause
from db.database import (
    get_async_session,
    InventoryLine as InventoryLineModel,
    Location as LocationModel,
    Transaction as TransactionModel,
)
from db.queries import apply_update, count_where, get_or_404
from db.users import User
from schemas.common import Page
from schemas.locations import LocationRead, LocationCreate, LocationUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=Page[LocationRead])
async def list_locations(
    search: Optional[str] = Query(None),
    active: Optional[bool] = Query(None),
    page: PageParams = Depends(),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    stmt = select(LocationModel)
    where = search_clause(search, LocationModel.name, LocationModel.type, LocationModel.city)
    if where is not None:
        stmt = stmt.where(where)
    if active is not None:
        stmt = stmt.where(LocationModel.is_active.is_(active))
    stmt = stmt.order_by(LocationModel.created_at.desc(), LocationModel.id)

    items, total = await paginate(db, stmt, page)
    return page_envelope([LocationRead(**loc.to_schema) for loc in items], total, page)


@router.get("/{location_id}", response_model=LocationRead)
async def get_location(
    location_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    m = await get_or_404(db, LocationModel, location_id, "Location")
    return LocationRead(**m.to_schema)


@router.post("", response_model=LocationRead, status_code=status.HTTP_201_CREATED)
async def create_location(
    payload: LocationCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    m = LocationModel(**payload.model_dump())
    db.add(m)
    await db.commit()
    await db.refresh(m)
    logger.info("Created location %s (%s)", m.id, m.name)
    return LocationRead(**m.to_schema)


@router.put("/{location_id}", response_model=LocationRead)
async def update_location(
    location_id: UUID,
    payload: LocationUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    m = await get_or_404(db, LocationModel, location_id, "Location")
    apply_update(m, payload.model_dump(exclude_unset=True), required=("name", "is_active"))

    await db.commit()
    await db.refresh(m)
    return LocationRead(**m.to_schema)


@router.delete("/{location_id}", response_model=LocationRead)
async def delete_location(
    location_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_superuser),
):
    m = await get_or_404(db, LocationModel, location_id, "Location")

    lines = await count_where(db, InventoryLineModel.location_id, location_id)
    res = await db.execute(
        select(func.count()).where(
            or_(
                TransactionModel.source_location_id == location_id,
                TransactionModel.destination_location_id == location_id,
            )
        )
    )
    txns = int(res.scalar_one() or 0)
    if lines or txns:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Location has {lines} inventory line(s) and {txns} transaction(s)",
        )

    out = LocationRead(**m.to_schema)
    await db.delete(m)
    await db.commit()
    logger.info("Deleted location %s", location_id)
    return out
