import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_active_user, current_active_superuser
from core.pagination import PageParams, page_envelope, paginate, search_clause
from db.database import get_async_session, Supplier as SupplierModel, Product as ProductModel
from db.queries import apply_update, count_where, get_or_404
from db.users import User
from schemas.common import Page
from schemas.suppliers import SupplierRead, SupplierCreate, SupplierUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=Page[SupplierRead])
async def list_suppliers(
    search: Optional[str] = Query(None),
    page: PageParams = Depends(),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    stmt = select(SupplierModel)
    where = search_clause(search, SupplierModel.name, SupplierModel.contact_name, SupplierModel.email)
    if where is not None:
        stmt = stmt.where(where)
    stmt = stmt.order_by(SupplierModel.created_at.desc(), SupplierModel.id)

    items, total = await paginate(db, stmt, page)
    return page_envelope([SupplierRead(**s.to_schema) for s in items], total, page)


@router.get("/{supplier_id}", response_model=SupplierRead)
async def get_supplier(
    supplier_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    m = await get_or_404(db, SupplierModel, supplier_id, "Supplier")
    return SupplierRead(**m.to_schema)


@router.post("", response_model=SupplierRead, status_code=status.HTTP_201_CREATED)
async def create_supplier(
    payload: SupplierCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    m = SupplierModel(**payload.model_dump())
    db.add(m)
    await db.commit()
    await db.refresh(m)
    logger.info("Created supplier %s (%s)", m.id, m.name)
    return SupplierRead(**m.to_schema)


@router.put("/{supplier_id}", response_model=SupplierRead)
async def update_supplier(
    supplier_id: UUID,
    payload: SupplierUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    m = await get_or_404(db, SupplierModel, supplier_id, "Supplier")
    apply_update(m, payload.model_dump(exclude_unset=True), required=("name",))

    await db.commit()
    await db.refresh(m)
    return SupplierRead(**m.to_schema)


@router.delete("/{supplier_id}", response_model=SupplierRead)
async def delete_supplier(
    supplier_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_superuser),
):
    m = await get_or_404(db, SupplierModel, supplier_id, "Supplier")

    in_use = await count_where(db, ProductModel.supplier_id, supplier_id)
    if in_use:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Supplier is used by {in_use} product(s)",
        )

    out = SupplierRead(**m.to_schema)
    await db.delete(m)
    await db.commit()
    logger.info("Deleted supplier %s", supplier_id)
    return out
