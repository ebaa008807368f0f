import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_active_user, current_active_superuser
from core.pagination import PageParams, page_envelope, paginate, search_clause
from db.database import get_async_session, Customer as CustomerModel
from db.queries import apply_update, get_or_404
from db.users import User
from schemas.common import Page
from schemas.customers import CustomerRead, CustomerCreate, CustomerUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=Page[CustomerRead])
async def list_customers(
    search: Optional[str] = Query(None),
    page: PageParams = Depends(),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    stmt = select(CustomerModel)
    where = search_clause(search, CustomerModel.name, CustomerModel.email, CustomerModel.company)
    if where is not None:
        stmt = stmt.where(where)
    stmt = stmt.order_by(CustomerModel.created_at.desc(), CustomerModel.id)

    items, total = await paginate(db, stmt, page)
    return page_envelope([CustomerRead(**c.to_schema) for c in items], total, page)


@router.get("/{customer_id}", response_model=CustomerRead)
async def get_customer(
    customer_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    m = await get_or_404(db, CustomerModel, customer_id, "Customer")
    return CustomerRead(**m.to_schema)


@router.post("", response_model=CustomerRead, status_code=status.HTTP_201_CREATED)
async def create_customer(
    payload: CustomerCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    m = CustomerModel(**payload.model_dump())
    db.add(m)
    await db.commit()
    await db.refresh(m)
    logger.info("Created customer %s", m.id)
    return CustomerRead(**m.to_schema)


@router.put("/{customer_id}", response_model=CustomerRead)
async def update_customer(
    customer_id: UUID,
    payload: CustomerUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    m = await get_or_404(db, CustomerModel, customer_id, "Customer")
    apply_update(m, payload.model_dump(exclude_unset=True), required=("name",))

    await db.commit()
    await db.refresh(m)
    return CustomerRead(**m.to_schema)


@router.delete("/{customer_id}", response_model=CustomerRead)
async def delete_customer(
    customer_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_superuser),
):
    # customers are not referenced by any other table
    m = await get_or_404(db, CustomerModel, customer_id, "Customer")
    out = CustomerRead(**m.to_schema)
    await db.delete(m)
    await db.commit()
    logger.info("Deleted customer %s", customer_id)
    return out
