import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import current_active_user, current_active_superuser
from core.pagination import PageParams, page_envelope, paginate, search_clause
from db.database import get_async_session, Category as CategoryModel, Product as ProductModel
from db.queries import apply_update, count_where, get_or_404
from db.users import User
from schemas.categories import CategoryCreate, CategoryRead, CategoryUpdate
from schemas.common import Page

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=Page[CategoryRead])
async def list_categories(
    search: Optional[str] = Query(None),
    page: PageParams = Depends(),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    stmt = select(CategoryModel)
    where = search_clause(search, CategoryModel.name, CategoryModel.description)
    if where is not None:
        stmt = stmt.where(where)
    stmt = stmt.order_by(CategoryModel.created_at.desc(), CategoryModel.id)

    items, total = await paginate(db, stmt, page)
    return page_envelope([CategoryRead(**c.to_schema) for c in items], total, page)


@router.get("/{category_id}", response_model=CategoryRead)
async def get_category(
    category_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    m = await get_or_404(db, CategoryModel, category_id, "Category")
    return CategoryRead(**m.to_schema)


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    m = CategoryModel(**payload.model_dump())
    db.add(m)
    await db.commit()
    await db.refresh(m)
    logger.info("Created category %s (%s)", m.id, m.name)
    return CategoryRead(**m.to_schema)


@router.put("/{category_id}", response_model=CategoryRead)
async def update_category(
    category_id: UUID,
    payload: CategoryUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_user),
):
    m = await get_or_404(db, CategoryModel, category_id, "Category")
    apply_update(m, payload.model_dump(exclude_unset=True), required=("name",))

    await db.commit()
    await db.refresh(m)
    return CategoryRead(**m.to_schema)


@router.delete("/{category_id}", response_model=CategoryRead)
async def delete_category(
    category_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(current_active_superuser),
):
    m = await get_or_404(db, CategoryModel, category_id, "Category")

    in_use = await count_where(db, ProductModel.category_id, category_id)
    if in_use:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Category is used by {in_use} product(s)",
        )

    out = CategoryRead(**m.to_schema)
    await db.delete(m)
    await db.commit()
    logger.info("Deleted category %s", category_id)
    return out
