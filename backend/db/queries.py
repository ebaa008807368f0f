from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession


async def get_or_404(db: AsyncSession, model, obj_id: UUID, label: str):
    res = await db.execute(select(model).where(model.id == obj_id))
    obj = res.scalar_one_or_none()
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return obj


async def ensure_reference(db: AsyncSession, model, obj_id: UUID, label: str):
    """A body field pointing at a missing row is a client error (400), not a 404."""
    res = await db.execute(select(model).where(model.id == obj_id))
    obj = res.scalar_one_or_none()
    if not obj:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{label} not found")
    return obj


async def count_where(db: AsyncSession, column, value) -> int:
    res = await db.execute(select(func.count()).where(column == value))
    return int(res.scalar_one() or 0)


def apply_update(model, data: dict, required: tuple = ()) -> None:
    """Copy a partial payload onto `model`; explicit nulls for required columns are ignored."""
    for key, value in data.items():
        if key in required and value is None:
            continue
        setattr(model, key, value)
