from typing import Any, Optional, Sequence

from fastapi import Query
from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings


class PageParams:
    """`limit`/`offset` query parameters shared by every list endpoint."""

    def __init__(
        self,
        limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
        offset: int = Query(0, ge=0),
    ):
        self.limit = limit
        self.offset = offset


def search_clause(search: Optional[str], *columns):
    """Case-insensitive substring match over any of `columns`, or None when no search."""
    s = (search or "").strip()
    if not s:
        return None
    # % and _ in user input match literally
    s = s.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return or_(*(col.ilike(f"%{s}%", escape="\\") for col in columns))


async def count_rows(db: AsyncSession, stmt: Select) -> int:
    res = await db.execute(select(func.count()).select_from(stmt.order_by(None).subquery()))
    return int(res.scalar_one() or 0)


def page_envelope(data: Sequence[Any], total: int, page: PageParams) -> dict:
    return {
        "data": list(data),
        "total": total,
        "limit": page.limit,
        "offset": page.offset,
        "has_more": page.offset + page.limit < total,
    }


async def paginate(db: AsyncSession, stmt: Select, page: PageParams) -> tuple[list, int]:
    """Run `stmt` for one page of ORM rows; returns (rows, total)."""
    total = await count_rows(db, stmt)
    res = await db.execute(stmt.limit(page.limit).offset(page.offset))
    return list(res.scalars().all()), total
