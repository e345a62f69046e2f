# app/core/pagination.py

"""
Limit/offset pagination for SQLAlchemy 2.0 style select statements.
"""

from typing import Any, List, Tuple

from pydantic import BaseModel
from sqlalchemy import asc, desc, func, select
from sqlmodel.ext.asyncio.session import AsyncSession


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


def apply_sorting(stmt, column, sort_order: str = "asc"):
    direction = desc if (sort_order or "asc").lower() == "desc" else asc
    return stmt.order_by(direction(column))


async def paginate_select(
    db: AsyncSession,
    base_stmt,
    *,
    limit: int,
    offset: int,
    scalars: bool = True,
) -> Tuple[List[Any], Pagination]:
    """
    Run `base_stmt` with LIMIT/OFFSET and a matching COUNT(*).
    Returns (items, pagination). With scalars=False the raw rows are returned
    (for statements selecting several entities/columns).
    """
    limit = max(1, limit)
    offset = max(0, offset)

    count_stmt = select(func.count()).select_from(base_stmt.order_by(None).subquery())
    total = int((await db.execute(count_stmt)).scalar_one() or 0)

    result = await db.execute(base_stmt.limit(limit).offset(offset))
    items = list(result.scalars().all()) if scalars else list(result.all())
    return items, Pagination(total=total, limit=limit, offset=offset, has_more=offset + len(items) < total)
