"""
attendance_backend/utils/pagination.py
Offset/limit pagination shared by every list endpoint
"""
import math
from dataclasses import dataclass
from typing import Any, List, Tuple

from fastapi import Query
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass(frozen=True)
class PageParams:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def page_params(
    page: int = Query(DEFAULT_PAGE, ge=1, description="Page number (1-based)"),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT, description="Page size (1-100)"),
) -> PageParams:
    """FastAPI dependency; out-of-range values are rejected as validation errors."""
    return PageParams(page=page, limit=limit)


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def to_dict(self) -> dict:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }


async def paginate(
    db: AsyncSession,
    query: Select,
    params: PageParams,
    *loader_options: Any,
) -> Tuple[List[Any], Pagination]:
    """
    Run query for one page and count the full result set.

    The count is taken from query as given; loader_options (selectinload and
    friends) are only applied to the page fetch.
    """
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar_one()

    page_query = query.options(*loader_options).offset(params.offset).limit(params.limit)
    items = list((await db.execute(page_query)).scalars().all())

    return items, Pagination(page=params.page, limit=params.limit, total=total)
