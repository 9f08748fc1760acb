"""
attendance_backend/services/lookups.py
Row lookups shared by the entity services
"""
from typing import Any, Optional, Type, TypeVar

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_backend.errors import NotFoundError

ModelT = TypeVar("ModelT")


async def fetch(db: AsyncSession, model: Type[ModelT], row_id: int, *loader_options: Any) -> Optional[ModelT]:
    """
    Load one row by id with loader_options applied.

    populate_existing refreshes an instance already in the identity map, which
    is what makes this safe to call right after a write: relationships are
    re-read instead of lazily loaded (lazy loads are not available under
    asyncio).
    """
    query = (
        select(model)
        .where(model.id == row_id)
        .options(*loader_options)
        .execution_options(populate_existing=True)
    )
    return (await db.execute(query)).scalar_one_or_none()


async def fetch_or_404(
    db: AsyncSession,
    model: Type[ModelT],
    row_id: int,
    resource: str,
    *loader_options: Any,
) -> ModelT:
    row = await fetch(db, model, row_id, *loader_options)
    if row is None:
        raise NotFoundError(resource)
    return row


async def row_exists(db: AsyncSession, *criteria: Any) -> bool:
    """True when at least one row matches all criteria."""
    return bool((await db.execute(select(exists().where(*criteria)))).scalar())
