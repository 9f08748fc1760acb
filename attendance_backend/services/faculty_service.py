"""
attendance_backend/services/faculty_service.py
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from attendance_backend.errors import ConflictError, DependentRowsError
from attendance_backend.orm import Department, Faculty
from attendance_backend.services.filters import FacultyFilters, build_faculty_query
from attendance_backend.services.lookups import fetch_or_404, row_exists
from attendance_backend.utils.pagination import PageParams, Pagination, paginate

logger = logging.getLogger(__name__)

FACULTY_LIST_OPTIONS = (selectinload(Faculty.departments),)
FACULTY_DETAIL_OPTIONS = (selectinload(Faculty.departments).selectinload(Department.courses),)


async def _ensure_name_available(db: AsyncSession, name: str, exclude_id: Optional[int] = None) -> None:
    criteria = [Faculty.name == name]
    if exclude_id is not None:
        criteria.append(Faculty.id != exclude_id)
    if await row_exists(db, *criteria):
        raise ConflictError("Faculty with this name already exists")


async def list_faculties(db: AsyncSession, filters: FacultyFilters, params: PageParams) -> Tuple[List[Faculty], Pagination]:
    return await paginate(db, build_faculty_query(filters), params, *FACULTY_LIST_OPTIONS)


async def get_faculty(db: AsyncSession, faculty_id: int) -> Faculty:
    return await fetch_or_404(db, Faculty, faculty_id, "Faculty", *FACULTY_DETAIL_OPTIONS)


async def create_faculty(db: AsyncSession, name: str, description: Optional[str], actor_id: int) -> Faculty:
    await _ensure_name_available(db, name)

    faculty = Faculty(name=name, description=description)
    db.add(faculty)
    await db.commit()
    logger.info(f"Faculty created: {name} by user {actor_id}")
    return await get_faculty(db, faculty.id)


async def update_faculty(db: AsyncSession, faculty_id: int, changes: Dict[str, Any], actor_id: int) -> Faculty:
    faculty = await fetch_or_404(db, Faculty, faculty_id, "Faculty")

    name = changes.get("name")
    if name is not None and name != faculty.name:
        await _ensure_name_available(db, name, exclude_id=faculty.id)
        faculty.name = name
    if "description" in changes:
        faculty.description = changes["description"]

    await db.commit()
    logger.info(f"Faculty updated: {faculty.name} by user {actor_id}")
    return await get_faculty(db, faculty.id)


async def delete_faculty(db: AsyncSession, faculty_id: int, actor_id: int) -> None:
    faculty = await fetch_or_404(db, Faculty, faculty_id, "Faculty")

    if await row_exists(db, Department.faculty_id == faculty.id):
        raise DependentRowsError("Cannot delete faculty with existing departments")

    await db.delete(faculty)
    await db.commit()
    logger.info(f"Faculty deleted: {faculty.name} by user {actor_id}")
