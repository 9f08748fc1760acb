"""
attendance_backend/services/department_service.py
Departments: names are unique inside their faculty only
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from attendance_backend.errors import ConflictError, DependentRowsError
from attendance_backend.orm import Course, Department, Faculty
from attendance_backend.services.filters import DepartmentFilters, build_department_query
from attendance_backend.services.lookups import fetch_or_404, row_exists
from attendance_backend.utils.pagination import PageParams, Pagination, paginate

logger = logging.getLogger(__name__)

DEPARTMENT_LIST_OPTIONS = (
    selectinload(Department.faculty),
    selectinload(Department.courses),
)
DEPARTMENT_DETAIL_OPTIONS = (
    selectinload(Department.faculty),
    selectinload(Department.courses).selectinload(Course.teacher),
)


async def _ensure_name_available(
    db: AsyncSession,
    name: str,
    faculty_id: int,
    exclude_id: Optional[int] = None,
) -> None:
    criteria = [Department.name == name, Department.faculty_id == faculty_id]
    if exclude_id is not None:
        criteria.append(Department.id != exclude_id)
    if await row_exists(db, *criteria):
        raise ConflictError("Department with this name already exists in this faculty")


async def list_departments(
    db: AsyncSession,
    filters: DepartmentFilters,
    params: PageParams,
) -> Tuple[List[Department], Pagination]:
    return await paginate(db, build_department_query(filters), params, *DEPARTMENT_LIST_OPTIONS)


async def get_department(db: AsyncSession, department_id: int) -> Department:
    return await fetch_or_404(db, Department, department_id, "Department", *DEPARTMENT_DETAIL_OPTIONS)


async def create_department(
    db: AsyncSession,
    name: str,
    faculty_id: int,
    description: Optional[str],
    actor_id: int,
) -> Department:
    await fetch_or_404(db, Faculty, faculty_id, "Faculty")
    await _ensure_name_available(db, name, faculty_id)

    department = Department(name=name, faculty_id=faculty_id, description=description)
    db.add(department)
    await db.commit()
    logger.info(f"Department created: {name} (faculty {faculty_id}) by user {actor_id}")
    return await get_department(db, department.id)


async def update_department(
    db: AsyncSession,
    department_id: int,
    changes: Dict[str, Any],
    actor_id: int,
) -> Department:
    """
    Moving a department to another faculty re-checks its name there, even if
    the name itself is unchanged.
    """
    department = await fetch_or_404(db, Department, department_id, "Department")

    faculty_id = changes.get("faculty_id")
    if faculty_id is not None and faculty_id != department.faculty_id:
        await fetch_or_404(db, Faculty, faculty_id, "Faculty")
    else:
        faculty_id = department.faculty_id

    name = changes.get("name") or department.name
    if name != department.name or faculty_id != department.faculty_id:
        await _ensure_name_available(db, name, faculty_id, exclude_id=department.id)

    department.name = name
    department.faculty_id = faculty_id
    if "description" in changes:
        department.description = changes["description"]

    await db.commit()
    logger.info(f"Department updated: {department.name} by user {actor_id}")
    return await get_department(db, department.id)


async def delete_department(db: AsyncSession, department_id: int, actor_id: int) -> None:
    department = await fetch_or_404(db, Department, department_id, "Department")

    if await row_exists(db, Course.department_id == department.id):
        raise DependentRowsError("Cannot delete department with existing courses")

    await db.delete(department)
    await db.commit()
    logger.info(f"Department deleted: {department.name} by user {actor_id}")
