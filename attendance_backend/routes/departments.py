"""
attendance_backend/routes/departments.py
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_backend.database import get_db
from attendance_backend.schemas.academics import DepartmentCreate, DepartmentUpdate
from attendance_backend.security.auth import CurrentUser
from attendance_backend.security.rbac import Operation, require
from attendance_backend.services import department_service
from attendance_backend.services.filters import DepartmentFilters
from attendance_backend.utils.pagination import PageParams, page_params
from attendance_backend.utils.responses import envelope, page_envelope

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/departments", tags=["Departments"])


@router.get("")
async def list_departments(
    faculty_id: Optional[int] = Query(None, alias="facultyId"),
    search: Optional[str] = Query(None, max_length=100),
    params: PageParams = Depends(page_params),
    current_user: CurrentUser = Depends(require(Operation.DEPARTMENT_READ)),
    db: AsyncSession = Depends(get_db),
):
    filters = DepartmentFilters(faculty_id=faculty_id, search=search)
    departments, pagination = await department_service.list_departments(db, filters, params)
    return page_envelope("departments", (department.to_dict() for department in departments), pagination)


@router.get("/{department_id}")
async def get_department(
    department_id: int,
    current_user: CurrentUser = Depends(require(Operation.DEPARTMENT_READ)),
    db: AsyncSession = Depends(get_db),
):
    department = await department_service.get_department(db, department_id)
    return envelope({"department": department.to_dict(with_courses=True)})


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_department(
    body: DepartmentCreate,
    current_user: CurrentUser = Depends(require(Operation.DEPARTMENT_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    department = await department_service.create_department(
        db, body.name, body.faculty_id, body.description, current_user.id
    )
    return envelope({"department": department.to_dict(with_courses=True)}, "Department created successfully")


@router.put("/{department_id}")
async def update_department(
    department_id: int,
    body: DepartmentUpdate,
    current_user: CurrentUser = Depends(require(Operation.DEPARTMENT_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    department = await department_service.update_department(db, department_id, body.changes(), current_user.id)
    return envelope({"department": department.to_dict(with_courses=True)}, "Department updated successfully")


@router.delete("/{department_id}")
async def delete_department(
    department_id: int,
    current_user: CurrentUser = Depends(require(Operation.DEPARTMENT_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    await department_service.delete_department(db, department_id, current_user.id)
    return envelope(message="Department deleted successfully")
