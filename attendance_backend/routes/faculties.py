"""
attendance_backend/routes/faculties.py
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_backend.database import get_db
from attendance_backend.schemas.academics import FacultyCreate, FacultyUpdate
from attendance_backend.security.auth import CurrentUser
from attendance_backend.security.rbac import Operation, require
from attendance_backend.services import faculty_service
from attendance_backend.services.filters import FacultyFilters
from attendance_backend.utils.pagination import PageParams, page_params
from attendance_backend.utils.responses import envelope, page_envelope

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/faculties", tags=["Faculties"])


@router.get("")
async def list_faculties(
    search: Optional[str] = Query(None, max_length=100),
    params: PageParams = Depends(page_params),
    current_user: CurrentUser = Depends(require(Operation.FACULTY_READ)),
    db: AsyncSession = Depends(get_db),
):
    faculties, pagination = await faculty_service.list_faculties(db, FacultyFilters(search=search), params)
    return page_envelope("faculties", (faculty.to_dict() for faculty in faculties), pagination)


@router.get("/{faculty_id}")
async def get_faculty(
    faculty_id: int,
    current_user: CurrentUser = Depends(require(Operation.FACULTY_READ)),
    db: AsyncSession = Depends(get_db),
):
    faculty = await faculty_service.get_faculty(db, faculty_id)
    return envelope({"faculty": faculty.to_dict(with_departments=True)})


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_faculty(
    body: FacultyCreate,
    current_user: CurrentUser = Depends(require(Operation.FACULTY_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    faculty = await faculty_service.create_faculty(db, body.name, body.description, current_user.id)
    return envelope({"faculty": faculty.to_dict(with_departments=True)}, "Faculty created successfully")


@router.put("/{faculty_id}")
async def update_faculty(
    faculty_id: int,
    body: FacultyUpdate,
    current_user: CurrentUser = Depends(require(Operation.FACULTY_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    faculty = await faculty_service.update_faculty(db, faculty_id, body.changes(), current_user.id)
    return envelope({"faculty": faculty.to_dict(with_departments=True)}, "Faculty updated successfully")


@router.delete("/{faculty_id}")
async def delete_faculty(
    faculty_id: int,
    current_user: CurrentUser = Depends(require(Operation.FACULTY_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    await faculty_service.delete_faculty(db, faculty_id, current_user.id)
    return envelope(message="Faculty deleted successfully")
