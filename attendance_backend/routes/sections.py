"""
attendance_backend/routes/sections.py
Sections and enrollment management
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_backend.database import get_db
from attendance_backend.schemas.academics import EnrollmentRequest, SectionCreate, SectionUpdate
from attendance_backend.security.auth import CurrentUser
from attendance_backend.security.rbac import Operation, require
from attendance_backend.services import section_service
from attendance_backend.services.filters import SectionFilters
from attendance_backend.utils.pagination import PageParams, page_params
from attendance_backend.utils.responses import envelope, page_envelope

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/sections", tags=["Sections"])


@router.get("")
async def list_sections(
    course_id: Optional[int] = Query(None, alias="courseId"),
    search: Optional[str] = Query(None, max_length=100),
    params: PageParams = Depends(page_params),
    current_user: CurrentUser = Depends(require(Operation.SECTION_READ)),
    db: AsyncSession = Depends(get_db),
):
    filters = SectionFilters(course_id=course_id, search=search)
    sections, pagination = await section_service.list_sections(db, filters, params)
    return page_envelope("sections", (section.to_dict() for section in sections), pagination)


@router.get("/{section_id}")
async def get_section(
    section_id: int,
    current_user: CurrentUser = Depends(require(Operation.SECTION_READ)),
    db: AsyncSession = Depends(get_db),
):
    section = await section_service.get_section(db, section_id)
    return envelope({"section": section.to_dict(with_students=True)})


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_section(
    body: SectionCreate,
    current_user: CurrentUser = Depends(require(Operation.SECTION_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    section = await section_service.create_section(
        db,
        name=body.name,
        course_id=body.course_id,
        schedule=body.schedule,
        room=body.room,
        capacity=body.capacity,
        actor_id=current_user.id,
    )
    return envelope({"section": section.to_dict()}, "Section created successfully")


@router.put("/{section_id}")
async def update_section(
    section_id: int,
    body: SectionUpdate,
    current_user: CurrentUser = Depends(require(Operation.SECTION_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    section = await section_service.update_section(db, section_id, body.changes(), current_user.id)
    return envelope({"section": section.to_dict()}, "Section updated successfully")


@router.delete("/{section_id}")
async def delete_section(
    section_id: int,
    current_user: CurrentUser = Depends(require(Operation.SECTION_DELETE)),
    db: AsyncSession = Depends(get_db),
):
    await section_service.delete_section(db, section_id, current_user.id)
    return envelope(message="Section deleted successfully")


@router.post("/{section_id}/enroll", status_code=status.HTTP_201_CREATED)
async def enroll_student(
    section_id: int,
    body: EnrollmentRequest,
    current_user: CurrentUser = Depends(require(Operation.ENROLLMENT_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    enrollment = await section_service.enroll_student(db, section_id, body.student_id, current_user.id)
    return envelope({"enrollment": enrollment.to_dict()}, "Student enrolled successfully")


@router.delete("/{section_id}/unenroll")
async def unenroll_student(
    section_id: int,
    body: EnrollmentRequest,
    current_user: CurrentUser = Depends(require(Operation.ENROLLMENT_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    await section_service.unenroll_student(db, section_id, body.student_id, current_user.id)
    return envelope(message="Student unenrolled successfully")
