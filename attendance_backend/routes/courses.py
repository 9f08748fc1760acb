"""
attendance_backend/routes/courses.py
Course catalogue plus the "my courses" views for teachers and students
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_backend.database import get_db
from attendance_backend.schemas.academics import CourseCreate, CourseUpdate
from attendance_backend.security.auth import CurrentUser
from attendance_backend.security.rbac import Operation, require
from attendance_backend.services import course_service
from attendance_backend.services.filters import CourseFilters
from attendance_backend.utils.pagination import PageParams, page_params
from attendance_backend.utils.responses import envelope, page_envelope

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/courses", tags=["Courses"])


@router.get("")
async def list_courses(
    department_id: Optional[int] = Query(None, alias="departmentId"),
    teacher_id: Optional[int] = Query(None, alias="teacherId"),
    search: Optional[str] = Query(None, max_length=100),
    params: PageParams = Depends(page_params),
    current_user: CurrentUser = Depends(require(Operation.COURSE_READ)),
    db: AsyncSession = Depends(get_db),
):
    filters = CourseFilters(department_id=department_id, teacher_id=teacher_id, search=search)
    courses, pagination = await course_service.list_courses(db, filters, params)
    return page_envelope("courses", (course.to_dict() for course in courses), pagination)


# Declared before /{course_id} so "my-courses" is never parsed as an id

@router.get("/my-courses/teacher")
async def list_my_teaching_courses(
    current_user: CurrentUser = Depends(require(Operation.COURSE_LIST_TEACHING)),
    db: AsyncSession = Depends(get_db),
):
    courses = await course_service.list_teaching_courses(db, current_user.id)
    return envelope({"courses": [course.to_dict(with_sections=True) for course in courses]})


@router.get("/my-courses/student")
async def list_my_enrolled_courses(
    current_user: CurrentUser = Depends(require(Operation.COURSE_LIST_ENROLLED)),
    db: AsyncSession = Depends(get_db),
):
    enrollments = await course_service.list_student_enrollments(db, current_user.id)
    return envelope({"enrollments": [enrollment.to_student_view() for enrollment in enrollments]})


@router.get("/{course_id}")
async def get_course(
    course_id: int,
    current_user: CurrentUser = Depends(require(Operation.COURSE_READ)),
    db: AsyncSession = Depends(get_db),
):
    course = await course_service.get_course(db, course_id)
    return envelope({"course": course.to_dict(with_sections=True)})


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_course(
    body: CourseCreate,
    current_user: CurrentUser = Depends(require(Operation.COURSE_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    course = await course_service.create_course(
        db,
        code=body.code,
        name=body.name,
        description=body.description,
        credits=body.credits,
        department_id=body.department_id,
        teacher_id=body.teacher_id,
        actor_id=current_user.id,
    )
    return envelope({"course": course.to_dict()}, "Course created successfully")


@router.put("/{course_id}")
async def update_course(
    course_id: int,
    body: CourseUpdate,
    current_user: CurrentUser = Depends(require(Operation.COURSE_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    course = await course_service.update_course(db, course_id, body.changes(), current_user.id)
    return envelope({"course": course.to_dict()}, "Course updated successfully")


@router.delete("/{course_id}")
async def delete_course(
    course_id: int,
    current_user: CurrentUser = Depends(require(Operation.COURSE_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    await course_service.delete_course(db, course_id, current_user.id)
    return envelope(message="Course deleted successfully")
