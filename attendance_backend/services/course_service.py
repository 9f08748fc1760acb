"""
attendance_backend/services/course_service.py
Courses: unique codes, a department parent and a TEACHER-role owner
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from attendance_backend.errors import BadRequestError, ConflictError, DependentRowsError
from attendance_backend.orm import Course, Department, Enrollment, Lesson, Section, User, UserRole
from attendance_backend.services.filters import CourseFilters, build_course_query
from attendance_backend.services.lookups import fetch_or_404, row_exists
from attendance_backend.utils.pagination import PageParams, Pagination, paginate

logger = logging.getLogger(__name__)

COURSE_LIST_OPTIONS = (
    selectinload(Course.department).selectinload(Department.faculty),
    selectinload(Course.teacher),
    selectinload(Course.sections),
    selectinload(Course.enrollments),
)
COURSE_DETAIL_OPTIONS = (
    selectinload(Course.department).selectinload(Department.faculty),
    selectinload(Course.teacher),
    selectinload(Course.sections).selectinload(Section.enrollments).selectinload(Enrollment.student),
    selectinload(Course.sections).selectinload(Section.enrollments).selectinload(Enrollment.section),
    selectinload(Course.sections).selectinload(Section.lessons),
    selectinload(Course.enrollments).selectinload(Enrollment.student),
    selectinload(Course.enrollments).selectinload(Enrollment.section),
)
STUDENT_ENROLLMENT_OPTIONS = (
    selectinload(Enrollment.course).selectinload(Course.department).selectinload(Department.faculty),
    selectinload(Enrollment.course).selectinload(Course.teacher),
    selectinload(Enrollment.section).selectinload(Section.lessons).selectinload(Lesson.attendances),
)


async def _ensure_teacher(db: AsyncSession, teacher_id: int) -> User:
    teacher = await fetch_or_404(db, User, teacher_id, "Teacher")
    if teacher.role != UserRole.TEACHER:
        raise BadRequestError("User is not a teacher")
    return teacher


async def _ensure_code_available(db: AsyncSession, code: str, exclude_id: Optional[int] = None) -> None:
    criteria = [Course.code == code]
    if exclude_id is not None:
        criteria.append(Course.id != exclude_id)
    if await row_exists(db, *criteria):
        raise ConflictError("Course with this code already exists")


async def list_courses(db: AsyncSession, filters: CourseFilters, params: PageParams) -> Tuple[List[Course], Pagination]:
    return await paginate(db, build_course_query(filters), params, *COURSE_LIST_OPTIONS)


async def get_course(db: AsyncSession, course_id: int) -> Course:
    return await fetch_or_404(db, Course, course_id, "Course", *COURSE_DETAIL_OPTIONS)


async def create_course(
    db: AsyncSession,
    *,
    code: str,
    name: str,
    description: Optional[str],
    credits: int,
    department_id: int,
    teacher_id: int,
    actor_id: int,
) -> Course:
    await fetch_or_404(db, Department, department_id, "Department")
    await _ensure_teacher(db, teacher_id)
    await _ensure_code_available(db, code)

    course = Course(
        code=code,
        name=name,
        description=description,
        credits=credits,
        department_id=department_id,
        teacher_id=teacher_id,
    )
    db.add(course)
    await db.commit()
    logger.info(f"Course created: {code} by user {actor_id}")
    return await get_course(db, course.id)


async def update_course(db: AsyncSession, course_id: int, changes: Dict[str, Any], actor_id: int) -> Course:
    """Only the fields present in changes are touched."""
    course = await fetch_or_404(db, Course, course_id, "Course")

    department_id = changes.get("department_id")
    if department_id is not None and department_id != course.department_id:
        await fetch_or_404(db, Department, department_id, "Department")
        course.department_id = department_id

    teacher_id = changes.get("teacher_id")
    if teacher_id is not None and teacher_id != course.teacher_id:
        await _ensure_teacher(db, teacher_id)
        course.teacher_id = teacher_id

    code = changes.get("code")
    if code is not None and code != course.code:
        await _ensure_code_available(db, code, exclude_id=course.id)
        course.code = code

    for field in ("name", "credits"):
        if changes.get(field) is not None:
            setattr(course, field, changes[field])
    if "description" in changes:
        course.description = changes["description"]

    await db.commit()
    logger.info(f"Course updated: {course.code} by user {actor_id}")
    return await get_course(db, course.id)


async def delete_course(db: AsyncSession, course_id: int, actor_id: int) -> None:
    course = await fetch_or_404(db, Course, course_id, "Course")

    if (
        await row_exists(db, Section.course_id == course.id)
        or await row_exists(db, Enrollment.course_id == course.id)
    ):
        raise DependentRowsError("Cannot delete course with existing sections or enrollments")

    await db.delete(course)
    await db.commit()
    logger.info(f"Course deleted: {course.code} by user {actor_id}")


async def list_teaching_courses(db: AsyncSession, teacher_id: int) -> List[Course]:
    query = (
        select(Course)
        .where(Course.teacher_id == teacher_id)
        .options(*COURSE_DETAIL_OPTIONS)
        .order_by(Course.code)
    )
    return list((await db.execute(query)).scalars().all())


async def list_student_enrollments(db: AsyncSession, student_id: int) -> List[Enrollment]:
    query = (
        select(Enrollment)
        .join(Enrollment.course)
        .where(Enrollment.student_id == student_id)
        .options(*STUDENT_ENROLLMENT_OPTIONS)
        .order_by(Course.code)
    )
    return list((await db.execute(query)).scalars().all())
