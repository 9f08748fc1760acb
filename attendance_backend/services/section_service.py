"""
attendance_backend/services/section_service.py
Sections of a course and the enrollments that fill their seats
"""
import logging
from typing import Any, Dict, List, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from attendance_backend.errors import BadRequestError, ConflictError, DependentRowsError, NotFoundError
from attendance_backend.orm import Course, Enrollment, Lesson, Section, User, UserRole
from attendance_backend.services.filters import SectionFilters, build_section_query
from attendance_backend.services.lookups import fetch_or_404, row_exists
from attendance_backend.utils.pagination import PageParams, Pagination, paginate

logger = logging.getLogger(__name__)

SECTION_LIST_OPTIONS = (
    selectinload(Section.course),
    selectinload(Section.lessons),
    selectinload(Section.enrollments),
)
SECTION_DETAIL_OPTIONS = (
    selectinload(Section.course),
    selectinload(Section.lessons),
    selectinload(Section.enrollments).selectinload(Enrollment.student),
)


async def count_enrollments(db: AsyncSession, section_id: int) -> int:
    query = select(func.count(Enrollment.id)).where(Enrollment.section_id == section_id)
    return (await db.execute(query)).scalar_one()


async def list_sections(db: AsyncSession, filters: SectionFilters, params: PageParams) -> Tuple[List[Section], Pagination]:
    return await paginate(db, build_section_query(filters), params, *SECTION_LIST_OPTIONS)


async def get_section(db: AsyncSession, section_id: int) -> Section:
    return await fetch_or_404(db, Section, section_id, "Section", *SECTION_DETAIL_OPTIONS)


async def create_section(
    db: AsyncSession,
    *,
    name: str,
    course_id: int,
    schedule: str,
    room: str,
    capacity: int,
    actor_id: int,
) -> Section:
    await fetch_or_404(db, Course, course_id, "Course")

    section = Section(name=name, course_id=course_id, schedule=schedule, room=room, capacity=capacity)
    db.add(section)
    await db.commit()
    logger.info(f"Section created: {name} (course {course_id}) by user {actor_id}")
    return await get_section(db, section.id)


async def update_section(db: AsyncSession, section_id: int, changes: Dict[str, Any], actor_id: int) -> Section:
    section = await fetch_or_404(db, Section, section_id, "Section")

    capacity = changes.get("capacity")
    if capacity is not None and capacity < section.capacity:
        if capacity < await count_enrollments(db, section.id):
            raise BadRequestError("Capacity cannot be less than current enrollment count")

    for field in ("name", "schedule", "room", "capacity"):
        if changes.get(field) is not None:
            setattr(section, field, changes[field])

    await db.commit()
    logger.info(f"Section updated: {section.name} by user {actor_id}")
    return await get_section(db, section.id)


async def delete_section(db: AsyncSession, section_id: int, actor_id: int) -> None:
    section = await fetch_or_404(db, Section, section_id, "Section")

    if (
        await row_exists(db, Enrollment.section_id == section.id)
        or await row_exists(db, Lesson.section_id == section.id)
    ):
        raise DependentRowsError("Cannot delete section with existing enrollments or lessons")

    await db.delete(section)
    await db.commit()
    logger.info(f"Section deleted: {section.name} by user {actor_id}")


async def enroll_student(db: AsyncSession, section_id: int, student_id: int, actor_id: int) -> Enrollment:
    """
    Seat a student in a section. A student holds at most one section per
    course, and a section never takes more students than its capacity.
    """
    section = await fetch_or_404(db, Section, section_id, "Section")
    student = await fetch_or_404(db, User, student_id, "Student")
    if student.role != UserRole.STUDENT:
        raise BadRequestError("User is not a student")

    if await row_exists(db, Enrollment.student_id == student.id, Enrollment.course_id == section.course_id):
        raise ConflictError("Student is already enrolled in this course")

    if await count_enrollments(db, section.id) >= section.capacity:
        raise BadRequestError("Section is full")

    enrollment = Enrollment(student_id=student.id, course_id=section.course_id, section_id=section.id)
    db.add(enrollment)
    await db.commit()
    logger.info(f"Student {student.id} enrolled in section {section.id} by user {actor_id}")
    return enrollment


async def unenroll_student(db: AsyncSession, section_id: int, student_id: int, actor_id: int) -> None:
    section = await fetch_or_404(db, Section, section_id, "Section")

    query = select(Enrollment).where(
        Enrollment.section_id == section.id,
        Enrollment.student_id == student_id,
    )
    enrollment = (await db.execute(query)).scalar_one_or_none()
    if enrollment is None:
        raise NotFoundError("Enrollment")

    await db.delete(enrollment)
    await db.commit()
    logger.info(f"Student {student_id} unenrolled from section {section.id} by user {actor_id}")
