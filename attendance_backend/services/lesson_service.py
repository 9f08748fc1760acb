"""
attendance_backend/services/lesson_service.py
"""
import logging
from typing import Any, Dict, List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from attendance_backend.errors import BadRequestError, DependentRowsError
from attendance_backend.orm import Attendance, Lesson, LessonStatus, Section
from attendance_backend.services.filters import LessonFilters, build_lesson_query
from attendance_backend.services.lookups import fetch_or_404, row_exists
from attendance_backend.utils.pagination import PageParams, Pagination, paginate

logger = logging.getLogger(__name__)

LESSON_OPTIONS = (
    selectinload(Lesson.section).selectinload(Section.course),
    selectinload(Lesson.attendances),
)


async def list_lessons(db: AsyncSession, filters: LessonFilters, params: PageParams) -> Tuple[List[Lesson], Pagination]:
    return await paginate(db, build_lesson_query(filters), params, *LESSON_OPTIONS)


async def get_lesson(db: AsyncSession, lesson_id: int) -> Lesson:
    return await fetch_or_404(db, Lesson, lesson_id, "Lesson", *LESSON_OPTIONS)


async def create_lesson(
    db: AsyncSession,
    *,
    section_id: int,
    date,
    start_time,
    end_time,
    topic: str,
    status: LessonStatus,
    actor_id: int,
) -> Lesson:
    await fetch_or_404(db, Section, section_id, "Section")

    lesson = Lesson(
        section_id=section_id,
        date=date,
        start_time=start_time,
        end_time=end_time,
        topic=topic,
        status=status,
    )
    db.add(lesson)
    await db.commit()
    logger.info(f"Lesson created: section {section_id} on {date} by user {actor_id}")
    return await get_lesson(db, lesson.id)


async def update_lesson(db: AsyncSession, lesson_id: int, changes: Dict[str, Any], actor_id: int) -> Lesson:
    lesson = await fetch_or_404(db, Lesson, lesson_id, "Lesson")

    start_time = changes.get("start_time") or lesson.start_time
    end_time = changes.get("end_time") or lesson.end_time
    if end_time <= start_time:
        raise BadRequestError("End time must be after start time")

    for field in ("date", "start_time", "end_time", "topic", "status"):
        if changes.get(field) is not None:
            setattr(lesson, field, changes[field])

    await db.commit()
    logger.info(f"Lesson updated: {lesson.id} by user {actor_id}")
    return await get_lesson(db, lesson.id)


async def delete_lesson(db: AsyncSession, lesson_id: int, actor_id: int) -> None:
    lesson = await fetch_or_404(db, Lesson, lesson_id, "Lesson")

    if await row_exists(db, Attendance.lesson_id == lesson.id):
        raise DependentRowsError("Cannot delete lesson with recorded attendance")

    await db.delete(lesson)
    await db.commit()
    logger.info(f"Lesson deleted: {lesson.id} by user {actor_id}")
