"""
attendance_backend/services/attendance_service.py
Attendance ledger: one mark per (lesson, student)

A mark can only be recorded for a student enrolled in the lesson's section,
and never for a cancelled lesson.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from attendance_backend.errors import BadRequestError, ConflictError
from attendance_backend.orm import (
    Attendance,
    AttendanceStatus,
    Enrollment,
    Lesson,
    LessonStatus,
    User,
    UserRole,
)
from attendance_backend.services.filters import AttendanceFilters, build_attendance_query
from attendance_backend.services.lookups import fetch_or_404, row_exists
from attendance_backend.utils.pagination import PageParams, Pagination, paginate

logger = logging.getLogger(__name__)

ATTENDANCE_OPTIONS = (
    selectinload(Attendance.lesson),
    selectinload(Attendance.student),
)


def _ensure_lesson_open(lesson: Lesson) -> None:
    if lesson.status == LessonStatus.cancelled:
        raise BadRequestError("Cannot record attendance for a cancelled lesson")


async def _ensure_enrolled_student(db: AsyncSession, lesson: Lesson, student_id: int) -> None:
    student = await fetch_or_404(db, User, student_id, "Student")
    if student.role != UserRole.STUDENT:
        raise BadRequestError("User is not a student")
    if not await row_exists(db, Enrollment.student_id == student.id, Enrollment.section_id == lesson.section_id):
        raise BadRequestError("Student is not enrolled in this section")


async def list_attendance(
    db: AsyncSession,
    filters: AttendanceFilters,
    params: PageParams,
) -> Tuple[List[Attendance], Pagination]:
    return await paginate(db, build_attendance_query(filters), params, *ATTENDANCE_OPTIONS)


async def get_attendance(db: AsyncSession, attendance_id: int) -> Attendance:
    return await fetch_or_404(db, Attendance, attendance_id, "Attendance record", *ATTENDANCE_OPTIONS)


async def record_attendance(
    db: AsyncSession,
    *,
    lesson_id: int,
    student_id: int,
    status: AttendanceStatus,
    notes: Optional[str],
    actor_id: int,
) -> Attendance:
    lesson = await fetch_or_404(db, Lesson, lesson_id, "Lesson")
    _ensure_lesson_open(lesson)
    await _ensure_enrolled_student(db, lesson, student_id)

    if await row_exists(db, Attendance.lesson_id == lesson.id, Attendance.student_id == student_id):
        raise ConflictError("Attendance already recorded for this student in this lesson")

    attendance = Attendance(lesson_id=lesson.id, student_id=student_id, status=status, notes=notes)
    db.add(attendance)
    await db.commit()
    logger.info(f"Attendance recorded: lesson {lesson.id}, student {student_id} {status.value} by user {actor_id}")
    return await get_attendance(db, attendance.id)


async def update_attendance(db: AsyncSession, attendance_id: int, changes: Dict[str, Any], actor_id: int) -> Attendance:
    attendance = await fetch_or_404(db, Attendance, attendance_id, "Attendance record")
    lesson = await fetch_or_404(db, Lesson, attendance.lesson_id, "Lesson")
    _ensure_lesson_open(lesson)

    if changes.get("status") is not None:
        attendance.status = changes["status"]
    if "notes" in changes:
        attendance.notes = changes["notes"]

    await db.commit()
    logger.info(f"Attendance updated: {attendance.id} by user {actor_id}")
    return await get_attendance(db, attendance.id)


async def delete_attendance(db: AsyncSession, attendance_id: int, actor_id: int) -> None:
    attendance = await fetch_or_404(db, Attendance, attendance_id, "Attendance record")
    await db.delete(attendance)
    await db.commit()
    logger.info(f"Attendance deleted: {attendance_id} by user {actor_id}")


async def bulk_record_attendance(
    db: AsyncSession,
    lesson_id: int,
    marks: Sequence[Dict[str, Any]],
    actor_id: int,
) -> Tuple[List[Attendance], int, int]:
    """
    Record or overwrite the marks for a whole lesson in one commit.

    Every student is validated before anything is written, so either all
    marks are stored or none. Returns (records, created, updated).
    """
    lesson = await fetch_or_404(db, Lesson, lesson_id, "Lesson")
    _ensure_lesson_open(lesson)
    for mark in marks:
        await _ensure_enrolled_student(db, lesson, mark["student_id"])

    existing = {
        record.student_id: record
        for record in (await db.execute(select(Attendance).where(Attendance.lesson_id == lesson.id))).scalars()
    }

    created = updated = 0
    touched_ids = []
    for mark in marks:
        record = existing.get(mark["student_id"])
        if record is None:
            record = Attendance(
                lesson_id=lesson.id,
                student_id=mark["student_id"],
                status=mark["status"],
                notes=mark.get("notes"),
            )
            db.add(record)
            created += 1
        else:
            record.status = mark["status"]
            if "notes" in mark:
                record.notes = mark["notes"]
            updated += 1
        touched_ids.append(mark["student_id"])

    await db.commit()
    logger.info(f"Bulk attendance: lesson {lesson.id}, {created} created, {updated} updated by user {actor_id}")

    query = (
        select(Attendance)
        .where(Attendance.lesson_id == lesson.id, Attendance.student_id.in_(touched_ids))
        .options(*ATTENDANCE_OPTIONS)
        .order_by(Attendance.student_id)
        .execution_options(populate_existing=True)
    )
    records = list((await db.execute(query)).scalars().all())
    return records, created, updated


async def lesson_summary(db: AsyncSession, lesson_id: int) -> Dict[str, Any]:
    """
    Counts per status plus how many enrolled students have no mark yet.

    Only marks of students currently enrolled in the lesson's section are
    counted; marks left behind by an unenrolled student stay in the ledger
    but not in the summary.
    """
    lesson = await fetch_or_404(db, Lesson, lesson_id, "Lesson")

    rows = await db.execute(
        select(Attendance.status, func.count(Attendance.id))
        .join(
            Enrollment,
            and_(Enrollment.student_id == Attendance.student_id, Enrollment.section_id == lesson.section_id),
        )
        .where(Attendance.lesson_id == lesson.id)
        .group_by(Attendance.status)
    )
    counts = {status.value: 0 for status in AttendanceStatus}
    for status, count in rows:
        counts[status.value] = count

    enrolled = (await db.execute(
        select(func.count(Enrollment.id)).where(Enrollment.section_id == lesson.section_id)
    )).scalar_one()
    marked = sum(counts.values())
    attended = counts[AttendanceStatus.present.value] + counts[AttendanceStatus.late.value]

    return {
        "lesson": lesson.to_brief(),
        "enrolled": enrolled,
        **counts,
        "unmarked": max(0, enrolled - marked),
        "attendanceRate": round(attended * 100 / enrolled, 1) if enrolled else 0.0,
    }
