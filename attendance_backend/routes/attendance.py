"""
attendance_backend/routes/attendance.py
Attendance marks: per-record CRUD, whole-lesson bulk marking, summaries,
and the student's own history
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_backend.database import get_db
from attendance_backend.orm.attendance import AttendanceStatus
from attendance_backend.schemas.lessons import AttendanceCreate, AttendanceUpdate, BulkAttendanceRequest
from attendance_backend.security.auth import CurrentUser
from attendance_backend.security.rbac import Operation, require
from attendance_backend.services import attendance_service
from attendance_backend.services.filters import AttendanceFilters
from attendance_backend.utils.pagination import PageParams, page_params
from attendance_backend.utils.responses import envelope, page_envelope

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/attendance", tags=["Attendance"])


@router.get("")
async def list_attendance(
    lesson_id: Optional[int] = Query(None, alias="lessonId"),
    student_id: Optional[int] = Query(None, alias="studentId"),
    attendance_status: Optional[AttendanceStatus] = Query(None, alias="status"),
    params: PageParams = Depends(page_params),
    current_user: CurrentUser = Depends(require(Operation.ATTENDANCE_READ)),
    db: AsyncSession = Depends(get_db),
):
    filters = AttendanceFilters(lesson_id=lesson_id, student_id=student_id, status=attendance_status)
    records, pagination = await attendance_service.list_attendance(db, filters, params)
    return page_envelope("attendance", (record.to_dict() for record in records), pagination)


@router.get("/my")
async def list_my_attendance(
    attendance_status: Optional[AttendanceStatus] = Query(None, alias="status"),
    params: PageParams = Depends(page_params),
    current_user: CurrentUser = Depends(require(Operation.ATTENDANCE_READ_OWN)),
    db: AsyncSession = Depends(get_db),
):
    filters = AttendanceFilters(student_id=current_user.id, status=attendance_status)
    records, pagination = await attendance_service.list_attendance(db, filters, params)
    return page_envelope("attendance", (record.to_dict() for record in records), pagination)


@router.get("/lessons/{lesson_id}/summary")
async def lesson_summary(
    lesson_id: int,
    current_user: CurrentUser = Depends(require(Operation.ATTENDANCE_READ)),
    db: AsyncSession = Depends(get_db),
):
    summary = await attendance_service.lesson_summary(db, lesson_id)
    return envelope({"summary": summary})


@router.post("/lessons/{lesson_id}/bulk")
async def bulk_record_attendance(
    lesson_id: int,
    body: BulkAttendanceRequest,
    current_user: CurrentUser = Depends(require(Operation.ATTENDANCE_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    marks = [mark.changes() for mark in body.records]
    records, created, updated = await attendance_service.bulk_record_attendance(db, lesson_id, marks, current_user.id)
    return envelope(
        {
            "attendance": [record.to_dict() for record in records],
            "created": created,
            "updated": updated,
        },
        "Attendance saved successfully",
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def record_attendance(
    body: AttendanceCreate,
    current_user: CurrentUser = Depends(require(Operation.ATTENDANCE_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    record = await attendance_service.record_attendance(
        db,
        lesson_id=body.lesson_id,
        student_id=body.student_id,
        status=body.status,
        notes=body.notes,
        actor_id=current_user.id,
    )
    return envelope({"attendance": record.to_dict()}, "Attendance recorded successfully")


@router.get("/{attendance_id}")
async def get_attendance(
    attendance_id: int,
    current_user: CurrentUser = Depends(require(Operation.ATTENDANCE_READ)),
    db: AsyncSession = Depends(get_db),
):
    record = await attendance_service.get_attendance(db, attendance_id)
    return envelope({"attendance": record.to_dict()})


@router.put("/{attendance_id}")
async def update_attendance(
    attendance_id: int,
    body: AttendanceUpdate,
    current_user: CurrentUser = Depends(require(Operation.ATTENDANCE_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    record = await attendance_service.update_attendance(db, attendance_id, body.changes(), current_user.id)
    return envelope({"attendance": record.to_dict()}, "Attendance updated successfully")


@router.delete("/{attendance_id}")
async def delete_attendance(
    attendance_id: int,
    current_user: CurrentUser = Depends(require(Operation.ATTENDANCE_DELETE)),
    db: AsyncSession = Depends(get_db),
):
    await attendance_service.delete_attendance(db, attendance_id, current_user.id)
    return envelope(message="Attendance record deleted successfully")
