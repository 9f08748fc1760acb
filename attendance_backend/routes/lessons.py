"""
attendance_backend/routes/lessons.py
"""
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_backend.database import get_db
from attendance_backend.orm.lesson import LessonStatus
from attendance_backend.schemas.lessons import LessonCreate, LessonUpdate
from attendance_backend.security.auth import CurrentUser
from attendance_backend.security.rbac import Operation, require
from attendance_backend.services import lesson_service
from attendance_backend.services.filters import LessonFilters
from attendance_backend.utils.pagination import PageParams, page_params
from attendance_backend.utils.responses import envelope, page_envelope

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/lessons", tags=["Lessons"])


@router.get("")
async def list_lessons(
    section_id: Optional[int] = Query(None, alias="sectionId"),
    lesson_status: Optional[LessonStatus] = Query(None, alias="status"),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    params: PageParams = Depends(page_params),
    current_user: CurrentUser = Depends(require(Operation.LESSON_READ)),
    db: AsyncSession = Depends(get_db),
):
    filters = LessonFilters(section_id=section_id, status=lesson_status, date_from=date_from, date_to=date_to)
    lessons, pagination = await lesson_service.list_lessons(db, filters, params)
    return page_envelope("lessons", (lesson.to_dict() for lesson in lessons), pagination)


@router.get("/{lesson_id}")
async def get_lesson(
    lesson_id: int,
    current_user: CurrentUser = Depends(require(Operation.LESSON_READ)),
    db: AsyncSession = Depends(get_db),
):
    lesson = await lesson_service.get_lesson(db, lesson_id)
    return envelope({"lesson": lesson.to_dict()})


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_lesson(
    body: LessonCreate,
    current_user: CurrentUser = Depends(require(Operation.LESSON_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    lesson = await lesson_service.create_lesson(
        db,
        section_id=body.section_id,
        date=body.date,
        start_time=body.start_time,
        end_time=body.end_time,
        topic=body.topic,
        status=body.status,
        actor_id=current_user.id,
    )
    return envelope({"lesson": lesson.to_dict()}, "Lesson created successfully")


@router.put("/{lesson_id}")
async def update_lesson(
    lesson_id: int,
    body: LessonUpdate,
    current_user: CurrentUser = Depends(require(Operation.LESSON_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    lesson = await lesson_service.update_lesson(db, lesson_id, body.changes(), current_user.id)
    return envelope({"lesson": lesson.to_dict()}, "Lesson updated successfully")


@router.delete("/{lesson_id}")
async def delete_lesson(
    lesson_id: int,
    current_user: CurrentUser = Depends(require(Operation.LESSON_WRITE)),
    db: AsyncSession = Depends(get_db),
):
    await lesson_service.delete_lesson(db, lesson_id, current_user.id)
    return envelope(message="Lesson deleted successfully")
