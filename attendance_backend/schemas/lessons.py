"""
attendance_backend/schemas/lessons.py
Lesson and attendance bodies
"""
import datetime as dt
from typing import List, Optional

from pydantic import Field, model_validator

from attendance_backend.orm.attendance import AttendanceStatus
from attendance_backend.orm.lesson import LessonStatus
from attendance_backend.schemas.common import CamelModel, NonEmptyStr


class LessonCreate(CamelModel):
    section_id: int
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    topic: NonEmptyStr
    status: LessonStatus = LessonStatus.scheduled

    @model_validator(mode="after")
    def check_times(self):
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self


class LessonUpdate(CamelModel):
    """Times are checked against the stored lesson in the service."""
    date: Optional[dt.date] = None
    start_time: Optional[dt.time] = None
    end_time: Optional[dt.time] = None
    topic: Optional[NonEmptyStr] = None
    status: Optional[LessonStatus] = None


class AttendanceCreate(CamelModel):
    lesson_id: int
    student_id: int
    status: AttendanceStatus
    notes: Optional[str] = None


class AttendanceUpdate(CamelModel):
    status: Optional[AttendanceStatus] = None
    notes: Optional[str] = None


class AttendanceMark(CamelModel):
    student_id: int
    status: AttendanceStatus
    notes: Optional[str] = None


class BulkAttendanceRequest(CamelModel):
    records: List[AttendanceMark] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_unique_students(self):
        student_ids = [mark.student_id for mark in self.records]
        if len(student_ids) != len(set(student_ids)):
            raise ValueError("Each student may appear only once")
        return self
