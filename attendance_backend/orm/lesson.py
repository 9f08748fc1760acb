"""
attendance_backend/orm/lesson.py
Lesson: one dated class meeting of a section
"""
from enum import Enum

from sqlalchemy import Column, Integer, String, Date, Time, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship

from attendance_backend.orm.base import TimestampedBase, iso, hhmm


class LessonStatus(str, Enum):
    scheduled = "scheduled"
    completed = "completed"
    cancelled = "cancelled"


class Lesson(TimestampedBase):
    __tablename__ = "lessons"

    section_id = Column(
        Integer,
        ForeignKey("sections.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    topic = Column(String(255), nullable=False)
    status = Column(
        SQLEnum(LessonStatus, name="lesson_status"),
        nullable=False,
        default=LessonStatus.scheduled
    )

    section = relationship("Section", back_populates="lessons")
    attendances = relationship("Attendance", back_populates="lesson")

    def __repr__(self):
        return f"<Lesson(id={self.id}, section_id={self.section_id}, date={self.date})>"

    def to_brief(self) -> dict:
        return {
            "id": self.id,
            "date": iso(self.date),
            "startTime": hhmm(self.start_time),
            "endTime": hhmm(self.end_time),
            "topic": self.topic,
            "status": self.status.value if self.status else None,
        }

    def to_dict(self) -> dict:
        """Requires section (with course) and attendances loaded."""
        return {
            **self.to_brief(),
            "sectionId": self.section_id,
            "section": {
                "id": self.section.id,
                "name": self.section.name,
                "course": self.section.course.to_brief(),
            },
            "attendanceCount": len(self.attendances),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
