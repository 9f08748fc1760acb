"""
attendance_backend/orm/attendance.py
Attendance: a student's presence status for one lesson
"""
from enum import Enum

from sqlalchemy import Column, Integer, Text, ForeignKey, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship

from attendance_backend.orm.base import TimestampedBase, iso


class AttendanceStatus(str, Enum):
    present = "present"
    absent = "absent"
    late = "late"


class Attendance(TimestampedBase):
    __tablename__ = "attendance"

    lesson_id = Column(
        Integer,
        ForeignKey("lessons.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    student_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    status = Column(SQLEnum(AttendanceStatus, name="attendance_status"), nullable=False)
    notes = Column(Text, nullable=True)

    lesson = relationship("Lesson", back_populates="attendances")
    student = relationship("User", back_populates="attendances")

    __table_args__ = (
        UniqueConstraint("lesson_id", "student_id", name="uq_attendance_lesson_student"),
    )

    def __repr__(self):
        return f"<Attendance(lesson_id={self.lesson_id}, student_id={self.student_id}, status={self.status})>"

    def to_dict(self) -> dict:
        """Requires lesson and student loaded."""
        return {
            "id": self.id,
            "lessonId": self.lesson_id,
            "studentId": self.student_id,
            "status": self.status.value,
            "notes": self.notes,
            "lesson": self.lesson.to_brief(),
            "student": {**self.student.to_brief(), "studentId": self.student.student_id},
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
