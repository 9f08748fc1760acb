"""
attendance_backend/orm/enrollment.py
Enrollment: a student's seat in one section of a course
"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from attendance_backend.orm.base import TimestampedBase, iso, utcnow


class Enrollment(TimestampedBase):
    """
    One row per (student, course). The section records which group of the
    course the student sits in, so a student cannot hold two sections of the
    same course.
    """
    __tablename__ = "enrollments"

    student_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    course_id = Column(
        Integer,
        ForeignKey("courses.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    section_id = Column(
        Integer,
        ForeignKey("sections.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    enrolled_at = Column(DateTime, nullable=False, default=utcnow)

    student = relationship("User", back_populates="enrollments")
    course = relationship("Course", back_populates="enrollments")
    section = relationship("Section", back_populates="enrollments")

    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="uq_enrollment_student_course"),
    )

    def __repr__(self):
        return f"<Enrollment(student_id={self.student_id}, section_id={self.section_id})>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "studentId": self.student_id,
            "courseId": self.course_id,
            "sectionId": self.section_id,
            "enrolledAt": iso(self.enrolled_at),
        }

    def to_student_view(self, recent_lessons: int = 5) -> dict:
        """
        What a student sees for one of their courses: the course, their
        section and its latest lessons with their own attendance mark.

        Requires course (department with faculty, teacher) and section
        (lessons with attendances) loaded.
        """
        lessons = self.section.lessons[:recent_lessons]
        return {
            **self.to_dict(),
            "course": {
                **self.course.to_brief(),
                "description": self.course.description,
                "department": self.course.department.to_brief(),
                "teacher": self.course.teacher.to_brief(),
            },
            "section": {
                "id": self.section.id,
                "name": self.section.name,
                "schedule": self.section.schedule,
                "room": self.section.room,
                "lessonCount": len(self.section.lessons),
                "lessons": [
                    {**lesson.to_brief(), "attendanceStatus": self._own_status(lesson)}
                    for lesson in lessons
                ],
            },
        }

    def _own_status(self, lesson):
        for attendance in lesson.attendances:
            if attendance.student_id == self.student_id:
                return attendance.status.value
        return None
