"""
attendance_backend/orm/section.py
Section: a scheduled group of a course with a room and a seat capacity
"""
from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from attendance_backend.orm.base import TimestampedBase, iso


class Section(TimestampedBase):
    __tablename__ = "sections"

    name = Column(String(100), nullable=False)
    course_id = Column(
        Integer,
        ForeignKey("courses.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    schedule = Column(String(200), nullable=False)  # "Mon/Wed 09:00-10:30"
    room = Column(String(100), nullable=False)
    capacity = Column(Integer, nullable=False)

    course = relationship("Course", back_populates="sections")
    lessons = relationship(
        "Lesson",
        back_populates="section",
        order_by="Lesson.date.desc()"
    )
    enrollments = relationship("Enrollment", back_populates="section")

    def __repr__(self):
        return f"<Section(id={self.id}, name='{self.name}', course_id={self.course_id})>"

    def to_summary(self) -> dict:
        """Requires enrollments loaded."""
        return {
            "id": self.id,
            "name": self.name,
            "schedule": self.schedule,
            "room": self.room,
            "capacity": self.capacity,
            "enrollmentCount": len(self.enrollments),
        }

    def to_dict(self, with_students: bool = False) -> dict:
        """
        Requires course, lessons and enrollments loaded; with_students also
        needs each enrollment's student.
        """
        section_dict = {
            **self.to_summary(),
            "courseId": self.course_id,
            "course": self.course.to_brief(),
            "lessonCount": len(self.lessons),
            "availableSeats": max(0, self.capacity - len(self.enrollments)),
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
        if with_students:
            section_dict["students"] = [
                {**enrollment.student.to_brief(), "studentId": enrollment.student.student_id}
                for enrollment in self.enrollments
            ]
        return section_dict
