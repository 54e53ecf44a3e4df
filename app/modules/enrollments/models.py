"""Enrollment ORM models."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BaseModelMixin


class StudentCourses(BaseModelMixin, Base):
    """Per-student enrollment record."""

    __tablename__ = "student_courses"

    user_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    courses: Mapped[list[StudentCourseEntry]] = relationship(
        back_populates="record",
        cascade="all, delete-orphan",
        order_by="StudentCourseEntry.date_of_purchase",
    )


class StudentCourseEntry(BaseModelMixin, Base):
    """One course a student has access to."""

    __tablename__ = "student_course_entries"
    __table_args__ = (UniqueConstraint("record_id", "course_id"),)

    record_id: Mapped[UUID] = mapped_column(
        ForeignKey("student_courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    course_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    instructor_id: Mapped[str] = mapped_column(String(64), nullable=False)
    instructor_name: Mapped[str] = mapped_column(String(255), nullable=False)
    date_of_purchase: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    course_image: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    record: Mapped[StudentCourses] = relationship(back_populates="courses")
