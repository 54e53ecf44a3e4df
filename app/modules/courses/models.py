"""Course catalogue and roster ORM models."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, TimestampMixin


class Course(TimestampMixin, Base):
    """Course as known to the purchase flow.

    Ids are opaque references owned by the catalogue, not generated here.
    """

    __tablename__ = "courses"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    image: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    instructor_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    instructor_name: Mapped[str] = mapped_column(String(255), nullable=False)
    pricing: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)

    students: Mapped[list[CourseStudent]] = relationship(
        back_populates="course",
        cascade="all, delete-orphan",
    )


class CourseStudent(Base):
    """Roster entry: a student who enrolled in a course."""

    __tablename__ = "course_students"
    __table_args__ = (UniqueConstraint("course_id", "student_id"),)

    id: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), primary_key=True, default=uuid4)
    course_id: Mapped[str] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    student_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    student_name: Mapped[str] = mapped_column(String(255), nullable=False)
    student_email: Mapped[str] = mapped_column(String(255), nullable=False)
    paid_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    course: Mapped[Course] = relationship(back_populates="students")
