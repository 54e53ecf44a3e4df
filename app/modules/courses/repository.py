"""Courses repository layer."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.courses.models import Course, CourseStudent


class CoursesRepository:
    """DB access methods for courses and their rosters."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_course(self, course_id: str) -> Course | None:
        return await self.session.get(Course, course_id)

    async def get_student(self, course_id: str, student_id: str) -> CourseStudent | None:
        stmt = select(CourseStudent).where(
            CourseStudent.course_id == course_id,
            CourseStudent.student_id == student_id,
        )
        return await self.session.scalar(stmt)

    async def add_student(
        self,
        course_id: str,
        student_id: str,
        student_name: str,
        student_email: str,
        paid_amount: Decimal,
    ) -> tuple[CourseStudent, bool]:
        """Add student to roster unless already present; returns (entry, created)."""
        existing = await self.get_student(course_id, student_id)
        if existing is not None:
            return existing, False

        entry = CourseStudent(
            course_id=course_id,
            student_id=student_id,
            student_name=student_name,
            student_email=student_email,
            paid_amount=paid_amount,
        )
        try:
            async with self.session.begin_nested():
                self.session.add(entry)
                await self.session.flush()
        except IntegrityError:
            # Lost a race with a concurrent enrollment of the same student.
            existing = await self.get_student(course_id, student_id)
            if existing is None:
                raise
            return existing, False
        return entry, True

    async def list_students(
        self,
        course_id: str,
        limit: int,
        offset: int,
    ) -> tuple[list[CourseStudent], int]:
        base_stmt: Select[tuple[CourseStudent]] = select(CourseStudent).where(
            CourseStudent.course_id == course_id,
        )
        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = base_stmt.order_by(CourseStudent.student_name.asc()).limit(limit).offset(offset)
        items = (await self.session.scalars(stmt)).all()
        return items, total
