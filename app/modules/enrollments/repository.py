"""Enrollments repository layer."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.enrollments.models import StudentCourseEntry, StudentCourses


class EnrollmentsRepository:
    """DB access methods for student enrollment records."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_record(self, user_id: str) -> StudentCourses | None:
        stmt = select(StudentCourses).where(StudentCourses.user_id == user_id)
        return await self.session.scalar(stmt)

    async def get_or_create_record(self, user_id: str) -> StudentCourses:
        record = await self.get_record(user_id)
        if record is not None:
            return record

        record = StudentCourses(user_id=user_id)
        try:
            async with self.session.begin_nested():
                self.session.add(record)
                await self.session.flush()
        except IntegrityError:
            existing = await self.get_record(user_id)
            if existing is None:
                raise
            return existing
        return record

    async def get_entry(self, user_id: str, course_id: str) -> StudentCourseEntry | None:
        stmt = (
            select(StudentCourseEntry)
            .join(StudentCourses, StudentCourseEntry.record_id == StudentCourses.id)
            .where(
                StudentCourses.user_id == user_id,
                StudentCourseEntry.course_id == course_id,
            )
        )
        return await self.session.scalar(stmt)

    async def add_entry(
        self,
        user_id: str,
        course_id: str,
        title: str,
        instructor_id: str,
        instructor_name: str,
        date_of_purchase: datetime,
        course_image: str | None,
    ) -> tuple[StudentCourseEntry, bool]:
        """Append course to the student's record unless present; returns (entry, created)."""
        existing = await self.get_entry(user_id, course_id)
        if existing is not None:
            return existing, False

        record = await self.get_or_create_record(user_id)
        entry = StudentCourseEntry(
            record_id=record.id,
            course_id=course_id,
            title=title,
            instructor_id=instructor_id,
            instructor_name=instructor_name,
            date_of_purchase=date_of_purchase,
            course_image=course_image,
        )
        try:
            async with self.session.begin_nested():
                self.session.add(entry)
                await self.session.flush()
        except IntegrityError:
            existing = await self.get_entry(user_id, course_id)
            if existing is None:
                raise
            return existing, False
        return entry, True

    async def list_entries(
        self,
        user_id: str,
        limit: int,
        offset: int,
    ) -> tuple[list[StudentCourseEntry], int]:
        base_stmt: Select[tuple[StudentCourseEntry]] = (
            select(StudentCourseEntry)
            .join(StudentCourses, StudentCourseEntry.record_id == StudentCourses.id)
            .where(StudentCourses.user_id == user_id)
        )
        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = (
            base_stmt.order_by(StudentCourseEntry.date_of_purchase.desc())
            .limit(limit)
            .offset(offset)
        )
        items = (await self.session.scalars(stmt)).all()
        return items, total
