"""Courses business logic layer."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.modules.courses.models import CourseStudent
from app.modules.courses.repository import CoursesRepository
from app.shared.exceptions import NotFoundException


class CoursesService:
    """Read access to course rosters."""

    def __init__(self, repository: CoursesRepository) -> None:
        self.repository = repository

    async def list_students(
        self,
        course_id: str,
        limit: int,
        offset: int,
    ) -> tuple[list[CourseStudent], int]:
        if await self.repository.get_course(course_id) is None:
            raise NotFoundException("Course not found")
        return await self.repository.list_students(course_id, limit=limit, offset=offset)


async def get_courses_service(session: AsyncSession = Depends(get_db_session)) -> CoursesService:
    """Dependency provider for courses service."""
    return CoursesService(CoursesRepository(session))
