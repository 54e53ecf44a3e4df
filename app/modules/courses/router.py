"""Courses API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.modules.courses.schemas import CourseStudentRead
from app.modules.courses.service import CoursesService, get_courses_service
from app.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get(
    "/{course_id}/students",
    response_model=Page[CourseStudentRead],
)
async def list_course_students(
    course_id: str,
    pagination=Depends(get_pagination_params),
    service: CoursesService = Depends(get_courses_service),
) -> Page[CourseStudentRead]:
    """List students enrolled in a course."""
    items, total = await service.list_students(
        course_id,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    serialized = [CourseStudentRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)
