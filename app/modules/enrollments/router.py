"""Student enrollments API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.modules.enrollments.schemas import PurchaseInfoRead, StudentCourseRead
from app.modules.enrollments.service import EnrollmentService, get_enrollment_service
from app.shared.pagination import Page, build_page, get_pagination_params
from app.shared.schemas import ApiResponse

router = APIRouter(prefix="/student/courses-bought", tags=["enrollments"])


@router.get("/{user_id}", response_model=Page[StudentCourseRead])
async def list_student_courses(
    user_id: str,
    pagination=Depends(get_pagination_params),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> Page[StudentCourseRead]:
    """List courses the student has access to, most recent purchase first."""
    items, total = await service.list_student_courses(
        user_id,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    serialized = [StudentCourseRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)


@router.get("/{user_id}/courses/{course_id}", response_model=ApiResponse[PurchaseInfoRead])
async def get_purchase_info(
    user_id: str,
    course_id: str,
    service: EnrollmentService = Depends(get_enrollment_service),
) -> ApiResponse[PurchaseInfoRead]:
    """Tell whether the student already owns the course."""
    purchased = await service.has_purchased(user_id, course_id)
    return ApiResponse[PurchaseInfoRead](data=PurchaseInfoRead(purchased=purchased))
