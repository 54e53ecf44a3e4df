"""Enrollment business logic layer.

``EnrollmentService.enroll`` is the single side effect shared by free purchases
and confirmed paid orders. Both writes are keyed upserts, so running it again for
the same purchaser and course converges to the same state instead of duplicating
rows.
"""

from __future__ import annotations

import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.modules.audit.repository import AuditRepository
from app.modules.courses.repository import CoursesRepository
from app.modules.enrollments.models import StudentCourseEntry
from app.modules.enrollments.repository import EnrollmentsRepository
from app.modules.enrollments.schemas import EnrollmentGrant, EnrollmentResult

logger = logging.getLogger(__name__)


class EnrollmentService:
    """Enrollment domain service."""

    def __init__(
        self,
        repository: EnrollmentsRepository,
        courses_repository: CoursesRepository,
        audit_repository: AuditRepository,
    ) -> None:
        self.repository = repository
        self.courses_repository = courses_repository
        self.audit_repository = audit_repository

    async def enroll(self, grant: EnrollmentGrant) -> EnrollmentResult:
        """Give purchaser access to course and add them to the course roster."""
        _, entry_created = await self.repository.add_entry(
            user_id=grant.user_id,
            course_id=grant.course_id,
            title=grant.course_title,
            instructor_id=grant.instructor_id,
            instructor_name=grant.instructor_name,
            date_of_purchase=grant.purchased_at,
            course_image=grant.course_image,
        )
        _, roster_created = await self.courses_repository.add_student(
            course_id=grant.course_id,
            student_id=grant.user_id,
            student_name=grant.user_name,
            student_email=grant.user_email,
            paid_amount=grant.paid_amount,
        )
        result = EnrollmentResult(entry_created=entry_created, roster_created=roster_created)

        if not (entry_created or roster_created):
            logger.info(
                "Student %s already enrolled in course %s",
                grant.user_id,
                grant.course_id,
            )
            return result

        await self.audit_repository.create_audit_log(
            actor_id=grant.user_id,
            action="enrollments.course.enroll",
            entity_type="course",
            entity_id=grant.course_id,
            payload={
                "student_id": grant.user_id,
                "paid_amount": str(grant.paid_amount),
                "entry_created": entry_created,
                "roster_created": roster_created,
            },
        )
        await self.audit_repository.create_outbox_event(
            aggregate_type="enrollments",
            aggregate_id=grant.course_id,
            event_type="enrollments.course.enrolled",
            payload={
                "course_id": grant.course_id,
                "course_title": grant.course_title,
                "student_id": grant.user_id,
                "student_email": grant.user_email,
            },
        )
        return result

    async def list_student_courses(
        self,
        user_id: str,
        limit: int,
        offset: int,
    ) -> tuple[list[StudentCourseEntry], int]:
        return await self.repository.list_entries(user_id, limit=limit, offset=offset)

    async def has_purchased(self, user_id: str, course_id: str) -> bool:
        return await self.repository.get_entry(user_id, course_id) is not None


def build_enrollment_service(session: AsyncSession) -> EnrollmentService:
    return EnrollmentService(
        repository=EnrollmentsRepository(session),
        courses_repository=CoursesRepository(session),
        audit_repository=AuditRepository(session),
    )


async def get_enrollment_service(
    session: AsyncSession = Depends(get_db_session),
) -> EnrollmentService:
    """Dependency provider for enrollment service."""
    return build_enrollment_service(session)
