"""Enrollments schemas."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from app.shared.schemas import CamelModel


@dataclass(slots=True, frozen=True)
class EnrollmentGrant:
    """Everything needed to give a purchaser access to a course."""

    user_id: str
    user_name: str
    user_email: str
    course_id: str
    course_title: str
    course_image: str | None
    instructor_id: str
    instructor_name: str
    purchased_at: datetime
    paid_amount: Decimal


@dataclass(slots=True, frozen=True)
class EnrollmentResult:
    """Which enrollment writes actually happened (False means already present)."""

    entry_created: bool
    roster_created: bool


class StudentCourseRead(CamelModel):
    """Course entry of a student's enrollment record."""

    model_config = ConfigDict(from_attributes=True)

    course_id: str
    title: str
    instructor_id: str
    instructor_name: str
    date_of_purchase: datetime
    course_image: str | None


class PurchaseInfoRead(BaseModel):
    purchased: bool
