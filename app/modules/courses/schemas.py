"""Courses schemas."""

from __future__ import annotations

from decimal import Decimal

from pydantic import ConfigDict

from app.shared.schemas import CamelModel


class CourseStudentRead(CamelModel):
    """Roster entry response schema."""

    model_config = ConfigDict(from_attributes=True)

    student_id: str
    student_name: str
    student_email: str
    paid_amount: Decimal
