"""Orders schemas."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import ConfigDict, Field

from app.core.enums import OrderStatusEnum, PaymentMethodEnum, PaymentStatusEnum
from app.shared.schemas import CamelModel

if TYPE_CHECKING:
    from app.modules.orders.models import Order


class OrderCreate(CamelModel):
    """Purchase intent submitted by the client."""

    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: str = Field(min_length=1, max_length=64)
    user_name: str = Field(min_length=1, max_length=255)
    user_email: str = Field(min_length=3, max_length=255)
    course_id: str = Field(min_length=1, max_length=64)
    course_title: str = Field(min_length=1, max_length=255)
    course_image: str | None = Field(default=None, max_length=1024)
    instructor_id: str = Field(min_length=1, max_length=64)
    instructor_name: str = Field(min_length=1, max_length=255)
    course_pricing: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    order_date: datetime

    # Only meaningful for paid courses; free orders are always confirmed/free/paid.
    order_status: OrderStatusEnum = OrderStatusEnum.PENDING
    payment_method: str = Field(default=PaymentMethodEnum.PAYPAL, min_length=1, max_length=32)
    payment_status: PaymentStatusEnum = PaymentStatusEnum.PENDING


class OrderCapture(CamelModel):
    """Payment confirmation returned by the provider after approval."""

    model_config = ConfigDict(str_strip_whitespace=True)

    payment_id: str = Field(min_length=1, max_length=128)
    payer_id: str = Field(min_length=1, max_length=128)
    order_id: UUID


class OrderRead(CamelModel):
    """Order response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: str
    user_name: str
    user_email: str
    course_id: str
    course_title: str
    course_image: str | None
    course_pricing: Decimal
    instructor_id: str
    instructor_name: str
    order_status: OrderStatusEnum
    payment_method: str
    payment_status: PaymentStatusEnum
    payment_id: str | None
    payer_id: str | None
    order_date: datetime
    created_at: datetime
    updated_at: datetime


class OrderCreatedRead(CamelModel):
    approve_url: str | None
    order_id: UUID


@dataclass(slots=True)
class OrderPlacement:
    """Outcome of a purchase intent."""

    order: Order
    approve_url: str | None
